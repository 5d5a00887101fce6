from abc import abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Type, TypeVar, Union

from aibs_informatics_core.models.base import ModelProtocol
from aibs_informatics_core.utils.json import JSON
from aws_lambda_powertools.utilities.typing import LambdaContext

from aws_sns_to_discord.common.base import HandlerMixins
from aws_sns_to_discord.common.logging import LoggingMixins

LambdaEvent = Union[JSON]  # type: ignore # https://github.com/python/mypy/issues/7866
LambdaHandlerType = Callable[[LambdaEvent, LambdaContext], Optional[JSON]]

REQUEST = TypeVar("REQUEST", bound=ModelProtocol)
RESPONSE = TypeVar("RESPONSE", bound=ModelProtocol)


@dataclass  # type: ignore[misc] # mypy #5374
class LambdaHandler(LoggingMixins, HandlerMixins, Generic[REQUEST, RESPONSE]):
    """Base class for strongly-typed AWS Lambda handlers.

    Subclasses declare a REQUEST and RESPONSE model and implement ``handle``. The raw Lambda
    event is deserialized into REQUEST, and the returned RESPONSE is serialized back to JSON.
    Override ``deserialize_request`` when the event is not shaped like the request model
    (e.g. events emitted by AWS services).

    Type Parameters:
        REQUEST: The request model type (must implement ModelProtocol).
        RESPONSE: The response model type (must implement ModelProtocol).

    Example:
        ```python
        class MyHandler(LambdaHandler[MyRequest, MyResponse]):
            def handle(self, request: MyRequest) -> MyResponse:
                ...

        handler = MyHandler.get_handler()
        ```
    """

    def __post_init__(self):
        self.context = LambdaContext()

    @abstractmethod
    def handle(self, request: REQUEST) -> Optional[RESPONSE]:
        raise NotImplementedError("Please implement `handle` method")  # pragma: no cover

    @classmethod
    def get_request_cls(cls) -> Type[REQUEST]:
        return cls.__orig_bases__[0].__args__[0]  # type: ignore

    @classmethod
    def get_response_cls(cls) -> Type[RESPONSE]:
        return cls.__orig_bases__[0].__args__[1]  # type: ignore

    @classmethod
    def deserialize_request(cls, request: LambdaEvent) -> REQUEST:
        return cls.get_request_cls().from_dict(request)

    @classmethod
    def serialize_response(cls, response: RESPONSE) -> JSON:
        return response.to_dict()

    @classmethod
    def get_handler(cls, *args, **kwargs) -> LambdaHandlerType:
        """Create the Lambda function entry point for this handler class.

        The returned function logs the incoming event, builds a new handler instance per
        invocation, and runs deserialize -> handle -> serialize.

        Args:
            *args: Positional arguments passed to the handler constructor.
            **kwargs: Keyword arguments passed to the handler constructor.

        Returns:
            A callable suitable for use as an AWS Lambda handler.
        """

        logger = cls.get_logger(service=cls.service_name())

        @logger.inject_lambda_context(log_event=True)
        def handler(event: LambdaEvent, context: LambdaContext) -> Optional[JSON]:
            lambda_handler = cls(*args, **kwargs)  # type: ignore[call-arg]
            lambda_handler.log = logger
            lambda_handler.context = context
            lambda_handler.add_logger_to_root()

            request = lambda_handler.deserialize_request(event)

            lambda_handler.log.info("Event successfully deserialized. Calling handler...")
            response = lambda_handler.handle(request=request)

            if response:
                lambda_handler.log.info("Serializing response")
                return lambda_handler.serialize_response(response)

            return None

        return handler

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"request: {self.get_request_cls().__name__}, "
            f"response: {self.get_response_cls().__name__}"
            ")"
        )
