from typing import Optional

from aibs_informatics_core.utils.os_operations import get_env_var
from aws_lambda_powertools.utilities.typing import LambdaContext

CONTEXT_ATTR = "_context"

SERVICE_NAME_ENV_VAR = "POWERTOOLS_SERVICE_NAME"
"""Environment variable that overrides the service name used by loggers."""


class HandlerMixins:
    """Mixin class exposing the Lambda context and naming helpers to handlers.

    Attributes:
        context: The AWS Lambda context object for the current invocation.
    """

    @property
    def context(self) -> LambdaContext:
        """The Lambda context of the current invocation.

        Raises:
            ValueError: If no context has been attached to this handler.
        """
        context: Optional[LambdaContext] = getattr(self, CONTEXT_ATTR, None)
        if context is None:
            raise ValueError(f"No Lambda context attached to {self.__class__.__name__}")
        return context

    @context.setter
    def context(self, value: LambdaContext):
        setattr(self, CONTEXT_ATTR, value)

    @classmethod
    def handler_name(cls) -> str:
        return cls.__name__

    @classmethod
    def service_name(cls) -> str:
        """Service name used to label logs.

        Resolved from ``POWERTOOLS_SERVICE_NAME`` when set, otherwise the handler class name.
        """
        return get_env_var(SERVICE_NAME_ENV_VAR) or cls.handler_name()
