"""Logging utilities for the relay Lambda handlers.

Structured JSON logging is provided by the AWS Lambda Powertools ``Logger``. Modules that
log through the standard library (``logging.getLogger(__name__)``) are routed through the
same handler once it is attached to the root logger.
"""

import logging
from typing import Optional, Union

from aibs_informatics_core.utils.logging import get_all_handlers
from aws_lambda_powertools.logging import Logger

from aws_sns_to_discord.common.base import HandlerMixins

SERVICE_NAME = "aws-sns-to-discord"

LOGGER_ATTR = "_logger"


class LoggingMixins(HandlerMixins):
    """Mixin class giving handlers a lazily created Powertools ``Logger``.

    Attributes:
        log: Alias for the logger property.
        logger: The AWS Lambda Powertools Logger instance.
    """

    @property
    def log(self) -> Logger:
        return self.logger

    @log.setter
    def log(self, value: Logger):
        self.logger = value

    @property
    def logger(self) -> Logger:
        logger: Optional[Logger] = getattr(self, LOGGER_ATTR, None)
        if logger is None:
            logger = self.get_logger(self.service_name())
            self.logger = logger
        return logger

    @logger.setter
    def logger(self, value: Logger):
        setattr(self, LOGGER_ATTR, value)

    @classmethod
    def get_logger(cls, service: Optional[str] = None) -> Logger:
        return get_service_logger(service=service)

    def add_logger_to_root(self):
        """Route records of every standard library logger through this handler's logger."""
        add_handler_to_logger(self.logger, None)


def get_service_logger(service: Optional[str] = None) -> Logger:
    """Create a Powertools logger for a service.

    Args:
        service (Optional[str]): The service name. Defaults to ``SERVICE_NAME``.

    Returns:
        A configured Logger instance.
    """
    return Logger(service=service or SERVICE_NAME)


def add_handler_to_logger(
    source_logger: Logger, target_logger: Union[str, logging.Logger, None] = None
):
    """Attach the handler of a Powertools logger to a standard library logger.

    Args:
        source_logger (Logger): The Logger whose handler is shared.
        target_logger (Union[str, logging.Logger, None]): A logger name, a logger instance,
            or None for the root logger.
    """
    handler = source_logger.registered_handler

    if target_logger is None or isinstance(target_logger, str):
        target_logger = logging.getLogger(target_logger)
        target_logger.setLevel(min(source_logger.log_level, target_logger.getEffectiveLevel()))

    if handler not in get_all_handlers(target_logger):
        target_logger.addHandler(handler)
