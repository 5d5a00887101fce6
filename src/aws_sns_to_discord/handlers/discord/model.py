"""Discord relay data models.

Defines the inbound SNS notification models, the Discord message handed to delivery,
the webhook configuration, and the per-endpoint delivery results.
"""

__all__ = [
    "DISCORD_WEBHOOK_URLS_ENV_VAR",
    "MAX_CONTENT_LENGTH",
    "DeliveryOutcome",
    "DiscordAttachment",
    "DiscordConfig",
    "DiscordMessage",
    "NotificationResult",
    "SNSNotificationBatch",
    "SNSNotificationRecord",
    "SNSToDiscordResponse",
]

from dataclasses import dataclass, field
from typing import List, Optional

from aibs_informatics_core.models.base import (
    BooleanField,
    ListField,
    RawField,
    SchemaModel,
    StringField,
    custom_field,
)
from aibs_informatics_core.utils.json import JSON
from aibs_informatics_core.utils.os_operations import get_env_var
from aws_lambda_powertools.utilities.data_classes import SNSEvent

from aws_sns_to_discord.handlers.discord.exceptions import InvalidDiscordConfigError

MAX_CONTENT_LENGTH = 2000
"""Maximum number of characters Discord accepts in a message's content."""

DISCORD_WEBHOOK_URLS_ENV_VAR = "DISCORD_WEBHOOK_URLS"
"""Environment variable holding the whitespace separated list of webhook URLs."""


# ----------------------------------------------------------
# Inbound SNS Models
# ----------------------------------------------------------


@dataclass
class SNSNotificationRecord(SchemaModel):
    """A single SNS notification delivered to the Lambda function.

    Attributes:
        message: The raw SNS message. Usually a JSON document.
        message_id: The SNS message id.
        topic_arn: The ARN of the topic the message was published to.
        subject: The optional subject of the SNS message.
    """

    message: str = custom_field(mm_field=StringField())
    message_id: str = custom_field(mm_field=StringField(), default="")
    topic_arn: str = custom_field(mm_field=StringField(), default="")
    subject: Optional[str] = custom_field(default=None, mm_field=StringField(allow_none=True))


@dataclass
class SNSNotificationBatch(SchemaModel):
    """All SNS notifications received by one Lambda invocation."""

    records: List[SNSNotificationRecord] = custom_field(
        mm_field=ListField(SNSNotificationRecord.as_mm_field()), default_factory=list
    )

    @classmethod
    def from_sns_event(cls, event: Optional[JSON]) -> "SNSNotificationBatch":
        """Build a batch from a raw Lambda SNS event.

        A missing event, or one without records, results in an empty batch.
        """
        if not isinstance(event, dict) or not event.get("Records"):
            return cls(records=[])
        return cls(
            records=[
                SNSNotificationRecord(
                    message=record.sns.message,
                    message_id=record.sns.get("MessageId", ""),
                    topic_arn=record.sns.get("TopicArn", ""),
                    subject=record.sns.get("Subject"),
                )
                for record in SNSEvent(event).records
            ]
        )


# ----------------------------------------------------------
# Discord Message
# ----------------------------------------------------------


@dataclass
class DiscordAttachment:
    """A file uploaded alongside a Discord message."""

    data: bytes
    filename: str


@dataclass
class DiscordMessage:
    """A message ready to be sent to Discord webhooks.

    Attributes:
        content: Text of the message. Bounded to MAX_CONTENT_LENGTH before delivery.
        attachments: Files to upload with the message.
    """

    content: Optional[str] = None
    attachments: List[DiscordAttachment] = field(default_factory=list)


# ----------------------------------------------------------
# Configuration
# ----------------------------------------------------------


@dataclass
class DiscordConfig(SchemaModel):
    """Delivery configuration.

    Attributes:
        discord_webhook_urls: Ordered list of webhook URLs every message is sent to.
    """

    discord_webhook_urls: List[str] = custom_field(mm_field=ListField(StringField()))

    @classmethod
    def from_env(cls) -> "DiscordConfig":
        """Load the configuration from the DISCORD_WEBHOOK_URLS environment variable.

        Raises:
            InvalidDiscordConfigError: If the environment variable is unset or blank.
        """
        webhook_urls = get_env_var(DISCORD_WEBHOOK_URLS_ENV_VAR)
        if not webhook_urls or not webhook_urls.strip():
            raise InvalidDiscordConfigError(
                f"Environment variable {DISCORD_WEBHOOK_URLS_ENV_VAR} has not been configured"
            )
        return cls(discord_webhook_urls=webhook_urls.split())


# ----------------------------------------------------------
# Delivery Results
# ----------------------------------------------------------


@dataclass
class DeliveryOutcome(SchemaModel):
    """Result of sending one message to one webhook.

    Attributes:
        webhook_id: Id of the webhook. The token is never recorded.
        success: Whether Discord accepted the message.
        response: Status code of the response, or the error that occurred.
    """

    webhook_id: str = custom_field(mm_field=StringField())
    success: bool = custom_field(mm_field=BooleanField())
    response: JSON = custom_field(mm_field=RawField())


@dataclass
class NotificationResult(SchemaModel):
    """Result of relaying a single SNS notification."""

    message_id: str = custom_field(mm_field=StringField())
    recognized: bool = custom_field(mm_field=BooleanField())
    success: bool = custom_field(mm_field=BooleanField())
    outcomes: List[DeliveryOutcome] = custom_field(
        mm_field=ListField(DeliveryOutcome.as_mm_field()), default_factory=list
    )


@dataclass
class SNSToDiscordResponse(SchemaModel):
    results: List[NotificationResult] = custom_field(
        mm_field=ListField(NotificationResult.as_mm_field()), default_factory=list
    )
