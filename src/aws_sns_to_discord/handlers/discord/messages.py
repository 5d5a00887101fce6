"""Construction of Discord messages from SNS notifications.

Two notification shapes are recognized, in order of precedence:

1. CloudWatch Alarm state changes, identified by an ``AlarmName``.
2. AWS Health events, identified by ``detail-type``, ``detail.service`` and
   ``detail.eventDescription[0].latestDescription``.
"""

import json
from typing import Any, Optional, Union

from aws_sns_to_discord.handlers.discord.model import (
    MAX_CONTENT_LENGTH,
    DiscordAttachment,
    DiscordMessage,
    SNSNotificationRecord,
)

OVERFLOW_ATTACHMENT_FILENAME = "message.txt"


def construct_discord_message(record: SNSNotificationRecord) -> Optional[DiscordMessage]:
    """Build a Discord message for an SNS notification.

    Args:
        record (SNSNotificationRecord): The SNS notification.

    Returns:
        The message to send, or None if the notification is not recognized.
    """
    payload = parse_sns_message(record)
    return discord_message_for_cloudwatch_alarm(payload) or discord_message_for_aws_health(
        payload
    )


def discord_message_for_cloudwatch_alarm(payload: Any) -> Optional[DiscordMessage]:
    alarm_name = get_string(payload, "AlarmName")
    if alarm_name:
        return DiscordMessage(content=alarm_name)
    return None


def discord_message_for_aws_health(payload: Any) -> Optional[DiscordMessage]:
    """Summarize an AWS Health event.

    The latest description is moved to an attached file when the full summary would not
    fit in a single message, so that the description is never truncated.
    """
    detail_type = get_string(payload, "detail-type")
    service = get_string(payload, "detail", "service")
    latest_description = get_string(
        payload, "detail", "eventDescription", 0, "latestDescription"
    )
    if not (detail_type and service and latest_description):
        return None

    title = f"{detail_type}\n{service}"
    full_content = f"{title}\n\n{latest_description}"
    if len(full_content) > MAX_CONTENT_LENGTH:
        return DiscordMessage(
            content=title,
            attachments=[
                DiscordAttachment(
                    data=latest_description.encode("utf-8"),
                    filename=OVERFLOW_ATTACHMENT_FILENAME,
                )
            ],
        )
    return DiscordMessage(content=full_content)


def parse_sns_message(record: SNSNotificationRecord) -> Any:
    try:
        return json.loads(record.message)
    except (TypeError, ValueError):
        # not in JSON format
        return None


def get_string(value: Any, *path: Union[str, int]) -> Optional[str]:
    """Look up a string nested inside a decoded JSON document.

    Each path element is either a key into an object or an index into an array.
    Missing keys, out of range indices and values of the wrong type all yield None.

    Example:
        ```python
        get_string({"a": [{"b": "c"}]}, "a", 0, "b")  # "c"
        get_string({"a": [{"b": 1}]}, "a", 0, "b")  # None
        ```
    """
    for key in path:
        if isinstance(key, int) and isinstance(value, list):
            if not 0 <= key < len(value):
                return None
            value = value[key]
        elif isinstance(key, str) and isinstance(value, dict):
            if key not in value:
                return None
            value = value[key]
        else:
            return None
    return value if isinstance(value, str) else None
