"""Lambda handler relaying SNS notifications to Discord.

The function is subscribed to one or more SNS topics. Each notification is summarized
and posted to every webhook listed in the DISCORD_WEBHOOK_URLS environment variable.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from aibs_informatics_core.utils.json import JSON

from aws_sns_to_discord.common.handler import LambdaHandler
from aws_sns_to_discord.handlers.discord.exceptions import DiscordDeliveryError
from aws_sns_to_discord.handlers.discord.messages import construct_discord_message
from aws_sns_to_discord.handlers.discord.model import (
    DiscordConfig,
    NotificationResult,
    SNSNotificationBatch,
    SNSNotificationRecord,
    SNSToDiscordResponse,
)
from aws_sns_to_discord.handlers.discord.webhook import (
    send_discord_message,
    validate_discord_config,
)


@dataclass  # type: ignore[misc] # mypy #5374
class SNSToDiscordHandler(LambdaHandler[SNSNotificationBatch, SNSToDiscordResponse]):
    """Handler posting a summary of each SNS notification to Discord.

    The webhook configuration is loaded and validated once per invocation; an invalid
    configuration fails the whole invocation before anything is sent. Notifications are
    then relayed one at a time. Unrecognized notifications and failed deliveries are
    logged and reported in the response without stopping the rest of the batch.

    Example:
        ```python
        handler = SNSToDiscordHandler.get_handler()
        ```
    """

    config: Optional[DiscordConfig] = field(default=None, repr=False)

    @classmethod
    def deserialize_request(cls, request: JSON) -> SNSNotificationBatch:
        return SNSNotificationBatch.from_sns_event(request)

    def handle(self, request: SNSNotificationBatch) -> SNSToDiscordResponse:
        config = self.config or DiscordConfig.from_env()
        validate_discord_config(config)

        results: List[NotificationResult] = []
        for record in request.records:
            results.append(self.relay(config, record))

        failed = [result for result in results if result.recognized and not result.success]
        self.logger.info(
            f"Relayed {len(results) - len(failed)} of {len(results)} notifications to Discord"
        )
        return SNSToDiscordResponse(results=results)

    def relay(self, config: DiscordConfig, record: SNSNotificationRecord) -> NotificationResult:
        message = construct_discord_message(record)
        if message is None:
            self.logger.warning(
                "Unrecognized notification",
                extra={"message_id": record.message_id, "topic_arn": record.topic_arn},
            )
            return NotificationResult(
                message_id=record.message_id, recognized=False, success=False
            )

        try:
            outcomes = send_discord_message(config, message)
        except DiscordDeliveryError as e:
            self.logger.error(
                f"Failed to relay notification {record.message_id} to Discord: {e}",
                extra={"message_id": record.message_id, "topic_arn": record.topic_arn},
            )
            return NotificationResult(
                message_id=record.message_id, recognized=True, success=False, outcomes=e.outcomes
            )
        return NotificationResult(
            message_id=record.message_id, recognized=True, success=True, outcomes=outcomes
        )


handler = SNSToDiscordHandler.get_handler()
