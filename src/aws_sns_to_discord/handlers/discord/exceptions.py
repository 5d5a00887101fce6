from typing import TYPE_CHECKING, List

from aibs_informatics_core.exceptions import ApplicationException

if TYPE_CHECKING:  # pragma: no cover
    from aws_sns_to_discord.handlers.discord.model import DeliveryOutcome


class InvalidDiscordConfigError(ApplicationException):
    """Raised when the webhook configuration is missing or malformed."""


class DiscordDeliveryError(ApplicationException):
    """Raised when a message could not be delivered to one or more webhooks.

    Carries the outcome of every attempted delivery, successful ones included.
    """

    def __init__(self, outcomes: List["DeliveryOutcome"]):
        self.outcomes = outcomes
        super().__init__(
            f"Failed to deliver message to {len(self.failed_outcomes)} of {len(outcomes)} "
            "Discord webhooks. "
            f"Outcomes: {[outcome.to_dict() for outcome in outcomes]}"
        )

    @property
    def failed_outcomes(self) -> List["DeliveryOutcome"]:
        return [outcome for outcome in self.outcomes if not outcome.success]
