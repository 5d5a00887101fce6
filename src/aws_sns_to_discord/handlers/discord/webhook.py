"""Delivery of Discord messages to webhooks.

Every configured webhook receives the message concurrently. Each delivery is a single
attempt through its own short-lived HTTP session, and all deliveries are allowed to
settle before the combined result is reported.
"""

import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence

import requests

from aws_sns_to_discord.handlers.discord.exceptions import (
    DiscordDeliveryError,
    InvalidDiscordConfigError,
)
from aws_sns_to_discord.handlers.discord.model import (
    MAX_CONTENT_LENGTH,
    DeliveryOutcome,
    DiscordAttachment,
    DiscordConfig,
    DiscordMessage,
)

logger = logging.getLogger(__name__)

DISCORD_WEBHOOK_API_URL = "https://discord.com/api/webhooks"

WEBHOOK_URL_PATTERN = re.compile(r"/([^/]+)/([^/]+)$")

ELLIPSIS = " ..."

REDACTED = "<redacted>"


@dataclass(frozen=True)
class DiscordWebhook:
    """Credentials of a Discord webhook, taken from the last two segments of its URL."""

    id: str
    token: str = field(repr=False)

    @classmethod
    def from_url(cls, webhook_url: str) -> "DiscordWebhook":
        match = WEBHOOK_URL_PATTERN.search(webhook_url)
        if not match:
            raise InvalidDiscordConfigError(
                "Invalid Discord webhook URL: expected it to end with "
                "/<webhook id>/<webhook token>"
            )
        return cls(id=match.group(1), token=match.group(2))

    @property
    def url(self) -> str:
        return f"{DISCORD_WEBHOOK_API_URL}/{self.id}/{self.token}"

    def redact(self, text: str) -> str:
        """Remove the webhook token from text that is about to be logged or returned."""
        return text.replace(self.token, REDACTED)


class DiscordWebhookClient:
    """Minimal client for executing a Discord webhook.

    Owns an HTTP session that must be released with ``close``. Prefer ``webhook_client``,
    which releases it on every exit path.
    """

    def __init__(self, webhook: DiscordWebhook):
        self.webhook = webhook
        self.session = requests.Session()

    def send(
        self, content: str, attachments: Sequence[DiscordAttachment] = ()
    ) -> requests.Response:
        """Post a message to the webhook.

        Raises:
            requests.HTTPError: If Discord rejects the message.
        """
        payload: Dict[str, Any] = {"content": content}
        if attachments:
            payload["attachments"] = [
                {"id": i, "filename": attachment.filename}
                for i, attachment in enumerate(attachments)
            ]
            response = self.session.post(
                self.webhook.url,
                params={"wait": "true"},
                data={"payload_json": json.dumps(payload)},
                files=[
                    (f"files[{i}]", (attachment.filename, attachment.data))
                    for i, attachment in enumerate(attachments)
                ],
            )
        else:
            response = self.session.post(self.webhook.url, params={"wait": "true"}, json=payload)
        response.raise_for_status()
        return response

    def close(self):
        self.session.close()


@contextmanager
def webhook_client(webhook_url: str) -> Iterator[DiscordWebhookClient]:
    """Open a client for a webhook URL and close it once the block exits.

    Raises:
        InvalidDiscordConfigError: If the URL does not end with a webhook id and token.
    """
    client = DiscordWebhookClient(DiscordWebhook.from_url(webhook_url))
    try:
        yield client
    finally:
        client.close()


def validate_discord_config(config: DiscordConfig):
    """Check that a configuration can be used to deliver messages.

    No requests are made: a client is built for each webhook URL and immediately released.

    Raises:
        InvalidDiscordConfigError: If no webhook URLs are configured or any URL is malformed.
    """
    if not config.discord_webhook_urls:
        raise InvalidDiscordConfigError("Provide at least one Discord webhook URL")
    for i, webhook_url in enumerate(config.discord_webhook_urls):
        try:
            with webhook_client(webhook_url):
                pass
        except InvalidDiscordConfigError as e:
            raise InvalidDiscordConfigError(
                f"Discord webhook URL #{i + 1} of {len(config.discord_webhook_urls)}: {e}"
            ) from e


def get_content(message: DiscordMessage) -> str:
    """Bound the content of a message to MAX_CONTENT_LENGTH characters.

    Longer content is cut short and marked with a trailing ellipsis.
    """
    content = message.content or ""
    if len(content) <= MAX_CONTENT_LENGTH:
        return content
    new_length = MAX_CONTENT_LENGTH - len(ELLIPSIS)
    logger.warning(
        f"Message content was trimmed from {len(content)} to {new_length} characters"
    )
    return content[:new_length] + ELLIPSIS


def send(
    webhook_url: str, content: str, attachments: Sequence[DiscordAttachment]
) -> DeliveryOutcome:
    webhook = DiscordWebhook.from_url(webhook_url)
    try:
        with webhook_client(webhook_url) as client:
            response = client.send(content, attachments)
    except Exception as e:
        return DeliveryOutcome(
            webhook_id=webhook.id,
            success=False,
            response=webhook.redact(f"{type(e).__name__}: {e}"),
        )
    return DeliveryOutcome(
        webhook_id=webhook.id,
        success=True,
        response={"status_code": response.status_code},
    )


def send_discord_message(config: DiscordConfig, message: DiscordMessage) -> List[DeliveryOutcome]:
    """Send a message to every configured webhook.

    Deliveries run concurrently and are all awaited; one failing delivery never stops the
    others.

    Args:
        config (DiscordConfig): The webhooks to deliver to.
        message (DiscordMessage): The message to deliver.

    Returns:
        The outcome of each delivery, in the order the webhooks are configured.

    Raises:
        DiscordDeliveryError: If any delivery failed. Carries every outcome.
    """
    content = get_content(message)
    attachments = list(message.attachments)
    webhook_urls = config.discord_webhook_urls

    with ThreadPoolExecutor(max_workers=max(len(webhook_urls), 1)) as executor:
        outcomes = list(
            executor.map(lambda webhook_url: send(webhook_url, content, attachments), webhook_urls)
        )

    if any(not outcome.success for outcome in outcomes):
        raise DiscordDeliveryError(outcomes)
    return outcomes
