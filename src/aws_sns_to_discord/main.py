"""Command line validation of the Discord webhook configuration.

Intended to run before a deployment starts accepting notifications:

    validate-discord-config https://discord.com/api/webhooks/<id>/<token> ...

Without arguments, the URLs are read from the DISCORD_WEBHOOK_URLS environment variable.
"""

import argparse
import logging
import sys
from typing import List, Optional

from aws_sns_to_discord.handlers.discord.exceptions import InvalidDiscordConfigError
from aws_sns_to_discord.handlers.discord.model import DiscordConfig
from aws_sns_to_discord.handlers.discord.webhook import DiscordWebhook, validate_discord_config

logger = logging.getLogger(__name__)


def validate_cli(args: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate the Discord webhook URLs used to relay SNS notifications."
    )
    parser.add_argument(
        "webhook_urls",
        nargs="*",
        help="Discord webhook URLs. Defaults to the DISCORD_WEBHOOK_URLS environment variable.",
    )
    parsed_args = parser.parse_args(args)

    try:
        if parsed_args.webhook_urls:
            config = DiscordConfig(discord_webhook_urls=parsed_args.webhook_urls)
        else:
            config = DiscordConfig.from_env()
        validate_discord_config(config)
    except InvalidDiscordConfigError as e:
        logger.error(f"Invalid Discord configuration: {e}")
        return 1

    webhook_ids = [DiscordWebhook.from_url(url).id for url in config.discord_webhook_urls]
    logger.info(f"Discord configuration is valid. Webhook ids: {webhook_ids}")
    return 0


def main():  # pragma: no cover
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(validate_cli(sys.argv[1:]))


if __name__ == "__main__":  # pragma: no cover
    main()
