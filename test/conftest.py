import os
from unittest import mock

import pytest

from aws_sns_to_discord.handlers.discord.model import DISCORD_WEBHOOK_URLS_ENV_VAR


@pytest.fixture(autouse=True)
def discord_webhook_urls_fixture():
    """Ensure webhook URLs from the developer's environment never leak into tests."""
    with mock.patch.dict(os.environ):
        os.environ.pop(DISCORD_WEBHOOK_URLS_ENV_VAR, None)
        yield
