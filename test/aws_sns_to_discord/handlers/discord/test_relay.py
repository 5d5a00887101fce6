import json
from test.aws_sns_to_discord.base import LambdaHandlerTestCase, LambdaHandlerType
from test.aws_sns_to_discord.handlers.discord.test_model import sns_record
from test.base import WEBHOOK_URL_1, WEBHOOK_URL_2
from unittest import mock

import requests

from aws_sns_to_discord.handlers.discord.exceptions import InvalidDiscordConfigError
from aws_sns_to_discord.handlers.discord.model import DiscordConfig, SNSNotificationBatch
from aws_sns_to_discord.handlers.discord.relay import SNSToDiscordHandler

ALARM_MESSAGE = json.dumps({"AlarmName": "CPUAlarm", "NewStateValue": "ALARM"})


class SNSToDiscordHandlerTests(LambdaHandlerTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.set_discord_webhook_urls(WEBHOOK_URL_1, WEBHOOK_URL_2)
        self.mock_session_cls = self.create_patch(
            "aws_sns_to_discord.handlers.discord.webhook.requests.Session"
        )
        self.mock_session = self.mock_session_cls.return_value
        self.mock_session.post.return_value = mock.MagicMock(status_code=200)

    @property
    def handler(self) -> LambdaHandlerType:
        return SNSToDiscordHandler.get_handler()

    def test__handler__delivers_alarm_name_to_every_webhook(self):
        self.assertHandles(
            self.handler,
            {"Records": [sns_record(ALARM_MESSAGE)]},
            {
                "results": [
                    {
                        "message_id": "message-1",
                        "recognized": True,
                        "success": True,
                        "outcomes": [
                            {
                                "webhook_id": "111",
                                "success": True,
                                "response": {"status_code": 200},
                            },
                            {
                                "webhook_id": "222",
                                "success": True,
                                "response": {"status_code": 200},
                            },
                        ],
                    }
                ]
            },
        )
        self.assertEqual(self.mock_session.post.call_count, 2)
        for call in self.mock_session.post.call_args_list:
            self.assertEqual(call.kwargs["json"], {"content": "CPUAlarm"})

    def test__handler__skips_unrecognized_notification(self):
        self.assertHandles(
            self.handler,
            {"Records": [sns_record("not json")]},
            {
                "results": [
                    {
                        "message_id": "message-1",
                        "recognized": False,
                        "success": False,
                        "outcomes": [],
                    }
                ]
            },
        )
        self.mock_session.post.assert_not_called()

    def test__handler__handles_missing_event(self):
        self.assertHandles(self.handler, None, {"results": []})
        self.mock_session.post.assert_not_called()

    def test__handler__fails_before_sending_when_config_missing(self):
        self.set_discord_webhook_urls()

        self.assertLambdaRaises(
            self.handler, {"Records": [sns_record(ALARM_MESSAGE)]}, InvalidDiscordConfigError
        )
        self.mock_session.post.assert_not_called()

    def test__handler__fails_before_sending_when_webhook_url_malformed(self):
        self.set_discord_webhook_urls(WEBHOOK_URL_1, "discord-webhook")

        self.assertLambdaRaises(
            self.handler, {"Records": [sns_record(ALARM_MESSAGE)]}, InvalidDiscordConfigError
        )
        self.mock_session.post.assert_not_called()

    def test__handler__continues_after_failed_delivery(self):
        failed_response = mock.MagicMock(status_code=500)
        failed_response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        ok_response = mock.MagicMock(status_code=200)
        self.mock_session.post.side_effect = [failed_response, ok_response]
        self.set_discord_webhook_urls(WEBHOOK_URL_1)

        event = {
            "Records": [
                sns_record(ALARM_MESSAGE, "message-1"),
                sns_record("not json", "message-2"),
                sns_record(ALARM_MESSAGE, "message-3"),
            ]
        }
        response = self.handler(event, self.context)

        assert response is not None
        results = response["results"]
        self.assertEqual(
            [r["message_id"] for r in results], ["message-1", "message-2", "message-3"]
        )
        self.assertEqual([r["recognized"] for r in results], [True, False, True])
        self.assertEqual([r["success"] for r in results], [False, False, True])
        self.assertEqual(
            results[0]["outcomes"],
            [{"webhook_id": "111", "success": False, "response": "HTTPError: 500 Server Error"}],
        )
        self.assertEqual(self.mock_session.post.call_count, 2)


class SNSToDiscordHandlerHandleTests(LambdaHandlerTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.mock_send_discord_message = self.create_patch(
            "aws_sns_to_discord.handlers.discord.relay.send_discord_message"
        )
        self.mock_send_discord_message.return_value = []

    def test__handle__uses_provided_config(self):
        config = DiscordConfig(discord_webhook_urls=[WEBHOOK_URL_1])
        handler = SNSToDiscordHandler(config=config)

        handler.handle(
            SNSNotificationBatch.from_sns_event({"Records": [sns_record(ALARM_MESSAGE)]})
        )

        self.mock_send_discord_message.assert_called_once()
        self.assertIs(self.mock_send_discord_message.call_args.args[0], config)
        self.assertEqual(self.mock_send_discord_message.call_args.args[1].content, "CPUAlarm")

    def test__handle__logs_unrecognized_notification(self):
        handler = SNSToDiscordHandler(config=DiscordConfig(discord_webhook_urls=[WEBHOOK_URL_1]))
        handler.logger = mock.MagicMock()

        handler.handle(SNSNotificationBatch.from_sns_event({"Records": [sns_record("nope")]}))

        self.mock_send_discord_message.assert_not_called()
        self.assertEqual(handler.logger.warning.call_args.args[0], "Unrecognized notification")

    def test__repr__hides_config(self):
        handler = SNSToDiscordHandler(config=DiscordConfig(discord_webhook_urls=[WEBHOOK_URL_1]))
        self.assertNotIn("token-one", repr(handler))
