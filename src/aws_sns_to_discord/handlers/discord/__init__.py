"""Summarize SNS notifications and deliver them to Discord webhooks."""
