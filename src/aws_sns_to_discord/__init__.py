"""Relay Amazon SNS notifications to Discord.

Provides an AWS Lambda handler that summarizes CloudWatch Alarm and AWS Health
notifications and posts them to one or more Discord webhooks.
"""
