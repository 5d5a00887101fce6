"""Lambda handler implementations.

Contains the handler relaying SNS notifications to Discord webhooks.
"""
