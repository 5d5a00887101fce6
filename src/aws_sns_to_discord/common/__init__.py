"""Common Lambda utilities and base classes.

Provides the base handler class and the logging mixins shared by handlers.
"""
