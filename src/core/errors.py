"""
Error types shared across the bot.
"""


class CommerceBotError(Exception):
    """Base class for bot errors."""


class StoreError(CommerceBotError):
    """A profile, cart or order operation could not be completed."""


class ValidationError(CommerceBotError):
    """An outbound payload was rejected before any network call."""
