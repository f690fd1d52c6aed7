"""Exceptions raised by the storage and delivery layers.

Extraction failures never surface as exceptions: extractors log them and
return an empty list.
"""


class ConfigurationError(ValueError):
    """A required credential or setting is missing."""


class PersistenceError(Exception):
    """The event or subscription store rejected a read or write."""


class EmailDeliveryError(Exception):
    """The email provider refused or failed to accept a message."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
