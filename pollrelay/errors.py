"""
This module defines the error classes raised by the relay.

Every error derives from `RelayError`. The `fatal` class attribute tells the caller whether
the process can keep going: only a `ConfigurationError` is fatal, everything else is handled
by the relay loop at the scope where it occurred (one poll or one forward).
"""

from typing import Any


class RelayError(Exception):
    """Base class for all errors raised by the relay."""

    fatal: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(RelayError):
    """The relay cannot start with the given configuration."""

    fatal = True


class SourceError(RelayError):
    """A batch of updates could not be obtained from the source."""


class SourceAPIError(SourceError):
    """
    The source answered with `ok: false`. `description` is the human-readable reason reported
    by the source and `error_code` the code it reported, if any.
    """

    def __init__(self, description: str, error_code: int | None = None) -> None:
        super().__init__(f"source error: {description}")
        self.description = description
        self.error_code = error_code

    def status(self) -> int | None:
        """Return the error code reported by the source."""
        return self.error_code


class SourceTransportError(SourceError):
    """The source could not be reached, or the connection failed mid-request."""


class MalformedResponseError(SourceError):
    """The source answered with something that is not a valid batch of updates."""

    def __init__(self, message: str, updates: list[Any] | None = None) -> None:
        super().__init__(message)
        self.updates = updates or []


class SinkDeliveryError(RelayError):
    """An update could not be delivered to the sink."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class CursorStoreError(RelayError):
    """The persisted cursor could not be read or written."""
