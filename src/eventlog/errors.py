"""Exceptions raised by the event-capture primitive.

Configuration problems fail loudly and synchronously. Hook, printer and
predicate failures never surface as exceptions (they are swallowed at the call
site), so nothing here models them.
"""

from __future__ import annotations

from typing import Any


class EventLogError(Exception):
    """Base class for all eventlog errors."""


class InvalidConfig(EventLogError, ValueError):
    """A configuration value could not be normalized."""

    def __init__(self, message: str, *, label: str | None = None) -> None:
        """Create an error; `label` names the option that failed, if known."""
        self.label = label
        super().__init__(message)


class InvalidName(EventLogError, ValueError):
    """A stream name was empty, non-finite, or of an unsupported type."""


class InvalidQuery(EventLogError, ValueError):
    """A query option (currently only `limit`) was malformed."""


class ErrorRecorded(EventLogError, RuntimeError):
    """Raised by `Registry.error()` after storing, when `raise_on_error` is enabled."""

    def __init__(self, *, stream: str, record: Any) -> None:
        """Create an error carrying the stream name and the stored record."""
        self.stream = stream
        self.record = record
        super().__init__(f"error recorded on stream {stream!r} (raise_on_error enabled)")
