"""Shared constants for the event-capture primitive."""

from __future__ import annotations

from enum import IntEnum
from typing import Final


class ConsoleLevel(IntEnum):
    """Ordinal console policy, from most silent to most verbose."""

    OFF = 0  # never print
    ERROR = 1  # error only
    WARN = 2  # warn + error
    INFO = 3  # info + warn + error
    LOG = 4  # log + info + warn + error
    ALL = 5  # print everything


class _Unset:
    """Marker for "argument not supplied" where a falsy value is meaningful."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()

# Bare filter keys routed to the record header; any other bare key targets the body.
KNOWN_HEADER_FIELDS: Final = frozenset({"at", "source", "level", "event", "trace"})

DEFAULT_LEVEL: Final = "log"
DEFAULT_STREAM_NAME: Final = "default"
DEFAULT_REGISTRY_NAME: Final = "log"
