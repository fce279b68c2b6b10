"""Policy normalizers.

Pure functions that coerce raw configuration values into canonical forms:

- storage limits (`normalize_limit`)
- console verbosity (`normalize_console_policy`)
- hook references (`resolve_callable`, via an optional `CallableResolver`)
- clock sources (`resolve_clock`)
- stream names (`validate_stream_name`)

They hold no state and either return a value or raise `InvalidConfig` /
`InvalidName` deterministically.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from .constants import ConsoleLevel
from .errors import InvalidConfig, InvalidName

Clock = Callable[[], "int | float"]


@runtime_checkable
class CallableResolver(Protocol):
    """Looks up a callable from a non-callable reference (e.g. a registered name)."""

    def resolve(self, reference: Any) -> Callable[..., Any] | None:
        """Return the callable for `reference`, or None if unknown."""


def now_ms() -> int:
    """Return the current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def _is_number(value: Any) -> bool:
    """True for int/float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_limit(value: Any) -> int:
    """Normalize a retention limit; 0 means unbounded.

    Falsy values and the string "0" map to 0. Positive integers (including
    integral floats and numeric strings) pass through. Everything else raises.
    """
    if not value:
        return 0
    if value == "0":
        return 0
    if isinstance(value, bool):
        raise InvalidConfig(f"invalid limit (not numeric): {value!r}", label="limit")

    num: Any = value
    if isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError as exc:
            raise InvalidConfig(f"invalid limit (not numeric): {value!r}", label="limit") from exc

    if not _is_number(num) or not math.isfinite(num):
        raise InvalidConfig(f"invalid limit (not numeric): {value!r}", label="limit")
    if isinstance(num, float):
        if not num.is_integer():
            raise InvalidConfig(f"invalid limit (must be integer): {value!r}", label="limit")
        num = int(num)
    if num < 0:
        raise InvalidConfig(f"invalid limit (negative): {value!r}", label="limit")
    return num


def normalize_console_policy(value: Any) -> ConsoleLevel:
    """Map a console setting onto the `ConsoleLevel` scale.

    - falsy -> OFF, `True` -> ALL
    - finite numbers are clamped into [OFF, ALL] (fractions truncate)
    - strings match level names case-insensitively
    - anything else (including unmatched strings) -> OFF
    """
    if not value:
        return ConsoleLevel.OFF
    if value is True:
        return ConsoleLevel.ALL
    if _is_number(value):
        if not math.isfinite(value):
            return ConsoleLevel.OFF
        clamped = min(max(value, ConsoleLevel.OFF), ConsoleLevel.ALL)
        return ConsoleLevel(int(clamped))
    if isinstance(value, str):
        member = ConsoleLevel.__members__.get(value.upper())
        if member is not None:
            return member
    return ConsoleLevel.OFF


def resolve_callable(
    value: Any,
    label: str = "function",
    resolver: CallableResolver | None = None,
) -> Callable[..., Any] | None:
    """Return a callable for a hook option, or None when the option is unset.

    Non-callable references are handed to `resolver` (when provided); if no
    callable comes back, the option is rejected with `InvalidConfig`.
    """
    if not value:
        return None
    if callable(value):
        return value

    if resolver is not None:
        try:
            resolved = resolver.resolve(value)
        except Exception as exc:  # noqa: BLE001 - resolution failure is a config error
            raise InvalidConfig(
                f"invalid {label}: could not resolve {value!r}", label=label
            ) from exc
        if callable(resolved):
            return resolved

    raise InvalidConfig(f"invalid {label}: expected function or resolvable reference", label=label)


def resolve_clock(value: Any) -> Clock:
    """Return the clock to use; falsy selects `now_ms`."""
    if not value:
        return now_ms
    if callable(value):
        return value
    raise InvalidConfig(f"invalid clock: expected function, got {type(value).__name__}", label="clock")


def validate_stream_name(value: Any, strict: bool = True) -> str | None:
    """Validate a stream name.

    Non-empty strings are returned trimmed; finite numbers are converted to
    strings. Invalid names raise `InvalidName` when `strict`, else return None.
    """
    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed:
            return trimmed
    elif _is_number(value) and math.isfinite(value):
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    if not strict:
        return None
    raise InvalidName(f"stream name must be a non-empty string or finite number, got {value!r}")


def level_to_console_level(level: Any) -> ConsoleLevel:
    """Return the console ordinal a record level needs in order to print."""
    lv = str(level or "log").lower()
    if lv == "error":
        return ConsoleLevel.ERROR
    if lv in ("warn", "warning"):
        return ConsoleLevel.WARN
    if lv == "info":
        return ConsoleLevel.INFO
    return ConsoleLevel.LOG


def should_print(level: Any, policy: Any) -> bool:
    """Decide whether a record at `level` is printable under `policy`."""
    resolved = normalize_console_policy(policy)
    if resolved is ConsoleLevel.OFF:
        return False
    if resolved is ConsoleLevel.ALL:
        return True
    return resolved >= level_to_console_level(level)
