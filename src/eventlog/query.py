"""Record filtering.

A filter is a mapping. `limit` and `since` are range options; every other key
selects a record field:

- `header.<prop>` / `body.<prop>` target that exact property (no traversal)
- bare keys in `KNOWN_HEADER_FIELDS` target the header, the rest the body

A callable value is a predicate, `(field_value) -> bool` or
`(field_value, record) -> bool`; anything else must match by type and value
(`1` does not match `True` or `1.0`). Predicates that raise count as non-matches.
"""

from __future__ import annotations

import inspect
import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .constants import KNOWN_HEADER_FIELDS
from .errors import InvalidQuery
from .models import MISSING, Record

logger = logging.getLogger(__name__)

Predicate = Callable[[Record], bool]

_RANGE_KEYS = frozenset({"limit", "since"})


def coerce_query_limit(value: Any) -> int | None:
    """Validate a `limit` option: None, or a non-negative integer."""
    if value is None:
        return None
    num: Any = value
    if isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError as exc:
            raise InvalidQuery(f"invalid limit: {value!r}") from exc
    if isinstance(num, bool) or not isinstance(num, (int, float)):
        raise InvalidQuery(f"invalid limit: {value!r}")
    if isinstance(num, float):
        if not math.isfinite(num) or not num.is_integer():
            raise InvalidQuery(f"invalid limit: {value!r}")
        num = int(num)
    if num < 0:
        raise InvalidQuery(f"invalid limit: {value!r}")
    return num


def coerce_since(value: Any) -> int | float | None:
    """Return `value` if it is a finite number, else None (no lower bound)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def _target(key: str) -> tuple[str, str]:
    """Resolve a filter key into `(section, prop)`."""
    if key.startswith("header."):
        return "header", key[len("header."):]
    if key.startswith("body."):
        return "body", key[len("body."):]
    return ("header" if key in KNOWN_HEADER_FIELDS else "body"), key


def _lookup(record: Record, section: str, prop: str) -> Any:
    if section == "header":
        return record.header.get(prop)
    return record.body_get(prop)


def _accepts_record(fn: Callable[..., Any]) -> bool:
    """True if `fn` can be called as `fn(value, record)`."""
    try:
        inspect.signature(fn).bind(None, None)
    except TypeError:
        return False
    except ValueError:
        # No introspectable signature (some builtins); assume the full form.
        return True
    return True


def _make_predicate(key: str, expected: Any) -> Predicate:
    section, prop = _target(key)

    if callable(expected):
        with_record = _accepts_record(expected)

        def _call(record: Record) -> bool:
            value = _lookup(record, section, prop)
            if value is MISSING:
                value = None
            try:
                if with_record:
                    return bool(expected(value, record))
                return bool(expected(value))
            except Exception:  # noqa: BLE001 - a broken predicate is a non-match
                logger.debug("filter predicate for %r raised; treating as non-match", key, exc_info=True)
                return False

        return _call

    def _equals(record: Record) -> bool:
        value = _lookup(record, section, prop)
        if value is MISSING or type(value) is not type(expected):
            return False
        return value == expected

    return _equals


def compile_predicates(filter: Mapping[str, Any]) -> list[Predicate]:
    """Build one predicate per non-range filter key."""
    return [
        _make_predicate(str(key), expected)
        for key, expected in filter.items()
        if key not in _RANGE_KEYS
    ]


def apply_query(
    records: Iterable[Record],
    filter: Mapping[str, Any] | None = None,
    *,
    limit: int | None = None,
    since: int | float | None = None,
) -> list[Record]:
    """Filter chronologically ordered `records` and keep the newest `limit`.

    `limit` and `since` must already be validated (see `coerce_query_limit`).
    """
    if limit == 0:
        return []

    predicates = compile_predicates(filter or {})
    out: list[Record] = []
    for record in records:
        if record is None:
            continue
        if since is not None and record.header.at < since:
            continue
        if all(predicate(record) for predicate in predicates):
            out.append(record)

    if limit is not None and len(out) > limit:
        out = out[len(out) - limit:]
    return out
