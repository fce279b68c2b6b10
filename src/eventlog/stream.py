"""Single-stream event capture.

A `Stream` owns one named, in-memory sequence of records with its own:
- storage policy (unbounded, or a ring buffer when `limit > 0`)
- enable/disable switch
- console policy (which levels are printed)
- optional accept hook (called after every stored record)
- optional print hook (replaces the default logging printer)
- clock, default clone policy, and a caller-owned workspace passed to hooks

Everything is synchronous: hooks and printers run inline before `emit()`
returns, and their failures never escape `emit()`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .clone import DeepCopy
from .constants import DEFAULT_LEVEL, DEFAULT_STREAM_NAME, UNSET, ConsoleLevel
from .errors import InvalidConfig
from .models import PrintContext, Record, StreamPatch, StreamStats, make_record
from .policy import (
    CallableResolver,
    level_to_console_level,
    normalize_console_policy,
    normalize_limit,
    resolve_callable,
    resolve_clock,
    should_print,
    validate_stream_name,
)
from .printer import print_record
from .query import apply_query, coerce_query_limit, coerce_since

logger = logging.getLogger(__name__)

AcceptHook = Callable[[Record, "Stream", Any], Any]
PrintHook = Callable[[Record, PrintContext, Any], Any]


def _resolve_workspace(value: Any) -> Any:
    """Mappings are used as-is; anything else becomes a fresh empty dict."""
    return value if isinstance(value, Mapping) else {}


class Stream:
    """Per-stream storage and policy container."""

    def __init__(
        self,
        name: Any = DEFAULT_STREAM_NAME,
        *,
        limit: Any = 0,
        enabled: bool = True,
        console: Any = None,
        on_accept: Any = None,
        on_print: Any = None,
        clock: Any = None,
        clone: bool = False,
        workspace: Any = None,
        deep_copy: DeepCopy | None = None,
        resolver: CallableResolver | None = None,
    ) -> None:
        """Create a stream.

        Args:
            name: Stream name, used as `record.header.source`.
            limit: 0 for unbounded storage, otherwise the ring-buffer capacity.
            enabled: When False, `emit()` is a no-op returning None.
            console: Console policy (see `normalize_console_policy`).
            on_accept: Hook called as `(record, stream, workspace)` after storing.
            on_print: Printer called as `(record, ctx, workspace)`; defaults to
                `print_record`.
            clock: Zero-arg callable returning epoch milliseconds.
            clone: Default clone policy for record bodies.
            workspace: Caller-owned mapping forwarded to hooks.
            deep_copy: Fallback copier used when `copy.deepcopy` fails.
            resolver: Resolves non-callable hook references.
        """
        self._resolver = resolver
        self.deep_copy = deep_copy

        self.name: str = validate_stream_name(name)  # type: ignore[assignment]
        self.limit: int = normalize_limit(limit)
        self.enabled = bool(enabled)
        self.console: ConsoleLevel = normalize_console_policy(console)
        self.on_accept: AcceptHook | None = resolve_callable(on_accept, "on_accept", resolver)
        self.on_print: PrintHook | None = resolve_callable(on_print, "on_print", resolver)
        self.clock = resolve_clock(clock)
        self.clone = clone is True
        self.workspace = _resolve_workspace(workspace)

        self._events: list[Record] = []
        self._cursor = 0
        self._count = 0
        # Survives clear() so `delta` stays meaningful across resets.
        self._last_at: int | float | None = None

    def __repr__(self) -> str:
        return f"Stream(name={self.name!r}, limit={self.limit}, size={len(self._events)}, enabled={self.enabled})"

    # -- policy ---------------------------------------------------------------

    def set_enabled(self, on: bool = True) -> None:
        self.enabled = bool(on)

    def set_console_policy(self, value: Any) -> None:
        self.console = normalize_console_policy(value)

    def set_limit(self, value: Any) -> None:
        """Change the retention limit, keeping the most recent records."""
        limit = normalize_limit(value)
        events = self._chronological()
        self.limit = limit
        self._relayout(events)

    def truncate(self) -> None:
        """Drop records beyond `limit`, keeping the most recent ones."""
        self._relayout(self._chronological())

    def _relayout(self, events: list[Record]) -> None:
        # Storage is rebuilt oldest-first even when nothing is dropped, so a
        # grown limit never appends after a wrapped ring segment.
        if self.limit > 0 and len(events) > self.limit:
            events = events[len(events) - self.limit:]
        self._events = events
        self._cursor = len(events) % self.limit if self.limit > 0 else 0

    def configure(self, patch: Mapping[str, Any] | StreamPatch) -> None:
        """Apply a runtime patch; only keys present in `patch` are changed."""
        if isinstance(patch, Mapping):
            patch = StreamPatch.model_validate(dict(patch))
        elif not isinstance(patch, StreamPatch):
            raise InvalidConfig(
                f"Stream.configure expects a mapping or StreamPatch, got {type(patch).__name__}",
                label="patch",
            )

        present = patch.model_fields_set
        if "enabled" in present:
            self.enabled = bool(patch.enabled)
        if "limit" in present:
            self.set_limit(patch.limit)
        if "console" in present:
            self.set_console_policy(patch.console)
        if "on_accept" in present:
            self.on_accept = resolve_callable(patch.on_accept, "on_accept", self._resolver)
        if "on_print" in present:
            self.on_print = resolve_callable(patch.on_print, "on_print", self._resolver)
        if "clock" in present:
            self.clock = resolve_clock(patch.clock)
        if "workspace" in present:
            self.workspace = _resolve_workspace(patch.workspace)

    # -- capture --------------------------------------------------------------

    def emit(
        self,
        payload: Any,
        *,
        level: str | None = None,
        event: Any = None,
        trace: Any = None,
        clone: bool | None = None,
        echo: bool = True,
        console: Any = UNSET,
    ) -> Record | None:
        """Capture `payload` as a record.

        Args:
            payload: Mapping used as the body, or any value wrapped as `{"value": ...}`.
            level: Free-form severity (default "log").
            event: Optional caller label stored in the header.
            trace: Optional opaque context stored in the header.
            clone: Overrides the stream's clone policy when not None.
            echo: When False, never print this record.
            console: Per-call console policy override.

        Returns:
            The stored record, or None when the stream is disabled.
        """
        if not self.enabled:
            return None

        record = make_record(
            payload,
            clock=self.clock,
            source=self.name,
            level=DEFAULT_LEVEL if level is None else str(level),
            event=event,
            trace=trace,
            last_at=self._last_at,
            clone=self.clone if clone is None else clone is True,
            deep_copy=self.deep_copy,
        )
        self._last_at = record.header.at

        self._push(record)
        self._dispatch_on_accept(record)

        if echo is not False:
            policy = self.console if console is UNSET else console
            if should_print(record.header.level, policy):
                self._print(record, policy)

        return record

    def log(self, payload: Any, **options: Any) -> Record | None:
        return self.emit(payload, **{**options, "level": "log"})

    def info(self, payload: Any, **options: Any) -> Record | None:
        return self.emit(payload, **{**options, "level": "info"})

    def warn(self, payload: Any, **options: Any) -> Record | None:
        return self.emit(payload, **{**options, "level": "warn"})

    def error(self, payload: Any, **options: Any) -> Record | None:
        return self.emit(payload, **{**options, "level": "error"})

    def _push(self, record: Record) -> None:
        self._count += 1
        if self.limit == 0:
            self._events.append(record)
        else:
            self._push_ring(record)

    def _push_ring(self, record: Record) -> None:
        if len(self._events) < self.limit:
            self._events.append(record)
            self._cursor = len(self._events) % self.limit
            return
        self._events[self._cursor] = record
        self._cursor = (self._cursor + 1) % self.limit

    def _dispatch_on_accept(self, record: Record) -> None:
        hook = self.on_accept
        if hook is None:
            return
        try:
            hook(record, self, self.workspace)
        except Exception:  # noqa: BLE001 - hooks must not break capture
            logger.debug("on_accept hook failed for stream %r", self.name, exc_info=True)

    def _print(self, record: Record, policy: Any) -> None:
        printer = self.on_print or print_record
        ctx = PrintContext(
            level_num=level_to_console_level(record.header.level),
            policy=normalize_console_policy(policy),
        )
        try:
            printer(record, ctx, self.workspace)
        except Exception:  # noqa: BLE001 - printing must not break capture
            logger.debug("printer failed for stream %r", self.name, exc_info=True)

    # -- retrieval ------------------------------------------------------------

    def _chronological(self) -> list[Record]:
        """Return stored records oldest to newest."""
        if self.limit > 0 and len(self._events) == self.limit:
            return self._events[self._cursor:] + self._events[:self._cursor]
        return list(self._events)

    def query(
        self,
        filter: Any = None,
        *,
        limit: Any = UNSET,
        since: Any = UNSET,
    ) -> list[Record]:
        """Return matching records, oldest first.

        `filter` is a mapping of field selectors (see `eventlog.query`) plus the
        optional `limit` and `since` keys. Keyword `limit`/`since` take
        precedence and apply even when `filter` is not a mapping.
        """
        criteria: Mapping[str, Any] = filter if isinstance(filter, Mapping) else {}

        raw_limit = criteria.get("limit") if limit is UNSET else limit
        raw_since = criteria.get("since") if since is UNSET else since

        max_items = coerce_query_limit(raw_limit)
        if max_items == 0:
            return []

        return apply_query(
            self._chronological(),
            criteria,
            limit=max_items,
            since=coerce_since(raw_since),
        )

    def clear(self) -> None:
        """Drop stored records and reset counters (the last timestamp is kept)."""
        self._events = []
        self._cursor = 0
        self._count = 0

    def stats(self) -> StreamStats:
        return StreamStats(
            name=self.name,
            enabled=self.enabled,
            limit=self.limit,
            size=len(self._events),
            total_accepted=self._count,
            is_ring=self.limit > 0,
        )
