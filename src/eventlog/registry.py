"""Registry of named streams.

The registry owns streams, applies creation-time defaults, and forwards
convenience calls (`log/info/warn/error/query/clear`) by stream name. It never
stores records itself.

Lookups come in two flavours over the same validation:
- soft (`stream`): invalid or unknown names give None
- strict (`create_stream`, `ensure_stream`, `configure_stream`, forwarding
  calls): invalid names raise `InvalidName`
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .clone import DeepCopy
from .constants import DEFAULT_REGISTRY_NAME
from .config import EventLogConfig
from .errors import ErrorRecorded
from .models import Record, StreamPatch, StreamStats
from .policy import (
    CallableResolver,
    normalize_console_policy,
    normalize_limit,
    resolve_callable,
    resolve_clock,
    validate_stream_name,
)
from .stream import Stream

logger = logging.getLogger(__name__)


class Registry:
    """Creates, finds and forwards to named `Stream`s."""

    def __init__(
        self,
        name: str = DEFAULT_REGISTRY_NAME,
        *,
        enabled: bool = True,
        console: Any = None,
        on_accept: Any = None,
        clock: Any = None,
        clone: bool = False,
        limit: Any = 0,
        workspace: Any = None,
        raise_on_error: bool = False,
        deep_copy: DeepCopy | None = None,
        resolver: CallableResolver | None = None,
        streams: Mapping[Any, Mapping[str, Any] | None] | None = None,
    ) -> None:
        """Create a registry.

        Args:
            name: Registry label (informational).
            enabled: When False, forwarding calls return None without emitting.
            console, on_accept, clock, clone, limit, workspace: Defaults for
                new streams; options passed to `create_stream` win when present.
            raise_on_error: Make `error()` raise `ErrorRecorded` after storing.
            deep_copy, resolver: Collaborators forwarded to every stream.
            streams: Streams to create up front, as `{name: options}`.
        """
        self.name = str(name or DEFAULT_REGISTRY_NAME)
        self.enabled = enabled is not False
        self.raise_on_error = raise_on_error is True
        self.workspace = workspace if isinstance(workspace, Mapping) else {}

        self._defaults: dict[str, Any] = {
            "enabled": self.enabled,
            "console": normalize_console_policy(console),
            "on_accept": resolve_callable(on_accept, "on_accept", resolver),
            "clock": resolve_clock(clock),
            "clone": clone is True,
            "limit": normalize_limit(limit),
            "deep_copy": deep_copy,
            "resolver": resolver,
        }
        self._streams: dict[str, Stream] = {}

        for stream_name, options in (streams or {}).items():
            self.create_stream(stream_name, **dict(options or {}))

    @classmethod
    def from_config(cls, config: EventLogConfig, **overrides: Any) -> Registry:
        """Build a registry whose defaults come from `config`."""
        options: dict[str, Any] = {
            "enabled": config.enabled,
            "console": config.console,
            "clone": config.clone,
            "limit": config.limit,
            "raise_on_error": config.raise_on_error,
        }
        options.update(overrides)
        return cls(**options)

    def __contains__(self, name: Any) -> bool:
        key = validate_stream_name(name, strict=False)
        return key is not None and key in self._streams

    def create_stream(self, name: Any, **options: Any) -> Stream:
        """Create (or replace) a stream, merging `options` over the defaults."""
        key = validate_stream_name(name)
        merged = {**self._defaults, **options}
        merged["workspace"] = options["workspace"] if "workspace" in options else self.workspace
        merged.pop("name", None)

        stream = Stream(key, **merged)
        if key in self._streams:
            logger.debug("replacing stream %r in registry %r", key, self.name)
        self._streams[stream.name] = stream
        return stream

    def stream(self, name: Any) -> Stream | None:
        """Soft lookup: None for invalid or unknown names."""
        key = validate_stream_name(name, strict=False)
        if key is None:
            return None
        return self._streams.get(key)

    def ensure_stream(self, name: Any, **options: Any) -> Stream:
        """Return the named stream, creating it with `options` if missing."""
        key = validate_stream_name(name)
        existing = self._streams.get(key)  # type: ignore[arg-type]
        if existing is not None:
            return existing
        return self.create_stream(key, **options)

    def configure_stream(self, name: Any, patch: Mapping[str, Any] | StreamPatch) -> Stream:
        """Get-or-create the named stream and apply `patch` to it."""
        options: dict[str, Any] = {}
        if isinstance(patch, StreamPatch):
            if "workspace" in patch.model_fields_set:
                options["workspace"] = patch.workspace
        elif isinstance(patch, Mapping) and "workspace" in patch:
            options["workspace"] = patch["workspace"]

        stream = self.ensure_stream(name, **options)
        stream.configure(patch)
        return stream

    def _lookup(self, name: Any) -> Stream | None:
        key = validate_stream_name(name)
        return self._streams.get(key)  # type: ignore[arg-type]

    def _forward(self, method: str, name: Any, payload: Any, options: dict[str, Any]) -> Record | None:
        if not self.enabled:
            return None
        stream = self._lookup(name)
        if stream is None:
            return None
        return getattr(stream, method)(payload, **options)

    def log(self, name: Any, payload: Any, **options: Any) -> Record | None:
        return self._forward("log", name, payload, options)

    def info(self, name: Any, payload: Any, **options: Any) -> Record | None:
        return self._forward("info", name, payload, options)

    def warn(self, name: Any, payload: Any, **options: Any) -> Record | None:
        return self._forward("warn", name, payload, options)

    def error(self, name: Any, payload: Any, **options: Any) -> Record | None:
        """Record an error; raises `ErrorRecorded` afterwards when `raise_on_error`."""
        record = self._forward("error", name, payload, options)
        if record is not None and self.raise_on_error:
            raise ErrorRecorded(stream=record.header.source or str(name), record=record)
        return record

    def query(self, name: Any, filter: Any = None, **options: Any) -> list[Record]:
        """Query the named stream; unknown streams yield an empty list."""
        stream = self._lookup(name)
        if stream is None:
            return []
        return stream.query(filter, **options)

    def clear(self, name: Any = None) -> None:
        """Clear one stream, or every stream when `name` is None."""
        if name is None:
            for stream in self._streams.values():
                stream.clear()
            return
        stream = self._lookup(name)
        if stream is not None:
            stream.clear()

    def list(self) -> list[StreamStats]:
        return [stream.stats() for stream in self._streams.values()]

    def names(self) -> list[str]:
        return list(self._streams)
