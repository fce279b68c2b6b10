"""Record and stream models.

A record always has the shape `{header, body}`:
- `header` is system-owned metadata (timestamp, source stream, level, optional
  event/trace labels, and timing continuity fields).
- `body` is the caller's payload, kept by reference unless cloning was requested.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .clone import DeepCopy, clone_best_effort
from .constants import ConsoleLevel
from .policy import Clock, now_ms


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# Returned for lookups of fields a record does not have; never equal to any value.
MISSING: Any = _Missing()


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class RecordHeader(_Model):
    """System-owned record metadata."""

    at: int | float
    source: str | None = None
    level: str | None = None
    event: Any = None
    trace: Any = None

    # Previous accepted timestamp in the same stream, and `at - last_at`.
    last_at: int | float | None = Field(default=None, alias="lastAt")
    delta: int | float | None = None

    def get(self, name: str) -> Any:
        """Look up a field by Python name or alias (`MISSING` if unknown)."""
        fields = type(self).model_fields
        if name in fields:
            return getattr(self, name)
        for field_name, info in fields.items():
            if info.alias == name:
                return getattr(self, field_name)
        return MISSING


class Record(_Model):
    """A captured event: `header` metadata plus the caller's `body`."""

    header: RecordHeader
    body: Any

    def body_get(self, name: str) -> Any:
        """Look up a top-level body key (`MISSING` if absent)."""
        if isinstance(self.body, Mapping):
            return self.body.get(name, MISSING)
        return MISSING


class StreamStats(_Model):
    """Read-only snapshot of a stream's state."""

    name: str
    enabled: bool
    limit: int
    size: int
    total_accepted: int
    is_ring: bool


class StreamPatch(BaseModel):
    """Runtime changes to a stream.

    Only fields that were explicitly provided (see `model_fields_set`) are
    applied, so `StreamPatch(console=None)` turns printing off while
    `StreamPatch()` leaves it untouched.
    """

    model_config = ConfigDict(extra="ignore")

    enabled: Any = None
    limit: Any = None
    console: Any = None
    on_accept: Any = None
    on_print: Any = None
    clock: Any = None
    workspace: Any = None


@dataclass(frozen=True)
class PrintContext:
    """Passed to printers alongside the record and workspace."""

    level_num: ConsoleLevel
    policy: ConsoleLevel


def make_record(
    payload: Any,
    *,
    clock: Clock | None = None,
    source: str | None = None,
    level: str | None = None,
    event: Any = None,
    trace: Any = None,
    last_at: int | float | None = None,
    clone: bool = False,
    deep_copy: DeepCopy | None = None,
) -> Record:
    """Build a record from a payload and its capture context.

    Mappings become the body directly; any other payload is wrapped as
    `{"value": payload}`. `last_at` (when not None) also yields `delta`.
    """
    body: Any = payload if isinstance(payload, Mapping) else {"value": payload}
    if clone:
        body = clone_best_effort(body, deep_copy)

    at = (clock or now_ms)()
    header: dict[str, Any] = {"at": at, "source": source, "level": level, "event": event, "trace": trace}
    if last_at is not None:
        header["last_at"] = last_at
        header["delta"] = at - last_at

    return Record(header=RecordHeader(**header), body=body)
