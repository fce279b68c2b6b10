"""In-memory event capture.

This package provides a small, synchronous foundation for:
- Capturing structured events as `{header, body}` records per named stream.
- Retaining them in bounded (ring buffer) or unbounded memory.
- Querying them back in chronological order with field predicates.

Transport, batching and sampling are left to layers built on top.
"""

from .config import EventLogConfig, load_config
from .constants import ConsoleLevel
from .errors import ErrorRecorded, EventLogError, InvalidConfig, InvalidName, InvalidQuery
from .models import PrintContext, Record, RecordHeader, StreamPatch, StreamStats, make_record
from .policy import CallableResolver
from .registry import Registry
from .stream import Stream

__all__ = [
    "CallableResolver",
    "ConsoleLevel",
    "ErrorRecorded",
    "EventLogConfig",
    "EventLogError",
    "InvalidConfig",
    "InvalidName",
    "InvalidQuery",
    "PrintContext",
    "Record",
    "RecordHeader",
    "Registry",
    "Stream",
    "StreamPatch",
    "StreamStats",
    "load_config",
    "make_record",
]
