"""Default printer: routes printable records through stdlib logging."""

from __future__ import annotations

import logging
from typing import Any

from .models import PrintContext, Record

_CONSOLE_LOGGER = "eventlog.console"


def _logging_level(level: Any) -> int:
    """Map a record level onto a stdlib logging level."""
    lv = str(level or "log").lower()
    if lv == "error":
        return logging.ERROR
    if lv in ("warn", "warning"):
        return logging.WARNING
    return logging.INFO


def print_record(record: Record, ctx: PrintContext | None = None, workspace: Any = None) -> None:
    """Log the record body on `eventlog.console.<source>` at the record's level."""
    if record is None:
        return
    name = _CONSOLE_LOGGER
    if record.header.source:
        name = f"{_CONSOLE_LOGGER}.{record.header.source}"
    logging.getLogger(name).log(_logging_level(record.header.level), "%s", record.body)
