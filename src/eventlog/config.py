"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting `EVENTLOG_*` environment variables into a Pydantic model.
- Validating values through the same normalizers streams use, with actionable
  error messages.
"""

from __future__ import annotations

import os
from typing import Any

import dotenv
from pydantic import BaseModel, Field, field_validator

from .constants import ConsoleLevel
from .errors import InvalidConfig
from .policy import normalize_console_policy, normalize_limit


def _get_env_str(name: str, default: str) -> str:
    """Read a string env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def _get_env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    normalized = raw.strip().lower()
    if normalized in {"true", "1", "yes", "y", "on"}:
        return True
    if normalized in {"false", "0", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean (true/false). Got: {raw!r}")


class EventLogConfig(BaseModel):
    """Registry-wide defaults applied to newly created streams."""

    console: ConsoleLevel = Field(default=ConsoleLevel.OFF, description="Console policy for new streams")
    limit: int = Field(default=0, description="Retention limit for new streams (0 = unbounded)")
    enabled: bool = Field(default=True, description="Enable capture")
    clone: bool = Field(default=False, description="Clone record bodies by default")
    raise_on_error: bool = Field(default=False, description="Raise after Registry.error() stores a record")

    @field_validator("console", mode="before")
    def validate_console(cls, v: Any) -> ConsoleLevel:
        """Accept level names, numbers, or booleans."""
        if isinstance(v, str) and v.strip().lower() in {"true", "false"}:
            v = v.strip().lower() == "true"
        elif isinstance(v, str) and v.strip().lstrip("-").isdigit():
            v = int(v)
        return normalize_console_policy(v)

    @field_validator("limit", mode="before")
    def validate_limit(cls, v: Any) -> int:
        """Validate the limit is a non-negative integer."""
        try:
            return normalize_limit(v)
        except InvalidConfig as exc:
            raise ValueError(f"EVENTLOG_LIMIT must be a non-negative integer. Got: {v!r}") from exc


def load_config() -> EventLogConfig:
    """Load eventlog defaults from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Unset variables fall back to the model defaults.
    """
    dotenv.load_dotenv()

    return EventLogConfig(
        console=_get_env_str("EVENTLOG_CONSOLE", "off"),
        limit=_get_env_str("EVENTLOG_LIMIT", "0"),
        enabled=_get_env_bool("EVENTLOG_ENABLED", True),
        clone=_get_env_bool("EVENTLOG_CLONE", False),
        raise_on_error=_get_env_bool("EVENTLOG_RAISE_ON_ERROR", False),
    )
