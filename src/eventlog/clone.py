"""Best-effort deep copy used when a caller asks for cloned record bodies."""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

DeepCopy = Callable[[Any], Any]

_SCALARS = (str, bytes, int, float, complex, bool)


def clone_best_effort(value: Any, deep_copy: DeepCopy | None = None) -> Any:
    """Deep-copy `value`, falling back to the original reference.

    Strategies, in order:
    1. `copy.deepcopy` (fails for locks, generators, sockets, ...)
    2. `deep_copy`, an application-supplied copier
    3. the original reference

    Never raises.
    """
    if value is None or isinstance(value, _SCALARS):
        return value

    try:
        return copy.deepcopy(value)
    except Exception:  # noqa: BLE001 - fall through to the next strategy
        pass

    if deep_copy is not None:
        try:
            return deep_copy(value)
        except Exception:  # noqa: BLE001 - fall through to the original reference
            pass

    return value
