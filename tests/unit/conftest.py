from __future__ import annotations

import pytest


class StepClock:
    """Deterministic millisecond clock advancing by `step` on every call."""

    def __init__(self, start: int = 1_000, step: int = 10) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
