"""Synthetic implied-volatility generator."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .interface import ReadingSource
from .models import Reading
from .seed_volatility import (
    SYNTHETIC_FLOOR,
    SYNTHETIC_HIGH,
    SYNTHETIC_LOW,
    SYNTHETIC_WALK_STEP,
)

logger = logging.getLogger(__name__)

UNIFORM = "uniform"
WALK = "walk"


@dataclass(frozen=True, slots=True)
class SyntheticPolicy:
    """How synthetic volatility values are drawn.

    uniform: every cycle draws independently from [low, high).
    walk:    the first value is drawn uniformly, then each cycle adds a
             normal step with stdev `step`, clamped below at `floor`.
    """

    mode: str = UNIFORM
    low: float = SYNTHETIC_LOW
    high: float = SYNTHETIC_HIGH
    step: float = SYNTHETIC_WALK_STEP
    floor: float = SYNTHETIC_FLOOR

    def __post_init__(self) -> None:
        if self.mode not in (UNIFORM, WALK):
            raise ValueError(f"unknown synthetic mode: {self.mode!r}")
        if not 0 < self.low < self.high:
            raise ValueError("synthetic range must satisfy 0 < low < high")
        if self.step < 0:
            raise ValueError("walk step must be >= 0")
        if self.floor <= 0:
            raise ValueError("walk floor must be > 0")


class VolatilityWalk:
    """Per-symbol volatility state driven by a SyntheticPolicy."""

    def __init__(self, policy: SyntheticPolicy, rng: np.random.Generator) -> None:
        self._policy = policy
        self._rng = rng
        self._values: dict[str, float] = {}

    def step(self, symbols: list[str]) -> dict[str, float]:
        """Advance every requested symbol by one cycle. Returns {symbol: iv}."""
        n = len(symbols)
        if n == 0:
            return {}

        policy = self._policy
        draws = self._rng.uniform(policy.low, policy.high, n)
        if policy.mode == WALK:
            steps = self._rng.normal(0.0, policy.step, n)

        result: dict[str, float] = {}
        for i, symbol in enumerate(symbols):
            previous = self._values.get(symbol)
            if policy.mode == UNIFORM or previous is None:
                value = float(draws[i])
            else:
                value = max(policy.floor, previous + float(steps[i]))
            self._values[symbol] = value
            result[symbol] = value
        return result


class SyntheticReadingSource(ReadingSource):
    """ReadingSource that fabricates plausible readings. Never fails."""

    def __init__(self, policy: SyntheticPolicy | None = None, seed: int | None = None) -> None:
        self._policy = policy or SyntheticPolicy()
        self._walk = VolatilityWalk(self._policy, np.random.default_rng(seed))

    @property
    def policy(self) -> SyntheticPolicy:
        return self._policy

    async def fetch(self, symbols: list[str]) -> list[Reading]:
        values = self._walk.step(list(symbols))
        readings = [
            Reading(symbol=symbol, implied_volatility=values[symbol]) for symbol in symbols
        ]
        logger.debug("Synthetic readings (%s): %s", self._policy.mode, values)
        return readings
