"""Tests for the synthetic reading source."""

import numpy as np
import pytest

from ivmonitor.volatility.synthetic import (
    UNIFORM,
    WALK,
    SyntheticPolicy,
    SyntheticReadingSource,
    VolatilityWalk,
)


class TestSyntheticPolicy:
    def test_defaults(self):
        policy = SyntheticPolicy()
        assert policy.mode == UNIFORM
        assert (policy.low, policy.high) == (10.0, 40.0)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            SyntheticPolicy(mode="gbm")

    def test_bad_range_rejected(self):
        with pytest.raises(ValueError):
            SyntheticPolicy(low=40.0, high=10.0)

    def test_non_positive_floor_rejected(self):
        with pytest.raises(ValueError):
            SyntheticPolicy(mode=WALK, floor=0.0)


class TestVolatilityWalk:
    """Unit tests for the per-symbol volatility state."""

    def test_uniform_values_in_range(self):
        walk = VolatilityWalk(SyntheticPolicy(), np.random.default_rng(1))
        for _ in range(1000):
            values = walk.step(["IF", "IC"])
            assert set(values) == {"IF", "IC"}
            assert all(10.0 <= v < 40.0 for v in values.values())

    def test_empty_step(self):
        walk = VolatilityWalk(SyntheticPolicy(), np.random.default_rng(1))
        assert walk.step([]) == {}

    def test_walk_starts_uniform_then_moves_in_small_steps(self):
        policy = SyntheticPolicy(mode=WALK, step=0.1)
        walk = VolatilityWalk(policy, np.random.default_rng(7))
        first = walk.step(["IF"])["IF"]
        assert 10.0 <= first < 40.0
        second = walk.step(["IF"])["IF"]
        # 0.1 stdev step: a move of 1.0 is a 10-sigma event
        assert abs(second - first) < 1.0

    def test_walk_never_below_floor(self):
        """Volatility stays positive even with huge downward steps."""
        policy = SyntheticPolicy(mode=WALK, low=1.0, high=1.5, step=5.0, floor=0.5)
        walk = VolatilityWalk(policy, np.random.default_rng(3))
        for _ in range(2000):
            assert walk.step(["IF"])["IF"] >= 0.5


@pytest.mark.asyncio
class TestSyntheticReadingSource:
    async def test_one_reading_per_symbol(self):
        source = SyntheticReadingSource(seed=42)
        readings = await source.fetch(["IF", "IC", "IH"])
        assert [r.symbol for r in readings] == ["IF", "IC", "IH"]
        assert all(r.is_valid() for r in readings)

    async def test_seed_is_reproducible(self):
        a = await SyntheticReadingSource(seed=5).fetch(["IF", "IC"])
        b = await SyntheticReadingSource(seed=5).fetch(["IF", "IC"])
        assert [r.implied_volatility for r in a] == [r.implied_volatility for r in b]

    async def test_values_are_plain_floats(self):
        readings = await SyntheticReadingSource(seed=5).fetch(["IF"])
        assert type(readings[0].implied_volatility) is float

    async def test_empty_symbols(self):
        assert await SyntheticReadingSource().fetch([]) == []

    async def test_aclose_is_noop(self):
        source = SyntheticReadingSource()
        await source.aclose()
        await source.aclose()
