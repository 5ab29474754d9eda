"""Tests for the fixed-interval rate gate."""

import sys

import pytest

sys.path.append("src")
from quantleap.providers.rate_gate import RateGate


class TestRateGate:
    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self, fake_clock):
        gate = RateGate(0.5, clock=fake_clock, sleep=fake_clock.sleep)

        await gate.acquire()

        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_back_to_back_acquires_wait_full_interval(self, fake_clock):
        gate = RateGate(0.5, clock=fake_clock, sleep=fake_clock.sleep)

        await gate.acquire()
        await gate.acquire()
        await gate.acquire()

        assert fake_clock.sleeps == [0.5, 0.5]

    @pytest.mark.asyncio
    async def test_waits_only_the_remainder(self, fake_clock):
        gate = RateGate(0.5, clock=fake_clock, sleep=fake_clock.sleep)

        await gate.acquire()
        fake_clock.advance(0.2)
        await gate.acquire()

        assert fake_clock.sleeps == [pytest.approx(0.3)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(self, fake_clock):
        gate = RateGate(0.5, clock=fake_clock, sleep=fake_clock.sleep)

        await gate.acquire()
        fake_clock.advance(1.0)
        await gate.acquire()

        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_context_manager(self, fake_clock):
        gate = RateGate(1.0, clock=fake_clock, sleep=fake_clock.sleep)

        async with gate:
            pass
        async with gate:
            pass

        assert fake_clock.sleeps == [1.0]

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            RateGate(-1)
