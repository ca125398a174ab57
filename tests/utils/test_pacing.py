# ABOUTME: Tests for the request pacer
# ABOUTME: Uses a fake clock so pacing is checked without real delays

import pytest

from poudre_flies.utils.pacing import Pacer


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestPacer:
    """Test Pacer.acquire."""

    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self, clock):
        pacer = Pacer(0.2, clock=clock, sleep=clock.sleep)

        assert await pacer.acquire() == 0.0
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_back_to_back_acquires_are_spaced(self, clock):
        pacer = Pacer(0.2, clock=clock, sleep=clock.sleep)

        for _ in range(3):
            await pacer.acquire()

        assert clock.sleeps == [pytest.approx(0.2), pytest.approx(0.2)]
        assert pacer.total_waited == pytest.approx(0.4)

    @pytest.mark.asyncio
    async def test_waits_only_for_remaining_interval(self, clock):
        pacer = Pacer(0.2, clock=clock, sleep=clock.sleep)

        await pacer.acquire()
        clock.now += 0.15
        waited = await pacer.acquire()

        assert waited == pytest.approx(0.05)

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(self, clock):
        pacer = Pacer(0.2, clock=clock, sleep=clock.sleep)

        await pacer.acquire()
        clock.now += 1.0

        assert await pacer.acquire() == 0.0

    @pytest.mark.asyncio
    async def test_zero_interval_never_sleeps(self, clock):
        pacer = Pacer(0, clock=clock, sleep=clock.sleep)

        await pacer.acquire()
        await pacer.acquire()

        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_reset(self, clock):
        pacer = Pacer(0.2, clock=clock, sleep=clock.sleep)
        await pacer.acquire()
        await pacer.acquire()

        pacer.reset()

        assert pacer.total_waited == 0.0
        assert await pacer.acquire() == 0.0

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            Pacer(-1)
