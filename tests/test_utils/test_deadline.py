"""Tests for the job deadline helper."""

from fleet_facts.utils.deadline import Deadline


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestDeadline:
    def test_unbounded(self) -> None:
        deadline = Deadline(None)

        assert deadline.remaining() is None
        assert not deadline.expired
        assert deadline.clamp(5) == 5
        assert deadline.clamp(None) is None

    def test_counts_down(self) -> None:
        clock = FakeClock()
        deadline = Deadline(10, clock=clock)

        clock.now += 4
        assert deadline.remaining() == 6
        assert deadline.clamp(5) == 5
        assert deadline.clamp(8) == 6
        assert deadline.clamp(None) == 6

    def test_expires(self) -> None:
        clock = FakeClock()
        deadline = Deadline(1, clock=clock)

        clock.now += 2
        assert deadline.expired
        assert deadline.remaining() == 0
        assert deadline.clamp(5) == 0
