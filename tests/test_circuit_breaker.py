"""
Unit tests for the consecutive-failure circuit breaker.
"""

from portfolio_market_data.circuit_breaker import CircuitBreaker
from portfolio_market_data.models import CircuitStatus

from conftest import FakeClock


def make_breaker(clock, threshold=5, reset=60.0):
    return CircuitBreaker('test', failure_threshold=threshold, reset_timeout_seconds=reset, clock=clock)


class TestCircuitBreaker:

    def test_starts_closed(self):
        breaker = make_breaker(FakeClock())
        assert breaker.is_open() is False
        assert breaker.status() == CircuitStatus.CLOSED
        assert breaker.failure_count == 0

    def test_opens_at_threshold(self):
        breaker = make_breaker(FakeClock())
        for _ in range(4):
            breaker.record_failure()
        assert breaker.is_open() is False

        breaker.record_failure()
        assert breaker.is_open() is True
        assert breaker.status() == CircuitStatus.OPEN

    def test_success_resets_count_regardless_of_streak(self):
        breaker = make_breaker(FakeClock())
        for _ in range(12):
            breaker.record_failure()
        assert breaker.is_open() is True

        breaker.record_success()

        assert breaker.failure_count == 0
        assert breaker.is_open() is False

    def test_stays_open_inside_reset_window(self):
        clock = FakeClock()
        breaker = make_breaker(clock)
        for _ in range(5):
            breaker.record_failure()

        clock.advance(59.9)
        assert breaker.is_open() is True

    def test_self_heals_after_window_and_counts_from_zero(self):
        clock = FakeClock()
        breaker = make_breaker(clock)
        for _ in range(5):
            breaker.record_failure()
        assert breaker.is_open() is True

        clock.advance(60)
        assert breaker.is_open() is False
        assert breaker.failure_count == 0

        # Needs a full new streak to reopen
        for _ in range(4):
            breaker.record_failure()
        assert breaker.is_open() is False
        breaker.record_failure()
        assert breaker.is_open() is True

    def test_window_measured_from_last_failure(self):
        clock = FakeClock()
        breaker = make_breaker(clock, threshold=3)
        for _ in range(3):
            breaker.record_failure()
        clock.advance(50)
        breaker.record_failure()
        clock.advance(50)

        assert breaker.is_open() is True

    def test_stock_scenario_reopens_after_61_seconds(self):
        clock = FakeClock()
        breaker = make_breaker(clock, threshold=5, reset=60)
        for _ in range(5):
            breaker.record_failure()
        assert breaker.is_open() is True

        clock.advance(61)

        assert breaker.is_open() is False

    def test_stock_scenario_success_between_failures(self):
        breaker = make_breaker(FakeClock(), threshold=5, reset=60)
        breaker.record_failure()
        breaker.record_failure()
        breaker.record_success()
        for _ in range(4):
            breaker.record_failure()

        assert breaker.is_open() is False
