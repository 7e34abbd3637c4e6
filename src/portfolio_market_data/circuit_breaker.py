"""Consecutive-failure circuit breaker for upstream providers"""

import time
import logging
from typing import Callable, Optional

from .models import CircuitStatus


class CircuitBreaker:
    """
    Stops calls to a failing provider once too many consecutive failures pile up.

    The breaker is open while the failure count is at or above the threshold and
    the last failure happened less than reset_timeout_seconds ago. There is no
    timer: the first is_open() call after the window has passed resets the
    failure count, so is_open() is a stateful check rather than a pure getter.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int,
        reset_timeout_seconds: float,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout_seconds = reset_timeout_seconds
        self.failure_count = 0
        self.last_failure_at: Optional[float] = None
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def is_open(self) -> bool:
        """Check the breaker, healing it if the reset window has elapsed"""
        if self.failure_count >= self.failure_threshold:
            elapsed = self._clock() - (self.last_failure_at or 0.0)
            if elapsed < self.reset_timeout_seconds:
                return True
            self.logger.info(
                f"Circuit breaker '{self.name}' reset after {elapsed:.1f}s without failures"
            )
            self.failure_count = 0
        return False

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_at = self._clock()
        if self.failure_count == self.failure_threshold:
            self.logger.warning(
                f"Circuit breaker '{self.name}' opened after {self.failure_count} consecutive failures"
            )

    def record_success(self) -> None:
        # A single success clears the whole failure streak
        self.failure_count = 0

    def status(self) -> CircuitStatus:
        return CircuitStatus.OPEN if self.is_open() else CircuitStatus.CLOSED
