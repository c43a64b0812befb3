"""
State management for the ADCortex chat clients.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ClientState(Enum):
    """Operational state of a chat client."""

    IDLE = 1
    PROCESSING = 2


class CircuitBreaker:
    """
    Error-counting gate for calls to the matching service.

    The breaker opens once ``threshold`` errors have been recorded and stays
    open for ``timeout`` seconds. There is no timer: every ``is_open()`` call
    first checks whether the cooldown has elapsed and, if so, closes the
    breaker before answering.
    """

    def __init__(
        self,
        threshold: int = 5,
        timeout: float = 120,
        disable_logging: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            threshold: Number of errors before the circuit opens
            timeout: Seconds before an open circuit resets
            disable_logging: Suppress log output from this breaker
            clock: Returns the current aware datetime (injectable for tests)
        """
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        self.threshold = threshold
        self.timeout = timeout
        self._disable_logging = disable_logging
        self._clock = clock
        self._error_count = 0
        self._reset_at: datetime | None = None
        self._is_open = False

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def reset_at(self) -> datetime | None:
        return self._reset_at

    def record_error(self) -> None:
        """Record an error, opening the circuit at the threshold."""
        self._error_count += 1
        # Errors recorded while open keep counting but never extend the cooldown
        if self._error_count >= self.threshold and not self._is_open:
            self._is_open = True
            self._reset_at = self._clock() + timedelta(seconds=self.timeout)
            if not self._disable_logging:
                logger.error(
                    f"Circuit breaker opened after {self._error_count} errors, "
                    f"resets at {self._reset_at.isoformat()}"
                )

    def is_open(self) -> bool:
        """Check whether calls are blocked, closing the circuit if the cooldown is over."""
        if not self._is_open:
            return False

        if self._reset_at is not None and self._clock() >= self._reset_at:
            self.reset()
            if not self._disable_logging:
                logger.info("Circuit breaker closed after cooldown")
            return False

        return True

    def reset(self) -> None:
        """Force the circuit closed."""
        self._is_open = False
        self._error_count = 0
        self._reset_at = None
