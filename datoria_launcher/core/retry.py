"""
Retry policy shared by every network call site.

Version lookup and archive download both run their single attempts through
a RetryPolicy, so the attempt budget and the delay schedule live in one
place.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, TypeVar

from datoria_launcher.core.exceptions import RetryExhaustedError, TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry schedule.

    Attributes:
        max_attempts: Total number of attempts, including the first one
        delay: Seconds to wait after the first failed attempt
        backoff: Multiplier applied to the delay after each failure
            (1.0 keeps the delay fixed)
    """

    max_attempts: int = 3
    delay: float = 1.0
    backoff: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay cannot be negative")

    def delays(self) -> Iterator[float]:
        """
        Yield the wait before each retry.

        Example:
            >>> list(RetryPolicy(max_attempts=3, delay=2.0).delays())
            [2.0, 2.0]
        """
        current = self.delay
        for _ in range(self.max_attempts - 1):
            yield current
            current *= self.backoff

    def run(
        self,
        operation: Callable[[], T],
        sleep: Callable[[float], None] = time.sleep,
        description: str = "operation",
    ) -> T:
        """
        Run operation until it succeeds or the attempt budget is spent.

        Only TransientError triggers a retry; any other exception propagates
        immediately.

        Args:
            operation: Zero-argument callable performing one attempt
            sleep: Function used to wait between attempts
            description: Human readable name used in debug logs

        Returns:
            The value returned by the first successful attempt

        Raises:
            RetryExhaustedError: If every attempt raised TransientError
        """
        delays = self.delays()
        errors = []
        for attempt in range(1, self.max_attempts + 1):
            try:
                return operation()
            except TransientError as e:
                errors.append(e)
                if attempt == self.max_attempts:
                    raise RetryExhaustedError(errors) from e

                wait = next(delays)
                logger.debug(
                    f"{description} attempt {attempt}/{self.max_attempts} failed: {e}. "
                    f"Retrying in {wait:g}s..."
                )
                sleep(wait)

        # max_attempts >= 1 guarantees the loop returns or raises
        raise AssertionError("unreachable")


__all__ = ["RetryPolicy"]
