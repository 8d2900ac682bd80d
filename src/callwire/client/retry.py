"""Retry policy and retry classification.

This module centralizes the retry configuration used by the execution
engine. Delays grow exponentially with the attempt number, without
jitter: the retry after failed attempt ``k`` waits
``base_delay * 2 ** (k - 1)`` seconds, optionally capped by ``max_delay``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, ClassVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import NetworkError, ServerError

logger = logging.getLogger("callwire")


def is_retryable_status_code(status_code: int) -> bool:
    """Check if an undecodable error status is worth retrying.

    Args:
        status_code: HTTP status code

    Returns:
        True for 5xx (server error) statuses
    """
    return status_code >= 500


def is_retryable(exception: BaseException) -> bool:
    """Check if an execution error may be re-attempted.

    Retryable conditions:
    - NetworkError (the transport produced no response)
    - ServerError with a 5xx status

    Backend errors, decoding failures and 4xx server errors are never
    retried.
    """
    if isinstance(exception, NetworkError):
        return True
    if isinstance(exception, ServerError):
        return is_retryable_status_code(exception.status_code)
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for a request execution.

    Attributes:
        max_attempts: Total number of attempts, including the first (>= 1)
        base_delay: Delay before the first retry, in seconds (>= 0)
        max_delay: Optional ceiling on any single delay, in seconds
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float | None = None

    NONE: ClassVar["RetryPolicy"]
    DEFAULT: ClassVar["RetryPolicy"]

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")
        if self.max_delay is not None and self.max_delay < 0:
            raise ValueError(f"max_delay must be >= 0, got {self.max_delay}")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        delay = self.base_delay * 2 ** (attempt - 1)
        if self.max_delay is not None:
            return min(delay, self.max_delay)
        return delay

    def wait(self) -> wait_exponential:
        """Tenacity wait strategy matching ``delay_for``."""
        if self.max_delay is None:
            return wait_exponential(multiplier=self.base_delay, exp_base=2)
        return wait_exponential(multiplier=self.base_delay, exp_base=2, max=self.max_delay)

    def retrying(
        self,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> AsyncRetrying:
        """Create an async retry controller for this policy.

        Args:
            sleep: Coroutine function used for delays (defaults to
                ``asyncio.sleep``)

        Returns:
            A tenacity AsyncRetrying that re-raises the last error.
        """
        kwargs: dict[str, Any] = {}
        if sleep is not None:
            kwargs["sleep"] = sleep
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.wait(),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
            **kwargs,
        )


RetryPolicy.NONE = RetryPolicy(max_attempts=1, base_delay=0)
RetryPolicy.DEFAULT = RetryPolicy(max_attempts=3, base_delay=0.5)
