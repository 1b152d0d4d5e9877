"""Retry policy for calls made to Typesense.

The backend answers 503 while it is starting and 422 while a node is not
ready to serve yet. Both are retried with exponential backoff and jitter; any
other failure surfaces on the first attempt.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Tuple

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from .errors import TypesenseRetryableError


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 6
    base_delay_s: float = 3.0
    backoff_base: float = 2.0
    jitter: float = 0.25
    retry_status: Tuple[int, ...] = (503, 422)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_s < 0:
            raise ValueError("base_delay_s must not be negative")
        if self.backoff_base < 1:
            raise ValueError("backoff_base must be at least 1")
        # With jitter below 1/3 the shortest wait for attempt n+1 is still
        # longer than the longest wait for attempt n.
        if not 0 <= self.jitter < 1 / 3:
            raise ValueError("jitter must be in [0, 1/3)")

    def nominal_delay(self, attempt: int) -> float:
        """Un-jittered wait after the given (1-based) failed attempt."""
        return self.base_delay_s * self.backoff_base ** (attempt - 1)

    def max_total_delay(self) -> float:
        """Longest possible time spent sleeping across one call."""
        return sum(
            self.nominal_delay(n) * (1 + self.jitter)
            for n in range(1, self.max_attempts)
        )


@dataclass(frozen=True)
class WaitExponentialJitter(wait_base):
    """``initial * base ** (attempt - 1)`` scaled by a factor in [1 - jitter, 1 + jitter]."""

    initial: float
    base: float
    jitter: float
    rand: Callable[[], float] = field(default=random.random, compare=False)

    def __call__(self, retry_state: object) -> float:
        attempt = getattr(retry_state, "attempt_number", 1)
        delay = self.initial * self.base ** (attempt - 1)
        factor = 1 - self.jitter + 2 * self.jitter * self.rand()
        return max(0.0, delay * factor)


def build_retrying(policy: RetryPolicy, *, sleep: Optional[Sleep] = None) -> AsyncRetrying:
    """Create a fresh retry controller for a single backend call.

    A new controller per call keeps attempt counting local to that call.
    """
    kwargs = {}
    if sleep is not None:
        kwargs["sleep"] = sleep
    return AsyncRetrying(
        retry=retry_if_exception_type(TypesenseRetryableError),
        stop=stop_after_attempt(policy.max_attempts),
        wait=WaitExponentialJitter(
            initial=policy.base_delay_s,
            base=policy.backoff_base,
            jitter=policy.jitter,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
        **kwargs,
    )
