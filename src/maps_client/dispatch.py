"""Retry, backoff and rate limiting around a single logical call."""

import logging
import random
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from maps_client.exceptions import (
    ConfigurationError,
    RequestCancelledError,
    RetryableServiceError,
    ServiceError,
    TransportError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded exponential backoff with jitter."""

    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 8.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("Backoff delays must not be negative")

    def delay(self, attempt: int, rng: random.Random | None = None) -> float:
        """Return the sleep before the attempt following ``attempt`` (1-based).

        The capped exponential delay is scaled by a jitter factor in [0.5, 1.5).
        """
        capped = min(self.max_delay, self.base_delay * self.multiplier ** (attempt - 1))
        jitter = (rng or random).random() + 0.5
        return capped * jitter


class RateLimiter:
    """In-memory sliding one-second window shared by concurrent callers."""

    def __init__(self, queries_per_second: int, clock: Callable[[], float] = time.monotonic) -> None:
        if queries_per_second < 1:
            raise ConfigurationError(
                f"queries_per_second must be at least 1, got {queries_per_second}"
            )
        self._clock = clock
        self._lock = threading.Lock()
        self._sent: deque[float] = deque(maxlen=queries_per_second)

    def reserve(self, deadline: float | None = None) -> float | None:
        """Claim the next free slot and return how long to wait before using it.

        Returns ``None`` without claiming a slot when the wait would run past
        ``deadline``, a value on the limiter's clock.
        """
        with self._lock:
            now = self._clock()
            wait = 0.0
            if len(self._sent) == self._sent.maxlen:
                wait = max(0.0, self._sent[0] + 1.0 - now)
            if deadline is not None and now + wait >= deadline:
                return None
            self._sent.append(now + wait)
            return wait

    def acquire(
        self,
        cancel: threading.Event | None = None,
        deadline: float | None = None,
    ) -> None:
        """Block until a slot is free.

        Raises:
            RequestCancelledError: If ``cancel`` is set while waiting, or no
                slot frees up before ``deadline``.
        """
        wait = self.reserve(deadline)
        if wait is None:
            raise RequestCancelledError("Call deadline exceeded while waiting for rate limit")
        if wait > 0 and _sleep(wait, cancel):
            raise RequestCancelledError("Call cancelled while waiting for rate limit")


def _sleep(seconds: float, cancel: threading.Event | None) -> bool:
    """Sleep, returning True if woken early by ``cancel``."""
    if cancel is not None:
        return cancel.wait(seconds)
    time.sleep(seconds)
    return False


def _check_cancelled(cancel: threading.Event | None, deadline: float | None) -> None:
    if cancel is not None and cancel.is_set():
        raise RequestCancelledError("Call cancelled")
    if deadline is not None and time.monotonic() >= deadline:
        raise RequestCancelledError("Call deadline exceeded")


def execute(
    attempt_call: Callable[[float], T],
    *,
    policy: RetryPolicy,
    timeout: float,
    rate_limiter: RateLimiter | None = None,
    cancel: threading.Event | None = None,
    deadline: float | None = None,
    description: str = "request",
) -> T:
    """Run ``attempt_call`` until it succeeds, fails terminally or attempts run out.

    Args:
        attempt_call: Performs one attempt given its timeout in seconds.
        policy: Attempt bound and backoff schedule.
        timeout: Per-attempt timeout, clipped to the remaining deadline.
        rate_limiter: Optional limiter consulted before every attempt; its
            wait never runs past ``deadline``.
        cancel: Event that aborts the loop when set.
        deadline: ``time.monotonic()`` value after which no attempt starts.
        description: Label used in log records.

    Returns:
        Whatever the first successful attempt returns.

    Raises:
        RequestCancelledError: If cancelled or past the deadline.
        TransportError: If a terminal transport failure occurs or the last
            retryable one exhausts the attempts.
        ServiceError: If the service reports a terminal status, or a
            transient one on the final attempt.
    """
    last_error: TransportError | RetryableServiceError | None = None

    for attempt in range(1, policy.max_attempts + 1):
        _check_cancelled(cancel, deadline)
        if rate_limiter is not None:
            rate_limiter.acquire(cancel, deadline)
            _check_cancelled(cancel, deadline)

        attempt_timeout = timeout
        if deadline is not None:
            attempt_timeout = min(timeout, deadline - time.monotonic())
            if attempt_timeout <= 0:
                raise RequestCancelledError("Call deadline exceeded")

        try:
            logger.debug(
                "Dispatching request",
                extra={"request": description, "attempt": attempt},
            )
            return attempt_call(attempt_timeout)
        except TransportError as exc:
            if not exc.retryable:
                raise
            last_error = exc
        except RetryableServiceError as exc:
            last_error = exc

        if attempt == policy.max_attempts:
            break

        delay = policy.delay(attempt)
        if deadline is not None:
            delay = min(delay, max(0.0, deadline - time.monotonic()))
        logger.warning(
            "Transient failure, retrying",
            extra={
                "request": description,
                "attempt": attempt,
                "delay": round(delay, 3),
                "error": str(last_error),
            },
        )
        if _sleep(delay, cancel):
            raise RequestCancelledError("Call cancelled during backoff") from last_error

    logger.error(
        "Retries exhausted",
        extra={"request": description, "attempts": policy.max_attempts, "error": str(last_error)},
    )
    if isinstance(last_error, RetryableServiceError):
        raise ServiceError(last_error.status, last_error.error_message) from last_error
    raise last_error  # type: ignore[misc]
