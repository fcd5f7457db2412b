"""Retry decorator for store API calls, built on tenacity.

Retries belong to the content store clients; the import engine never
retries a save itself. Waits grow exponentially with jitter, and a
``Retry-After`` sent with a 429 response is honored when it asks for longer.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from press_import.client.exceptions import NetworkError, RateLimitError, ServerError
from press_import.utils.logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

TRANSIENT_ERRORS = (NetworkError, ServerError, RateLimitError)


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    logger.info(
        "retry_attempt",
        function=getattr(retry_state.fn, "__name__", "unknown"),
        attempt=retry_state.attempt_number,
        wait_seconds=round(retry_state.upcoming_sleep, 2),
        error=str(outcome.exception()) if outcome is not None else None,
    )


class wait_for_retry_after:
    """Exponential backoff that never waits less than the server's Retry-After."""

    def __init__(self, min_wait: float, max_wait: float):
        self.max_wait = max_wait
        self.backoff = wait_random_exponential(multiplier=1, min=min_wait, max=max_wait)

    def __call__(self, retry_state: RetryCallState) -> float:
        wait = self.backoff(retry_state)
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        if isinstance(error, RateLimitError) and error.retry_after:
            wait = max(wait, min(float(error.retry_after), self.max_wait))
        return wait


def retry_with_backoff(
    max_attempts: int = 3,
    min_wait: float = 1,
    max_wait: float = 30,
    retry_on_exceptions: tuple = TRANSIENT_ERRORS,
) -> Callable[[F], F]:
    """Retry the decorated call on transient store errors.

    Args:
        max_attempts: Attempts including the first call
        min_wait: Minimum wait between attempts in seconds
        max_wait: Maximum wait between attempts in seconds
        retry_on_exceptions: Exception types that trigger another attempt

    Returns:
        Decorator; the last error is re-raised once attempts run out
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            @retry(
                stop=stop_after_attempt(max_attempts),
                wait=wait_for_retry_after(min_wait, max_wait),
                retry=retry_if_exception_type(retry_on_exceptions),
                before_sleep=_log_retry,
                reraise=True,
            )
            def _attempt() -> Any:
                return func(*args, **kwargs)

            return _attempt()

        return wrapper  # type: ignore

    return decorator
