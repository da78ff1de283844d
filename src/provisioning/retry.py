"""Fixed-delay retry for the connectivity check, using tenacity."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Tuple, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from core.exceptions import ConnectionExhaustedError
from core.logging_config import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    How often and how patiently to retry a failing connection.

    The delay is constant between attempts; there is no backoff growth.
    """

    max_attempts: int = 3
    delay_seconds: float = 2.0
    retry_on: Tuple[Type[BaseException], ...] = (SQLAlchemyError, OSError)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")

    def retrying(self, sleep: Callable[[float], None] = time.sleep) -> Retrying:
        """Build the tenacity controller for this policy."""
        return Retrying(
            retry=retry_if_exception_type(self.retry_on),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.delay_seconds),
            after=_log_failed_attempt,
            before_sleep=_log_pending_retry,
            sleep=sleep,
            reraise=False,
        )


DEFAULT_RETRY_POLICY = RetryPolicy()


def _log_failed_attempt(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    LOGGER.error("Connection attempt %d failed: %s", retry_state.attempt_number, exc)


def _log_pending_retry(retry_state: RetryCallState) -> None:
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    LOGGER.info("Retrying in %g seconds...", delay)


def connect_with_retry(
    check: Callable[[], T],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[T, int]:
    """
    Call `check` until it succeeds or the policy runs out of attempts.

    Args:
        check: Zero-argument connectivity check.
        policy: Attempt bound and fixed delay.
        sleep: Injected for tests.

    Returns:
        Tuple of (check result, attempts used).

    Raises:
        ConnectionExhaustedError: every attempt failed with a retryable error.
    """
    attempts = 0

    def attempt() -> T:
        nonlocal attempts
        attempts += 1
        return check()

    try:
        result = policy.retrying(sleep=sleep)(attempt)
    except RetryError as exc:
        last_error = exc.last_attempt.exception()
        raise ConnectionExhaustedError(attempts, last_error) from last_error
    return result, attempts


__all__ = [
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "connect_with_retry",
]
