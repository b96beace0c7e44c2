from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from .errors import AutoMergeError, ExternalCallExhausted

logger = logging.getLogger("automerge.retry")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 5
    base_delay: float = 1.0
    max_delay: float = 30.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must be non-negative")

    def delay_for(self, attempt: int) -> float:
        """Backoff to wait after the given (1-based) failed attempt."""
        return min(self.max_delay, self.base_delay * (self.multiplier ** (attempt - 1)))


def retry(
    operation: Callable[[], T],
    *,
    policy: RetryPolicy | None = None,
    label: str = "operation",
    sleep: Callable[[float], None] = time.sleep,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Run an idempotent side effect until it succeeds or the attempt budget is spent.

    Engine errors (``AutoMergeError``) and exceptions outside ``retry_on`` are
    not transient and propagate on the first occurrence.
    """
    policy = policy or RetryPolicy()
    attempt = 0

    while True:
        attempt += 1
        try:
            return operation()
        except AutoMergeError:
            raise
        except retry_on as exc:
            if attempt >= policy.max_attempts:
                logger.error("%s exhausted %d attempt(s): %s", label, attempt, exc)
                raise ExternalCallExhausted(label, attempt, exc) from exc
            backoff = policy.delay_for(attempt)
            logger.warning(
                "%s attempt %d/%d failed: %s. Backoff %.1fs",
                label,
                attempt,
                policy.max_attempts,
                exc,
                backoff,
            )
            sleep(backoff)
