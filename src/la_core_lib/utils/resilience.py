"""Resilience utilities for process-start configuration loading.

The engine itself is pure and never retries. The only I/O it may trigger is
reading an on-disk service catalog at startup, where the file can lag behind
the process (config volume not yet mounted, file being rotated).
"""

import logging
from typing import Any, Callable, Tuple, Type, TypeVar

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_custom_retry(
    max_attempts: int = 3,
    min_wait: int = 1,
    max_wait: int = 8,
    multiplier: int = 1,
    retry_on: Tuple[Type[BaseException], ...] = (OSError,),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Create a retry decorator with specific parameters.

    Only exceptions listed in ``retry_on`` are retried; anything else (bad
    catalog content, validation failures) propagates on the first attempt.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait time between retries (seconds)
        max_wait: Maximum wait time between retries (seconds)
        multiplier: Exponential backoff multiplier
        retry_on: Exception types that trigger another attempt

    Returns:
        A retry decorator configured with the specified parameters

    Example:
        ```python
        read_retry = create_custom_retry(max_attempts=5)

        @read_retry
        def read_catalog(path):
            ...
        ```
    """
    return retry(
        retry=retry_if_exception_type(retry_on),
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def call_with_retry(func: Callable[..., T], *args: Any, max_attempts: int = 3, **kwargs: Any) -> T:
    """Invoke ``func`` under a startup retry policy with ``max_attempts`` attempts."""
    return create_custom_retry(max_attempts=max_attempts)(func)(*args, **kwargs)
