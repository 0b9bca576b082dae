"""
Retry logic with exponential backoff for handling transient storage failures.

SQLite raises OperationalError while another connection holds the write lock;
those calls are worth repeating a few times before giving up.
"""

import time
import functools
from typing import Callable, Type, Tuple, Optional


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


def exponential_backoff(
    max_retries: int = 3,
    base_delay: float = 0.05,
    max_delay: float = 2.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    should_retry: Optional[Callable[[Exception], bool]] = None,
    on_retry: Optional[Callable] = None,
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (0 = no retries)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between retries in seconds
        exponential_base: Base for exponential calculation (delay *= base)
        exceptions: Tuple of exceptions to catch and retry
        should_retry: Optional predicate; a caught exception it rejects is
            re-raised immediately
        on_retry: Optional callback function(attempt, exception, delay)

    Example:
        @exponential_backoff(max_retries=3, exceptions=(OperationalError,))
        def write_blob(session, blob):
            session.merge(blob)
            session.commit()
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delay = base_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if should_retry is not None and not should_retry(e):
                        raise

                    if attempt >= max_retries:
                        raise RetryError(
                            f"Failed after {max_retries + 1} attempts: {str(e)}"
                        ) from e

                    current_delay = min(delay, max_delay)
                    if on_retry:
                        on_retry(attempt + 1, e, current_delay)

                    time.sleep(current_delay)
                    delay *= exponential_base

        return wrapper
    return decorator


def is_transient_error(exception: Exception) -> bool:
    """
    Determine if a storage exception is likely transient and should be retried.

    Args:
        exception: Exception to check

    Returns:
        True if the error looks like lock contention or a busy database
    """
    error_str = str(exception).lower()

    transient_keywords = [
        'database is locked',
        'database table is locked',
        'database is busy',
        'timeout',
        'temporarily unavailable',
    ]

    return any(keyword in error_str for keyword in transient_keywords)
