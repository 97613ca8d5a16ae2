"""
Retry with exponential backoff and jitter for blocking SDK calls.

Used by the storage and CDN backends around their network calls. The upload
workflow itself never retries: a failure that survives the backend's retries
fails the build.

Usage:
    from asset_uploader.utils.retry import retry_with_backoff

    @retry_with_backoff(max_attempts=5, base_delay=1.0)
    def put_object(path):
        # ... SDK call that may fail transiently ...
        pass
"""

import time
import random
import functools
from typing import Callable, Optional, Type, Tuple, Any

from asset_uploader.utils.logging import get_logger

logger = get_logger(__name__)


def calculate_backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    multiplier: float,
    jitter: bool,
) -> float:
    """
    Calculate delay for exponential backoff with optional jitter.

    Formula:
        delay = min(base_delay * (multiplier ** attempt), max_delay)
        if jitter:
            delay = delay * random.uniform(0.5, 1.5)

    Args:
        attempt: Current attempt number (0-indexed)
        base_delay: Base delay in seconds
        max_delay: Maximum delay cap
        multiplier: Exponential multiplier
        jitter: Whether to add random jitter

    Returns:
        Calculated delay in seconds

    Example:
        >>> calculate_backoff_delay(2, base_delay=1.0, max_delay=60.0,
        ...                         multiplier=2.0, jitter=False)
        4.0
    """
    delay = min(base_delay * (multiplier ** attempt), max_delay)

    if jitter:
        delay = delay * random.uniform(0.5, 1.5)

    return delay


def retry_with_backoff(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    backoff_multiplier: float = 2.0,
    jitter: bool = True,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (including initial)
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries
        backoff_multiplier: Multiplier for exponential backoff
        jitter: Add randomness to prevent thundering herd
        exceptions: Tuple of exception types to retry on
        on_retry: Optional callback ``(attempt, error, delay)`` called before each retry

    Returns:
        Decorated function with retry logic

    Example:
        >>> @retry_with_backoff(
        ...     max_attempts=3,
        ...     exceptions=(ConnectionError, TimeoutError)
        ... )
        ... def create_invalidation():
        ...     return cloudfront.create_invalidation(...)
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(max_attempts):
                try:
                    if attempt > 0:
                        logger.info(
                            f"Retry attempt {attempt}/{max_attempts - 1} "
                            f"for {func.__name__}"
                        )

                    result = func(*args, **kwargs)

                    if attempt > 0:
                        logger.info(
                            f"{func.__name__} succeeded on attempt {attempt + 1}"
                        )
                    return result

                except exceptions as e:
                    if attempt == max_attempts - 1:
                        logger.error(
                            f"{func.__name__} failed after {max_attempts} attempts. "
                            f"Last error: {e}"
                        )
                        raise

                    delay = calculate_backoff_delay(
                        attempt=attempt,
                        base_delay=base_delay,
                        max_delay=max_delay,
                        multiplier=backoff_multiplier,
                        jitter=jitter,
                    )
                    logger.warning(
                        f"{func.__name__} failed on attempt {attempt + 1}: {e}. "
                        f"Retrying in {delay:.2f}s..."
                    )

                    if on_retry:
                        on_retry(attempt, e, delay)

                    time.sleep(delay)

            # Unreachable: the loop either returns or raises
            raise RuntimeError(f"{func.__name__} failed without exception")

        return wrapper
    return decorator
