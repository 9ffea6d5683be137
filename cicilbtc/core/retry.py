"""Retry logic wrapper with fixed or exponential backoff."""

from time import sleep
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from cicilbtc.core.logger import logger

F = TypeVar('F', bound=Callable[..., Any])

def with_retries(max_attempts: int = 3, initial_delay: float = 2, backoff: float = 2.0) -> Callable[[F], F]:
    """
    A decorator that retries a function upon failure.

    Args:
        max_attempts (int): Total number of calls, including the first one.
        initial_delay (float): Delay in seconds before the second attempt.
        backoff (float): Multiplier applied to the delay after each failed
                         attempt. ``1.0`` gives a fixed delay.

    Returns:
        Callable: The decorated function.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if attempt == max_attempts:
                        logger.error(f"'{func.__name__}' failed after {max_attempts} attempts: {e}")
                        raise

                    logger.warning(
                        f"'{func.__name__}' failed (attempt {attempt}/{max_attempts}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    sleep(delay)
                    delay *= backoff

            return None # Should not be reached due to raise
        return cast(F, wrapper)
    return decorator
