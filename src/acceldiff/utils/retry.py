"""
Retry with exponential backoff for database connection setup

Only establishing a connection is retried. Reads from an open cursor are
never retried because a restarted query would re-deliver rows the diff
engine has already consumed.

Usage:
    from acceldiff.utils.retry import retry_database_operation

    @retry_database_operation(max_retries=3, base_delay=1.0)
    def open_connection():
        return pyodbc.connect(connection_string)
"""

import logging
import random
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)

# Message fragments of transient connection failures. The SQLSTATE values are
# the DRDA communication errors Db2 reports through ODBC (08001, 08S01) and
# the Db2 SQLCODEs for a dropped or refused connection (-30080, -30081).
RETRYABLE_PATTERNS = (
    "connection",
    "timeout",
    "timed out",
    "communication link failure",
    "unable to connect",
    "connection refused",
    "connection reset",
    "broken pipe",
    "network error",
    "08001",
    "08s01",
    "sql30080n",
    "sql30081n",
)

RETRYABLE_EXCEPTION_NAMES = (
    "connectionerror",
    "timeouterror",
    "operationalerror",
    "interfaceerror",
)


def compute_delay(
    attempt: int,
    base_delay: float,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> float:
    """
    Backoff delay before retry number attempt + 1

    Args:
        attempt: Zero-based number of the attempt that just failed
        base_delay: Initial delay in seconds
        max_delay: Upper bound before jitter
        exponential_base: Growth factor per attempt
        jitter: Add +/-25% random jitter

    Returns:
        Delay in seconds, never below 0.1 when jitter is enabled
    """
    delay = min(base_delay * (exponential_base ** attempt), max_delay)
    if jitter:
        jitter_amount = delay * 0.25
        delay = max(0.1, delay + random.uniform(-jitter_amount, jitter_amount))
    return delay


def is_retryable_db_exception(exception: Exception) -> bool:
    """
    Determine if a database exception is a transient connection failure

    Args:
        exception: The exception to check

    Returns:
        True if the exception is retryable, False otherwise
    """
    exception_str = str(exception).lower()
    exception_type = type(exception).__name__.lower()

    if exception_type in RETRYABLE_EXCEPTION_NAMES:
        return True

    return any(
        pattern in exception_str or pattern in exception_type
        for pattern in RETRYABLE_PATTERNS
    )


def retry_database_operation(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    on_retry: Callable[[int, Exception, float], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator that retries transient database errors with exponential backoff

    Non-retryable errors (authentication failures, unknown objects, SQL
    errors) are raised immediately.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        base_delay: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay in seconds (default: 60.0)
        on_retry: Callback function(attempt, exception, delay) called on each retry
        sleep: Function used to wait between attempts

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            func_name = getattr(func, "__name__", "function")

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)

                except Exception as e:
                    if not is_retryable_db_exception(e):
                        logger.error(
                            f"Non-retryable database error in {func_name}: "
                            f"{type(e).__name__}: {e}"
                        )
                        raise

                    if attempt == max_retries:
                        logger.error(
                            f"Max retries ({max_retries}) exceeded for {func_name}: "
                            f"{type(e).__name__}: {e}"
                        )
                        raise

                    delay = compute_delay(attempt, base_delay, max_delay)

                    logger.warning(
                        f"Retryable database error in {func_name} "
                        f"(attempt {attempt + 1}/{max_retries}): "
                        f"{type(e).__name__}: {e}. Retrying in {delay:.2f}s..."
                    )

                    if on_retry:
                        try:
                            on_retry(attempt + 1, e, delay)
                        except Exception as callback_error:
                            logger.error(f"Error in retry callback: {callback_error}")

                    sleep(delay)

            raise RuntimeError(f"Unexpected error in retry logic for {func_name}")

        return wrapper
    return decorator
