"""Retry logic with exponential backoff for page writes.

Plans are applied one page write at a time. A write that fails with a
transient error (rate limit, timeout, temporarily unavailable backend) is
retried with exponential backoff (1s, 2s, 4s); any other error fails fast.
Retrying a write is safe because plan entries are idempotent.
"""

import logging
import time
from typing import Callable, TypeVar

from .errors import RetryExhaustedError, TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar('T')

TRANSIENT_STATUS_CODES = {429, 502, 503, 504}


def retry_on_transient_error(func: Callable[..., T], *args, max_retries: int = 3, **kwargs) -> T:
    """Retry function on transient errors with exponential backoff.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        max_retries: Retries after the first attempt (default 3)
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        RetryExhaustedError: If the error persists after max_retries retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> retry_on_transient_error(store.update_content, "p-1", content)
    """
    for retry_num in range(max_retries + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_transient_error(e):
                raise

            if retry_num >= max_retries:
                logger.error(
                    f"Transient error persisted after {max_retries} retries, giving up"
                )
                raise RetryExhaustedError(max_retries, str(e)) from e

            wait_time = 2 ** retry_num
            logger.info(
                f"Transient error ({e}), retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{max_retries})"
            )
            time.sleep(wait_time)

    raise RetryExhaustedError(max_retries)


def _is_transient_error(exception: Exception) -> bool:
    """Check if an exception is worth retrying.

    Recognizes TransientStoreError, HTTP-style status codes on the
    exception or its response, and common transient phrases in messages.
    """
    if isinstance(exception, TransientStoreError):
        return True

    if isinstance(exception, TimeoutError):
        return True

    status_code = getattr(exception, 'status_code', None)
    if status_code in TRANSIENT_STATUS_CODES:
        return True

    response = getattr(exception, 'response', None)
    if getattr(response, 'status_code', None) in TRANSIENT_STATUS_CODES:
        return True

    error_msg = str(exception).lower()
    transient_patterns = [
        'too many requests',
        'rate limit exceeded',
        'rate limited',
        'temporarily unavailable',
        'connection reset',
        'timed out',
    ]
    return any(pattern in error_msg for pattern in transient_patterns)
