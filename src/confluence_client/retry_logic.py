"""Retry with exponential backoff for Confluence API rate limits.

Only HTTP 429 responses are retried (1s, 2s, 4s, or the server's
Retry-After when it asks for longer). Every other error is raised
immediately so the caller sees the original failure.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from .errors import APIAccessError, ConfluenceError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3

# Matched against the lowercased exception message
RATE_LIMIT_PATTERNS = (
    '429',
    'too many requests',
    'rate limit exceeded',
    'rate limit hit',
    'rate limited',
)


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Call ``func(*args, **kwargs)``, retrying on rate limit errors.

    Args:
        func: The callable to execute
        *args: Positional arguments for ``func``
        **kwargs: Keyword arguments for ``func``

    Returns:
        Whatever ``func`` returns

    Raises:
        APIAccessError: If the rate limit persists after MAX_RETRIES retries
        Exception: Any non rate limit error raised by ``func``, unchanged
    """
    for attempt in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise

            if attempt >= MAX_RETRIES:
                logger.error(f"Rate limit persisted after {MAX_RETRIES} retries, giving up")
                raise APIAccessError(
                    getattr(e, 'operation', None),
                    page_id=getattr(e, 'page_id', None),
                    reason=f"after {MAX_RETRIES} retries",
                ) from e

            wait_time = max(2 ** attempt, _retry_after(e) or 0)
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {attempt + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise APIAccessError(reason=f"after {MAX_RETRIES} retries")


def _is_rate_limit_error(exception: Exception) -> bool:
    """Return True if the exception, or one it was raised from, looks like
    an HTTP 429 response."""
    return _rate_limit_cause(exception) is not None


def _rate_limit_cause(exception: Optional[BaseException]) -> Optional[BaseException]:
    # APIWrapper translates client errors, so the 429 may sit in __cause__
    seen = set()
    while exception is not None and id(exception) not in seen:
        seen.add(id(exception))
        # Our own messages embed page ids and titles, only client text is matched
        if not isinstance(exception, ConfluenceError):
            error_msg = str(exception).lower()
            if any(pattern in error_msg for pattern in RATE_LIMIT_PATTERNS):
                return exception
        if getattr(exception, 'status_code', None) == 429:
            return exception
        response = getattr(exception, 'response', None)
        if response is not None and getattr(response, 'status_code', None) == 429:
            return exception
        exception = exception.__cause__
    return None


def _retry_after(exception: Exception) -> Optional[int]:
    """Seconds requested by a Retry-After header, if the response carries one."""
    response = getattr(_rate_limit_cause(exception) or exception, 'response', None)
    headers = getattr(response, 'headers', None)
    if not headers:
        return None
    try:
        value = headers.get('Retry-After')
    except AttributeError:
        return None
    if isinstance(value, (str, int)) and str(value).isdigit():
        return int(value)
    return None
