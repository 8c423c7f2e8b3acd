"""Retry decorators using tenacity."""

from __future__ import annotations

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

TRANSIENT_ERRORS = (
    TimeoutError,
    ConnectionError,
    requests.Timeout,
    requests.ConnectionError,
)


def retry_api(max_attempts: int = 3, *, extra: tuple[type[BaseException], ...] = ()):
    """Retry decorator for network calls with exponential backoff."""
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception_type(TRANSIENT_ERRORS + extra),
        reraise=True,
    )
