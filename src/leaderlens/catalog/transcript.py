"""Transcript retrieval from URLs or local files."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

import requests

from leaderlens.utils.progress import log_step
from leaderlens.utils.retry import retry_api

REQUEST_TIMEOUT = 30


class TranscriptFetchError(RuntimeError):
    """Raised when a transcript cannot be retrieved."""

    def __init__(self, location: str, reason: str):
        self.location = location
        super().__init__(f"Failed to fetch transcript {location}: {reason}")


@retry_api()
def _get(url: str) -> requests.Response:
    return requests.get(url, timeout=REQUEST_TIMEOUT)


def fetch_transcript(location: str) -> str:
    """Return transcript text from an http(s) URL or a local path."""
    scheme = urlparse(location).scheme
    if scheme in ("http", "https"):
        log_step("Transcript", f"Fetching {location}")
        try:
            response = _get(location)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TranscriptFetchError(location, str(e)) from e
        return response.text

    path = Path(location[len("file://"):] if scheme == "file" else location)
    if not path.exists():
        raise TranscriptFetchError(location, "file not found")
    return path.read_text(encoding="utf-8")
