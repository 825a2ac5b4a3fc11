"""
HTTP transfers for the launcher.

Each function here performs exactly one attempt and reports every
retryable failure (network error, timeout, unexpected status, empty body)
as TransientError. Callers wrap them in a RetryPolicy.

Timeouts are applied twice: requests enforces the connect timeout and a
per-read timeout, and the streaming loop enforces a deadline on the whole
transfer. The deadline starts before the request is sent, and the read
timeout handed to requests is whatever remains of it at that point.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

import requests
from requests.exceptions import RequestException

from datoria_launcher.core.context import LaunchContext
from datoria_launcher.core.exceptions import TransientError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass(frozen=True)
class Timeouts:
    """Connect and total time limits for one request, in seconds."""

    connect: float
    total: float

    def remaining(self, elapsed: float) -> float:
        """Seconds left of the total budget after elapsed seconds."""
        return self.total - elapsed

    def as_requests_timeout(self, elapsed: float = 0.0) -> tuple:
        """(connect, read) tuple understood by requests; read gets what is left."""
        return (self.connect, self.remaining(elapsed))


def _deadline_error(url: str, timeouts: Timeouts, status_code=None) -> TransientError:
    return TransientError(
        f"Transfer from {url} exceeded {timeouts.total:g}s", status_code=status_code
    )


def _open(
    context: LaunchContext, url: str, timeouts: Timeouts, start: float
) -> requests.Response:
    elapsed = context.clock() - start
    if timeouts.remaining(elapsed) <= 0:
        raise _deadline_error(url, timeouts)

    try:
        response = context.session.get(
            url,
            stream=True,
            timeout=timeouts.as_requests_timeout(elapsed),
            allow_redirects=True,
        )
    except RequestException as e:
        raise TransientError(f"Request to {url} failed: {e}") from e

    if response.status_code != 200:
        status = response.status_code
        response.close()
        raise TransientError(f"HTTP {status} from {url}", status_code=status)

    return response


def _iter_body(
    response: requests.Response,
    url: str,
    timeouts: Timeouts,
    clock: Callable[[], float],
    start: float,
) -> Iterator[bytes]:
    try:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if clock() - start > timeouts.total:
                raise _deadline_error(url, timeouts, response.status_code)
            if chunk:
                yield chunk
    except RequestException as e:
        raise TransientError(
            f"Transfer from {url} failed: {e}", status_code=response.status_code
        ) from e
    finally:
        response.close()


def fetch_text(context: LaunchContext, url: str, timeouts: Timeouts) -> str:
    """
    GET a small text resource.

    Args:
        context: Launch context providing the HTTP session and clock
        url: URL to fetch
        timeouts: Connect and total time limits

    Returns:
        Response body with surrounding whitespace stripped (never empty)

    Raises:
        TransientError: On network error, timeout, non-200 status or
            empty body
    """
    logger.debug(f"GET {url}")
    start = context.clock()
    response = _open(context, url, timeouts, start)
    status = response.status_code
    body = b"".join(_iter_body(response, url, timeouts, context.clock, start))

    text = body.decode("utf-8", errors="replace").strip()
    if not text:
        raise TransientError(f"Empty response from {url}", status_code=status)
    return text


def download_file(
    context: LaunchContext, url: str, destination: Path, timeouts: Timeouts
) -> Path:
    """
    Download url to destination, overwriting any existing file.

    Args:
        context: Launch context providing the HTTP session and clock
        url: URL to download
        destination: File to write
        timeouts: Connect and total time limits

    Returns:
        destination

    Raises:
        TransientError: On network error, timeout, non-200 status or an
            empty resulting file
    """
    logger.debug(f"Downloading {url} -> {destination}")
    start = context.clock()
    response = _open(context, url, timeouts, start)
    status = response.status_code

    downloaded = 0
    with open(destination, "wb") as f:
        for chunk in _iter_body(response, url, timeouts, context.clock, start):
            f.write(chunk)
            downloaded += len(chunk)

    if downloaded == 0 or destination.stat().st_size == 0:
        raise TransientError(f"Downloaded file from {url} is empty", status_code=status)

    logger.debug(f"Download complete: {downloaded} bytes")
    return destination


__all__ = ["Timeouts", "fetch_text", "download_file"]
