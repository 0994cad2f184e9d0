"""
Transfer Engine

Performs the single HTTP GET behind every remote artifact. The body is
streamed chunk by chunk into a growable in-memory buffer, which keeps
progress reporting possible without changing how bytes are held.

Memory bound: the whole artifact lives in RAM until the caller has checked
its digest and written it. This suits benchmark archives in the tens to
hundreds of megabytes; it is not meant for multi-gigabyte corpora.

No retries and no resumption: any network or status failure reaches the
caller on the first attempt.
"""

from __future__ import annotations

import logging

import requests

from ..core import DEFAULT_CHUNK_SIZE, LOGGER_NAME, LogStyle
from ..exceptions import HttpStatusError, SizeMismatchError

logger = logging.getLogger(LOGGER_NAME)


def fetch(
    url: str,
    expected_size: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    timeout: float | None = None,
    session: requests.Session | None = None,
) -> bytes:
    """
    Downloads ``url`` and returns its complete body.

    Args:
        url: Address to GET.
        expected_size: Size in bytes the caller expects. Compared against the
            advertised ``Content-Length`` before any body byte is read, and
            against the received byte count afterwards.
        chunk_size: Streaming chunk size in bytes.
        timeout: Seconds before a stalled connection fails (None waits forever).
        session: Optional ``requests.Session`` for connection reuse.

    Returns:
        bytes: The full response body.

    Raises:
        HttpStatusError: If the server answers with a non-success status.
        SizeMismatchError: If the advertised or received size disagrees with
            ``expected_size``.
        requests.RequestException: Connection-level failures, unchanged.
    """
    http = session if session is not None else requests

    with http.get(url, stream=True, timeout=timeout) as r:
        if not r.ok:
            raise HttpStatusError(url, r.status_code, r.reason or "")

        advertised = _content_length(r)
        if advertised is not None and expected_size is not None and advertised != expected_size:
            raise SizeMismatchError(
                f"Remote advertises {advertised} bytes for {url}, expected {expected_size}"
            )

        buffer = bytearray()
        percent = 0
        for chunk in r.iter_content(chunk_size=chunk_size):
            if not chunk:
                continue
            buffer.extend(chunk)
            if advertised:
                new_percent = len(buffer) * 100 // advertised
                if new_percent > percent:
                    percent = new_percent
                    logger.debug(
                        f"{LogStyle.DOUBLE_INDENT}{len(buffer)} / {advertised} ({percent}%)"
                    )

    if expected_size is not None and len(buffer) != expected_size:
        raise SizeMismatchError(f"Received {len(buffer)} bytes from {url}, expected {expected_size}")

    return bytes(buffer)


# PRIVATE HELPERS
def _content_length(response: requests.Response) -> int | None:
    """Parses the Content-Length header, or None when absent or unusable."""
    raw = response.headers.get("Content-Length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
