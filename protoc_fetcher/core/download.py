"""
Network retrieval of release archives.

A single HTTP GET per call, with the whole archive returned as bytes. There is
no retry, resume or checksum logic; failures are raised to the caller, who
may call again.
"""

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from protoc_fetcher.core.exceptions import DownloadFailed, NetworkError

logger = logging.getLogger(__name__)

USER_AGENT = "protoc-fetcher"


def download(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> bytes:
    """
    Download a release archive into memory.

    Args:
        url: Archive URL
        timeout: Request timeout in seconds (None uses the client default)
        session: Optional requests session to issue the request with

    Returns:
        Response body

    Raises:
        DownloadFailed: If the server answers with a non-2xx status
        NetworkError: On DNS failure, refused connection, timeout, etc.
        ValueError: If URL is empty

    Example:
        >>> data = download("https://example.com/protoc-28.0-linux-x86_64.zip")
        >>> len(data) > 0
        True
    """
    if not url:
        raise ValueError("URL cannot be empty")

    logger.info(f"Downloading from {url}")

    getter = session.get if session is not None else requests.get
    try:
        response = getter(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            allow_redirects=True,
        )
    except RequestException as e:
        raise NetworkError(url, str(e)) from e

    if not 200 <= response.status_code < 300:
        raise DownloadFailed(url, response.status_code, response.text)

    try:
        content = response.content
    except RequestException as e:
        # Connection dropped while the body was being read
        raise NetworkError(url, str(e)) from e

    logger.info(f"Download successful ({len(content)} bytes)")
    return content


__all__ = ["download", "USER_AGENT"]
