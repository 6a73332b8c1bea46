"""Secure download utilities with SSL certificate handling.

Downloads use certifi's CA bundle so they also work from standalone Python
builds on macOS, where the system certificate store is not accessible by
default. Every download is a single attempt with a finite timeout; retrying
is left to the caller.
"""

from __future__ import annotations

import http.client
import socket
import ssl
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import certifi

from cmd_keeper_installer import __version__
from cmd_keeper_installer.core.logging import get_logger
from cmd_keeper_installer.errors import FetchError

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT = 60.0

USER_AGENT = f"cmd-keeper-installer/{__version__}"


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def secure_urlopen(url: str, timeout: Optional[float] = DEFAULT_TIMEOUT):
    """Open an HTTPS URL with certificate verification.

    Args:
        url: The URL to open.
        timeout: Socket timeout in seconds.

    Returns:
        A file-like object for reading the response.

    Raises:
        URLError: If the URL cannot be opened.
        ValueError: If the URL is not HTTPS.
    """
    if not url.startswith("https://"):
        raise ValueError(f"Only HTTPS URLs are supported: {url}")

    request = Request(url, headers={"User-Agent": USER_AGENT})
    return urlopen(request, timeout=timeout, context=get_ssl_context())  # nosec B310


def fetch_artifact(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Download an artifact into memory.

    Args:
        url: HTTPS download location.
        timeout: Socket timeout in seconds; expiry is reported as FetchError.

    Returns:
        The response body.

    Raises:
        FetchError: On non-HTTPS URL, HTTP error status, connection error,
            truncated response or timeout.
    """
    LOGGER.info(f"Downloading {url}")

    try:
        with secure_urlopen(url, timeout=timeout) as response:
            status = getattr(response, "status", 200)
            if not 200 <= status < 300:
                raise FetchError(url, getattr(response, "reason", "") or "unexpected status", status)

            total_size = response.getheader("Content-Length")
            if total_size:
                LOGGER.info(f"Artifact size: {int(total_size) / 1024 / 1024:.1f} MB")

            data = response.read()
    except FetchError:
        raise
    except ValueError as e:
        raise FetchError(url, str(e)) from e
    except HTTPError as e:
        raise FetchError(url, str(e.reason), e.code) from e
    except URLError as e:
        if isinstance(e.reason, (socket.timeout, TimeoutError)):
            raise FetchError(url, f"timed out after {timeout:g}s") from e
        raise FetchError(url, f"{e.reason}. Check your network connection.") from e
    except (socket.timeout, TimeoutError) as e:
        raise FetchError(url, f"timed out after {timeout:g}s") from e
    except http.client.HTTPException as e:
        raise FetchError(url, f"incomplete or malformed response: {e!r}") from e
    except OSError as e:
        raise FetchError(url, str(e)) from e

    LOGGER.info(f"Downloaded {len(data)} bytes")
    return data
