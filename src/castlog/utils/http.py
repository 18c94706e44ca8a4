"""HTTP helpers shared by the upstream clients.

Failures are not retried: a pipeline pass surfaces them to its caller,
which decides whether the process should stop.
"""

import logging
from typing import Any

import requests

from castlog import __version__
from castlog.utils.errors import NetworkError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
USER_AGENT = f"castlog/{__version__}"


def classify_http_error(status_code: int, error_message: str = "") -> UpstreamError:
    """Build an UpstreamError describing a failed HTTP reply.

    Args:
        status_code: HTTP status code
        error_message: Error message or reason from the server

    Returns:
        UpstreamError carrying the status code
    """
    if status_code == 429:
        message = f"Rate limit exceeded: {error_message}"
    elif 500 <= status_code < 600:
        message = f"Server error (HTTP {status_code}): {error_message}"
    elif status_code in (401, 403):
        message = f"Authentication failed (HTTP {status_code}): {error_message}"
    elif 400 <= status_code < 500:
        message = f"Invalid request (HTTP {status_code}): {error_message}"
    else:
        message = f"Request failed (HTTP {status_code}): {error_message}"
    return UpstreamError(message, status_code=status_code)


def fetch(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> requests.Response:
    """GET url and return the response, which is guaranteed to be a 200.

    Raises:
        UpstreamError: If the server replied with another status
        NetworkError: If the request could not be completed
    """
    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)

    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, params=params, headers=request_headers, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"Request to {url} failed: {e}") from e

    if response.status_code != 200:
        raise classify_http_error(response.status_code, response.reason or "")
    return response


def fetch_json(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> Any:
    """GET url and decode its JSON body.

    Raises:
        UpstreamError: On a non-200 reply
        NetworkError: If the request failed or the body is not JSON
    """
    response = fetch(url, params=params, headers=headers, timeout=timeout, session=session)
    try:
        return response.json()
    except ValueError as e:
        raise NetworkError(f"Invalid JSON from {url}: {e}") from e
