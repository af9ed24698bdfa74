"""HTTP helpers with an explicit timeout on every call"""

import logging
from typing import Any

import requests

from job_ingest.config import DEFAULT_USER_AGENT
from job_ingest.exceptions import ParseError, TransientFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


def http_get(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> requests.Response:
    """
    GET a URL, raising TransientFetchError on timeout, connection problems or non-2xx

    Args:
        url: URL to fetch
        params: Query string parameters
        headers: Extra headers (a browser User-Agent is always sent)
        timeout: Request timeout in seconds

    Returns:
        The successful response
    """
    merged_headers = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        merged_headers.update(headers)

    try:
        response = requests.get(url, params=params, headers=merged_headers, timeout=timeout)
    except requests.Timeout as e:
        logger.warning("Timeout fetching %s", url)
        raise TransientFetchError(url, "timeout") from e
    except requests.RequestException as e:
        logger.warning("Request error fetching %s: %s", url, e)
        raise TransientFetchError(url, f"request_error: {str(e)[:100]}") from e

    if not 200 <= response.status_code < 300:
        raise TransientFetchError(url, f"http_{response.status_code}")

    return response


def http_get_json(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> Any:
    """GET a URL and decode its JSON body, raising ParseError if it is not JSON"""
    response = http_get(
        url, params=params, headers={"Accept": "application/json", **(headers or {})}, timeout=timeout
    )
    try:
        return response.json()
    except ValueError as e:
        raise ParseError(f"Non-JSON response from {url}") from e
