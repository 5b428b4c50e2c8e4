# gesture_graph/ingestion/http.py
"""
HTTP client with retry logic for the graph query service.

Uses httpx for HTTP and tenacity for retries. Timeouts and 5xx responses
are retried; 4xx responses and refused connections are not.
"""

import httpx
from typing import Optional, Dict, Any
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
)

# Default timeout for HTTP requests (seconds)
DEFAULT_TIMEOUT = 10.0

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_WAIT_MIN = 1
DEFAULT_WAIT_MAX = 10


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class HttpTimeoutError(HttpClientError):
    """Raised when request times out."""
    pass


class HttpConnectionError(HttpClientError):
    """Raised when the server cannot be reached."""
    pass


class HttpStatusError(HttpClientError):
    """Raised when response has non-2xx status."""
    def __init__(self, status_code: int, message: str, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {message}")


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


@retry(
    stop=stop_after_attempt(DEFAULT_MAX_ATTEMPTS),
    wait=wait_exponential(
        multiplier=1,
        min=DEFAULT_WAIT_MIN,
        max=DEFAULT_WAIT_MAX
    ),
    retry=retry_if_exception(_is_transient),
    reraise=True,  # Re-raise the last exception after retries exhausted
)
def _request_with_retry_inner(
    url: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    json: Optional[Any] = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """
    Inner retry function - lets exceptions bubble for tenacity to catch and retry.

    DO NOT catch exceptions here - that would prevent tenacity from retrying.
    """
    with httpx.Client(timeout=timeout, transport=transport) as client:
        response = client.request(
            method=method,
            url=url,
            params=params,
            headers=headers,
            json=json,
        )
        response.raise_for_status()
        return response


def request_with_retry(
    url: str,
    method: str = "GET",
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    json: Optional[Any] = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """
    Send a request with automatic retry on transient failures.

    Args:
        url: URL to request
        method: HTTP method (GET, POST, etc.)
        params: Query parameters
        headers: HTTP headers
        json: JSON body
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)

    Returns:
        httpx.Response object

    Raises:
        HttpTimeoutError: After all retries exhausted due to timeout
        HttpStatusError: On 4xx, or after retries exhausted on 5xx
        HttpConnectionError: When the host refuses or cannot be resolved
    """
    try:
        return _request_with_retry_inner(url, method, params, headers, json, timeout, transport)
    except httpx.TimeoutException as e:
        # Converted only after retries are exhausted
        raise HttpTimeoutError(f"Timeout requesting {url} after {DEFAULT_MAX_ATTEMPTS} attempts: {e}")
    except httpx.HTTPStatusError as e:
        raise HttpStatusError(
            e.response.status_code,
            e.response.reason_phrase or str(e),
            body=e.response.text,
        )
    except httpx.TransportError as e:
        raise HttpConnectionError(f"Connection failed to {url}: {e}")


class HttpClient:
    """
    HTTP client for the external query service.

    Provides a consistent interface with retry logic and error handling.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Base URL for all requests
            timeout: Default timeout in seconds
            headers: Default headers for all requests
            transport: Optional httpx transport
        """
        self.base_url = base_url or ""
        self.timeout = timeout
        self.headers = headers or {}
        self.transport = transport

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}" if self.base_url else path

    def post_json(
        self,
        path: str,
        body: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """
        POST a JSON body with retry.

        Args:
            path: URL path (appended to base_url)
            body: JSON-serializable body
            headers: Additional headers (merged with defaults)

        Returns:
            httpx.Response object
        """
        return request_with_retry(
            url=self._url(path),
            method="POST",
            headers={**self.headers, **(headers or {})},
            json=body,
            timeout=self.timeout,
            transport=self.transport,
        )
