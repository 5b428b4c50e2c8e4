# gesture_graph/ingestion/quine.py
"""
Quine Cypher query client.

Endpoint: POST {base}/api/v1/query/cypher
Body: {"text": <cypher>, "parameters": {...}}

Returns the raw result payload ({"results": [...]}) for GraphIngestor.
"""

from typing import Any, Dict, Optional

import httpx

from .http import (
    HttpClient,
    HttpConnectionError,
    HttpStatusError,
    HttpTimeoutError,
)
from ..logging import get_ingestion_logger

logger = get_ingestion_logger("quine")

CYPHER_QUERY_PATH = "/api/v1/query/cypher"

INITIAL_QUERY = """MATCH (n)
OPTIONAL MATCH (n)-[r]->(m)
RETURN n AS node, r AS relationship, m AS connected_node, type(r) AS relationship_type
ORDER BY labels(n), relationship_type
LIMIT 200"""


class QueryServiceError(Exception):
    """Query service failure with a message suitable for display."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


def normalize_base_url(base_url: str) -> str:
    """
    Trim, drop one trailing slash, and default the scheme to http.

    >>> normalize_base_url(" localhost:8082/ ")
    'http://localhost:8082'
    """
    url = base_url.strip()
    if url.endswith("/"):
        url = url[:-1]
    if not url.startswith("http"):
        url = f"http://{url}"
    return url


def cypher_endpoint(base_url: str) -> str:
    return f"{normalize_base_url(base_url)}{CYPHER_QUERY_PATH}"


class QuineClient:
    """
    Client for the Quine Cypher endpoint.

    Usage:
        client = QuineClient("localhost:8082")
        raw = client.execute("MATCH (n) RETURN n LIMIT 10")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = normalize_base_url(base_url)
        self.client = HttpClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{CYPHER_QUERY_PATH}"

    def execute(self, cypher: str, parameters: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a Cypher query.

        Args:
            cypher: Query text
            parameters: Query parameters (empty dict when None)

        Returns:
            Parsed JSON payload

        Raises:
            QueryServiceError: On non-2xx status, timeout, unreachable host,
                or a body that is not JSON
        """
        url = self.endpoint
        logger.info("cypher_query_started", url=url, parameters=parameters or {})

        try:
            response = self.client.post_json(
                CYPHER_QUERY_PATH,
                {"text": cypher, "parameters": parameters or {}},
            )
        except HttpStatusError as e:
            detail = e.body or str(e)
            logger.error("cypher_query_failed", url=url, status=e.status_code)
            raise QueryServiceError(
                f"Quine API Error {e.status_code}: {detail}",
                status_code=e.status_code,
            )
        except HttpTimeoutError as e:
            logger.error("cypher_query_timeout", url=url)
            raise QueryServiceError(f"Query to {url} timed out. ({e})")
        except HttpConnectionError:
            logger.error("cypher_query_unreachable", url=url)
            raise QueryServiceError(
                f"Connection failed to {url}. "
                "(Check: Is Quine running? Is CORS enabled? Is the port correct?)"
            )

        try:
            return response.json()
        except ValueError as e:
            raise QueryServiceError(f"Quine returned a non-JSON response from {url}: {e}")
