# Ingestion module - graph query service transport and loading
from .http import HttpClient, HttpClientError, request_with_retry
from .quine import QuineClient, QueryServiceError, INITIAL_QUERY, normalize_base_url
from .loader import GraphLoader, LoadResult, get_graph_loader

__all__ = [
    "HttpClient",
    "HttpClientError",
    "request_with_retry",
    "QuineClient",
    "QueryServiceError",
    "INITIAL_QUERY",
    "normalize_base_url",
    "GraphLoader",
    "LoadResult",
    "get_graph_loader",
]
