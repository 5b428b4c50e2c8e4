# gesture_graph/llm/__init__.py
"""LLM client module."""

from .client import LLMClient, LLMResponse, QueryGenerationError, get_llm_client
from .cypher import generate_cypher_query

__all__ = [
    "LLMClient",
    "LLMResponse",
    "QueryGenerationError",
    "get_llm_client",
    "generate_cypher_query",
]
