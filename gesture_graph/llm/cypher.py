# gesture_graph/llm/cypher.py
"""
Natural-language to Cypher query generation.

The generated query is shown to the user for editing before it runs,
so failures come back as a Cypher comment line instead of an exception.
"""

from typing import Optional

from .client import LLMClient, QueryGenerationError, get_llm_client
from ..logging import get_logger

logger = get_logger(__name__)

CYPHER_SYSTEM_PROMPT = """You are an expert in Quine (streaming graph) and Cypher query language.
Generate a valid, optimized Cypher query for the user's request.

CRITICAL: The output must be visualized in a 3D graph.
Ensure the query explicitly returns nodes and relationships (e.g., 'RETURN n, r, m' or 'RETURN path').
Do NOT return just counts or tables unless specifically asked.

Return ONLY the Cypher code, no markdown formatting, no explanations."""

MISSING_KEY_RESPONSE = "// API Key missing. Please provide a key to generate queries."
GENERATION_ERROR_RESPONSE = "// Error generating query. Please try again."


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ``` block if the model added one anyway."""
    content = text.strip()
    if content.startswith("```"):
        lines = content.split("\n")
        if lines[-1].strip().startswith("```"):
            lines = lines[1:-1]
        else:
            lines = lines[1:]
        content = "\n".join(lines).strip()
    return content


def generate_cypher_query(prompt: str, client: Optional[LLMClient] = None) -> str:
    """
    Generate a Cypher query for `prompt`.

    Args:
        prompt: Natural-language description of the wanted subgraph
        client: LLM client (defaults to the global one)

    Returns:
        Cypher text, or a Cypher comment explaining why none was generated
    """
    if client is None:
        try:
            client = get_llm_client()
        except QueryGenerationError as e:
            logger.warning("cypher_generation_unconfigured", error=str(e))
            return MISSING_KEY_RESPONSE

    try:
        response = client.complete(
            system=CYPHER_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": f'Request: "{prompt}"'}],
        )
    except Exception as e:
        logger.error("cypher_generation_failed", error=str(e), exc_info=True)
        return GENERATION_ERROR_RESPONSE

    logger.info("cypher_generated", model=response.model, **response.usage)
    return strip_code_fence(response.content)
