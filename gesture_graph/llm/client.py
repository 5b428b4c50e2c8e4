# gesture_graph/llm/client.py
"""
LLM Client - unified interface for OpenAI and Anthropic.

Used to turn natural-language requests into Cypher queries.
"""

from typing import Dict, Optional, List
from dataclasses import dataclass

from ..settings import settings


class QueryGenerationError(Exception):
    """Raised when the LLM client is misconfigured or the provider call fails."""
    pass


@dataclass
class LLMResponse:
    """Response from LLM."""
    content: str
    model: str
    usage: Dict[str, int]


class LLMClient:
    """
    Unified LLM client supporting OpenAI and Anthropic.

    Usage:
        client = LLMClient()
        response = client.complete(
            system="You are an expert in Cypher...",
            messages=[{"role": "user", "content": "All people and who they know"}]
        )
    """

    def __init__(self, provider: Optional[str] = None):
        self.provider = provider or settings.llm_provider
        self._client = None
        self._init_client()

    def _init_client(self):
        """Initialize the appropriate client."""
        if self.provider == "anthropic":
            if not settings.anthropic_api_key:
                raise QueryGenerationError("ANTHROPIC_API_KEY not set")
            import anthropic
            self._client = anthropic.Anthropic(
                api_key=settings.anthropic_api_key,
                timeout=30.0,
            )
            self.model = settings.anthropic_model
        else:  # openai
            if not settings.openai_api_key:
                raise QueryGenerationError("OPENAI_API_KEY not set")
            import openai
            self._client = openai.OpenAI(
                api_key=settings.openai_api_key,
                timeout=30.0,
            )
            self.model = settings.openai_model

    def complete(
        self,
        system: str,
        messages: List[Dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """
        Generate completion from LLM.

        Args:
            system: System prompt
            messages: List of message dicts with role/content
            temperature: Sampling temperature (0 = deterministic)
            max_tokens: Max response tokens

        Returns:
            LLMResponse with content and metadata
        """
        if self.provider == "anthropic":
            return self._complete_anthropic(system, messages, temperature, max_tokens)
        else:
            return self._complete_openai(system, messages, temperature, max_tokens)

    def _complete_anthropic(
        self,
        system: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        """Complete using Anthropic Claude."""
        response = self._client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system,
            messages=messages,
        )

        return LLMResponse(
            content=response.content[0].text,
            model=self.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            }
        )

    def _complete_openai(
        self,
        system: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        """Complete using OpenAI GPT."""
        all_messages = [{"role": "system", "content": system}] + messages

        response = self._client.chat.completions.create(
            model=self.model,
            messages=all_messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.model,
            usage={
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
            }
        )


# Global client instance
_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create global LLM client."""
    global _client
    if _client is None:
        _client = LLMClient()
    return _client
