# gesture_graph/settings.py
"""
Application settings.
"""

import os
from dataclasses import dataclass
from typing import Optional

# Load .env file
from dotenv import load_dotenv
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Application configuration."""

    # Graph query service (Quine)
    quine_url: str = os.getenv("QUINE_URL", "http://localhost:8082")
    quine_timeout_seconds: float = float(os.getenv("QUINE_TIMEOUT", "10"))
    quine_autoload: bool = _env_bool("QUINE_AUTOLOAD", "false")

    # Demo graph shown until a real query succeeds
    demo_node_count: int = int(os.getenv("DEMO_NODE_COUNT", "100"))

    # Control signal
    initial_expansion: float = float(os.getenv("INITIAL_EXPANSION", "0.1"))
    initial_tension: float = float(os.getenv("INITIAL_TENSION", "0.0"))

    # LLM providers (query generation)
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY")
    llm_provider: str = os.getenv("LLM_PROVIDER", "openai")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    anthropic_model: str = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-latest")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _env_bool("LOG_JSON", "true")

    # API settings
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    allowed_origins: str = os.getenv(
        "ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:8000"
    )


# Global settings instance
settings = Settings()
