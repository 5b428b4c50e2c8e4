# gesture_graph/logging.py
"""
Structured logging for Gesture Graph.

Every line is a JSON object:
- timestamp: ISO 8601
- level: DEBUG/INFO/WARNING/ERROR
- logger: Full logger name
- component: graph, ingestion, gesture, api, ... (from the logger name)
- message: Event name, snake_case
- bound context (ticket, session_id) and per-call fields

Usage:
    from gesture_graph.logging import get_logger
    logger = get_logger(__name__)
    logger.info("graph_published", nodes=120, links=87)

    log = logger.bind(ticket=7)
    log.warning("graph_load_empty")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "gesture_graph"


def component_of(logger_name: str) -> str:
    """
    Component segment of a logger name.

    >>> component_of("gesture_graph.ingestion.quine")
    'ingestion'
    """
    parts = logger_name.split(".")
    if parts[0] == ROOT_LOGGER_NAME and len(parts) > 1:
        return parts[1]
    return parts[0]


class StructuredLogFormatter(logging.Formatter):
    """Formats records carrying `structured_data` as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": component_of(record.name),
            "message": record.getMessage(),
        }

        if hasattr(record, "structured_data"):
            log_data.update(record.structured_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.ERROR:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """
    Logger taking keyword fields, with optional bound context.

    Bound fields are merged under per-call fields, so one load or one
    gesture session can be followed through the log.

    Example:
        log = get_gesture_logger().bind(session_id=3)
        log.info("gesture_session_transition", to_state="STREAMING")
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self._logger = logging.getLogger(name)
        self.context = dict(context or {})

    def bind(self, **fields) -> "StructuredLogger":
        """Return a logger that adds `fields` to every line."""
        return StructuredLogger(self._logger.name, {**self.context, **fields})

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs):
        extra = {"structured_data": {**self.context, **kwargs}}
        self._logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log an error; pass exc_info=True inside an except block for the traceback."""
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)


_configured = False


def configure_logging(level: str = "INFO", json_output: bool = True):
    """
    Install one stdout handler on the root logger.

    Args:
        level: Log level name; unknown names fall back to INFO
        json_output: JSON lines (True) or plain text (False)
    """
    global _configured
    if _configured:
        return
    _configured = True

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root_logger.addHandler(handler)

    # Per-request chatter from the HTTP and LLM clients
    for noisy in ("httpx", "httpcore", "uvicorn", "openai", "anthropic"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger, configuring logging from settings on first use."""
    if not _configured:
        from .settings import settings
        configure_logging(level=settings.log_level, json_output=settings.log_json)
    return StructuredLogger(name)


def get_ingestion_logger(source: str) -> StructuredLogger:
    return get_logger(f"{ROOT_LOGGER_NAME}.ingestion.{source}")


def get_gesture_logger() -> StructuredLogger:
    return get_logger(f"{ROOT_LOGGER_NAME}.gesture")


def get_api_logger() -> StructuredLogger:
    return get_logger(f"{ROOT_LOGGER_NAME}.api")
