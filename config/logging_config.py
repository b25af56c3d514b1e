"""Centralized logging configuration for the execution core and its service.

This module configures Python logging so that:
- Application logs are emitted with timestamps and module names.
- HTTP client libraries (httpx, httpcore, requests, urllib3, openai) log
  request/response details only when the base level is DEBUG.
- LangChain / LangGraph logs follow LANGCHAIN_LOG_LEVEL.

Use LOG_LEVEL env var to control the base level (default: INFO).
"""

import logging
import os
from typing import Iterable


HTTP_LOGGERS: Iterable[str] = (
    "httpx",
    "httpcore",
    "urllib3",
    "requests",
    "openai",
)

LANGCHAIN_LOGGERS: Iterable[str] = (
    "langchain",
    "langchain_core",
    "langchain_openai",
    "langgraph",
)

# Failed audit writes land here so they can be routed separately.
AUDIT_DEAD_LETTER_LOGGER = "agents.supervisor.audit"


def _level_from_env(name: str, default: str) -> int:
    level_name = os.getenv(name, default).upper()
    return getattr(logging, level_name, logging.INFO)


def setup_logging() -> None:
    """Configure root logging and the third-party logger levels.

    Idempotent: safe to call from the CLI, the service and tests.
    """
    level = _level_from_env("LOG_LEVEL", "INFO")

    root = logging.getLogger()

    # If no handlers are configured yet, set a default format.
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root.setLevel(level)

    # HTTP clients: only promote to DEBUG when global LOG_LEVEL is DEBUG.
    http_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    langchain_level = _level_from_env("LANGCHAIN_LOG_LEVEL", "WARNING")
    for name in LANGCHAIN_LOGGERS:
        logging.getLogger(name).setLevel(langchain_level)

    # Never quieter than WARNING, whatever the base level.
    logging.getLogger(AUDIT_DEAD_LETTER_LOGGER).setLevel(min(level, logging.WARNING))
