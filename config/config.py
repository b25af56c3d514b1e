# config/config.py

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from langchain_openai import ChatOpenAI

# Load .env
load_dotenv()


DEFAULT_LIBRARY_DIR = os.path.join("external", "Subagents-collection")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    openai_model: str
    openai_temperature: float
    llm_timeout_seconds: float
    agent_timeout_seconds: float
    subagents_dir: str
    external_agents_dir: str
    crm_base_url: Optional[str]
    crm_timeout_seconds: float
    service_host: str
    service_port: int


def load_settings() -> Settings:
    """Read settings from the environment (after .env has been loaded)."""
    subagents_dir = os.getenv("SUBAGENTS_DIR", DEFAULT_LIBRARY_DIR)
    return Settings(
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_temperature=_float_env("OPENAI_TEMPERATURE", 0.2),
        llm_timeout_seconds=_float_env("LLM_TIMEOUT_SECONDS", 30.0),
        agent_timeout_seconds=_float_env("AGENT_TIMEOUT_SECONDS", 60.0),
        subagents_dir=subagents_dir,
        external_agents_dir=os.getenv("EXTERNAL_AGENTS_DIR", subagents_dir),
        crm_base_url=os.getenv("CRM_BASE_URL") or None,
        crm_timeout_seconds=_float_env("CRM_TIMEOUT_SECONDS", 5.0),
        service_host=os.getenv("SERVICE_HOST", "0.0.0.0"),
        service_port=int(_float_env("SERVICE_PORT", 8005)),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def build_llm(settings: Optional[Settings] = None) -> ChatOpenAI:
    # ChatOpenAI refuses to construct without OPENAI_API_KEY, so callers build it lazily.
    settings = settings or get_settings()
    return ChatOpenAI(
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        timeout=settings.llm_timeout_seconds,
        max_tokens=1200,
    )
