# config.py
import os
import logging
from typing import Optional
from dataclasses import dataclass
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# Agent ID of the hosted judging agent
DEFAULT_AGENT_ID = "6972544f1d92f5e2dd22ee9c"

def _get(key: str, default: Optional[str] = None) -> Optional[str]:
    try:
        return st.secrets.get(key, os.getenv(key, default))
    except Exception:
        return os.getenv(key, default)

def _get_float(key: str, default: float) -> float:
    raw = _get(key, None)
    try:
        return float(raw) if raw not in (None, "") else default
    except (TypeError, ValueError):
        return default

@dataclass(frozen=True)
class AppConfig:
    OPENAI_API_KEY: str
    OPENAI_MODEL: str
    # Hosted agent
    AGENT_API_URL: str
    AGENT_API_KEY: str
    AGENT_ID: str
    AGENT_TIMEOUT: float
    # Local storage / UI
    DATA_DIR: str
    POLL_INTERVAL_SECONDS: float
    LOG_LEVEL: str

    @property
    def agent_api_configured(self) -> bool:
        return bool(self.AGENT_API_URL)

    @property
    def openai_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)

def get_config() -> "AppConfig":
    return AppConfig(
        OPENAI_API_KEY=_get("OPENAI_API_KEY", ""),
        OPENAI_MODEL=_get("OPENAI_MODEL", "gpt-4o-mini"),
        AGENT_API_URL=_get("AGENT_API_URL", ""),
        AGENT_API_KEY=_get("AGENT_API_KEY", ""),
        AGENT_ID=_get("AGENT_ID", DEFAULT_AGENT_ID),
        AGENT_TIMEOUT=_get_float("AGENT_TIMEOUT", 120.0),
        DATA_DIR=_get("JUDGE_DATA_DIR", ".judge_data"),
        POLL_INTERVAL_SECONDS=_get_float("POLL_INTERVAL_SECONDS", 1.0),
        LOG_LEVEL=_get("LOG_LEVEL", "INFO"),
    )

def configure_logging(cfg: AppConfig) -> None:
    level = getattr(logging, str(cfg.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
