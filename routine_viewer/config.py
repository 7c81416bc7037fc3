from __future__ import annotations

import logging
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

import streamlit as st


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "openai/gpt-oss-20b"
    GROQ_TRANSCRIBE_MODEL: str = "whisper-large-v3-turbo"
    GROQ_TEMPERATURE: float = 0.2

    # Language hints for the assistant
    TRANSCRIBE_LANGUAGE: Optional[str] = "es"
    PLAN_LANGUAGE: str = "Spanish"

    # Transcripts shorter than this are treated as silence
    MIN_TRANSCRIPT_CHARS: int = 6

    # Base address used when building share links
    PUBLIC_URL: str = "http://localhost:8501"


_SECRET_KEYS = [
    "APP_ENV",
    "LOG_LEVEL",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "GROQ_TRANSCRIBE_MODEL",
    "GROQ_TEMPERATURE",
    "TRANSCRIBE_LANGUAGE",
    "PLAN_LANGUAGE",
    "MIN_TRANSCRIPT_CHARS",
    "PUBLIC_URL",
]


def _secret_overrides() -> dict:
    # Streamlit Cloud secrets override env values; a missing secrets.toml is fine
    overrides: dict = {}
    try:
        for k in _SECRET_KEYS:
            if k in st.secrets and st.secrets[k] not in (None, ""):
                overrides[k] = st.secrets[k]
    except Exception as exc:  # no secrets.toml, or not running under Streamlit
        logging.getLogger(__name__).debug("Streamlit secrets unavailable (%s); using environment only.", exc)
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(**_secret_overrides())  # type: ignore[call-arg]


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=(level or get_settings().LOG_LEVEL).upper(),
    )
    # Groq's HTTP stack is chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
