"""Load settings from environment (.env and env vars)."""

from __future__ import annotations

import os
from pathlib import Path

# Load .env from backend root if present
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
if _env_path.exists():
    from dotenv import load_dotenv
    load_dotenv(_env_path)


def _str(key: str, default: str = "") -> str:
    return (os.environ.get(key) or "").strip() or default


def _float(key: str, default: float) -> float:
    try:
        return float(_str(key) or default)
    except ValueError:
        return default


# LLM (OpenAI)
OPENAI_API_KEY = _str("OPENAI_API_KEY")
LLM_MODEL = _str("LLM_MODEL") or "gpt-4o-mini"
LLM_TEMPERATURE = _float("LLM_TEMPERATURE", 0.7)
LLM_TOP_P = _float("LLM_TOP_P", 0.95)

# UI
COPY_RESET_SECONDS = _float("COPY_RESET_SECONDS", 2.0)

# Sessions unused this long are dropped when a new one is created
SESSION_TTL_SECONDS = _float("SESSION_TTL_SECONDS", 3600.0)

# Server
CORS_ORIGINS = [o.strip() for o in _str("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = _str("BLOG_WRITER_LOG_LEVEL", "INFO").upper()
