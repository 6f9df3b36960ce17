"""Application-wide configuration loader.

Settings are read from environment variables (a local ``.env`` file is loaded
first, if present).  The module-level :data:`settings` instance is only the
default: :func:`voicedoc.main.create_app` accepts an explicit
:class:`Settings` so the proxy can be pointed at a stub Ollama server in
tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _seconds(explicit: Optional[float], fallback: str) -> Optional[float]:
    seconds = float(explicit if explicit is not None else fallback)
    return seconds if seconds > 0 else None


class Settings:
    """Settings helper that gracefully falls back to sane defaults.

    Every value uses the idiom

        os.getenv(KEY) or DEFAULT

    so that an empty variable injected by docker-compose (``OLLAMA_URL=""``)
    does not override the useful in-code default.  Keyword arguments take
    precedence over the environment.
    """

    def __init__(
        self,
        *,
        port: Optional[int] = None,
        host: Optional[str] = None,
        ollama_url: Optional[str] = None,
        model_name: Optional[str] = None,
        ollama_timeout: Optional[float] = None,
        ollama_connect_timeout: Optional[float] = None,
        log_level: Optional[str] = None,
        log_dir: Optional[str] = None,
        frontend_dir: Optional[str] = None,
        cors_origins: Optional[str] = None,
    ) -> None:
        self.PORT: int = int(port or os.getenv("PORT") or "3001")
        self.HOST: str = host or os.getenv("HOST") or "0.0.0.0"
        self.OLLAMA_URL: str = (
            ollama_url or os.getenv("OLLAMA_URL") or "http://localhost:11434"
        ).rstrip("/")
        self.MODEL_NAME: str = model_name or os.getenv("MODEL_NAME") or "mistral"
        # Seconds; "0" disables the read/write/pool timeout entirely.
        self.OLLAMA_TIMEOUT: Optional[float] = _seconds(
            ollama_timeout, os.getenv("OLLAMA_TIMEOUT") or "300"
        )
        self.OLLAMA_CONNECT_TIMEOUT: Optional[float] = _seconds(
            ollama_connect_timeout, os.getenv("OLLAMA_CONNECT_TIMEOUT") or "10"
        )
        self.LOG_LEVEL: str = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
        self.LOG_DIR: str = log_dir or os.getenv("LOG_DIR") or "backend/logs"
        self.FRONTEND_DIR: Path = Path(
            frontend_dir or os.getenv("FRONTEND_DIR") or _PROJECT_ROOT / "frontend"
        )
        origins = cors_origins or os.getenv("CORS_ORIGINS") or "*"
        self.CORS_ORIGINS: list[str] = [o.strip() for o in origins.split(",") if o.strip()]

    def __repr__(self) -> str:
        return (
            f"Settings(OLLAMA_URL={self.OLLAMA_URL!r}, MODEL_NAME={self.MODEL_NAME!r}, "
            f"PORT={self.PORT})"
        )


settings = Settings()
