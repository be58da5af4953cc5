# imagecatalog/config.py
"""
Runtime settings read from the environment (and a ``.env`` file when
present).

Rules:
- Read from env when present, else use the defaults below.
- The Mongo connection string is ``MONGO_URI`` with the database name
  appended as-is, so ``MONGO_URI`` is expected to end with ``/``.
"""

from __future__ import annotations

import json
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",  # development
    "https://razi.iqsoft.in",  # production
]


# ----------------- helpers -----------------
def _env_str(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v == "" else str(v)


def _env_int(name: str, default: int) -> int:
    try:
        return int(_env_str(name, str(default)))
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    s = raw.strip()
    if s.startswith("["):
        try:
            val = json.loads(s)
        except json.JSONDecodeError:
            val = None
        if isinstance(val, list):
            return [str(x).strip() for x in val if str(x).strip()]
    return [item.strip() for item in s.split(",") if item.strip()]


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5000
    mongo_uri: str = "mongodb://127.0.0.1:27017/"
    mongo_db_name: str = "data"
    mongo_timeout_ms: int = 5000
    allowed_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    log_level: str = "INFO"

    @property
    def mongo_url(self) -> str:
        return f"{self.mongo_uri}{self.mongo_db_name}"


def load_settings(dotenv: bool = True) -> Settings:
    """Build ``Settings`` from the process environment."""
    if dotenv:
        load_dotenv()
    return Settings(
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 5000),
        mongo_uri=_env_str("MONGO_URI", "mongodb://127.0.0.1:27017/"),
        mongo_db_name=_env_str("MONGO_DB_NAME", "data"),
        mongo_timeout_ms=_env_int("MONGO_TIMEOUT_MS", 5000),
        allowed_origins=_env_list("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )
