"""
Process configuration resolved once from the environment.

Blank values are treated as unset, so `PORT=` behaves like no `PORT` at all.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlsplit

DEFAULT_PORT = 5000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_MONGO_URI = "mongodb://localhost:27017/yolo"
DEFAULT_DATABASE_NAME = "yolo"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SERVER_SELECTION_TIMEOUT_MS = 30_000


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return int(raw)


def database_name_from_uri(uri: str) -> str:
    # mongodb://host:27017/yolo?authSource=admin -> "yolo"
    path = urlsplit(uri).path.lstrip("/")
    return path.split("/", 1)[0] or DEFAULT_DATABASE_NAME


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    mongo_uri: str = DEFAULT_MONGO_URI
    database_name: str = DEFAULT_DATABASE_NAME
    log_level: str = DEFAULT_LOG_LEVEL
    server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from `PORT`, `HOST`, `MONGO_URI`, `LOG_LEVEL` and
        `MONGO_SERVER_SELECTION_TIMEOUT_MS`.

        Raises ValueError when `PORT` is set but not a valid TCP port.
        """
        port = _env_int("PORT", DEFAULT_PORT)
        if not 0 <= port <= 65535:
            raise ValueError(f"PORT must be between 0 and 65535, got {port}.")

        mongo_uri = _env_str("MONGO_URI", DEFAULT_MONGO_URI)
        return cls(
            port=port,
            host=_env_str("HOST", DEFAULT_HOST),
            mongo_uri=mongo_uri,
            database_name=database_name_from_uri(mongo_uri),
            log_level=_env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            server_selection_timeout_ms=_env_int(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS",
                DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
