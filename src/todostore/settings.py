from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - STORAGE_KEY: name of the slot holding the serialized todo list. Default 'todos'
    - SEED_URL: endpoint of the remote seed list
    - SEED_LIMIT: number of remote items requested. Default 10
    - SEED_TIMEOUT_SECONDS: timeout for the seed request. Default 10
    - LOCAL_FALLBACK_ON_SEED_ERROR: 'true' to show stored items when the seed fetch fails
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: logging level name. Default 'INFO'
    - HOST, PORT: bind address for the bundled server. Default 127.0.0.1:8000
    """

    persistence_backend: str
    sqlite_db_path: str
    storage_key: str
    seed_url: str
    seed_limit: int
    seed_timeout_seconds: float
    local_fallback_on_seed_error: bool
    cors_allow_origins: List[str]
    log_level: str
    host: str
    port: int


DEFAULT_SEED_URL = "https://jsonplaceholder.typicode.com/todos"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/todos.db").strip(),
        storage_key=_get_env("STORAGE_KEY", "todos").strip(),
        seed_url=_get_env("SEED_URL", DEFAULT_SEED_URL).strip(),
        seed_limit=_parse_int(_get_env("SEED_LIMIT", "10"), 10),
        seed_timeout_seconds=_parse_float(_get_env("SEED_TIMEOUT_SECONDS", "10"), 10.0),
        local_fallback_on_seed_error=_parse_bool(_get_env("LOCAL_FALLBACK_ON_SEED_ERROR", "false"), False),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        host=_get_env("HOST", "127.0.0.1").strip(),
        port=_parse_int(_get_env("PORT", "8000"), 8000),
    )
