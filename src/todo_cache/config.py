# src/todo_cache/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No remote endpoint required at import time (offline mode is the fallback).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Remote API (GraphQL) ----
    api_url: Optional[str]
    api_connect_timeout: float
    api_read_timeout: float

    # ---- Cache reconciliation ----
    patch_applies_fields: bool
    dedupe_inserts: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo") or "todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))

        api_url = _env(_k("API_URL"), "").strip() or None
        api_connect_timeout = _env_float(_k("API_CONNECT_TIMEOUT_SECONDS"), 5.0)
        # keep read >= connect as a sane baseline
        api_read_timeout = max(_env_float(_k("API_READ_TIMEOUT_SECONDS"), 15.0), api_connect_timeout)

        # Off by default: a toggle is acknowledged but the cached todo keeps its fields.
        patch_applies_fields = _env_bool(_k("PATCH_APPLIES_FIELDS"), False)
        dedupe_inserts = _env_bool(_k("DEDUPE_INSERTS"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            api_url=api_url,
            api_connect_timeout=api_connect_timeout,
            api_read_timeout=api_read_timeout,
            patch_applies_fields=patch_applies_fields,
            dedupe_inserts=dedupe_inserts,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
