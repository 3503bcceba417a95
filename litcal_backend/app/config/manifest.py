# litcal_backend/app/config/manifest.py
from __future__ import annotations

import os
from typing import List

# ---- Environment mode and runtime flags ----
# Read through small getters so tests can flip them with monkeypatch.setenv.

LATIN_PRIMARY_LANGUAGE: str = "la"
LATIN: str = "la_VA"

_DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
]

def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip() not in ("", "0", "false", "False")

def app_env() -> str:
    return os.getenv("LITCAL_ENV", "development")

def debug_mode() -> bool:
    return _flag("LITCAL_DEBUG")

def log_level() -> str:
    if debug_mode():
        return "DEBUG"
    return os.getenv("LITCAL_LOG_LEVEL", "INFO").upper()

# ---- Write-access settings ----
def write_token() -> str | None:
    tok = os.getenv("LITCAL_WRITE_TOKEN", "").strip()
    return tok or None

def auth_bypass() -> bool:
    return _flag("LITCAL_DEV_AUTH_BYPASS")

# ---- CORS ----
def allowed_origins() -> List[str]:
    raw = os.getenv("LITCAL_ALLOWED_ORIGINS", "").strip()
    if not raw:
        return list(_DEFAULT_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


__all__ = [
    "LATIN", "LATIN_PRIMARY_LANGUAGE",
    "app_env", "debug_mode", "log_level",
    "write_token", "auth_bypass", "allowed_origins",
]
