# litcal_backend/app/config/paths.py
from __future__ import annotations

"""
Central path resolution for the LitCal temporale service.

Env overrides:
    LITCAL_DATA_DIR   (alias: DATA_DIR)

Defaults:
    <repo_root>/jsondata

Layout under the data dir:
    calendar/proprium_de_tempore.json
    calendar/proprium_de_tempore/i18n/{locale}.json
    lectionary/<category>/[annum_X/]{locale}.json

Exports:
    - constants: REPO_ROOT, APP_ROOT
    - getters: get_data_dir(), get_temporale_file(), get_i18n_dir(), get_lectionary_dir()
    - resolvers: resolve_i18n_file(), resolve_lectionary_folder(), resolve_lectionary_file()

Paths are resolved on every call (not at import) so tests can repoint the
whole tree with monkeypatch.setenv.
"""

import os
from pathlib import Path
from typing import Optional

# ──────────────────────────────────────────────────────────────────────────────
_THIS_FILE = Path(__file__).resolve()

def _resolve_repo_root() -> Path:
    p = _THIS_FILE
    for _ in range(6):
        if (p.parent / "litcal_backend" / "app").exists():
            return p.parent
        p = p.parent
    return _THIS_FILE.parents[3]

REPO_ROOT: Path = _resolve_repo_root()
APP_ROOT: Path = REPO_ROOT / "litcal_backend" / "app"

TEMPORALE_FILENAME = "proprium_de_tempore.json"
TEMPORALE_FOLDER = "proprium_de_tempore"

def _clean_env(value: str | None) -> str | None:
    if value is None:
        return None
    v = value.strip().strip('"').strip("'")
    return v or None

def _env_path(*names: str) -> Path | None:
    for name in names:
        raw = _clean_env(os.getenv(name))
        if raw:
            return Path(raw).expanduser().resolve()
    return None

_default_data = REPO_ROOT / "jsondata"

# ── Getters
def get_app_root()  -> Path: return APP_ROOT

def get_data_dir() -> Path:
    return (_env_path("LITCAL_DATA_DIR", "DATA_DIR") or _default_data).resolve()

def get_calendar_dir() -> Path:
    return get_data_dir() / "calendar"

def get_temporale_file() -> Path:
    """Core event list (JSON array of {event_key, grade, type, color})."""
    return get_calendar_dir() / TEMPORALE_FILENAME

def get_i18n_dir() -> Path:
    return get_calendar_dir() / TEMPORALE_FOLDER / "i18n"

def get_lectionary_dir() -> Path:
    return get_data_dir() / "lectionary"

# ── Resolvers
def resolve_i18n_file(locale: str) -> Path:
    """Return absolute path of the name-translation file for `locale`."""
    return get_i18n_dir() / f"{locale}.json"

def resolve_lectionary_folder(category_folder: str, year_folder: Optional[str] = None) -> Path:
    """Folder holding one readings file per locale for a category (and year cycle)."""
    base = get_lectionary_dir() / category_folder
    return base / year_folder if year_folder else base

def resolve_lectionary_file(category_folder: str, locale: str, year_folder: Optional[str] = None) -> Path:
    return resolve_lectionary_folder(category_folder, year_folder) / f"{locale}.json"


__all__ = [
    # constants
    "REPO_ROOT", "APP_ROOT", "TEMPORALE_FILENAME", "TEMPORALE_FOLDER",
    # getters
    "get_app_root", "get_data_dir", "get_calendar_dir",
    "get_temporale_file", "get_i18n_dir", "get_lectionary_dir",
    # resolvers
    "resolve_i18n_file", "resolve_lectionary_folder", "resolve_lectionary_file",
]
