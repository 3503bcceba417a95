# litcal_backend/app/config/__init__.py
from __future__ import annotations

# Re-export config surface expected by callers across the app.

# Runtime flags live in manifest.py
from .manifest import (
    LATIN,
    LATIN_PRIMARY_LANGUAGE,
    app_env,
    debug_mode,
    log_level,
    write_token,
    auth_bypass,
    allowed_origins,
)

# Path helpers live in paths.py
from .paths import (
    REPO_ROOT,
    APP_ROOT,
    get_data_dir,
    get_temporale_file,
    get_i18n_dir,
    get_lectionary_dir,
    resolve_i18n_file,
    resolve_lectionary_folder,
    resolve_lectionary_file,
)

__all__ = [
    # manifest
    "LATIN",
    "LATIN_PRIMARY_LANGUAGE",
    "app_env",
    "debug_mode",
    "log_level",
    "write_token",
    "auth_bypass",
    "allowed_origins",
    # paths
    "REPO_ROOT",
    "APP_ROOT",
    "get_data_dir",
    "get_temporale_file",
    "get_i18n_dir",
    "get_lectionary_dir",
    "resolve_i18n_file",
    "resolve_lectionary_folder",
    "resolve_lectionary_file",
]
