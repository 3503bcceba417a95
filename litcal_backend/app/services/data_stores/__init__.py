# litcal_backend/app/services/data_stores/__init__.py
"""
Unified export surface for the file-based stores.

Import from here in services/router code, e.g.:
    from litcal_backend.app.services.data_stores import (
        # IO
        load_json, write_json, clear_cache,
        # Core list
        load_events, has_events, write_events,
        # Translations
        load_translations, merge_translations, ensure_i18n_consistency,
        # Readings
        load_ferial, write_readings,
    )

The i18n and lectionary modules both define remove_key(); import those
modules directly when you need them.
"""

from __future__ import annotations

# ---- Low-level IO helpers ----
from .io_utils import (  # noqa: F401
    atomic_write,
    clear_cache,
    invalidate_cache,
    list_json_files,
    load_json,
    write_json,
)

# ---- Core event list ----
from .temporale import (  # noqa: F401
    find_index,
    has_events,
    index_by_key,
    load_events,
    write_events,
)

# ---- Name translations ----
from .i18n import (  # noqa: F401
    ensure_i18n_consistency,
    load_translations,
    merge_translations,
    write_translations,
)

# ---- Lectionary readings ----
from .lectionary import (  # noqa: F401
    load_ferial,
    load_sanctorum,
    load_year_cycle,
    write_readings,
)

__all__ = [
    # io_utils
    "atomic_write", "clear_cache", "invalidate_cache", "list_json_files",
    "load_json", "write_json",
    # temporale
    "find_index", "has_events", "index_by_key", "load_events", "write_events",
    # i18n
    "ensure_i18n_consistency", "load_translations", "merge_translations", "write_translations",
    # lectionary
    "load_ferial", "load_sanctorum", "load_year_cycle", "write_readings",
]
