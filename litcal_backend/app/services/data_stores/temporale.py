# litcal_backend/app/services/data_stores/temporale.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from litcal_backend.app.config.paths import get_temporale_file
from litcal_backend.app.errors import InternalServerError, NotFoundError, StoreDecodeError
from .io_utils import load_json, mkdir_or_fail, write_json

# Core event list: a JSON array of {event_key, grade, type, color}.
# Names and readings never live here (see i18n.py / lectionary.py).

def load_events() -> List[Dict[str, Any]]:
    """
    Core list for read/merge paths.
    Missing file -> NotFoundError; undecodable file -> InternalServerError.
    """
    path = get_temporale_file()
    try:
        rows = load_json(path, expect=list)
    except FileNotFoundError as e:
        raise NotFoundError("Temporale data file not found") from e
    except StoreDecodeError as e:
        raise InternalServerError(f"Temporale data file is not a valid JSON array: {e.reason}") from e
    return [r for r in rows if isinstance(r, dict)]

def has_events() -> bool:
    """
    True when the core file holds at least one event. A missing, empty or
    malformed file counts as no data; read failures propagate.
    """
    try:
        rows = load_json(get_temporale_file(), expect=list)
    except (FileNotFoundError, StoreDecodeError):
        return False
    return len(rows) > 0

def index_by_key(events: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        row["event_key"]: i
        for i, row in enumerate(events)
        if isinstance(row.get("event_key"), str)
    }

def find_index(events: List[Dict[str, Any]], event_key: str) -> Optional[int]:
    for i, row in enumerate(events):
        if row.get("event_key") == event_key:
            return i
    return None

def write_events(events: List[Dict[str, Any]]) -> None:
    path = get_temporale_file()
    mkdir_or_fail(path.parent, "calendar")
    write_json(path, list(events), what="temporale data")


__all__ = ["load_events", "has_events", "index_by_key", "find_index", "write_events"]
