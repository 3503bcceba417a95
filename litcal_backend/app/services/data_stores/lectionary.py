# litcal_backend/app/services/data_stores/lectionary.py
from __future__ import annotations

"""
Readings files, one JSON object per locale and category:

    dominicale_et_festivum/annum_{a,b,c}/{locale}.json   per year (A/B/C)
    feriale_per_annum/annum_{I,II}/{locale}.json         per year (I/II)
    feriale_tempus_*/{locale}.json                       flat
    sanctorum/{locale}.json                              flat

Each file maps event_key -> readings object. Cycle categories receive
payloads wrapped by year (annum_a.. / annum_I..) and store each year's
part in that year's file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from litcal_backend.app.errors import LitCalError, ServiceUnavailableError, StoreDecodeError
from litcal_backend.app.services.lectionary.categories import (
    LectionaryCategory,
    TWO_YEAR_CYCLE,
    YEAR_CYCLE,
    classify,
    cycle_key,
)
from .io_utils import list_json_files, load_json, mkdir_or_fail, write_json

log = logging.getLogger("litcal.temporale")
audit = logging.getLogger("litcal.audit")

ReadingsMap = Dict[str, Any]

# Flat weekday folders merged into the ferial map, in load order.
FLAT_FERIAL_CATEGORIES = (
    LectionaryCategory.WEEKDAYS_ADVENT,
    LectionaryCategory.WEEKDAYS_CHRISTMAS,
    LectionaryCategory.WEEKDAYS_LENT,
    LectionaryCategory.WEEKDAYS_EASTER,
)

def _load_optional(path: Path, what: str) -> Optional[ReadingsMap]:
    try:
        return load_json(path)
    except FileNotFoundError:
        return None
    except (StoreDecodeError, ServiceUnavailableError) as e:
        log.debug("Failed to load %s: %s", what, e)
        return None

# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------

def load_year_cycle(locale: str) -> Dict[str, ReadingsMap]:
    """Sundays/Solemnities readings keyed by year label; absent years are left out."""
    category = LectionaryCategory.SUNDAYS_SOLEMNITIES
    out: Dict[str, ReadingsMap] = {}
    for year in YEAR_CYCLE:
        data = _load_optional(
            category.file_for_year(year, locale),
            f"Year {year} lectionary for locale '{locale}'",
        )
        if data is not None:
            out[year] = data
    return out

def load_sanctorum(locale: str) -> Optional[ReadingsMap]:
    return _load_optional(
        LectionaryCategory.SANCTORUM.file(locale),
        f"sanctorum lectionary for locale '{locale}'",
    )

def load_ferial(locale: str) -> ReadingsMap:
    """
    Weekday readings of every season in one map. Ordinary Time entries are
    folded into {"annum_I": ..., "annum_II": ...}, with None for a year
    that has no entry.
    """
    ferial: ReadingsMap = {}
    for category in FLAT_FERIAL_CATEGORIES:
        data = _load_optional(category.file(locale), f"{category.name} lectionary for locale '{locale}'")
        if data:
            ferial.update(data)

    ordinary = LectionaryCategory.WEEKDAYS_ORDINARY
    by_year = {
        year: _load_optional(
            ordinary.file_for_two_year_cycle(year, locale),
            f"Ordinary Time Year {year} lectionary for locale '{locale}'",
        )
        for year in TWO_YEAR_CYCLE
    }
    if any(v is not None for v in by_year.values()):
        keys: List[str] = []
        for data in by_year.values():
            for k in data or {}:
                if k not in keys:
                    keys.append(k)
        for k in keys:
            ferial[k] = {cycle_key(year): (data or {}).get(k) for year, data in by_year.items()}
    return ferial

# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------

def _load_for_update(path: Path) -> ReadingsMap:
    try:
        return load_json(path)
    except FileNotFoundError:
        return {}
    except (StoreDecodeError, ServiceUnavailableError) as e:
        log.debug("Failed to load lectionary file %s, starting fresh: %s", path, e)
        return {}

def _merge_into(path: Path, entries: ReadingsMap, locale: str) -> None:
    data = _load_for_update(path)
    data.update(entries)
    write_json(path, data, what=f"lectionary data for locale '{locale}'")

def _group_by_category(readings: ReadingsMap) -> Dict[LectionaryCategory, ReadingsMap]:
    grouped: Dict[LectionaryCategory, ReadingsMap] = {}
    for event_key, value in readings.items():
        grouped.setdefault(classify(event_key), {})[event_key] = value
    return grouped

def write_readings(by_locale: Dict[str, ReadingsMap]) -> None:
    """
    Merge {locale: {event_key: readings}} into the lectionary files.
    Existing entries for other keys are kept; any write failure aborts.
    """
    for locale, readings in by_locale.items():
        for category, entries in _group_by_category(readings).items():
            if category.has_year_cycle() or category.has_two_year_cycle():
                for year in category.cycle_labels():
                    wrapper = cycle_key(year)
                    folder = (
                        category.folder_for_year(year) if category.has_year_cycle()
                        else category.folder_for_two_year_cycle(year)
                    )
                    mkdir_or_fail(folder, "lectionary")
                    part = {
                        k: v[wrapper] for k, v in entries.items()
                        if isinstance(v, dict) and wrapper in v
                    }
                    _merge_into(folder / f"{locale}.json", part, locale)
            else:
                mkdir_or_fail(category.folder(), "lectionary")
                _merge_into(category.file(locale), entries, locale)

def remove_key(event_key: str) -> int:
    """
    Drop `event_key` from every locale file of its category (every year
    folder for cycle categories). Best effort; returns files rewritten.
    """
    category = classify(event_key)
    rewritten = 0
    for folder in category.folders():
        for path in list_json_files(folder):
            if _remove_from_file(path, event_key):
                rewritten += 1
    return rewritten

def _remove_from_file(path: Path, event_key: str) -> bool:
    try:
        data = load_json(path)
    except FileNotFoundError:
        return False
    except (StoreDecodeError, ServiceUnavailableError) as e:
        audit.warning(
            "Failed to read lectionary file for event removal",
            extra={"file": str(path), "event_key": event_key, "error": str(e)},
        )
        return False
    if event_key not in data:
        return False
    del data[event_key]
    try:
        write_json(path, data, what="lectionary data")
    except LitCalError as e:
        audit.warning(
            "Failed to write lectionary file after removing event",
            extra={"file": str(path), "event_key": event_key, "error": str(e)},
        )
        return False
    return True


__all__ = [
    "ReadingsMap",
    "FLAT_FERIAL_CATEGORIES",
    "load_year_cycle",
    "load_sanctorum",
    "load_ferial",
    "write_readings",
    "remove_key",
]
