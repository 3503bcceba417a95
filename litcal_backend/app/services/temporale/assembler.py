# litcal_backend/app/services/temporale/assembler.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from litcal_backend.app.schemas import LitGrade
from litcal_backend.app.services.data_stores import lectionary as lectionary_store
from litcal_backend.app.services.data_stores.i18n import load_translations
from litcal_backend.app.services.data_stores.temporale import load_events
from litcal_backend.app.services.lectionary.categories import SANCTORUM_EVENTS, YEAR_CYCLE, classify, cycle_key
from litcal_backend.app.services.lectionary.ferial_names import FerialNameGenerator
from litcal_backend.app.services.locales import LocaleResolver

# Purpose:
# Denormalized read view of the temporale: core events with their name in
# the resolved locale and their readings, followed by weekday events that
# exist only in the lectionary files.

def readings_for(
    event_key: str,
    year_cycle: Dict[str, Dict[str, Any]],
    sanctorum: Optional[Dict[str, Any]],
    ferial: Dict[str, Any],
) -> Optional[Any]:
    """
    Sanctorum-kept temporale events first, then the weekday map, then the
    Sundays/Solemnities years (only the years that have the key).
    """
    if event_key in SANCTORUM_EVENTS and sanctorum is not None and event_key in sanctorum:
        return sanctorum[event_key]
    if event_key in ferial:
        return ferial[event_key]
    readings = {
        cycle_key(year): year_cycle[year][event_key]
        for year in YEAR_CYCLE
        if year in year_cycle and event_key in year_cycle[year]
    }
    return readings or None

def derive_ferial_events(
    ferial: Dict[str, Any],
    existing_keys: Iterable[str],
    locale: str,
    i18n: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    """Synthetic grade-0 events for weekday keys the core list does not hold."""
    existing = set(existing_keys)
    names = FerialNameGenerator(locale)
    out: List[Dict[str, Any]] = []
    for event_key, readings in ferial.items():
        if event_key in existing:
            continue
        category = classify(event_key)
        if not category.is_ferial():
            continue
        event: Dict[str, Any] = {
            "event_key": event_key,
            "grade": LitGrade.WEEKDAY.value,
            "type": "mobile",
            "color": category.liturgical_color(),
            "readings": readings,
        }
        name = names.generate_name(event_key)
        if name is None and i18n is not None and event_key in i18n:
            name = i18n[event_key]
        if name is not None:
            event["name"] = name
        out.append(event)
    return out

def assemble_response(resolver: LocaleResolver, locale: str) -> Dict[str, Any]:
    """
    {"events": [...], "locale": locale}. A missing core file is NotFoundError;
    unreadable per-locale files only drop their contribution.
    """
    rows = load_events()
    existing_keys = [r["event_key"] for r in rows if isinstance(r.get("event_key"), str)]

    i18n = load_translations(locale)
    if i18n is not None:
        for row in rows:
            key = row.get("event_key")
            if key in i18n:
                row["name"] = i18n[key]

    lectionary_locale = resolver.lectionary_locale(locale)
    if lectionary_locale is not None:
        year_cycle = lectionary_store.load_year_cycle(lectionary_locale)
        sanctorum = lectionary_store.load_sanctorum(lectionary_locale)
        ferial = lectionary_store.load_ferial(lectionary_locale)

        for row in rows:
            readings = readings_for(row.get("event_key", ""), year_cycle, sanctorum, ferial)
            if readings is not None:
                row["readings"] = readings

        rows.extend(derive_ferial_events(ferial, existing_keys, locale, i18n))

    return {"events": rows, "locale": locale}
