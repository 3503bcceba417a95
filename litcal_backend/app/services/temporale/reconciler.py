# litcal_backend/app/services/temporale/reconciler.py
from __future__ import annotations

"""
PUT (create) and PATCH (merge) for the temporale.

Payload events carry their names and readings inline:

    {"event_key": "Easter", "grade": 7, "type": "mobile", "color": ["white"],
     "i18n": {"en": "Easter Sunday", "la": "Dominica Paschatis"},
     "readings": {"en": {"annum_a": {...}, "annum_b": {...}, "annum_c": {...}}}}

Both operations split each event three ways and write in this order:
    1. i18n/{locale}.json             names (graded events only)
    2. lectionary/.../{locale}.json   readings (graded and grade-0 events)
    3. proprium_de_tempore.json       the event without i18n/readings
Grade-0 (weekday) events never enter the core list or the i18n files.
There is no rollback: a failure at step 3 leaves steps 1-2 applied.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from litcal_backend.app.config.paths import get_temporale_file
from litcal_backend.app.errors import ConflictError, ValidationError
from litcal_backend.app.schemas import PatchResult, PutResult
from litcal_backend.app.services.data_stores import i18n as i18n_store
from litcal_backend.app.services.data_stores import lectionary as lectionary_store
from litcal_backend.app.services.data_stores import temporale as temporale_store
from litcal_backend.app.services.locales import LocaleResolver
from litcal_backend.app.utils.strings import base_locale
from . import validation as v

audit = logging.getLogger("litcal.audit")


@dataclass
class WriteContext:
    """Who is writing and in which locale; feeds validation and the audit trail."""
    locale: str
    client_ip: str = "unknown"
    request_id: str = ""

    @property
    def base_locale(self) -> str:
        return base_locale(self.locale)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def extract_i18n(events: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, str]]:
    """[{event_key, i18n: {locale: name}}] -> {locale: {event_key: name}}"""
    out: Dict[str, Dict[str, str]] = {}
    for ev in events:
        names = v.optional_object(ev, "i18n")
        if names is None:
            continue
        for locale, name in names.items():
            out.setdefault(locale, {})[ev["event_key"]] = name
    return out

def extract_readings(events: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """[{event_key, readings: {locale: r}}] -> {locale: {event_key: r}}"""
    out: Dict[str, Dict[str, Any]] = {}
    for ev in events:
        readings = v.optional_object(ev, "readings")
        if readings is None:
            continue
        for locale, per_locale in readings.items():
            out.setdefault(locale, {})[ev["event_key"]] = per_locale
    return out

def build_locale_files(
    locales: List[str], event_keys: List[str], extracted: Dict[str, Dict[str, str]]
) -> Dict[str, Dict[str, str]]:
    """One full map per declared locale; "" where a translation was not supplied."""
    return {
        loc: {key: extracted.get(loc, {}).get(key, "") for key in event_keys}
        for loc in locales
    }


# ---------------------------------------------------------------------------
# PUT
# ---------------------------------------------------------------------------

def ensure_creatable() -> None:
    if temporale_store.has_events():
        raise ConflictError("Temporale data already exists. Use PATCH to update existing data.")

def put_temporale(payload: Any, ctx: WriteContext, resolver: LocaleResolver) -> PutResult:
    ensure_creatable()
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be an object with locales and events properties")

    locales = v.require_locales(payload)
    events = v.require_events(payload, non_empty=True)

    seen: set = set()
    graded: List[Dict[str, Any]] = []
    ferial: List[Dict[str, Any]] = []
    for raw in events:
        event = v.validate_event(raw)
        key = event.event_key
        v.check_duplicate(seen, key)
        if event.is_ferial:
            v.validate_ferial_event(raw, key)
            ferial.append(raw)
        else:
            v.validate_new_event(raw, key, ctx.base_locale)
            graded.append(raw)

    event_keys = [ev["event_key"] for ev in graded]

    # 1. names
    if event_keys:
        i18n_store.write_translations(build_locale_files(locales, event_keys, extract_i18n(graded)))

    # 2. readings
    readings = extract_readings(graded + ferial)
    if readings:
        lectionary_store.write_readings(readings)

    # 3. core list
    temporale_store.write_events([v.strip_extensions(ev) for ev in graded])

    resolver.add_available(locales)

    audit.info(
        "Temporale data created",
        extra={
            "operation": "PUT",
            "client_ip": ctx.client_ip,
            "request_id": ctx.request_id,
            "file": str(get_temporale_file()),
            "events": len(graded),
            "ferial_events": len(ferial),
            "i18n_locales": locales,
            "readings_locales": list(readings),
        },
    )
    return PutResult(events=len(graded), ferial_events=len(ferial))


# ---------------------------------------------------------------------------
# PATCH
# ---------------------------------------------------------------------------

def patch_temporale(payload: Any, ctx: WriteContext, resolver: LocaleResolver) -> PatchResult:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be an object with events property")
    events = v.require_events(payload, non_empty=False)

    rows = temporale_store.load_events()
    index = temporale_store.index_by_key(rows)

    seen: set = set()
    graded: List[Dict[str, Any]] = []
    ferial: List[Dict[str, Any]] = []
    new_keys: List[str] = []
    updated = 0

    for raw in events:
        key = v.require_event_key(raw)
        v.check_duplicate(seen, key)
        event = v.validate_event(raw)

        if event.is_ferial:
            v.validate_ferial_event(raw, key)
            ferial.append(raw)
            continue

        if key in index:
            v.validate_existing_event(raw, key)
            updated += 1
        else:
            v.validate_new_event(raw, key, ctx.base_locale, prefix="New event")
            new_keys.append(key)
        graded.append(raw)

    # 1. names, then placeholders in both directions
    names = extract_i18n(graded)
    new_locales: List[str] = []
    if names:
        i18n_store.merge_translations(names)
        new_locales = resolver.add_available(names)

    if new_keys:
        # every known locale learns the new keys
        i18n_store.ensure_i18n_consistency(new_keys, resolver.available_locales, skip_locale=ctx.base_locale)
    if new_locales:
        # a new locale file gets every key already in the core list
        i18n_store.ensure_i18n_consistency(list(index), new_locales)

    # 2. readings
    readings = extract_readings(graded + ferial)
    if readings:
        lectionary_store.write_readings(readings)

    # 3. core list
    for raw in graded:
        record = v.strip_extensions(raw)
        pos = index.get(record["event_key"])
        if pos is None:
            rows.append(record)
        else:
            rows[pos] = record
    temporale_store.write_events(rows)

    audit.info(
        "Temporale data updated",
        extra={
            "operation": "PATCH",
            "client_ip": ctx.client_ip,
            "request_id": ctx.request_id,
            "file": str(get_temporale_file()),
            "updated": updated,
            "added": len(new_keys),
            "ferial_updated": len(ferial),
            "i18n_locales": list(names),
            "readings_locales": list(readings),
        },
    )
    return PatchResult(updated=updated, added=len(new_keys), ferial_updated=len(ferial))
