# litcal_backend/app/services/temporale/validation.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from litcal_backend.app.errors import ValidationError
from litcal_backend.app.schemas import TemporaleEvent
from litcal_backend.app.services.lectionary.categories import classify, cycle_key
from litcal_backend.app.services.lectionary.readings import ReadingsShape
from litcal_backend.app.services.locales import is_locale_tag

# Payload checks shared by PUT and PATCH. Every failure is a ValidationError
# (400) naming the offending event and field.

def _describe(e: PydanticValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)

def validate_event(raw: Any) -> TemporaleEvent:
    """event_key non-empty string, grade 0..7, type mobile|fixed, colors from LitColor."""
    if not isinstance(raw, dict):
        raise ValidationError("Each event must be an object")
    try:
        return TemporaleEvent.model_validate(raw)
    except PydanticValidationError as e:
        key = raw.get("event_key")
        label = f"Event '{key}'" if isinstance(key, str) and key else "Event"
        raise ValidationError(f"{label} is invalid: {_describe(e)}") from e

def require_event_key(raw: Any) -> str:
    if not isinstance(raw, dict):
        raise ValidationError("Each event must be an object")
    key = raw.get("event_key")
    if not isinstance(key, str):
        raise ValidationError("Each event must have an event_key property")
    return key

def has_object(raw: Dict[str, Any], field: str) -> bool:
    return isinstance(raw.get(field), dict)

def _require_locale_key(locale: str, field: str, event_key: str) -> None:
    # Locale keys become file names in the i18n and lectionary folders.
    if not is_locale_tag(locale):
        raise ValidationError(f"{field} key '{locale}' is not a valid locale in event '{event_key}'")

def validate_event_i18n(i18n: Dict[str, Any], event_key: str) -> None:
    for locale, name in i18n.items():
        _require_locale_key(locale, "i18n", event_key)
        if not isinstance(name, str):
            raise ValidationError(f"i18n.{locale} must be a string in event '{event_key}'")

def validate_event_readings(readings: Dict[str, Any], event_key: str) -> None:
    """
    {locale: readings}. Cycle categories wrap each locale's readings by year
    (annum_a/annum_b/annum_c, or annum_I/annum_II); each year's part, or the
    flat object for other categories, must match the event's ReadingsShape.
    """
    category = classify(event_key)
    shape = ReadingsShape.for_event_key(event_key)
    wrappers = [cycle_key(y) for y in category.cycle_labels()]

    for locale, per_locale in readings.items():
        _require_locale_key(locale, "readings", event_key)
        if not isinstance(per_locale, dict):
            raise ValidationError(f"readings.{locale} must be an object in event '{event_key}'")

        if not wrappers:
            _check_shape(shape, per_locale, f"in event '{event_key}' readings.{locale}")
            continue

        if any(w not in per_locale for w in wrappers):
            raise ValidationError(
                f"readings.{locale} must have {_join(wrappers)} properties in event '{event_key}'"
            )
        extra = [k for k in per_locale if k not in wrappers]
        if extra:
            raise ValidationError(
                f"readings.{locale} has unexpected properties {', '.join(extra)} in event '{event_key}'"
            )
        for w in wrappers:
            if not isinstance(per_locale[w], dict):
                raise ValidationError(f"readings.{locale}.{w} must be an object in event '{event_key}'")
            _check_shape(shape, per_locale[w], f"in event '{event_key}' readings.{locale}.{w}")

def _check_shape(shape: ReadingsShape, candidate: Dict[str, Any], where: str) -> None:
    if not shape.validate_structure(candidate):
        raise ValidationError(f"{shape.validation_error(candidate)} {where}")

def _join(items: List[str]) -> str:
    if len(items) < 2:
        return "".join(items)
    return ", ".join(items[:-1]) + f" and {items[-1]}"

def validate_ferial_event(raw: Dict[str, Any], event_key: str) -> None:
    """Grade 0: names come from the name generator, readings are mandatory."""
    i18n = raw.get("i18n")
    if isinstance(i18n, dict) and i18n:
        raise ValidationError(
            f"Grade 0 event '{event_key}' should not have i18n data (translations are generated)"
        )
    if not has_object(raw, "readings"):
        raise ValidationError(f"Grade 0 event '{event_key}' must have a 'readings' object property")
    validate_event_readings(raw["readings"], event_key)

def validate_new_event(raw: Dict[str, Any], event_key: str, base_locale: str, prefix: str = "Event") -> None:
    """Graded event entering the core list: i18n with `base_locale`, plus readings."""
    if not has_object(raw, "i18n"):
        raise ValidationError(f"{prefix} '{event_key}' must have an 'i18n' object property")
    validate_event_i18n(raw["i18n"], event_key)
    if base_locale not in raw["i18n"]:
        raise ValidationError(
            f"{prefix} '{event_key}' i18n must contain translation for Accept-Language locale '{base_locale}'"
        )
    if not has_object(raw, "readings"):
        raise ValidationError(f"{prefix} '{event_key}' must have a 'readings' object property")
    validate_event_readings(raw["readings"], event_key)

def validate_existing_event(raw: Dict[str, Any], event_key: str) -> None:
    """Graded event already in the core list: i18n and readings are optional."""
    if has_object(raw, "i18n"):
        validate_event_i18n(raw["i18n"], event_key)
    if has_object(raw, "readings"):
        validate_event_readings(raw["readings"], event_key)

def check_duplicate(seen: set, event_key: str) -> None:
    if event_key in seen:
        raise ValidationError(f"Duplicate event_key '{event_key}' in payload")
    seen.add(event_key)

def require_events(payload: Dict[str, Any], *, non_empty: bool) -> List[Any]:
    events = payload.get("events")
    if not isinstance(events, list):
        raise ValidationError('Payload must have an "events" array property')
    if non_empty and not events:
        raise ValidationError("Events array must contain at least one event")
    return events

def require_locales(payload: Dict[str, Any]) -> List[str]:
    locales = payload.get("locales")
    if not isinstance(locales, list):
        raise ValidationError('Payload must have a "locales" array property')
    if not locales:
        raise ValidationError("Locales array must contain at least one locale")
    for loc in locales:
        if not isinstance(loc, str) or not loc:
            raise ValidationError("Each locale must be a non-empty string")
        if not is_locale_tag(loc):
            raise ValidationError(f"Locale '{loc}' is not a valid locale")
        if "_" in loc or "-" in loc:
            raise ValidationError(f"Locale '{loc}' must be a base locale without regional identifiers")
    return list(dict.fromkeys(locales))

def strip_extensions(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Core record: the event without its inline i18n and readings."""
    return {k: v for k, v in raw.items() if k not in ("i18n", "readings")}

def optional_object(raw: Dict[str, Any], field: str) -> Optional[Dict[str, Any]]:
    value = raw.get(field)
    return value if isinstance(value, dict) else None
