# litcal_backend/app/services/lectionary/readings.py
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# ===================== Reading slot sets =====================

FESTIVE_KEYS: Tuple[str, ...] = (
    "first_reading",
    "responsorial_psalm",
    "second_reading",
    "gospel_acclamation",
    "gospel",
)

FERIAL_KEYS: Tuple[str, ...] = (
    "first_reading",
    "responsorial_psalm",
    "gospel_acclamation",
    "gospel",
)

CHRISTMAS_KEYS: Tuple[str, ...] = ("vigil", "night", "dawn", "day")
WITH_VIGIL_KEYS: Tuple[str, ...] = ("vigil", "day")
WITH_EVENING_MASS_KEYS: Tuple[str, ...] = ("day", "evening")
MULTIPLE_SCHEMAS_KEYS: Tuple[str, ...] = ("schema_one", "schema_two", "schema_three")
SEASONAL_KEYS: Tuple[str, ...] = ("easter_season", "outside_easter_season")

PALM_SUNDAY_KEYS: Tuple[str, ...] = ("palm_gospel",) + FESTIVE_KEYS

# Seven Old Testament readings each followed by a psalm, then epistle and gospel.
EASTER_VIGIL_KEYS: Tuple[str, ...] = (
    "first_reading",
    "responsorial_psalm",
    "second_reading",
    "responsorial_psalm_2",
    "third_reading",
    "responsorial_psalm_3",
    "fourth_reading",
    "responsorial_psalm_4",
    "fifth_reading",
    "responsorial_psalm_5",
    "sixth_reading",
    "responsorial_psalm_6",
    "seventh_reading",
    "responsorial_psalm_7",
    "epistle",
    "responsorial_psalm_epistle",
    "gospel_acclamation",
    "gospel",
)

# ===================== Key -> shape tables =====================

CHRISTMAS_EVENTS = ("Christmas",)
FESTIVE_WITH_VIGIL_EVENTS = ("Pentecost",)
EASTER_VIGIL_EVENTS = ("EasterVigil",)
PALM_SUNDAY_EVENTS = ("PalmSun",)
WITH_EVENING_EVENTS = ("Easter",)
MULTIPLE_SCHEMAS_EVENTS = ("AllSouls",)

# Weekdays of every season. AshWednesday and the Octave days keep the festive shape.
_FERIAL_PATTERNS = [re.compile(p) for p in (
    r"^AdventWeekday\d",
    r"^AdventWeekdayDec\d+$",
    r"^ChristmasWeekday",
    r"^DayAfterEpiphany",
    r"^LentWeekday\d",
    r"^(Friday|Saturday|Thursday)AfterAshWednesday$",
    r"^EasterWeekday\d",
    r"^OrdWeekday\d+",
)]


class ReadingsShape(str, Enum):
    CHRISTMAS = "christmas"
    FESTIVE_WITH_VIGIL = "festive_with_vigil"
    EASTER_VIGIL = "easter_vigil"
    PALM_SUNDAY = "palm_sunday"
    WITH_EVENING = "with_evening"
    MULTIPLE_SCHEMAS = "multiple_schemas"
    SEASONAL = "seasonal"
    FESTIVE = "festive"
    FERIAL = "ferial"

    @classmethod
    def for_event_key(cls, event_key: str) -> "ReadingsShape":
        for keys, shape in _EXPLICIT:
            if event_key in keys:
                return shape
        if any(p.search(event_key) for p in _FERIAL_PATTERNS):
            return cls.FERIAL
        return cls.FESTIVE

    def expected_keys(self) -> Tuple[str, ...]:
        return _EXPECTED[self]

    def has_nested_structure(self) -> bool:
        """Nested shapes hold one reading set per mass (e.g. vigil.first_reading)."""
        return self in _NESTED

    def nested_keys(self) -> Optional[Tuple[str, ...]]:
        if not self.has_nested_structure():
            return None
        return FERIAL_KEYS if self is ReadingsShape.SEASONAL else FESTIVE_KEYS

    def validate_structure(self, readings: Any) -> bool:
        return not self._problems(readings)

    def validation_error(self, readings: Any) -> str:
        return f"ReadingsShape::{self.name} validation failed: " + "; ".join(self._problems(readings))

    def _problems(self, readings: Any) -> List[str]:
        if not isinstance(readings, dict):
            return ["readings must be an object"]
        errors = _key_set_errors(readings, self.expected_keys(), prefix="")
        if errors:
            return errors
        inner = self.nested_keys()
        if inner is None:
            return _leaf_errors(readings, prefix="")
        for key in self.expected_keys():
            nested = readings[key]
            if not isinstance(nested, dict):
                errors.append(f"{key} must be an object")
                continue
            problems = _key_set_errors(nested, inner, prefix=f"{key} ")
            errors.extend(problems or _leaf_errors(nested, prefix=f"{key}."))
        return errors


_EXPLICIT = (
    (CHRISTMAS_EVENTS, ReadingsShape.CHRISTMAS),
    (FESTIVE_WITH_VIGIL_EVENTS, ReadingsShape.FESTIVE_WITH_VIGIL),
    (EASTER_VIGIL_EVENTS, ReadingsShape.EASTER_VIGIL),
    (PALM_SUNDAY_EVENTS, ReadingsShape.PALM_SUNDAY),
    (WITH_EVENING_EVENTS, ReadingsShape.WITH_EVENING),
    (MULTIPLE_SCHEMAS_EVENTS, ReadingsShape.MULTIPLE_SCHEMAS),
)

_EXPECTED = {
    ReadingsShape.CHRISTMAS: CHRISTMAS_KEYS,
    ReadingsShape.FESTIVE_WITH_VIGIL: WITH_VIGIL_KEYS,
    ReadingsShape.EASTER_VIGIL: EASTER_VIGIL_KEYS,
    ReadingsShape.PALM_SUNDAY: PALM_SUNDAY_KEYS,
    ReadingsShape.WITH_EVENING: WITH_EVENING_MASS_KEYS,
    ReadingsShape.MULTIPLE_SCHEMAS: MULTIPLE_SCHEMAS_KEYS,
    ReadingsShape.SEASONAL: SEASONAL_KEYS,
    ReadingsShape.FESTIVE: FESTIVE_KEYS,
    ReadingsShape.FERIAL: FERIAL_KEYS,
}

_NESTED = frozenset({
    ReadingsShape.CHRISTMAS,
    ReadingsShape.FESTIVE_WITH_VIGIL,
    ReadingsShape.WITH_EVENING,
    ReadingsShape.MULTIPLE_SCHEMAS,
    ReadingsShape.SEASONAL,
})


def _key_set_errors(obj: Dict[str, Any], expected: Tuple[str, ...], prefix: str) -> List[str]:
    missing = [k for k in expected if k not in obj]
    extra = [k for k in obj if k not in expected]
    errors = []
    if missing:
        errors.append(f"{prefix}missing keys: " + ", ".join(missing))
    if extra:
        errors.append(f"{prefix}unexpected keys: " + ", ".join(extra))
    return errors


def _leaf_errors(obj: Dict[str, Any], prefix: str) -> List[str]:
    return [f"{prefix}{k} must be a string" for k, v in obj.items() if not isinstance(v, str)]


def special_event_keys() -> List[str]:
    """Event keys whose shape comes from an explicit list rather than a pattern."""
    out: List[str] = []
    for keys, _ in _EXPLICIT:
        out.extend(keys)
    return out


def readings_shape_of(event_key: str) -> ReadingsShape:
    return ReadingsShape.for_event_key(event_key)


def validate(shape: ReadingsShape, candidate: Any) -> bool:
    return shape.validate_structure(candidate)


def describe_error(shape: ReadingsShape, candidate: Any) -> str:
    return shape.validation_error(candidate)
