# litcal_backend/app/services/lectionary/categories.py
from __future__ import annotations

"""
Lectionary storage categories for temporale events.

Every event key maps to exactly one category, which decides the folder
(and, for cycle categories, the per-year sub-folder) its readings live in:

    SUNDAYS_SOLEMNITIES   three-year cycle A/B/C (the default)
    WEEKDAYS_ADVENT       flat
    WEEKDAYS_CHRISTMAS    flat
    WEEKDAYS_LENT         flat
    WEEKDAYS_EASTER       flat
    WEEKDAYS_ORDINARY     two-year cycle I/II
    SANCTORUM             flat, explicit key list

Classification is pattern based and checked in a fixed order
(Advent, Christmas, Lent, Easter, Ordinary, Sanctorum); the first match
wins and anything unmatched falls back to SUNDAYS_SOLEMNITIES.
"""

import re
from enum import Enum
from pathlib import Path
from typing import List, Optional, Pattern, Sequence, Tuple

from litcal_backend.app.config.paths import resolve_lectionary_file, resolve_lectionary_folder

YEAR_CYCLE: Tuple[str, ...] = ("A", "B", "C")
TWO_YEAR_CYCLE: Tuple[str, ...] = ("I", "II")

def _compile(patterns: Sequence[str]) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)

_ADVENT_PATTERNS = _compile([
    r"^AdventWeekday\d",
    r"^AdventWeekdayDec\d+$",
])

_CHRISTMAS_PATTERNS = _compile([
    r"^ChristmasWeekday",
    r"^DayAfterEpiphany",
])

_LENT_PATTERNS = _compile([
    r"^AshWednesday$",
    r"^(Thursday|Friday|Saturday)AfterAshWednesday$",
    r"^LentWeekday\d",
    r"^(Mon|Tue|Wed)HolyWeek$",
])

_EASTER_PATTERNS = _compile([
    r"^(Mon|Tue|Wed|Thu|Fri|Sat)OctaveEaster$",
    r"^EasterWeekday\d",
])

_ORDINARY_PATTERNS = _compile([
    r"^OrdWeekday\d+",
])

# Temporale events whose readings are kept with the saints.
SANCTORUM_EVENTS: Tuple[str, ...] = ("ImmaculateHeart",)


class LectionaryCategory(str, Enum):
    SUNDAYS_SOLEMNITIES = "dominicale_et_festivum"
    WEEKDAYS_ADVENT = "feriale_tempus_adventus"
    WEEKDAYS_CHRISTMAS = "feriale_tempus_nativitatis"
    WEEKDAYS_LENT = "feriale_tempus_quadragesimae"
    WEEKDAYS_EASTER = "feriale_tempus_paschatis"
    WEEKDAYS_ORDINARY = "feriale_per_annum"
    SANCTORUM = "sanctorum"

    # ── classification
    @classmethod
    def for_event_key(cls, event_key: str) -> "LectionaryCategory":
        for patterns, category in _RULES:
            if any(p.search(event_key) for p in patterns):
                return category
        if event_key in SANCTORUM_EVENTS:
            return cls.SANCTORUM
        return cls.SUNDAYS_SOLEMNITIES

    @classmethod
    def all(cls) -> List["LectionaryCategory"]:
        return list(cls)

    # ── cycle flags
    def has_year_cycle(self) -> bool:
        return self is LectionaryCategory.SUNDAYS_SOLEMNITIES

    def has_two_year_cycle(self) -> bool:
        return self is LectionaryCategory.WEEKDAYS_ORDINARY

    def cycle_labels(self) -> Tuple[str, ...]:
        """Year labels this category is split into; () for flat categories."""
        if self.has_year_cycle():
            return YEAR_CYCLE
        if self.has_two_year_cycle():
            return TWO_YEAR_CYCLE
        return ()

    def is_ferial(self) -> bool:
        return self in _FERIAL

    def liturgical_color(self) -> List[str]:
        """Fixed seasonal color of synthesized weekday events."""
        if not self.is_ferial():
            raise ValueError(f"Lectionary category '{self.value}' has no fixed weekday color")
        return [_FERIAL[self]]

    # ── storage
    def folder(self) -> Path:
        """
        Base folder. Cycle categories return their first year (A / I);
        use folder_for_year() / folder_for_two_year_cycle() for a specific one.
        """
        if self.has_year_cycle():
            return self.folder_for_year("A")
        if self.has_two_year_cycle():
            return self.folder_for_two_year_cycle("I")
        return resolve_lectionary_folder(self.value)

    def file(self, locale: str) -> Path:
        if self.has_year_cycle():
            return self.file_for_year("A", locale)
        if self.has_two_year_cycle():
            return self.file_for_two_year_cycle("I", locale)
        return resolve_lectionary_file(self.value, locale)

    def folder_for_year(self, year: str) -> Path:
        return resolve_lectionary_folder(self.value, self._year_folder(year))

    def file_for_year(self, year: str, locale: str) -> Path:
        return resolve_lectionary_file(self.value, locale, self._year_folder(year))

    def folder_for_two_year_cycle(self, year: str) -> Path:
        return resolve_lectionary_folder(self.value, self._two_year_folder(year))

    def file_for_two_year_cycle(self, year: str, locale: str) -> Path:
        return resolve_lectionary_file(self.value, locale, self._two_year_folder(year))

    def folders(self) -> List[Path]:
        """Every folder this category's readings may live in."""
        if self.has_year_cycle():
            return [self.folder_for_year(y) for y in YEAR_CYCLE]
        if self.has_two_year_cycle():
            return [self.folder_for_two_year_cycle(y) for y in TWO_YEAR_CYCLE]
        return [self.folder()]

    def event_keys(self) -> Optional[List[str]]:
        """Explicit key list, or None for pattern-based / default categories."""
        if self is LectionaryCategory.SANCTORUM:
            return list(SANCTORUM_EVENTS)
        return None

    def _year_folder(self, year: str) -> str:
        if not self.has_year_cycle():
            raise ValueError(f"Lectionary category '{self.value}' does not have year cycles")
        label = str(year).upper()
        if label not in YEAR_CYCLE:
            raise ValueError(f"Invalid year cycle: '{year}'")
        return cycle_key(label)

    def _two_year_folder(self, year: str) -> str:
        if not self.has_two_year_cycle():
            raise ValueError(f"Lectionary category '{self.value}' does not have a two-year cycle")
        label = str(year).upper()
        if label not in TWO_YEAR_CYCLE:
            raise ValueError(f"Invalid two-year cycle: '{year}'")
        return cycle_key(label)


_RULES = (
    (_ADVENT_PATTERNS, LectionaryCategory.WEEKDAYS_ADVENT),
    (_CHRISTMAS_PATTERNS, LectionaryCategory.WEEKDAYS_CHRISTMAS),
    (_LENT_PATTERNS, LectionaryCategory.WEEKDAYS_LENT),
    (_EASTER_PATTERNS, LectionaryCategory.WEEKDAYS_EASTER),
    (_ORDINARY_PATTERNS, LectionaryCategory.WEEKDAYS_ORDINARY),
)

_FERIAL = {
    LectionaryCategory.WEEKDAYS_ADVENT: "purple",
    LectionaryCategory.WEEKDAYS_CHRISTMAS: "white",
    LectionaryCategory.WEEKDAYS_LENT: "purple",
    LectionaryCategory.WEEKDAYS_EASTER: "white",
    LectionaryCategory.WEEKDAYS_ORDINARY: "green",
}


def cycle_key(year: str) -> str:
    """
    Wrapper key (and folder name) for a cycle label:
    A/B/C -> annum_a/annum_b/annum_c, I/II -> annum_I/annum_II.
    """
    label = str(year).upper()
    if label in YEAR_CYCLE:
        return f"annum_{label.lower()}"
    if label in TWO_YEAR_CYCLE:
        return f"annum_{label}"
    raise ValueError(f"Invalid year cycle: '{year}'")


def classify(event_key: str) -> LectionaryCategory:
    return LectionaryCategory.for_event_key(event_key)
