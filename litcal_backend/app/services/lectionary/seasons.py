# litcal_backend/app/services/lectionary/seasons.py
from __future__ import annotations

import re
from enum import Enum

from litcal_backend.app.config.manifest import LATIN, LATIN_PRIMARY_LANGUAGE

# Checked in declaration order; first match wins.
_SEASON_PATTERNS = {
    "ADVENT": (
        r"^Advent\d",
        r"^AdventWeekday",
    ),
    "CHRISTMAS": (
        r"^Christmas",
        r"^HolyFamily$",
        r"^Epiphany",
        r"^BaptismLord$",
        r"^MaryMotherOfGod$",
        r"^DayAfterEpiphany",
    ),
    "LENT": (
        r"^AshWednesday$",
        r"^(Friday|Saturday|Thursday)AfterAshWednesday$",
        r"^Lent\d",
        r"^LentWeekday\d",
        r"^PalmSun$",
        r"^(Mon|Tue|Wed)HolyWeek$",
        r"^HolyThursChrism$",
    ),
    "EASTER_TRIDUUM": (
        r"^HolyThurs$",
        r"^GoodFri$",
        r"^EasterVigil$",
    ),
    "EASTER": (
        r"^Easter\d*$",
        r"^(Mon|Tue|Wed|Thu|Fri|Sat)OctaveEaster$",
        r"^EasterWeekday\d",
        r"^Ascension$",
        r"^Pentecost$",
    ),
}
_COMPILED = [(name, [re.compile(p) for p in pats]) for name, pats in _SEASON_PATTERNS.items()]

_LABELS = {
    "ADVENT": ("Tempus Adventus", "Advent"),
    "CHRISTMAS": ("Tempus Nativitatis", "Christmas"),
    "LENT": ("Tempus Quadragesima", "Lent"),
    "EASTER_TRIDUUM": ("Triduum Paschale", "Easter Triduum"),
    "EASTER": ("Tempus Paschale", "Easter"),
    "ORDINARY_TIME": ("Tempus per annum", "Ordinary Time"),
}


class LitSeason(str, Enum):
    ADVENT = "ADVENT"
    CHRISTMAS = "CHRISTMAS"
    LENT = "LENT"
    EASTER_TRIDUUM = "EASTER_TRIDUUM"
    EASTER = "EASTER"
    ORDINARY_TIME = "ORDINARY_TIME"

    @classmethod
    def for_event_key(cls, event_key: str) -> "LitSeason":
        for name, patterns in _COMPILED:
            if any(p.search(event_key) for p in patterns):
                return cls(name)
        # OrdSunday*, OrdWeekday*, Trinity, CorpusChristi, ...
        return cls.ORDINARY_TIME

    def i18n(self, locale: str) -> str:
        """Season label: Latin for Latin locales, English otherwise."""
        latin, english = _LABELS[self.value]
        return latin if locale in (LATIN, LATIN_PRIMARY_LANGUAGE) else english


def season_of(event_key: str) -> LitSeason:
    return LitSeason.for_event_key(event_key)
