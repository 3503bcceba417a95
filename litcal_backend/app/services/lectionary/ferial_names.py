# litcal_backend/app/services/lectionary/ferial_names.py
from __future__ import annotations

import gettext
import re
from functools import lru_cache
from typing import Callable, List, Optional, Tuple

from litcal_backend.app.config.paths import get_app_root
from litcal_backend.app.utils.strings import base_locale

# Purpose:
# Localized names for weekday (grade 0) events, which have no entry in the
# i18n files. Latin is built from fixed tables; other languages go through
# gettext ("litcal" domain under app/i18n) and fall back to English.

DAY_ABBREV = {
    "Mon": "Monday", "Tue": "Tuesday", "Wed": "Wednesday", "Thu": "Thursday",
    "Fri": "Friday", "Sat": "Saturday", "Sun": "Sunday",
}

DAY_TO_NUMBER = {
    "Sunday": 0, "Monday": 1, "Tuesday": 2, "Wednesday": 3,
    "Thursday": 4, "Friday": 5, "Saturday": 6,
}

LATIN_DAYS = ("Dominica", "Feria II", "Feria III", "Feria IV", "Feria V", "Feria VI", "Sabbato")

LATIN_ORDINALS_GENITIVE = {
    1: "Primæ", 2: "Secundæ", 3: "Tertiæ", 4: "Quartæ", 5: "Quintæ",
    6: "Sextæ", 7: "Septimæ", 8: "Octavæ", 9: "Nonæ", 10: "Decimæ",
    11: "Undecimæ", 12: "Duodecimæ", 13: "Decimæ Tertiæ", 14: "Decimæ Quartæ",
    15: "Decimæ Quintæ", 16: "Decimæ Sextæ", 17: "Decimæ Septimæ",
    18: "Decimæ Octavæ", 19: "Decimæ Nonæ", 20: "Vigesimæ",
    21: "Vigesimæ Primæ", 22: "Vigesimæ Secundæ", 23: "Vigesimæ Tertiæ",
    24: "Vigesimæ Quartæ", 25: "Vigesimæ Quintæ", 26: "Vigesimæ Sextæ",
    27: "Vigesimæ Septimæ", 28: "Vigesimæ Octavæ", 29: "Vigesimæ Nonæ",
    30: "Trigesimæ", 31: "Trigesimæ Primæ", 32: "Trigesimæ Secundæ",
    33: "Trigesimæ Tertiæ", 34: "Trigesimæ Quartæ",
}

LATIN_ORDINALS_DAY = {
    1: "Prima", 2: "Secunda", 3: "Tertia", 4: "Quarta",
    5: "Quinta", 6: "Sexta", 7: "Septima", 8: "Octava",
}


@lru_cache(maxsize=32)
def _translations(language: str) -> gettext.NullTranslations:
    return gettext.translation(
        "litcal", localedir=str(get_app_root() / "i18n"), languages=[language], fallback=True
    )


def english_ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


class FerialNameGenerator:
    """
    Builds names such as "Monday of the 1st Week of Advent" from event keys.
    generate_name() returns None for keys it does not recognise.
    """

    def __init__(self, locale: str):
        self.locale = locale
        self.language = base_locale(locale)
        self._ = _translations(self.language).gettext
        # Order matters: the Dec/Jan forms must be tried before the generic ones.
        self._rules: List[Tuple[re.Pattern, Callable[..., str]]] = [
            (re.compile(r"^AdventWeekdayDec(\d+)$"), self._advent_dec),
            (re.compile(r"^AdventWeekday(\d)(\w+)$"), self._advent_weekday),
            (re.compile(r"^ChristmasWeekdayDec(\d+)$"), self._christmas_octave),
            (re.compile(r"^ChristmasWeekdayJan(\d+)$"), self._january_date),
            (re.compile(r"^DayAfterEpiphanyJan(\d+)$"), self._january_date),
            (re.compile(r"^DayAfterEpiphany(\w+)$"), self._after_epiphany),
            (re.compile(r"^(Thursday|Friday|Saturday)AfterAshWednesday$"), self._after_ash_wednesday),
            (re.compile(r"^LentWeekday(\d)(\w+)$"), self._lent_weekday),
            (re.compile(r"^(Mon|Tue|Wed|Thu|Fri|Sat)OctaveEaster$"), self._easter_octave),
            (re.compile(r"^EasterWeekday(\d)(\w+)$"), self._easter_weekday),
            (re.compile(r"^OrdWeekday(\d+)(\w+)$"), self._ordinary_weekday),
            (re.compile(r"^(Mon|Tue|Wed)HolyWeek$"), self._holy_week),
        ]

    @property
    def is_latin(self) -> bool:
        return self.language == "la"

    def generate_name(self, event_key: str) -> Optional[str]:
        for pattern, build in self._rules:
            m = pattern.match(event_key)
            if m:
                return build(*m.groups())
        return None

    # ── helpers
    def day_name(self, day: str) -> str:
        full = DAY_ABBREV.get(day, day)
        if self.is_latin:
            return LATIN_DAYS[DAY_TO_NUMBER.get(full, 1)]
        return self._(full)

    def ordinal(self, n: int) -> str:
        if self.is_latin:
            return LATIN_ORDINALS_GENITIVE.get(n, str(n))
        # msgids are the English forms ("1st", "2nd"); catalogs map them per language
        return self._(english_ordinal(n))

    def _week_of(self, week: str, day: str, latin_season: str, english_season: str) -> str:
        day_name, ordinal = self.day_name(day), self.ordinal(int(week))
        if self.is_latin:
            return f"{day_name} Hebdomadæ {ordinal} {latin_season}"
        return f"{day_name} " + self._(f"of the %s Week of {english_season}") % ordinal

    # ── builders
    def _advent_dec(self, dom: str) -> str:
        if self.is_latin:
            return f"{int(dom)} Decembris"
        return self._("December %s") % int(dom)

    def _advent_weekday(self, week: str, day: str) -> str:
        return self._week_of(week, day, "Adventus", "Advent")

    def _christmas_octave(self, dom: str) -> str:
        # Dec 25 is the first day of the octave
        octave_day = int(dom) - 24
        if self.is_latin:
            return f"Dies {LATIN_ORDINALS_DAY.get(octave_day, str(octave_day))} infra Octavam Nativitatis"
        return self._("%s Day of the Octave of Christmas") % self.ordinal(octave_day)

    def _january_date(self, dom: str) -> str:
        if self.is_latin:
            return f"{int(dom)} Ianuarii"
        if self.language == "it":
            return f"Feria propria del {int(dom)} gennaio"
        return self._("January %s") % int(dom)

    def _after_epiphany(self, day: str) -> str:
        if self.is_latin:
            return f"{self.day_name(day)} post Epiphaniam"
        return self._("%s after Epiphany") % self.day_name(day)

    def _after_ash_wednesday(self, day: str) -> str:
        if self.is_latin:
            return f"{self.day_name(day)} post Feria IV Cinerum"
        return f"{self.day_name(day)} " + self._("after Ash Wednesday")

    def _lent_weekday(self, week: str, day: str) -> str:
        return self._week_of(week, day, "Quadragesimæ", "Lent")

    def _easter_octave(self, day: str) -> str:
        if self.is_latin:
            return f"{self.day_name(day)} infra Octavam Paschæ"
        return self._("%s within the Octave of Easter") % self.day_name(day)

    def _easter_weekday(self, week: str, day: str) -> str:
        return self._week_of(week, day, "Temporis Paschali", "Easter")

    def _ordinary_weekday(self, week: str, day: str) -> str:
        return self._week_of(week, day, "Temporis per annum", "Ordinary Time")

    def _holy_week(self, day: str) -> str:
        if self.is_latin:
            return f"{self.day_name(day)} Hebdomadæ Sanctæ"
        return self._("%s of Holy Week") % self.day_name(day)
