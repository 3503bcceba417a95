# litcal_backend/app/services/locales.py
from __future__ import annotations

import locale as _stdlib_locale
import logging
import re
from typing import Iterable, List, Optional

from litcal_backend.app.config.manifest import LATIN, LATIN_PRIMARY_LANGUAGE
from litcal_backend.app.config.paths import get_i18n_dir
from litcal_backend.app.errors import ValidationError
from litcal_backend.app.services.data_stores.io_utils import list_json_files, locale_of
from litcal_backend.app.services.lectionary.categories import LectionaryCategory
from litcal_backend.app.utils.strings import base_locale

log = logging.getLogger("litcal.temporale")

_TAG = re.compile(
    r"^(?P<lang>[A-Za-z]{2,3})"
    r"(?:[_-](?P<script>[A-Za-z]{4}))?"
    r"(?:[_-](?P<region>[A-Za-z]{2}|\d{3}))?$"
)

def _known_languages() -> frozenset:
    langs = set()
    for alias in _stdlib_locale.locale_alias:
        head = re.split(r"[_.@]", alias)[0]
        if 2 <= len(head) <= 3 and head.isalpha():
            langs.add(head.lower())
    langs.add(LATIN_PRIMARY_LANGUAGE)
    return frozenset(langs)

KNOWN_LANGUAGES = _known_languages()


def canonicalize(tag: str) -> Optional[str]:
    """
    "en-us" -> "en_US", "sr-latn-rs" -> "sr_Latn_RS"; None if `tag` is not a
    well-formed language tag.
    """
    m = _TAG.match((tag or "").strip())
    if not m:
        return None
    parts = [m.group("lang").lower()]
    if m.group("script"):
        parts.append(m.group("script").title())
    if m.group("region"):
        parts.append(m.group("region").upper())
    return "_".join(parts)


def is_locale_tag(value: object) -> bool:
    """Exact tag shape, no surrounding whitespace; safe to use as a file name."""
    return isinstance(value, str) and _TAG.fullmatch(value) is not None


def is_valid_locale(canonical: str) -> bool:
    return canonical == LATIN or base_locale(canonical) in KNOWN_LANGUAGES


def pick_language(accept_language: Optional[str]) -> Optional[str]:
    """Highest-weighted language range of an Accept-Language header ('*' ignored)."""
    if not accept_language:
        return None
    ranked = []
    for pos, item in enumerate(accept_language.split(",")):
        tag, _, params = item.strip().partition(";")
        tag = tag.strip()
        if not tag or tag == "*":
            continue
        q = 1.0
        for param in params.split(";"):
            name, _, value = param.strip().partition("=")
            if name.strip() == "q":
                try:
                    q = float(value)
                except ValueError:
                    q = 0.0
        if q > 0:
            ranked.append((-q, pos, tag))
    if not ranked:
        return None
    return sorted(ranked)[0][2]


# ── discovery
def discover_i18n_locales() -> List[str]:
    return [locale_of(p) for p in list_json_files(get_i18n_dir())]


def discover_lectionary_locales() -> List[str]:
    """
    Locales with lectionary data, taken from the Year A folder. Years B and C
    are expected to mirror it; a gap is logged, not fatal.
    """
    category = LectionaryCategory.SUNDAYS_SOLEMNITIES
    found = []
    for p in list_json_files(category.folder_for_year("A")):
        loc = locale_of(p)
        found.append(loc)
        for year in ("B", "C"):
            if not category.file_for_year(year, loc).is_file():
                log.warning("Lectionary locale '%s' exists in Year A but missing in Year %s", loc, year)
    return found


class LocaleResolver:
    """
    Picks the locale used for event names and, separately, the one used for
    readings. The two may differ when a translation exists without readings.
    """

    def __init__(self, available_locales: Iterable[str], lectionary_locales: Iterable[str]):
        self.available_locales: List[str] = list(dict.fromkeys(available_locales))
        self.lectionary_locales: List[str] = list(dict.fromkeys(lectionary_locales))

    @classmethod
    def from_store(cls) -> "LocaleResolver":
        return cls(discover_i18n_locales(), discover_lectionary_locales())

    def add_available(self, locales: Iterable[str]) -> List[str]:
        """Register locales created by a write; returns the ones that were new."""
        new = [loc for loc in locales if loc not in self.available_locales]
        self.available_locales.extend(new)
        return new

    def select_locale(self, requested: str, strict: bool = False) -> str:
        canonical = canonicalize(requested)
        if not canonical:
            if strict:
                raise ValidationError(f"Invalid locale value: '{requested}'")
            return LATIN_PRIMARY_LANGUAGE

        if not is_valid_locale(canonical):
            if strict:
                raise ValidationError(
                    f"Invalid value '{requested}' for param `locale`, valid values are: "
                    f"{LATIN_PRIMARY_LANGUAGE}, {LATIN} or any ISO 639 language with optional region"
                )
            return LATIN_PRIMARY_LANGUAGE

        if canonical in self.available_locales:
            return canonical
        base = base_locale(canonical)
        if base in self.available_locales:
            return base

        if strict:
            raise ValidationError(
                f"Locale '{requested}' is not available for temporale data. "
                f"Available locales: {', '.join(self.available_locales)}"
            )
        return LATIN_PRIMARY_LANGUAGE

    def lectionary_locale(self, locale: str) -> Optional[str]:
        if locale in self.lectionary_locales:
            return locale
        base = base_locale(locale)
        if base in self.lectionary_locales:
            return base
        if LATIN_PRIMARY_LANGUAGE in self.lectionary_locales:
            return LATIN_PRIMARY_LANGUAGE
        return None

    def resolve_request_locale(self, accept_language: Optional[str], query_locale: Optional[str]) -> str:
        """Accept-Language is lenient; an explicit ?locale= overrides it and is strict."""
        picked = pick_language(accept_language) or LATIN
        resolved = self.select_locale(picked, strict=False)
        if query_locale is not None:
            resolved = self.select_locale(query_locale, strict=True)
        return resolved
