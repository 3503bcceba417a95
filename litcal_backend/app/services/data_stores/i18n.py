# litcal_backend/app/services/data_stores/i18n.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from litcal_backend.app.config.paths import get_i18n_dir, resolve_i18n_file
from litcal_backend.app.errors import LitCalError, ServiceUnavailableError, StoreDecodeError
from .io_utils import load_json, mkdir_or_fail, write_json

# Name translations: one {event_key: name} object per locale.
# Every non-ferial event key is expected in every locale file; an empty
# string is the placeholder for a missing translation.

log = logging.getLogger("litcal.temporale")
audit = logging.getLogger("litcal.audit")

Translations = Dict[str, str]

def load_translations(locale: str) -> Optional[Translations]:
    """
    Read path: None if the locale has no file. A corrupt or unreadable
    file is logged and treated the same way.
    """
    path = resolve_i18n_file(locale)
    try:
        return load_json(path)
    except FileNotFoundError:
        return None
    except (StoreDecodeError, ServiceUnavailableError) as e:
        log.debug("Failed to load i18n for locale '%s': %s", locale, e)
        return None

def _load_for_update(locale: str, context: str) -> Translations:
    path = resolve_i18n_file(locale)
    try:
        return load_json(path)
    except FileNotFoundError:
        return {}
    except (StoreDecodeError, ServiceUnavailableError) as e:
        audit.warning(
            "Failed to read i18n file for locale '%s' %s, starting fresh", locale, context,
            extra={"file": str(path), "error": str(e)},
        )
        return {}

def write_translations(by_locale: Dict[str, Translations]) -> None:
    """Replace each locale's file with the given map (create path)."""
    mkdir_or_fail(get_i18n_dir(), "i18n")
    for locale, translations in by_locale.items():
        write_json(resolve_i18n_file(locale), translations, what=f"i18n data for locale '{locale}'")

def merge_translations(by_locale: Dict[str, Translations]) -> None:
    """Union each locale's file with the given map; incoming names win."""
    mkdir_or_fail(get_i18n_dir(), "i18n")
    for locale, translations in by_locale.items():
        current = _load_for_update(locale, "for merge")
        current.update(translations)
        write_json(resolve_i18n_file(locale), current, what=f"i18n data for locale '{locale}'")

def ensure_i18n_consistency(
    event_keys: Iterable[str],
    locales: Iterable[str],
    skip_locale: Optional[str] = None,
) -> List[str]:
    """
    Add an empty-string placeholder for every key missing from each locale
    file. Best effort: a failed write is logged and the next locale is tried.
    Returns the locales whose files were rewritten.
    """
    if not get_i18n_dir().is_dir():
        return []
    keys = list(event_keys)
    touched: List[str] = []
    for locale in locales:
        if locale == skip_locale:
            continue
        data = _load_for_update(locale, "during consistency check")
        missing = [k for k in keys if k not in data]
        if not missing:
            continue
        for k in missing:
            data[k] = ""
        try:
            write_json(resolve_i18n_file(locale), data, what=f"i18n data for locale '{locale}'")
        except LitCalError as e:
            audit.warning(
                "Failed to write i18n file for locale '%s' during consistency check", locale,
                extra={"event_keys": keys, "error": str(e)},
            )
            continue
        touched.append(locale)
    return touched

def remove_key(event_key: str, locales: Iterable[str]) -> List[str]:
    """Drop `event_key` from each locale file that has it (best effort)."""
    if not get_i18n_dir().is_dir():
        return []
    touched: List[str] = []
    for locale in locales:
        path = resolve_i18n_file(locale)
        try:
            data = load_json(path)
        except FileNotFoundError:
            continue
        except (StoreDecodeError, ServiceUnavailableError) as e:
            audit.warning(
                "Failed to read i18n file for locale '%s'", locale,
                extra={"event_key": event_key, "file": str(path), "error": str(e)},
            )
            continue
        if event_key not in data:
            continue
        del data[event_key]
        try:
            write_json(path, data, what=f"i18n data for locale '{locale}'")
        except LitCalError as e:
            audit.warning(
                "Failed to write i18n file for locale '%s'", locale,
                extra={"event_key": event_key, "file": str(path), "error": str(e)},
            )
            continue
        touched.append(locale)
    return touched


__all__ = [
    "Translations",
    "load_translations",
    "write_translations",
    "merge_translations",
    "ensure_i18n_consistency",
    "remove_key",
]
