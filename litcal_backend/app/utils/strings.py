# litcal_backend/app/utils/strings.py

import re

_LOCALE_SPLIT = re.compile(r"[_-]")

# What it does:
# Base language of a locale tag: "en_US" / "en-US" -> "en"
def base_locale(locale: str) -> str:
    parts = _LOCALE_SPLIT.split(locale)
    return parts[0] if parts and parts[0] else locale
