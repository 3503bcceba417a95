from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from litcal_backend.app.config.paths import get_temporale_file, resolve_i18n_file
from litcal_backend.app.main import app
from litcal_backend.app.services.data_stores.io_utils import clear_cache, write_json
from litcal_backend.app.services.lectionary.categories import LectionaryCategory
from litcal_backend.app.services.lectionary.readings import FERIAL_KEYS, FESTIVE_KEYS

FESTIVE = {k: f"{k} (festive)" for k in FESTIVE_KEYS}
FERIAL = {k: f"{k} (ferial)" for k in FERIAL_KEYS}

# --- Data tree override: every test gets its own store -------------------------
@pytest.fixture(autouse=True)
def tmp_data_tree(tmp_path, monkeypatch):
    monkeypatch.setenv("LITCAL_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DATA_DIR", raising=False)
    monkeypatch.setenv("LITCAL_DEV_AUTH_BYPASS", "1")
    clear_cache()
    yield tmp_path
    clear_cache()

@pytest.fixture
def client():
    return TestClient(app)

@pytest.fixture
def festive():
    return dict(FESTIVE)

@pytest.fixture
def ferial():
    return dict(FERIAL)

@pytest.fixture
def year_cycle():
    """Sundays/Solemnities readings for one locale, wrapped by year."""
    return {f"annum_{y}": dict(FESTIVE) for y in ("a", "b", "c")}

# --- Seeding / inspecting the file stores ----------------------------------------
class Store:
    def core(self, events: Any) -> Path:
        path = get_temporale_file()
        write_json(path, events)
        return path

    def i18n(self, locale: str, names: Dict[str, str]) -> Path:
        path = resolve_i18n_file(locale)
        write_json(path, names)
        return path

    def readings(self, category: LectionaryCategory, locale: str, data: Dict[str, Any],
                 year: Optional[str] = None) -> Path:
        path = self.readings_path(category, locale, year)
        write_json(path, data)
        return path

    def readings_path(self, category: LectionaryCategory, locale: str, year: Optional[str] = None) -> Path:
        if category.has_year_cycle():
            return category.file_for_year(year, locale)
        if category.has_two_year_cycle():
            return category.file_for_two_year_cycle(year, locale)
        return category.file(locale)

    def read(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    def read_core(self) -> Any:
        return self.read(get_temporale_file())

    def read_i18n(self, locale: str) -> Any:
        return self.read(resolve_i18n_file(locale))

@pytest.fixture
def store():
    return Store()
