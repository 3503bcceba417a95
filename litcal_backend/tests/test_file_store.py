from __future__ import annotations
import pytest

from litcal_backend.app.errors import NotFoundError, InternalServerError, StoreDecodeError
from litcal_backend.app.services.data_stores import io_utils
from litcal_backend.app.services.data_stores import lectionary as lectionary_store
from litcal_backend.app.services.data_stores import temporale as temporale_store
from litcal_backend.app.services.data_stores.i18n import load_translations
from litcal_backend.app.services.lectionary.categories import LectionaryCategory as C


def test_write_is_pretty_and_unescaped(tmp_data_tree):
    path = tmp_data_tree / "x" / "names.json"
    io_utils.write_json(path, {"Easter": "Pâques"})
    text = path.read_text(encoding="utf-8")
    assert "Pâques" in text
    assert text.startswith("{\n    ")


def test_cache_is_invalidated_on_write(tmp_data_tree):
    path = tmp_data_tree / "cached.json"
    io_utils.write_json(path, {"a": 1})
    assert io_utils.load_json(path) == {"a": 1}
    io_utils.write_json(path, {"a": 2})
    assert io_utils.load_json(path) == {"a": 2}


def test_load_returns_a_copy(tmp_data_tree):
    path = tmp_data_tree / "copy.json"
    io_utils.write_json(path, {"a": [1]})
    io_utils.load_json(path)["a"].append(2)
    assert io_utils.load_json(path) == {"a": [1]}


@pytest.mark.parametrize("content", ["", "{", "[1, 2]"])
def test_load_rejects_bad_content(tmp_data_tree, content):
    path = tmp_data_tree / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StoreDecodeError):
        io_utils.load_json(path, expect=dict)


def test_load_missing_raises_file_not_found(tmp_data_tree):
    with pytest.raises(FileNotFoundError):
        io_utils.load_json(tmp_data_tree / "nope.json")


def test_core_list_states(store, tmp_data_tree):
    with pytest.raises(NotFoundError):
        temporale_store.load_events()
    assert not temporale_store.has_events()

    path = store.core([])
    assert not temporale_store.has_events()

    path.write_text("not json", encoding="utf-8")
    assert not temporale_store.has_events()
    with pytest.raises(InternalServerError):
        temporale_store.load_events()

    store.core([{"event_key": "Trinity", "grade": 6, "type": "mobile", "color": ["white"]}])
    assert temporale_store.has_events()
    assert temporale_store.find_index(temporale_store.load_events(), "Trinity") == 0


def test_corrupt_i18n_file_reads_as_absent(store):
    path = store.i18n("en", {})
    path.write_text("{", encoding="utf-8")
    assert load_translations("en") is None
    assert load_translations("fr") is None


def test_write_readings_routes_by_category(store, festive, ferial, year_cycle):
    lectionary_store.write_readings({
        "en": {
            "Trinity": year_cycle,
            "OrdWeekday1Monday": {"annum_I": ferial, "annum_II": dict(ferial, gospel="Mk 1:29")},
            "LentWeekday1Monday": ferial,
            "ImmaculateHeart": festive,
        }
    })
    for year in "ABC":
        assert store.read(store.readings_path(C.SUNDAYS_SOLEMNITIES, "en", year)) == {"Trinity": festive}
    assert store.read(store.readings_path(C.WEEKDAYS_ORDINARY, "en", "I")) == {"OrdWeekday1Monday": ferial}
    assert store.read(store.readings_path(C.WEEKDAYS_ORDINARY, "en", "II"))["OrdWeekday1Monday"]["gospel"] == "Mk 1:29"
    assert store.read(store.readings_path(C.WEEKDAYS_LENT, "en")) == {"LentWeekday1Monday": ferial}
    assert store.read(store.readings_path(C.SANCTORUM, "en")) == {"ImmaculateHeart": festive}


def test_write_readings_merges_with_existing(store, ferial):
    store.readings(C.WEEKDAYS_LENT, "en", {"AshWednesday": {"gospel": "old"}})
    lectionary_store.write_readings({"en": {"LentWeekday1Monday": ferial}})
    data = store.read(store.readings_path(C.WEEKDAYS_LENT, "en"))
    assert list(data) == ["AshWednesday", "LentWeekday1Monday"]


def test_load_ferial_folds_ordinary_years(store, ferial):
    store.readings(C.WEEKDAYS_ADVENT, "en", {"AdventWeekday1Monday": ferial})
    store.readings(C.WEEKDAYS_ORDINARY, "en", {"OrdWeekday1Monday": ferial}, "I")
    store.readings(C.WEEKDAYS_ORDINARY, "en", {"OrdWeekday1Tuesday": ferial}, "II")

    data = lectionary_store.load_ferial("en")
    assert data["AdventWeekday1Monday"] == ferial
    assert data["OrdWeekday1Monday"] == {"annum_I": ferial, "annum_II": None}
    assert data["OrdWeekday1Tuesday"] == {"annum_I": None, "annum_II": ferial}


def test_year_cycle_loader_skips_missing_and_corrupt(store, festive):
    store.readings(C.SUNDAYS_SOLEMNITIES, "en", {"Trinity": festive}, "A")
    store.readings_path(C.SUNDAYS_SOLEMNITIES, "en", "B").write_text("[", encoding="utf-8")
    assert lectionary_store.load_year_cycle("en") == {"A": {"Trinity": festive}}
    assert lectionary_store.load_sanctorum("en") is None


def test_remove_key_touches_every_year_and_locale(store, festive):
    for year in "ABC":
        for loc in ("en", "la"):
            store.readings(C.SUNDAYS_SOLEMNITIES, loc, {"Trinity": festive, "Easter": {}}, year)
    assert lectionary_store.remove_key("Trinity") == 6
    assert lectionary_store.remove_key("Trinity") == 0
    assert store.read(store.readings_path(C.SUNDAYS_SOLEMNITIES, "la", "C")) == {"Easter": {}}


def test_directory_in_place_of_a_readings_file_counts_as_absent(store, festive, ferial):
    store.readings(C.SUNDAYS_SOLEMNITIES, "en", {"Trinity": festive}, "A")
    store.readings_path(C.SUNDAYS_SOLEMNITIES, "en", "B").mkdir(parents=True)
    store.readings_path(C.WEEKDAYS_LENT, "en").mkdir(parents=True)
    store.readings(C.WEEKDAYS_ORDINARY, "en", {"OrdWeekday1Monday": ferial}, "I")
    store.readings_path(C.WEEKDAYS_ORDINARY, "en", "II").mkdir(parents=True)

    assert lectionary_store.load_year_cycle("en") == {"A": {"Trinity": festive}}
    assert lectionary_store.load_ferial("en") == {"OrdWeekday1Monday": {"annum_I": ferial, "annum_II": None}}
