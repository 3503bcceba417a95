from __future__ import annotations
import inspect
import json
import pytest
from fastapi.testclient import TestClient

from litcal_backend.app.routers.temporale import patch_temporale_route, put_temporale_route
from litcal_backend.app.services.lectionary.categories import LectionaryCategory as C

EN = {"Accept-Language": "en"}


def _event(key, grade=6, etype="mobile", color=("white",), **extra):
    return {"event_key": key, "grade": grade, "type": etype, "color": list(color), **extra}


@pytest.fixture
def seeded_locales(store):
    """Name locales exist before any event does."""
    store.i18n("en", {})
    store.i18n("la", {})


@pytest.fixture
def put_payload(year_cycle, ferial):
    return {
        "locales": ["en", "la"],
        "events": [
            _event("Trinity", i18n={"en": "Holy Trinity", "la": "Sanctissimæ Trinitatis"},
                   readings={"en": year_cycle, "la": year_cycle}),
            _event("ImmaculateHeart", grade=3, i18n={"en": "Immaculate Heart of Mary"},
                   readings={"en": dict(year_cycle["annum_a"])}),
            _event("OrdWeekday1Monday", grade=0, color=("green",),
                   readings={"en": {"annum_I": ferial, "annum_II": ferial}}),
            _event("LentWeekday1Monday", grade=0, color=("purple",), readings={"en": ferial}),
        ],
    }


# --- GET -----------------------------------------------------------------------

def test_get_without_core_file_is_404(client: TestClient):
    r = client.get("/temporale")
    assert r.status_code == 404
    assert r.headers["content-type"].startswith("application/problem+json")
    assert r.json()["type"] == "not-found"


def test_get_reports_locale_in_body_and_header(client, store, seeded_locales):
    store.core([])
    r = client.get("/temporale", headers={"Accept-Language": "en-US,en;q=0.8"})
    assert r.status_code == 200
    assert r.json() == {"events": [], "locale": "en"}
    assert r.headers["X-Litcal-Temporale-Locale"] == "en"


def test_get_header_locale_is_lenient(client, store, seeded_locales):
    store.core([])
    r = client.get("/temporale", headers={"Accept-Language": "zz"})
    assert r.status_code == 200
    assert r.json()["locale"] == "la"


@pytest.mark.parametrize("value", ["zz", "fr", "not a locale"])
def test_get_query_locale_is_strict(client, store, seeded_locales, value):
    store.core([])
    r = client.get("/temporale", params={"locale": value})
    assert r.status_code == 400
    assert r.json()["type"] == "validation-error"


def test_post_is_an_alias_of_get(client, store, seeded_locales):
    store.core([_event("Trinity")])
    r = client.post("/temporale", params={"locale": "en_US"})
    assert r.status_code == 200
    assert r.json()["locale"] == "en"
    assert r.json()["events"][0]["event_key"] == "Trinity"


# --- PUT -----------------------------------------------------------------------

def test_put_creates_and_round_trips(client, store, seeded_locales, put_payload, year_cycle, ferial):
    r = client.put("/temporale", json=put_payload, headers=EN)
    assert r.status_code == 201, r.text
    assert r.json() == {
        "success": True,
        "message": "Temporale data created successfully",
        "events": 2,
        "ferial_events": 2,
    }

    # core list holds graded events only, without i18n/readings
    assert store.read_core() == [_event("Trinity"), _event("ImmaculateHeart", grade=3)]
    assert store.read_i18n("la") == {"Trinity": "Sanctissimæ Trinitatis", "ImmaculateHeart": ""}

    body = client.get("/temporale", headers=EN).json()
    by_key = {e["event_key"]: e for e in body["events"]}
    trinity = by_key["Trinity"]
    assert (trinity["grade"], trinity["type"], trinity["color"]) == (6, "mobile", ["white"])
    assert trinity["name"] == "Holy Trinity"
    assert trinity["readings"] == year_cycle
    assert by_key["ImmaculateHeart"]["readings"] == year_cycle["annum_a"]

    weekday = by_key["OrdWeekday1Monday"]
    assert weekday["grade"] == 0 and weekday["color"] == ["green"]
    assert weekday["readings"] == {"annum_I": ferial, "annum_II": ferial}
    assert weekday["name"] == "Monday of the 1st Week of Ordinary Time"
    assert by_key["LentWeekday1Monday"]["readings"] == ferial


def test_put_treats_malformed_core_file_as_empty(client, store, seeded_locales, put_payload):
    store.core([]).write_text("{ broken", encoding="utf-8")
    r = client.put("/temporale", json=put_payload, headers=EN)
    assert r.status_code == 201


def test_put_conflict_leaves_stores_unchanged(client, store, seeded_locales, put_payload):
    core = store.core([_event("Easter")])
    before = core.read_text(encoding="utf-8")

    r = client.put("/temporale", json=put_payload, headers=EN)

    assert r.status_code == 409
    assert r.json()["type"] == "conflict"
    assert core.read_text(encoding="utf-8") == before
    assert store.read_i18n("en") == {}
    assert not store.readings_path(C.SUNDAYS_SOLEMNITIES, "en", "A").exists()


def test_put_conflict_is_checked_before_content_type(client, store):
    store.core([_event("Easter")])
    r = client.put("/temporale", content="locales=en", headers={"Content-Type": "text/plain"})
    assert r.status_code == 409


def test_put_rejects_non_json_content_type(client):
    r = client.put("/temporale", content="locales=en", headers={"Content-Type": "text/plain"})
    assert r.status_code == 415
    assert r.json()["type"] == "unsupported-media-type"


@pytest.mark.parametrize("body", ["{not json", "[1, 2]", "\"text\"", ""])
def test_put_rejects_bad_bodies(client, body):
    r = client.put("/temporale", content=body, headers={"Content-Type": "application/json"})
    assert r.status_code == 400


@pytest.mark.parametrize("mutate,fragment", [
    (lambda p: p.update(locales=[]), "at least one locale"),
    (lambda p: p.update(locales=["en_US"]), "base locale"),
    (lambda p: p.update(events=[]), "at least one event"),
    (lambda p: p["events"].append(dict(p["events"][0])), "Duplicate event_key 'Trinity'"),
    (lambda p: p["events"][0].update(grade=9), "Event 'Trinity' is invalid"),
    (lambda p: p["events"][0].update(type="moveable"), "Event 'Trinity' is invalid"),
    (lambda p: p["events"][0].update(color=["blue"]), "Event 'Trinity' is invalid"),
    (lambda p: p["events"][0].update(grade=True), "Event 'Trinity' is invalid"),
    (lambda p: p["events"][0]["i18n"].pop("en"), "Accept-Language locale 'en'"),
    (lambda p: p["events"][0].pop("readings"), "must have a 'readings' object"),
    (lambda p: p["events"][0]["readings"]["en"].pop("annum_c"), "annum_a, annum_b and annum_c"),
    (lambda p: p["events"][0]["readings"]["en"]["annum_b"].pop("gospel"), "ReadingsShape::FESTIVE"),
    (lambda p: p["events"][2].update(i18n={"en": "Monday"}), "should not have i18n"),
    (lambda p: p["events"][2].pop("readings"), "Grade 0 event 'OrdWeekday1Monday' must have"),
    (lambda p: p["events"][2]["readings"].update(en={"first_reading": "x"}), "annum_I and annum_II"),
])
def test_put_validation(client, store, seeded_locales, put_payload, mutate, fragment):
    mutate(put_payload)
    r = client.put("/temporale", json=put_payload, headers=EN)
    assert r.status_code == 400
    assert fragment in r.json()["detail"]
    assert not store.readings_path(C.SUNDAYS_SOLEMNITIES, "en", "A").exists()


def _outside_files(tree):
    return sorted(p.name for p in tree.parent.glob(f"{tree.name}-escaped*.json"))


@pytest.mark.parametrize("where", ["locales", "i18n", "readings"])
def test_put_rejects_locale_keys_that_leave_the_data_tree(client, store, tmp_data_tree, seeded_locales,
                                                          put_payload, year_cycle, where):
    bad = f"../../../../{tmp_data_tree.name}-escaped"
    if where == "locales":
        put_payload["locales"].append(bad)
    elif where == "i18n":
        put_payload["events"][0]["i18n"][bad] = "x"
    else:
        put_payload["events"][0]["readings"][bad] = year_cycle

    r = client.put("/temporale", json=put_payload, headers=EN)

    assert r.status_code == 400
    assert "not a valid locale" in r.json()["detail"]
    assert _outside_files(tmp_data_tree) == []
    assert not store.readings_path(C.SUNDAYS_SOLEMNITIES, "en", "A").exists()


def test_patch_rejects_locale_keys_that_leave_the_data_tree(client, store, tmp_data_tree, seeded_locales,
                                                            year_cycle):
    store.core([])
    bad = f"../../../../{tmp_data_tree.name}-escaped"
    payload = {"events": [_event("NewFeast", i18n={"en": "New", bad: "x"},
                                 readings={"en": year_cycle, f"../{bad}_readings": year_cycle})]}

    r = client.patch("/temporale", json=payload, headers=EN)

    assert r.status_code == 400
    assert _outside_files(tmp_data_tree) == []
    assert store.read_core() == []
    assert store.read_i18n("en") == {}


def test_patch_rejects_bad_readings_locale_on_existing_event(client, store, seeded_locales, year_cycle):
    store.core([_event("Trinity")])
    payload = {"events": [_event("Trinity", readings={"en/../x": year_cycle})]}
    r = client.patch("/temporale", json=payload, headers=EN)
    assert r.status_code == 400
    assert "readings key 'en/../x'" in r.json()["detail"]


# --- PATCH ---------------------------------------------------------------------

def test_patch_adds_new_event(client, store, seeded_locales, year_cycle):
    store.core([])
    payload = {"events": [_event("TestFeast", grade=7, etype="fixed",
                                 i18n={"en": "Test Feast"}, readings={"en": year_cycle})]}

    r = client.patch("/temporale", json=payload, headers=EN)

    assert r.status_code == 200, r.text
    assert r.json() == {
        "success": True,
        "message": "Temporale data updated successfully",
        "updated": 0,
        "added": 1,
        "ferial_updated": 0,
    }
    events = client.get("/temporale", headers=EN).json()["events"]
    assert events[0]["name"] == "Test Feast"
    assert events[0]["readings"]["annum_a"]["first_reading"] == year_cycle["annum_a"]["first_reading"]
    assert store.read_i18n("la") == {"TestFeast": ""}


def test_patch_flat_readings_for_a_year_cycle_key_are_rejected(client, store, seeded_locales, festive):
    """
    Sundays/Solemnities readings are stored per year (annum_a/b/c files), so a
    flat readings object for such a key has no year file to land in and is
    refused, even though a loose client might expect it to be accepted as is.
    """
    store.core([])
    payload = {"events": [_event("TestFeast", grade=7, etype="fixed",
                                 i18n={"en": "Test Feast"}, readings={"en": festive})]}
    r = client.patch("/temporale", json=payload, headers=EN)
    assert r.status_code == 400
    assert store.read_core() == []


def test_patch_updates_in_place_without_i18n_or_readings(client, store, seeded_locales):
    store.core([_event("Trinity"), _event("Pentecost", color=("red",))])
    r = client.patch("/temporale", json={"events": [_event("Trinity", grade=7)]}, headers=EN)
    assert r.status_code == 200
    assert r.json()["updated"] == 1
    assert store.read_core() == [_event("Trinity", grade=7), _event("Pentecost", color=("red",))]


def test_patch_new_event_requires_i18n_and_readings(client, store, seeded_locales, year_cycle):
    store.core([])
    r = client.patch("/temporale", json={"events": [_event("NewFeast", readings={"en": year_cycle})]}, headers=EN)
    assert r.status_code == 400
    assert "New event 'NewFeast' must have an 'i18n' object" in r.json()["detail"]

    r = client.patch("/temporale", json={"events": [_event("NewFeast", i18n={"en": "New"})]}, headers=EN)
    assert r.status_code == 400
    assert "New event 'NewFeast' must have a 'readings' object" in r.json()["detail"]


def test_patch_ferial_event_only_touches_lectionary(client, store, seeded_locales, ferial):
    store.core([])
    payload = {"events": [_event("AdventWeekday1Monday", grade=0, color=("purple",), readings={"en": ferial})]}
    r = client.patch("/temporale", json=payload, headers=EN)
    assert r.status_code == 200
    assert r.json()["ferial_updated"] == 1
    assert store.read_core() == []
    assert store.read_i18n("en") == {}
    assert store.read(store.readings_path(C.WEEKDAYS_ADVENT, "en")) == {"AdventWeekday1Monday": ferial}


def test_patch_without_core_file_is_404(client, seeded_locales):
    r = client.patch("/temporale", json={"events": []}, headers=EN)
    assert r.status_code == 404


def test_patch_requires_events_array(client, store):
    store.core([])
    r = client.patch("/temporale", json={"event": []})
    assert r.status_code == 400
    assert '"events" array' in r.json()["detail"]


def test_patch_rejects_non_json_content_type(client, store):
    store.core([])
    r = client.patch("/temporale", content=json.dumps({"events": []}), headers={"Content-Type": "text/plain"})
    assert r.status_code == 415


# --- DELETE --------------------------------------------------------------------

def test_delete_removes_every_trace(client, store, seeded_locales, put_payload):
    assert client.put("/temporale", json=put_payload, headers=EN).status_code == 201

    r = client.delete("/temporale/Trinity", headers=EN)
    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "message": "Temporale event 'Trinity' deleted successfully",
        "event_key": "Trinity",
    }

    assert "Trinity" not in {e["event_key"] for e in store.read_core()}
    for loc in ("en", "la"):
        assert "Trinity" not in store.read_i18n(loc)
        for year in "ABC":
            assert "Trinity" not in store.read(store.readings_path(C.SUNDAYS_SOLEMNITIES, loc, year))
    events = client.get("/temporale", headers=EN).json()["events"]
    assert "Trinity" not in {e["event_key"] for e in events}

    assert client.delete("/temporale/Trinity").status_code == 404


def test_delete_ferial_event(client, store, ferial):
    store.core([])
    path = store.readings(C.WEEKDAYS_LENT, "en", {"LentWeekday1Monday": ferial, "AshWednesday": {}})
    r = client.delete("/temporale/LentWeekday1Monday")
    assert r.status_code == 200
    assert r.json()["type"] == "ferial"
    assert store.read(path) == {"AshWednesday": {}}


def test_delete_unknown_key_is_404(client, store):
    store.core([_event("Trinity")])
    assert client.delete("/temporale/NoSuchFeast").status_code == 404


def test_delete_without_key_is_400(client, store):
    store.core([])
    r = client.delete("/temporale")
    assert r.status_code == 400


# --- Access control / health -------------------------------------------------

def test_writes_need_a_bearer_token(client, store, monkeypatch):
    monkeypatch.setenv("LITCAL_DEV_AUTH_BYPASS", "0")
    monkeypatch.setenv("LITCAL_WRITE_TOKEN", "s3cret")
    store.core([])

    assert client.patch("/temporale", json={"events": []}).status_code == 401
    r = client.patch("/temporale", json={"events": []}, headers={"Authorization": "Bearer wrong"})
    assert r.status_code == 401
    assert r.json()["type"] == "unauthorized"
    r = client.patch("/temporale", json={"events": []}, headers={"Authorization": "Bearer s3cret"})
    assert r.status_code == 200
    assert client.get("/temporale").status_code == 200


def test_health(client, monkeypatch):
    monkeypatch.setenv("LITCAL_ENV", "test")
    assert client.get("/health").json() == {"ok": True, "env": "test"}


def test_get_skips_unreadable_year_files(client, store, seeded_locales, festive):
    store.core([_event("Trinity")])
    store.readings(C.SUNDAYS_SOLEMNITIES, "en", {"Trinity": festive}, "A")
    store.readings_path(C.SUNDAYS_SOLEMNITIES, "en", "B").mkdir(parents=True)

    r = client.get("/temporale", headers=EN)

    assert r.status_code == 200
    assert r.json()["events"][0]["readings"] == {"annum_a": festive}


@pytest.mark.parametrize("route", [put_temporale_route, patch_temporale_route])
def test_write_handlers_run_in_the_threadpool(route):
    # File IO is blocking; only the body read is awaited, in a dependency.
    assert not inspect.iscoroutinefunction(route)
