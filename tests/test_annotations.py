"""Tests for core/annotations.py, core/storage.py and core/preferences.py."""

import json

import pytest

from core.annotations import (
    ANNOTATIONS_KEY,
    Annotation,
    AnnotationStore,
    InteractionStatus,
)
from core.preferences import Preferences
from core.storage import KeyValueStore


# ============================================================================
# Key-value store
# ============================================================================

def test_kv_store_round_trip(kv_store):
    assert kv_store.get("missing") is None
    assert kv_store.get("missing", "fallback") == "fallback"
    kv_store.set("k", "v1")
    kv_store.set("k", "v2")
    assert kv_store.get("k") == "v2"


def test_kv_store_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "dir" / "merinfo.db"
    KeyValueStore(path).set("k", "åäö")
    assert KeyValueStore(path).get("k") == "åäö"


# ============================================================================
# Annotation store
# ============================================================================

def test_get_returns_default_for_unknown_company(kv_store):
    store = AnnotationStore(kv_store)
    a = store.get("556677-8899")
    assert a == Annotation()
    assert a.status is InteractionStatus.NONE
    assert a.comment == ""
    assert a.is_favorite is False
    assert "556677-8899" not in store


def test_toggle_favorite_creates_annotation_with_defaults(kv_store):
    store = AnnotationStore(kv_store)
    a = store.toggle_favorite("556677-8899")
    assert a == Annotation(status=InteractionStatus.NONE, comment="", is_favorite=True)
    assert len(store) == 1


def test_merge_only_changes_given_fields(kv_store):
    store = AnnotationStore(kv_store)
    store.merge("556677-8899", is_favorite=True)
    store.merge("556677-8899", comment="Ring efter lunch")
    a = store.get("556677-8899")
    assert a.is_favorite is True
    assert a.comment == "Ring efter lunch"
    assert a.status is InteractionStatus.NONE


def test_merge_accepts_mapping_and_persisted_names(kv_store):
    store = AnnotationStore(kv_store)
    store.merge("1", {"status": "callback", "isFavorite": True})
    a = store.get("1")
    assert a.status is InteractionStatus.CALLBACK
    assert a.is_favorite is True


def test_merge_rejects_unknown_fields_and_statuses(kv_store):
    store = AnnotationStore(kv_store)
    with pytest.raises(ValueError):
        store.merge("1", rating=5)
    with pytest.raises(ValueError):
        store.merge("1", status="maybe")
    assert "1" not in store


def test_merge_none_comment_clears_it(kv_store):
    store = AnnotationStore(kv_store)
    store.merge("1", comment="Ring efter lunch")
    assert store.merge("1", comment=None).comment == ""


def test_every_merge_is_written_through(kv_store):
    store = AnnotationStore(kv_store)
    store.merge("1", status=InteractionStatus.INTERESTED)
    stored = json.loads(kv_store.get(ANNOTATIONS_KEY))
    assert stored == {"1": {"status": "interested", "comment": "", "isFavorite": False}}

    reloaded = AnnotationStore(kv_store)
    assert reloaded.get("1").status is InteractionStatus.INTERESTED


def test_corrupt_persisted_value_starts_empty(kv_store, caplog):
    kv_store.set(ANNOTATIONS_KEY, "{not json")
    store = AnnotationStore(kv_store)
    assert len(store) == 0
    assert "corrupt" in caplog.text


def test_non_object_persisted_value_starts_empty(kv_store):
    kv_store.set(ANNOTATIONS_KEY, "[1, 2, 3]")
    assert len(AnnotationStore(kv_store)) == 0


def test_malformed_entries_are_skipped_or_defaulted(kv_store):
    kv_store.set(ANNOTATIONS_KEY, json.dumps({
        "1": "oops",
        "2": {"status": "unknown", "comment": 7, "isFavorite": "yes"},
        "3": {"status": "callback", "isFavorite": True},
    }))
    store = AnnotationStore(kv_store)
    assert "1" not in store
    assert store.get("2") == Annotation()
    assert store.get("3") == Annotation(InteractionStatus.CALLBACK, "", True)


def test_snapshot_is_isolated_from_later_edits(kv_store):
    store = AnnotationStore(kv_store)
    store.merge("1", is_favorite=True)
    snapshot = store.snapshot()
    store.merge("1", is_favorite=False)
    store.merge("2", is_favorite=True)
    assert snapshot.get("1").is_favorite is True
    assert snapshot.get("2") == Annotation()
    assert snapshot.favorites() == ["1"]


# ============================================================================
# Preferences
# ============================================================================

def test_preferences_defaults(kv_store):
    prefs = Preferences(kv_store)
    assert prefs.view_mode == "grid"
    assert prefs.language == "ru"
    assert prefs.theme == "system"


def test_preferences_persist(kv_store):
    prefs = Preferences(kv_store)
    prefs.view_mode = "list"
    prefs.language = "sv"
    prefs.theme = "dark"
    again = Preferences(kv_store)
    assert (again.view_mode, again.language, again.theme) == ("list", "sv", "dark")


def test_preferences_ignore_unknown_stored_values(kv_store):
    kv_store.set("merinfo_view_mode", "table")
    kv_store.set("merinfo_lang", "en")
    prefs = Preferences(kv_store)
    assert prefs.view_mode == "grid"
    assert prefs.language == "ru"


def test_preferences_reject_unknown_values(kv_store):
    with pytest.raises(ValueError):
        Preferences(kv_store).view_mode = "cards"
