"""Preference migration tests."""

import json
from pathlib import Path

import pytest

from webble.preferences import (
    DefaultsError,
    MemoryStore,
    MigrationEngine,
    build_patch_table,
    load_default_patches,
)

from factories import A, B, C


def _urls(store: MemoryStore) -> list[str]:
    return [entry["url"] for entry in store.get_string_map_list("bookmarks")]


def test_fresh_install_applies_every_patch(store: MemoryStore, patch_table) -> None:
    MigrationEngine().migrate(store, patch_table, 1)

    assert _urls(store) == [A.url, B.url]
    assert store.get_int("version") == 1
    assert store.sync_count == 1


def test_upgrade_keeps_prior_bookmarks_first() -> None:
    store = MemoryStore({"version": 0, "bookmarks": [A.to_raw()]})
    table = build_patch_table({
        "0": {"bookmarks": [B.to_raw()]},
        "1": {"bookmarks": [A.to_raw(), C.to_raw()]},
    })

    MigrationEngine().migrate(store, table, 1)

    assert _urls(store) == [A.url, C.url]
    assert store.get_int("version") == 1


def test_prior_data_wins_over_default_with_same_url() -> None:
    store = MemoryStore({"bookmarks": [{"title": "Mine", "url": A.url}]})

    MigrationEngine().migrate(store, build_patch_table({"0": {"bookmarks": [A.to_raw()]}}), 0)

    assert store.get_string_map_list("bookmarks") == [{"title": "Mine", "url": A.url}]


def test_absent_version_starts_at_zero_but_version_zero_does_not() -> None:
    table = build_patch_table({"0": {"bookmarks": [A.to_raw()]}})

    fresh = MemoryStore()
    MigrationEngine().migrate(fresh, table, 0)
    assert _urls(fresh) == [A.url]

    existing = MemoryStore({"version": 0, "bookmarks": []})
    MigrationEngine().migrate(existing, table, 0)
    assert _urls(existing) == []


def test_migrate_twice_is_idempotent(store: MemoryStore, patch_table) -> None:
    MigrationEngine().migrate(store, patch_table, 1)
    first = store.snapshot()

    MigrationEngine().migrate(store, patch_table, 1)
    assert store.snapshot() == first

    # One engine run twice over the same store
    engine = MigrationEngine()
    engine.migrate(store, patch_table, 1)
    engine.migrate(store, patch_table, 1)
    assert store.snapshot() == first


def test_one_engine_keeps_stores_apart() -> None:
    first = MemoryStore({"version": 1, "bookmarks": [A.to_raw()]})
    second = MemoryStore({"version": 1})
    engine = MigrationEngine()

    engine.migrate(first, build_patch_table({}), 1)
    engine.migrate(second, build_patch_table({}), 1)

    assert second.get_string_map_list("bookmarks") == []
    assert len(engine.bookmarks) == 0
    assert _urls(first) == [A.url]


def test_sparse_patch_table_reaches_current_version() -> None:
    store = MemoryStore({"version": 1})
    table = build_patch_table({"4": {"bookmarks": [C.to_raw()]}})

    MigrationEngine().migrate(store, table, 7)

    assert store.get_int("version") == 7
    assert _urls(store) == [C.url]


def test_unknown_and_malformed_patch_content_is_skipped() -> None:
    store = MemoryStore()
    table = build_patch_table({
        "0": {"themes": ["dark"], "consoleOpen": True, "bookmarks": "oops"},
        "1": "not a patch",
        "2": {"bookmarks": [{"title": "No url"}, B.to_raw()]},
    })

    MigrationEngine().migrate(store, table, 2)

    assert _urls(store) == [B.url]
    assert store.get_int("version") == 2
    assert store.get_bool("consoleOpen") is None


def test_downgrade_applies_nothing_and_records_current_version(caplog) -> None:
    store = MemoryStore({"version": 5, "bookmarks": [A.to_raw()]})

    MigrationEngine().migrate(store, build_patch_table({"1": {"bookmarks": [B.to_raw()]}}), 1)

    assert _urls(store) == [A.url]
    assert store.get_int("version") == 1
    assert "newer than" in caplog.text


def test_negative_version_is_rejected(store: MemoryStore, patch_table) -> None:
    with pytest.raises(ValueError):
        MigrationEngine().migrate(store, patch_table, -1)


def test_patch_table_is_read_only(patch_table) -> None:
    with pytest.raises(TypeError):
        patch_table[2] = {}
    with pytest.raises(TypeError):
        patch_table[0]["bookmarks"] = []


def test_build_patch_table_rejects_bad_versions() -> None:
    with pytest.raises(DefaultsError):
        build_patch_table({"one": {}})
    with pytest.raises(DefaultsError):
        build_patch_table({"-1": {}})
    with pytest.raises(DefaultsError):
        build_patch_table(["0"])


def test_bundled_defaults_load() -> None:
    table = load_default_patches()

    assert 0 in table
    assert all(isinstance(version, int) for version in table)


def test_missing_defaults_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(DefaultsError, match="not found"):
        load_default_patches(tmp_path / "missing.json")


def test_unparsable_defaults_file_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "defaults.json"
    path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(DefaultsError):
        load_default_patches(path)


def test_defaults_file_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "defaults.json"
    path.write_text(json.dumps({"0": {"bookmarks": [A.to_raw()]}}), encoding="utf-8")
    store = MemoryStore()

    MigrationEngine().migrate(store, load_default_patches(path), 0)

    assert _urls(store) == [A.url]
