"""Shared fixtures for the WebBLE tests."""

import pytest

from factories import A, B
from webble.preferences import MemoryStore, build_patch_table


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    # Keep config lookups away from the real user directory
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("WEBBLE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def patch_table():
    return build_patch_table({
        "0": {"bookmarks": [A.to_raw()]},
        "1": {"bookmarks": [B.to_raw()]},
    })
