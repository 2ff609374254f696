"""
Preference storage and migration for WebBLE.
Provides the key-value store contract, schema migration and session preferences.
"""

from .store import KeyValueStore, MemoryStore, ConfigObjStore
from .migration import (
    PrefKey,
    DefaultsError,
    MigrationEngine,
    build_patch_table,
    load_default_patches,
)
from .session import BrowserPreferences

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "ConfigObjStore",
    "PrefKey",
    "DefaultsError",
    "MigrationEngine",
    "build_patch_table",
    "load_default_patches",
    "BrowserPreferences",
]
