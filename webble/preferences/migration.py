"""
Preference schema migration for WebBLE.
Brings a persisted preference store up to the current schema version by
applying the bundled, versioned default patches in order.
"""

import json
import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from webble.bookmarks import BookmarkStore
from webble.preferences.store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).parent.parent / 'defaults.json'


class PrefKey(str, Enum):
    """Keys of the persisted preference record."""
    BOOKMARKS = 'bookmarks'
    CONSOLE_OPEN = 'consoleOpen'
    LAST_LOCATION = 'lastLocation'
    VERSION = 'version'

    @classmethod
    def lookup(cls, name: str) -> "PrefKey | None":
        try:
            return cls(name)
        except ValueError:
            return None


class DefaultsError(Exception):
    """Exception raised when the bundled default patch table is unusable."""
    pass


DefaultPatchTable = Mapping[int, Mapping[str, object]]


def build_patch_table(data: Mapping[str, object]) -> DefaultPatchTable:
    """Build an immutable patch table from decoded defaults data.

    Args:
        data: Mapping of stringified version to patch payload

    Returns:
        Read-only mapping of integer version to read-only patch

    Raises:
        DefaultsError: If the data is not a mapping or a version key is not an integer
    """
    if not isinstance(data, Mapping):
        raise DefaultsError(f"Default patch table must be a mapping, got {type(data).__name__}")

    table = {}
    for key, patch in data.items():
        try:
            version = int(key)
        except (TypeError, ValueError):
            raise DefaultsError(f"Default patch table has a non-integer version: {key!r}") from None
        if version < 0:
            raise DefaultsError(f"Default patch table has a negative version: {key!r}")
        if not isinstance(patch, Mapping):
            logger.warning(f"Ignoring default patch {version}: not a mapping")
            continue
        table[version] = MappingProxyType(dict(patch))
    return MappingProxyType(table)


def load_default_patches(path: Path | str | None = None) -> DefaultPatchTable:
    """Load the default patch table from a JSON file.

    Args:
        path: Path to the table, defaults to the one bundled with the package

    Returns:
        The immutable default patch table

    Raises:
        DefaultsError: If the file is missing or cannot be parsed
    """
    path = Path(path) if path else DEFAULTS_PATH
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise DefaultsError(f"Default patch table not found: {path}") from None
    except (OSError, json.JSONDecodeError) as e:
        raise DefaultsError(f"Failed to read default patch table {path}: {e}") from e

    table = build_patch_table(data)
    logger.debug(f"Loaded {len(table)} default patches from {path}")
    return table


class MigrationEngine:
    """Applies versioned default patches to a preference store.

    The engine merges prior bookmarks first so that user data keeps its
    position ahead of bundled defaults sharing the same URL. Each call to
    ``migrate`` starts from an empty bookmark collection; the result of the
    last call stays available as ``bookmarks``.
    """

    def __init__(self):
        self.bookmarks = BookmarkStore()

    def migrate(self, store: KeyValueStore, defaults: DefaultPatchTable, current_version: int) -> None:
        """Bring the store up to ``current_version``.

        Args:
            store: Persisted preference store
            defaults: Default patch table
            current_version: Schema version this build expects

        Raises:
            ValueError: If current_version is negative
        """
        if current_version < 0:
            raise ValueError(f"Preference version must be >= 0, got {current_version}")

        self.bookmarks = BookmarkStore()
        stored_version = store.get_int(PrefKey.VERSION.value)
        prior = store.get_string_map_list(PrefKey.BOOKMARKS.value)
        if prior is not None:
            self.bookmarks.merge_from_raw(prior)

        start = 0 if stored_version is None else stored_version + 1
        if stored_version is not None and stored_version > current_version:
            logger.warning(f"Stored preferences version {stored_version} is newer than {current_version}")

        for version in range(start, current_version + 1):
            patch = defaults.get(version)
            if patch is None:
                continue
            logger.info(f"Applying default preferences for version {version}")
            self._apply_patch(version, patch)

        store.set_int(PrefKey.VERSION.value, current_version)
        store.set_array(PrefKey.BOOKMARKS.value, self.bookmarks.to_raw())
        store.sync()
        logger.debug(f"Preferences at version {current_version} with {len(self.bookmarks)} bookmarks")

    def _apply_patch(self, version: int, patch: Mapping[str, object]) -> None:
        for name, value in patch.items():
            key = PrefKey.lookup(name)
            if key is None:
                logger.debug(f"Ignoring unknown key '{name}' in default patch {version}")
                continue

            if key is PrefKey.BOOKMARKS:
                if not isinstance(value, list):
                    logger.error(f"Default patch {version} has malformed bookmarks, skipping")
                    continue
                self.bookmarks.merge_from_raw(value)
            else:
                logger.debug(f"Key '{name}' has no default patch effect")
