"""
Key-value preference stores for WebBLE.
Defines the store contract used by migration and session preferences, with an
in-memory implementation and a ConfigObj INI file implementation.
"""

import copy
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from configobj import ConfigObj, ConfigObjError, Section

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Get/set contract for persisted preferences.

    Getters return None when a key is absent or its value has the wrong shape.
    Setters may buffer; ``sync`` makes buffered changes durable.
    """

    def get_int(self, key: str) -> int | None: ...

    def get_string(self, key: str) -> str | None: ...

    def get_bool(self, key: str) -> bool | None: ...

    def get_string_map_list(self, key: str) -> list[dict[str, str]] | None: ...

    def set_int(self, key: str, value: int) -> None: ...

    def set_string(self, key: str, value: str) -> None: ...

    def set_bool(self, key: str, value: bool) -> None: ...

    def set_array(self, key: str, value: Sequence[Mapping[str, str]]) -> None: ...

    def sync(self) -> None: ...


class MemoryStore:
    """Dictionary backed store, used for tests and ephemeral sessions."""

    def __init__(self, initial: Mapping[str, object] | None = None):
        self._values: dict[str, object] = copy.deepcopy(dict(initial or {}))
        self.sync_count = 0

    def snapshot(self) -> dict[str, object]:
        """Copy of everything currently stored."""
        return copy.deepcopy(self._values)

    def get_int(self, key: str) -> int | None:
        value = self._values.get(key)
        # bool is an int subclass but never a stored version
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    def get_string(self, key: str) -> str | None:
        value = self._values.get(key)
        return value if isinstance(value, str) else None

    def get_bool(self, key: str) -> bool | None:
        value = self._values.get(key)
        return value if isinstance(value, bool) else None

    def get_string_map_list(self, key: str) -> list[dict[str, str]] | None:
        value = self._values.get(key)
        if not isinstance(value, list):
            return None
        return [dict(entry) for entry in value if isinstance(entry, Mapping)]

    def set_int(self, key: str, value: int) -> None:
        self._values[key] = int(value)

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def set_bool(self, key: str, value: bool) -> None:
        self._values[key] = bool(value)

    def set_array(self, key: str, value: Sequence[Mapping[str, str]]) -> None:
        self._values[key] = [dict(entry) for entry in value]

    def sync(self) -> None:
        self.sync_count += 1


class ConfigObjStore:
    """Preference store persisted as an INI file through ConfigObj.

    Scalars are plain keys. Arrays of string maps are stored as a section of
    numbered subsections, one per entry, in array order:

        version = 1
        [bookmarks]
        [[0]]
        title = Example
        url = https://example.com
    """

    def __init__(self, path: Path | str):
        """Open (or prepare to create) a preference file.

        An unparsable file is moved aside to ``<name>.corrupt`` and the store
        starts out empty.

        Args:
            path: Path to the INI file
        """
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._config = self._open()
        except ConfigObjError as e:
            corrupt_path = self.path.with_name(self.path.name + ".corrupt")
            logger.error(f"Failed to parse preference file {self.path}: {e}; moved it to {corrupt_path}")
            self.path.replace(corrupt_path)
            self._config = self._open()
        logger.debug(f"Opened preference store at {self.path}")

    def _open(self) -> ConfigObj:
        # Stored titles and URLs may contain "%(name)s", which is not a reference
        return ConfigObj(str(self.path), encoding='utf-8', interpolation=False)

    def _scalar(self, key: str) -> str | None:
        value = self._config.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            logger.warning(f"Preference '{key}' is not a scalar value, ignoring it")
            return None
        return value

    def get_int(self, key: str) -> int | None:
        value = self._scalar(key)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Preference '{key}' is not an integer: {value!r}")
            return None

    def get_string(self, key: str) -> str | None:
        return self._scalar(key)

    def get_bool(self, key: str) -> bool | None:
        if self._scalar(key) is None:
            return None
        try:
            return self._config.as_bool(key)
        except ValueError:
            logger.warning(f"Preference '{key}' is not a boolean: {self._config[key]!r}")
            return None

    def get_string_map_list(self, key: str) -> list[dict[str, str]] | None:
        value = self._config.get(key)
        if value is None:
            return None
        if not isinstance(value, Section):
            logger.warning(f"Preference '{key}' is not a list of records, ignoring it")
            return None

        entries = []
        for name in value.sections:
            entry = value[name]
            entries.append({k: v for k, v in entry.items() if isinstance(v, str)})
        return entries

    def _replace(self, key: str, value: str | dict) -> None:
        # ConfigObj tracks scalars and sections separately, so a key that
        # changes kind must be removed first
        if key in self._config:
            del self._config[key]
        self._config[key] = value

    def set_int(self, key: str, value: int) -> None:
        self._replace(key, str(int(value)))

    def set_string(self, key: str, value: str) -> None:
        self._replace(key, str(value))

    def set_bool(self, key: str, value: bool) -> None:
        self._replace(key, 'True' if value else 'False')

    def set_array(self, key: str, value: Sequence[Mapping[str, str]]) -> None:
        self._replace(key, {str(index): dict(entry) for index, entry in enumerate(value)})

    def sync(self) -> None:
        """Write the preference file."""
        self._config.write()
        logger.debug(f"Saved preferences to {self.path}")
