"""
Configuration management for WebBLE.
Loads the INI configuration file, validates it against config.spec and exposes
values through dot notation.
"""

import logging
import os
from pathlib import Path

from configobj import ConfigObj, Section, flatten_errors
from validate import Validator

logger = logging.getLogger(__name__)

SPEC_PATH = Path(__file__).parent / 'config.spec'
CONFIG_ENV_VAR = 'WEBBLE_CONFIG'


class ConfigSection:
    """Wrapper for ConfigObj sections to support dot notation access."""

    def __init__(self, section: Section) -> None:
        """Wrap a validated ConfigObj section.

        Args:
            section: Section such as ``[chrome]`` or ``[preferences]``
        """
        self._section = section

    def __getattr__(self, name: str) -> list | str | int | float | bool:
        """Get a value as an attribute, e.g. ``config.chrome.bottom_margin``.

        Args:
            name: Configuration key name

        Returns:
            The validated value, or a ConfigSection for a nested section

        Raises:
            AttributeError: If the key doesn't exist or starts with '_'
        """
        if name.startswith('_'):
            raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

        value = self._section.get(name)
        if value is None:
            raise AttributeError(f"No configuration key '{name}'")

        if isinstance(value, Section):
            return ConfigSection(value)
        return value

    def __getitem__(self, key: str) -> list | str | int | float | bool:
        """Dictionary-style access, raising KeyError for unknown keys."""
        value = self._section[key]
        if isinstance(value, Section):
            return ConfigSection(value)
        return value

    def __setitem__(self, key: str, value: list | str | int | float | bool) -> None:
        """Change a value in memory; call ``WebbleConfig.save`` to persist it."""
        self._section[key] = value


class WebbleConfig:
    """
    Configuration manager for WebBLE.

    Provides dot-notation access to values loaded from an INI file and
    validated against ``config.spec``. Searches for the file in order of
    precedence: explicit path, environment variable, user config directory,
    current directory.

    Example:
        config = WebbleConfig()
        version = config.preferences.schema_version
        config.chrome['show_bars_on_edge_flick'] = True
        config.save()
    """

    def __init__(self, path: Path | str | None = None) -> None:
        """Load and validate configuration.

        Args:
            path: Config file to use instead of searching the default locations
        """
        configfile = Path(path).expanduser() if path else self._get_config_path()
        self._config_file_path = configfile
        configfile.parent.mkdir(parents=True, exist_ok=True)

        self._config = ConfigObj(str(configfile), configspec=str(SPEC_PATH), encoding='utf-8')
        self._validate()

        # Write config to ensure all defaults are saved
        self._config.write()
        logger.info(f"Loaded configuration from: {configfile}")

    def _validate(self) -> None:
        """Validate against config.spec, replacing invalid values with defaults."""
        validator = Validator()
        result = self._config.validate(validator, preserve_errors=True)
        if result is True:
            return

        # Drop invalid values and validate again so their defaults apply
        for sections, key, error in flatten_errors(self._config, result):
            if key is None:
                continue
            name = '.'.join(sections + [key])
            logger.warning(f"Invalid configuration value for {name}: {error}; using default")
            section = self._config
            for section_name in sections:
                section = section[section_name]
            del section[key]
        self._config.validate(validator)

    def __getattr__(self, name: str) -> list | str | int | float | bool:
        """Get a top-level section (wrapped in ConfigSection) or value.

        Args:
            name: Section or key name

        Raises:
            AttributeError: If the name doesn't exist or starts with '_'
        """
        if name.startswith('_'):
            raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

        value = self._config.get(name)
        if value is None:
            raise AttributeError(f"No configuration key '{name}'")

        if isinstance(value, Section):
            return ConfigSection(value)
        return value

    def _get_config_path(self) -> Path:
        """Find configuration file in order of precedence.

        Returns:
            Path: Path of the first existing config file, or a new one in the
            user config directory
        """
        search_locations = []

        if env_path := os.environ.get(CONFIG_ENV_VAR):
            search_locations.append(Path(env_path).expanduser())

        user_config_dir = Path.home() / '.config' / 'webble'
        search_locations.append(user_config_dir / 'config.ini')

        search_locations.append(Path('config.ini'))

        for config_path in search_locations:
            if config_path.exists():
                logger.info(f"Using config file: {config_path}")
                return config_path
            logger.debug(f"Config not found at: {config_path}")

        user_config_dir.mkdir(parents=True, exist_ok=True)
        default_path = user_config_dir / 'config.ini'
        default_path.touch()
        logger.info(f"Created new config file at: {default_path}")
        return default_path

    def save(self) -> None:
        """Save current configuration to file."""
        self._config.write()

    def reload(self) -> None:
        """Reload configuration from file."""
        self.__init__(self._config_file_path)

    @property
    def config_file_path(self) -> Path:
        """Path of the configuration file in use."""
        return self._config_file_path
