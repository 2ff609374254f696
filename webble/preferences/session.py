"""
Browser session preferences for WebBLE.
Tracks the last visited location and whether the developer console is open.
"""

import logging

from webble.bookmarks import BLANK_URL
from webble.preferences.migration import PrefKey
from webble.preferences.store import KeyValueStore

logger = logging.getLogger(__name__)


class BrowserPreferences:
    """Session level preferences persisted in a key-value store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @property
    def last_location(self) -> str | None:
        return self.store.get_string(PrefKey.LAST_LOCATION.value)

    def record_location(self, url: str | None) -> bool:
        """Remember a location after a navigation finishes.

        Args:
            url: URL of the page that finished loading

        Returns:
            True if the location was stored
        """
        if not url or url == BLANK_URL:
            return False
        self.store.set_string(PrefKey.LAST_LOCATION.value, url)
        self.store.sync()
        logger.debug(f"Recorded last location: {url}")
        return True

    @property
    def console_open(self) -> bool:
        return bool(self.store.get_bool(PrefKey.CONSOLE_OPEN.value))

    @console_open.setter
    def console_open(self, value: bool) -> None:
        self.store.set_bool(PrefKey.CONSOLE_OPEN.value, value)
        self.store.sync()

    def toggle_console(self) -> bool:
        """Flip the console flag and return the new value."""
        self.console_open = not self.console_open
        logger.info(f"Console {'opened' if self.console_open else 'closed'}")
        return self.console_open

    def initial_location(self, initial_url: str | None, app_version: str, home_base: str) -> str:
        """Pick the location to load when the browser view appears.

        Args:
            initial_url: URL the app was launched with, if any
            app_version: Short version string of the app
            home_base: Project home page, the version is appended to it

        Returns:
            The location to load
        """
        if initial_url:
            return initial_url
        if last := self.last_location:
            return last
        return f"{home_base.rstrip('/')}/{app_version}"
