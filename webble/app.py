"""
Startup sequence and command line interface for WebBLE.
Loads configuration, migrates stored preferences and exposes bookmark tools.
"""

import argparse
import logging
import sys
from dataclasses import dataclass

from webble import WEBBLE_VERSION
from webble.bookmarks import BookmarkStore
from webble.chrome import ChromeVisibilityController
from webble.config import WebbleConfig
from webble.navigation import normalize_location
from webble.preferences import (
    BrowserPreferences,
    ConfigObjStore,
    DefaultsError,
    KeyValueStore,
    MigrationEngine,
    PrefKey,
    load_default_patches,
)

logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """Everything the browser window needs once startup has finished."""
    config: WebbleConfig
    store: KeyValueStore
    bookmarks: BookmarkStore
    preferences: BrowserPreferences
    chrome: ChromeVisibilityController

    def add_bookmark(self, title, url):
        """Bookmark a page and persist the bookmark list."""
        if not self.bookmarks.add_page(title, url):
            return False
        self.store.set_array(PrefKey.BOOKMARKS.value, self.bookmarks.to_raw())
        self.store.sync()
        return True


def start_session(config, store=None):
    """Run the startup sequence: open preferences, migrate them, build controllers.

    Args:
        config: Loaded WebbleConfig
        store: Preference store to use instead of the configured file

    Returns:
        BrowserSession: The ready session

    Raises:
        DefaultsError: If the default patch table cannot be loaded
    """
    prefs_config = config.preferences
    if store is None:
        store = ConfigObjStore(prefs_config.store_path)

    defaults = load_default_patches(prefs_config.defaults_file or None)

    engine = MigrationEngine()
    engine.migrate(store, defaults, prefs_config.schema_version)

    chrome_config = config.chrome
    chrome = ChromeVisibilityController(
        show_bars_on_edge_flick=chrome_config.show_bars_on_edge_flick,
        edge_threshold=chrome_config.edge_threshold,
        bottom_margin=chrome_config.bottom_margin,
    )

    logger.info(f"Session ready with {len(engine.bookmarks)} bookmarks")
    return BrowserSession(
        config=config,
        store=store,
        bookmarks=engine.bookmarks,
        preferences=BrowserPreferences(store),
        chrome=chrome,
    )


def _cmd_migrate(session, args):
    print(f"Preferences at version {session.config.preferences.schema_version}, "
          f"{len(session.bookmarks)} bookmarks")
    return 0


def _cmd_bookmarks(session, args):
    for index, bookmark in enumerate(session.bookmarks):
        print(f"{index:3d}  {bookmark.title}  <{bookmark.url}>")
    return 0


def _cmd_add(session, args):
    url = normalize_location(args.url)
    if url is None or not session.add_bookmark(args.title, url):
        print(f"Unable to bookmark {args.url!r}", file=sys.stderr)
        return 1
    print(f"Bookmarked {url}")
    return 0


def _cmd_open(session, args):
    if args.index is not None:
        bookmark = session.bookmarks.bookmark_at(args.index)
        location = bookmark.url if bookmark else None
    else:
        general = session.config.general
        location = session.preferences.initial_location(
            args.url and normalize_location(args.url),
            general.app_version,
            general.home_page_base,
        )
    if location is None:
        return 1
    print(location)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="WebBLE preference and bookmark tools")
    parser.add_argument("--config", "-c", default=None,
                        help="Path to configuration file")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {WEBBLE_VERSION}")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("migrate", help="Bring stored preferences up to date")
    subparsers.add_parser("bookmarks", help="List bookmarks")

    add_parser = subparsers.add_parser("add", help="Bookmark a page")
    add_parser.add_argument("title", help="Bookmark title")
    add_parser.add_argument("url", help="Page location")

    open_parser = subparsers.add_parser("open", help="Print the location the browser would load")
    open_parser.add_argument("url", nargs="?", default=None,
                             help="Location given on launch")
    open_parser.add_argument("--bookmark", "-b", dest="index", type=int, default=None,
                             help="Open the bookmark at this position")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    config = WebbleConfig(args.config)
    try:
        session = start_session(config)
    except DefaultsError as e:
        logger.critical(f"Cannot start: {e}")
        return 2

    commands = {
        "migrate": _cmd_migrate,
        "bookmarks": _cmd_bookmarks,
        "add": _cmd_add,
        "open": _cmd_open,
    }
    handler = commands.get(args.command or "migrate")
    return handler(session, args)


if __name__ == "__main__":
    sys.exit(main())
