"""
WebBLE - preference and chrome logic for a Web Bluetooth browser shell.

This package provides the parts of the browser that do not depend on a
rendering surface:
- Versioned migration of stored preferences and bookmarks
- Ordered, deduplicated bookmark storage
- Scroll-driven visibility of the navigation and tool bars
- Location bar handling and session preferences
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Application constants
WEBBLE_VERSION = __version__
WEBBLE_LICENSE = __license__


def main():
    """Entry point for the webble command."""
    from webble.app import main as app_main
    return app_main()
