"""
Location bar handling for WebBLE.
Turns location bar text into loadable URLs and decides what a reload should do.
"""

import logging
import re
from urllib.parse import urlparse

from webble.bookmarks import BLANK_URL

logger = logging.getLogger(__name__)


def normalize_location(text):
    """Convert location bar text into a URL.

    Anything without an http or https prefix is treated as an https address.

    Args:
        text: Text typed into the location bar

    Returns:
        str: The URL to load, or None if the text cannot be made into one
    """
    location = (text or '').strip()
    if not location:
        return None

    if not re.match(r'^https?://', location):
        location = f"https://{location}"

    parsed = urlparse(location)
    if not parsed.netloc or re.search(r'\s', location):
        logger.warning(f"Failed to convert location {location} into a URL")
        return None
    return location


def reload_target(current_url, location_text):
    """Decide what the reload button should do.

    A blank page with text in the location bar means the last load failed
    before anything was shown, so the typed location is loaded again.

    Args:
        current_url: URL of the page in the web view, if any
        location_text: Current location bar text

    Returns:
        str: Location to load, or None to reload the current page
    """
    if (current_url or BLANK_URL) == BLANK_URL and location_text:
        return normalize_location(location_text)
    return None
