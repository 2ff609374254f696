"""
Bookmark management for WebBLE.
Contains the bookmark record and the ordered, URL-deduplicated bookmark store.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

BLANK_URL = "about:blank"

# Schemes that must carry a host to be usable as a bookmark target
_HIERARCHICAL_SCHEMES = {'http', 'https', 'ftp', 'ws', 'wss'}


class BookmarkError(ValueError):
    """Exception raised for bookmark records that cannot be used."""
    pass


def is_absolute_url(url: str) -> bool:
    """Check whether a string is an absolute URI.

    Args:
        url: Candidate URL string

    Returns:
        True if the URL has a scheme (and a host for web schemes)
    """
    if not url or any(ch.isspace() for ch in url):
        return False
    parsed = urlparse(url)
    if not parsed.scheme:
        return False
    if parsed.scheme.lower() in _HIERARCHICAL_SCHEMES:
        return bool(parsed.netloc)
    return True


@dataclass(frozen=True)
class Bookmark:
    """A titled link. Two bookmarks are the same entry when their URLs match."""
    title: str
    url: str

    def __post_init__(self):
        if not isinstance(self.title, str) or not self.title:
            raise BookmarkError(f"Bookmark for {self.url!r} has no title")
        if not isinstance(self.url, str) or not is_absolute_url(self.url):
            raise BookmarkError(f"Bookmark URL is not absolute: {self.url!r}")

    @classmethod
    def from_raw(cls, raw: Mapping[str, str]) -> "Bookmark":
        """Decode a raw ``{"title": ..., "url": ...}`` record.

        Args:
            raw: Mapping read from a preference store or defaults table

        Returns:
            The decoded bookmark

        Raises:
            BookmarkError: If the record is not a mapping or lacks a field
        """
        if not isinstance(raw, Mapping):
            raise BookmarkError(f"Bookmark record is not a mapping: {raw!r}")
        if 'url' not in raw:
            raise BookmarkError(f"Bookmark record has no url: {dict(raw)!r}")
        if 'title' not in raw:
            raise BookmarkError(f"Bookmark record has no title: {dict(raw)!r}")
        return cls(title=raw['title'], url=raw['url'])

    def to_raw(self) -> dict[str, str]:
        return {'title': self.title, 'url': self.url}


class BookmarkStore:
    """Ordered bookmark collection holding at most one entry per URL.

    The first time a URL is seen fixes its position; later submissions of the
    same URL are dropped, whatever their title.
    """

    def __init__(self, bookmarks: Iterable[Bookmark] = ()):
        self._bookmarks: list[Bookmark] = []
        self._urls: set[str] = set()
        self.add(bookmarks)

    @property
    def bookmarks(self) -> tuple[Bookmark, ...]:
        """Current bookmarks in first-seen order."""
        return tuple(self._bookmarks)

    def __len__(self) -> int:
        return len(self._bookmarks)

    def __iter__(self) -> Iterator[Bookmark]:
        return iter(tuple(self._bookmarks))

    def __contains__(self, url: object) -> bool:
        if isinstance(url, Bookmark):
            url = url.url
        return url in self._urls

    def add(self, bookmarks: Iterable[Bookmark]) -> None:
        """Append bookmarks whose URL is not already present."""
        for bookmark in bookmarks:
            if bookmark.url in self._urls:
                logger.debug(f"Skipping duplicate bookmark: {bookmark.url}")
                continue
            self._urls.add(bookmark.url)
            self._bookmarks.append(bookmark)

    def merge_from_raw(self, raw_dicts: Iterable[Mapping[str, str]]) -> None:
        """Decode raw bookmark records and add the well-formed ones.

        Malformed records are logged and skipped.

        Args:
            raw_dicts: Records in ``{"title": ..., "url": ...}`` form
        """
        decoded = []
        for raw in raw_dicts:
            try:
                decoded.append(Bookmark.from_raw(raw))
            except BookmarkError as e:
                logger.warning(f"Skipping malformed bookmark: {e}")
        self.add(decoded)

    def add_page(self, title: str | None, url: str | None) -> bool:
        """Bookmark the page currently being displayed.

        Args:
            title: Page title as reported by the web view
            url: Page URL as reported by the web view

        Returns:
            True if the page was bookmarked or was already present,
            False if the page cannot be bookmarked
        """
        if not title or not url or url == BLANK_URL:
            logger.warning(f"Unable to bookmark page with title {title!r} and url {url!r}")
            return False
        try:
            bookmark = Bookmark(title=title, url=url)
        except BookmarkError as e:
            logger.warning(f"Unable to bookmark page: {e}")
            return False
        self.add([bookmark])
        logger.info(f"Bookmarked {url}")
        return True

    def bookmark_at(self, index: int) -> Bookmark | None:
        """Get the bookmark at a list position, as selected in the bookmark list.

        Args:
            index: Zero-based row index

        Returns:
            The bookmark, or None if the index is out of range
        """
        if index < 0 or index >= len(self._bookmarks):
            logger.error(f"Selected bookmark {index} is out of range (have {len(self._bookmarks)})")
            return None
        return self._bookmarks[index]

    def to_raw(self) -> list[dict[str, str]]:
        """Serialize bookmarks to raw records for a preference store."""
        return [bookmark.to_raw() for bookmark in self._bookmarks]
