"""Bookmark store ordering, deduplication and selection tests."""

import pytest

from webble.bookmarks import Bookmark, BookmarkError, BookmarkStore, is_absolute_url

from factories import A, B, C


def test_add_preserves_order_and_drops_duplicates() -> None:
    store = BookmarkStore()
    store.add([A, B])
    store.add([Bookmark("Renamed", A.url), C, B])

    assert store.bookmarks == (A, B, C)
    assert store.bookmarks[0].title == "Alpha"


def test_repeated_urls_never_duplicate_entries() -> None:
    store = BookmarkStore()
    for _ in range(3):
        store.add([C, A, C])
        store.merge_from_raw([B.to_raw(), A.to_raw(), C.to_raw()])

    urls = [bookmark.url for bookmark in store]
    assert len(urls) == len(set(urls)) == 3
    assert urls == [C.url, A.url, B.url]


def test_merge_from_raw_skips_malformed_records(caplog) -> None:
    store = BookmarkStore()
    store.merge_from_raw([
        {"title": "No url"},
        {"url": "https://untitled.example/"},
        {"title": "Relative", "url": "/just/a/path"},
        "not a mapping",
        A.to_raw(),
    ])

    assert store.bookmarks == (A,)
    assert "Skipping malformed bookmark" in caplog.text


def test_bookmark_requires_title_and_absolute_url() -> None:
    with pytest.raises(BookmarkError):
        Bookmark("", "https://example.com/")
    with pytest.raises(BookmarkError):
        Bookmark("Example", "example.com")
    assert is_absolute_url("https://example.com/path?q=1")
    assert is_absolute_url("mailto:someone@example.com")
    assert not is_absolute_url("https://")
    assert not is_absolute_url("https://exa mple.com")


def test_contains_by_url_or_bookmark() -> None:
    store = BookmarkStore([A])
    assert A.url in store
    assert Bookmark("Other title", A.url) in store
    assert B.url not in store
    assert len(store) == 1


def test_bookmark_at_out_of_range_returns_none(caplog) -> None:
    store = BookmarkStore([A, B])

    assert store.bookmark_at(1) == B
    assert store.bookmark_at(2) is None
    assert store.bookmark_at(-1) is None
    assert "out of range" in caplog.text


def test_add_page_rejects_blank_pages() -> None:
    store = BookmarkStore()

    assert store.add_page("", "https://example.com/") is False
    assert store.add_page("Blank", "about:blank") is False
    assert store.add_page("Nothing", None) is False
    assert store.add_page("Example", "https://example.com/") is True
    assert store.to_raw() == [{"title": "Example", "url": "https://example.com/"}]
