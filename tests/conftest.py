from __future__ import annotations

from pathlib import Path

import pytest
from ebooklib import epub

# Smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)

CHAPTERS = [
    (
        "chap01",
        "text/chap01.xhtml",
        "Introduction",
        "<h1>Introduction</h1><p>Hello   there.</p><p>Second paragraph.</p>",
    ),
    (
        "chap02",
        "text/chap02.xhtml",
        None,
        "<p>Line1<br/>Line2</p>",
    ),
    (
        "chap03",
        "text/chap03.xhtml",
        "The End",
        "<div><p>Goodbye.</p></div>",
    ),
]


def build_epub(
    path: Path,
    *,
    title: str = "Test Book",
    authors: tuple[str, ...] = ("Jane Doe",),
    date: str | None = "2020-05-01",
    with_cover: bool = True,
) -> Path:
    """Write a small EPUB with ebooklib and return its path."""
    book = epub.EpubBook()
    book.set_identifier("test-book-id")
    book.set_title(title)
    book.set_language("en")
    for author in authors:
        book.add_author(author)
    book.add_metadata("DC", "publisher", "Acme Press")
    book.add_metadata("DC", "identifier", "urn:isbn:9780306406157")
    book.add_metadata("DC", "description", "A small test book.")
    book.add_metadata("DC", "subject", "Fiction")
    book.add_metadata("DC", "subject", "Testing")
    if date is not None:
        book.add_metadata("DC", "date", date)

    if with_cover:
        book.set_cover("images/cover.png", PNG_BYTES, create_page=False)

    items = []
    toc = []
    for uid, file_name, chapter_title, body in CHAPTERS:
        item = epub.EpubHtml(uid=uid, file_name=file_name, title=chapter_title or "", lang="en")
        item.content = f"<html><head><title>x</title></head><body>{body}</body></html>"
        book.add_item(item)
        items.append(item)
        if chapter_title:
            toc.append(epub.Link(file_name, chapter_title, uid))

    book.toc = toc
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = items

    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def epub_path(tmp_path: Path) -> Path:
    return build_epub(tmp_path / "book.epub")
