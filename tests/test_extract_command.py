from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from epub_reader.commands.extract import get_default_output_dir, parse_chapter_selection
from epub_reader.core.output_writer import OutputWriter
from epub_reader.core.text_extractor import TextExtractor
from epub_reader.models import BookMetadata, Chapter, Image, ParsedBook


def test_parse_chapter_selection() -> None:
    assert parse_chapter_selection("all", 3) == [0, 1, 2]
    assert parse_chapter_selection("1,3,5-7", 10) == [0, 2, 4, 5, 6]
    assert parse_chapter_selection(" 2 , x, 2 ", 5) == [1]
    assert parse_chapter_selection("4-9", 5) == [3, 4]
    assert parse_chapter_selection("0,6", 5) == []


def test_reversed_and_unreadable_selections_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert parse_chapter_selection("5-2, 3, 1-x", 6) == [2]

    assert "reversed chapter range: 5-2" in caplog.text
    assert "unreadable chapter selection" in caplog.text
    assert parse_chapter_selection("2-2", 3) == [1]


def test_default_output_dir() -> None:
    assert get_default_output_dir(Path("/books/My Book (2nd ed).epub")) == Path(
        "/books/My_Book_2nd_ed_chapters"
    )


def test_output_writer_without_paragraph_breaks(tmp_path: Path) -> None:
    chapter = Chapter(
        id="c1",
        title="One",
        href="c1.xhtml",
        sequence_number=0,
        content=b"<p>A</p><p>B</p>",
    )
    book = ParsedBook(metadata=BookMetadata(title="Book", authors=["Jane Doe"]), chapters=[chapter])
    writer = OutputWriter(tmp_path / "out", tmp_path / "book.epub", TextExtractor(paragraph_breaks=False))

    path, metadata = writer.write_chapter(chapter)
    manifest_path = writer.write_manifest(book, [0], [metadata])

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert path.name == "chapter_001.json"
    assert payload["content"] == "A\nB"
    assert payload["paragraph_breaks"] is False
    assert payload["metadata"]["paragraph_count"] == 1

    manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    assert manifest["authors"] == ["Jane Doe"]
    assert manifest["cover_file"] is None


def test_write_cover(tmp_path: Path) -> None:
    writer = OutputWriter(tmp_path, tmp_path / "book.epub")

    assert writer.write_cover(None) is None
    assert writer.write_cover(Image(data=None, mime_type="image/png")) is None
    assert writer.write_cover(Image(data=b"\xff\xd8", mime_type="image/jpeg")).name == "cover.jpg"
    assert writer.write_cover(Image(data=b"\xff\xd8", mime_type="application/x-unknown")).name == "cover.jpg"
