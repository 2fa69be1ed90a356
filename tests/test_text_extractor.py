from __future__ import annotations

import pytest

from epub_reader.core import text_extractor
from epub_reader.core.text_extractor import TextExtractor, clean_whitespace, strip_tags
from epub_reader.errors import ChapterNotLoadedError
from epub_reader.models.book import Chapter


def _chapter(content: bytes | None) -> Chapter:
    return Chapter(id="c1", title="One", href="text/c1.xhtml", sequence_number=0, content=content)


def test_paragraphs_are_separated_by_one_blank_line() -> None:
    extractor = TextExtractor()

    assert extractor.extract_text_from_html("<p>Hello</p><p>World</p>") == "Hello\n\nWorld"


def test_line_break_becomes_newline() -> None:
    extractor = TextExtractor()

    assert extractor.extract_text_from_html("Line1<br>Line2") == "Line1\nLine2"


def test_nested_blocks_do_not_stack_blank_lines() -> None:
    extractor = TextExtractor()
    html = (
        "<html><body><section><div><h1>Title</h1></div>"
        "<div><p>First</p><blockquote><p>Quoted</p></blockquote></div>"
        "<ul><li>one</li><li>two</li></ul></section></body></html>"
    )

    assert extractor.extract_text_from_html(html) == "Title\n\nFirst\n\nQuoted\n\none\n\ntwo"


def test_inline_elements_do_not_add_delimiters() -> None:
    extractor = TextExtractor()

    text = extractor.extract_text_from_html("<p>Some <em>emphasised</em> and <b>bold</b> words</p>")

    assert text == "Some emphasised and bold words"


def test_whitespace_is_collapsed() -> None:
    extractor = TextExtractor()
    html = "<p>Too    many     spaces</p>\n\n\n\n<p>   padded   </p>Tail<br><br><br><br>End"

    text = extractor.extract_text_from_html(html)

    assert "  " not in text
    assert "\n\n\n" not in text
    assert text.startswith("Too many spaces\n\npadded")
    assert text.endswith("End")


def test_source_line_wrapping_is_not_a_line_break() -> None:
    extractor = TextExtractor()

    assert extractor.extract_text_from_html("<p>wrapped\n   across\n lines</p>") == "wrapped across lines"


def test_comments_scripts_and_styles_are_ignored() -> None:
    extractor = TextExtractor()
    html = (
        "<html><head><style>p { color: red; }</style></head><body>"
        "<!-- hidden --><script>var x = 1;</script><p>Visible</p></body></html>"
    )

    assert extractor.extract_text_from_html(html) == "Visible"


def test_xhtml_with_xml_declaration() -> None:
    extractor = TextExtractor()
    html = (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml"><head><title>T</title></head>'
        "<body><p>Body text</p></body></html>"
    )

    assert extractor.extract_text_from_html(html) == "Body text"


def test_blank_input_yields_empty_string() -> None:
    extractor = TextExtractor()

    assert extractor.extract_text_from_html("") == ""
    assert extractor.extract_text_from_html("   \n\t ") == ""
    assert extractor.extract_text_from_chapter(_chapter(b"")) == ""


def test_head_without_body_yields_empty_string() -> None:
    extractor = TextExtractor()

    html = "<html><head><title>Running Head</title></head></html>"

    assert extractor.extract_text_from_html(html) == ""


def test_malformed_markup_does_not_raise() -> None:
    extractor = TextExtractor()

    text = extractor.extract_text_from_html("<p>Unterminated <b>bold <i>and italic<p>Next")

    assert isinstance(text, str)
    assert "Unterminated bold and italic" in text
    assert "Next" in text


def test_parse_failure_falls_back_to_stripped_tags(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_parser(*args, **kwargs):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr(text_extractor, "BeautifulSoup", broken_parser)
    extractor = TextExtractor()

    text = extractor.extract_text_from_html("<p>Fish &amp; chips</p><script>x()</script>")

    assert text == "Fish & chips"


def test_extraction_is_repeatable() -> None:
    extractor = TextExtractor()
    chapter = _chapter(b"<p>Alpha</p><div>Beta<br>Gamma</div>")

    assert extractor.extract_text_from_chapter(chapter) == extractor.extract_text_from_chapter(chapter)


def test_unloaded_chapter_raises() -> None:
    extractor = TextExtractor()

    with pytest.raises(ChapterNotLoadedError):
        extractor.extract_text_from_chapter(_chapter(None))


def test_unloaded_chapter_error_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="not loaded"):
        TextExtractor().extract_text_from_chapter(_chapter(None))


def test_without_paragraph_breaks_blocks_are_single_lines() -> None:
    extractor = TextExtractor(paragraph_breaks=False)

    assert extractor.extract_text_from_html("<p>Hello</p><p>World</p>") == "Hello\nWorld"


def test_chapter_bytes_are_decoded_as_utf8() -> None:
    extractor = TextExtractor()

    text = extractor.extract_text_from_chapter(_chapter("<p>Café – naïve</p>".encode("utf-8")))

    assert text == "Café – naïve"


def test_clean_whitespace() -> None:
    assert clean_whitespace("  a  b \n\n\n\n  c  ") == "a b\n\nc"


def test_strip_tags() -> None:
    assert strip_tags("<div><!-- c --><style>x{}</style>A<br/>B &lt;3</div>") == "A B <3"


def test_get_stats() -> None:
    stats = TextExtractor().get_stats("One two\n\nthree")

    assert stats == {"word_count": 3, "character_count": 14, "paragraph_count": 2}
