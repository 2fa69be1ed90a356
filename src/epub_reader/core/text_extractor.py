"""Extract paragraph-aware plain text from chapter HTML."""

import html
import logging
import re
import warnings

from bs4 import BeautifulSoup, NavigableString, Tag, XMLParsedAsHTMLWarning
from bs4.element import PreformattedString

from epub_reader.errors import ChapterNotLoadedError
from epub_reader.models.book import Chapter

# Suppress XML parsing warnings - EPUB files often use XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)

# HTML whitespace, deliberately excluding no-break space
_WHITESPACE = re.compile(r"[ \t\n\r\f]+")
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_SCRIPT_OR_STYLE = re.compile(
    r"<\s*(script|style)\b[^>]*>.*?<\s*/\s*\1\s*>", re.IGNORECASE | re.DOTALL
)
_TAG = re.compile(r"<[^>]+>")


def clean_whitespace(text: str) -> str:
    """Collapse spaces, trim around newlines and keep at most one blank line."""
    text = re.sub(r" {2,}", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def strip_tags(markup: str) -> str:
    """Drop every tag and return the remaining text. Never raises."""
    markup = _COMMENT.sub("", markup)
    markup = _SCRIPT_OR_STYLE.sub(" ", markup)
    text = html.unescape(_TAG.sub(" ", markup))
    return _WHITESPACE.sub(" ", text).strip()


class TextExtractor:
    """Convert chapter HTML into plain text with paragraph breaks.

    With ``paragraph_breaks`` block elements are separated by a blank line,
    otherwise by a single newline.
    """

    BLOCK_TAGS = frozenset(
        {
            "p", "div", "h1", "h2", "h3", "h4", "h5", "h6",
            "blockquote", "pre", "ul", "ol", "li", "table", "tr",
            "section", "article", "header", "footer",
        }
    )
    LINE_BREAK_TAG = "br"
    # Their text content is code, not prose
    SKIPPED_TAGS = frozenset({"script", "style"})

    def __init__(self, paragraph_breaks: bool = True):
        self.paragraph_breaks = paragraph_breaks
        self.separator = "\n\n" if paragraph_breaks else "\n"

    def extract_text_from_chapter(self, chapter: Chapter) -> str:
        """Extract plain text from a loaded chapter.

        Raises:
            ChapterNotLoadedError: If the chapter content is absent
        """
        if not chapter.is_content_loaded:
            raise ChapterNotLoadedError(f"Chapter content not loaded: {chapter.title}")

        html_content = chapter.content.decode("utf-8", errors="replace")
        return self.extract_text_from_html(html_content)

    def extract_text_from_html(self, html_content: str) -> str:
        """Extract plain text from an HTML string.

        Falls back to stripping all tags when the markup cannot be parsed.
        """
        if not html_content or not html_content.strip():
            return ""

        try:
            soup = BeautifulSoup(html_content, "lxml")
            if soup.body is None:
                return ""
            parts: list[str] = []
            self._extract_from_element(soup.body, parts)
            return clean_whitespace("".join(parts))
        except Exception as e:
            log.warning("Failed to extract text from HTML, stripping tags instead: %s", e)
            return strip_tags(html_content)

    def _extract_from_element(self, element: Tag, parts: list[str]) -> None:
        """Depth-first walk appending text and delimiters to ``parts``."""
        for node in element.children:
            if isinstance(node, Tag):
                tag_name = (node.name or "").lower()
                if tag_name in self.SKIPPED_TAGS:
                    continue
                if tag_name in self.BLOCK_TAGS:
                    self._ensure_separator(parts)
                    self._extract_from_element(node, parts)
                    self._ensure_separator(parts)
                elif tag_name == self.LINE_BREAK_TAG:
                    parts.append("\n")
                else:
                    self._extract_from_element(node, parts)
            elif isinstance(node, NavigableString) and not isinstance(
                node, PreformattedString
            ):
                # Comments, doctypes and CDATA are PreformattedString
                text = _WHITESPACE.sub(" ", str(node))
                if text.strip():
                    parts.append(text)

    def _ensure_separator(self, parts: list[str]) -> None:
        """Append the block separator unless empty or already there."""
        if not parts:
            return
        tail = ""
        for part in reversed(parts):
            tail = part + tail
            if len(tail) >= len(self.separator):
                break
        if not tail.endswith(self.separator):
            parts.append(self.separator)

    def get_stats(self, content: str) -> dict[str, int]:
        """Calculate content statistics."""
        words = content.split()
        paragraphs = [p for p in content.split("\n\n") if p.strip()]
        return {
            "word_count": len(words),
            "character_count": len(content),
            "paragraph_count": len(paragraphs),
        }
