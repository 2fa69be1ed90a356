"""Map a decoded EPUB onto book records, applying defaults and fallbacks."""

import logging
from datetime import date, datetime

from epub_reader.models.book import BookMetadata, Chapter, Image, ParsedBook
from epub_reader.models.raw import RawAuthor, RawBook, RawMetadata, RawResource

log = logging.getLogger(__name__)


def _first_non_blank(values: list[str]) -> str | None:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def _non_blank(values: list[str]) -> list[str]:
    return [value.strip() for value in values if value and value.strip()]


def format_author_name(author: RawAuthor) -> str:
    """Join given and family name with a single space."""
    return f"{author.first_name or ''} {author.last_name or ''}".strip()


def chapter_title(resource: RawResource, chapter_number: int) -> str:
    """Resolve a chapter title.

    Declared title first, then the href's file name without extension, then
    "Chapter N" with the 1-based ``chapter_number``.
    """
    if resource.title and resource.title.strip():
        return resource.title.strip()

    if resource.href:
        stem = resource.href.rsplit("/", 1)[-1].rsplit(".", 1)[0]
        if stem.strip():
            return stem.strip()

    return f"Chapter {chapter_number}"


class BookAssembler:
    """Build a :class:`ParsedBook` from a :class:`RawBook`."""

    DEFAULT_TITLE = "Unknown Title"
    DEFAULT_COVER_MIME_TYPE = "image/jpeg"
    # Tried in order; "iso" is date.fromisoformat
    DATE_FORMATS = ("iso", "%Y-%m-%d", "%Y")

    def assemble(self, raw: RawBook, load_content: bool = True) -> ParsedBook:
        """Assemble the book record.

        Per-field failures are logged and degrade to absent values.
        With ``load_content=False`` chapters are left unloaded; load them
        later with ``chapter.load(raw.reader)``.
        """
        metadata = self.extract_metadata(raw.metadata)
        chapters = self.extract_chapters(raw, load_content)
        cover_image = self.extract_cover_image(raw)

        log.info(
            "Successfully parsed EPUB: %s (%d chapters)",
            metadata.title,
            len(chapters),
        )

        return ParsedBook(
            metadata=metadata,
            chapters=chapters,
            cover_image=cover_image,
        )

    def extract_metadata(self, metadata: RawMetadata) -> BookMetadata:
        """Extract book metadata."""
        authors = [format_author_name(author) for author in metadata.authors]

        return BookMetadata(
            title=_first_non_blank(metadata.titles) or self.DEFAULT_TITLE,
            authors=[name for name in authors if name],
            publishers=_non_blank(metadata.publishers),
            language=_first_non_blank(metadata.languages),
            isbn=next(
                (
                    identifier.value
                    for identifier in metadata.identifiers
                    if (identifier.scheme or "").lower() == "isbn"
                ),
                None,
            ),
            description=_first_non_blank(metadata.descriptions),
            publication_date=(
                self.parse_date(metadata.dates[0]) if metadata.dates else None
            ),
            subjects=_non_blank(metadata.subjects),
        )

    def parse_date(self, value: str) -> date | None:
        """Parse a declared date, returning None when no format matches."""
        if not value or not value.strip():
            return None

        text = value.strip()
        # EPUB 3 dates may carry a time part
        if "T" in text:
            text = text.split("T", 1)[0]

        for fmt in self.DATE_FORMATS:
            try:
                if fmt == "iso":
                    return date.fromisoformat(text)
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue

        log.warning("Failed to parse date: %s", value)
        return None

    def extract_chapters(self, raw: RawBook, load_content: bool = True) -> list[Chapter]:
        """Create one chapter per spine entry, in spine order."""
        chapters = []
        for index, resource in enumerate(raw.spine):
            content = None
            if load_content:
                try:
                    content = raw.read(resource)
                except Exception as e:
                    log.warning("Failed to load content for chapter %d: %s", index, e)

            chapters.append(
                Chapter(
                    id=resource.id,
                    title=chapter_title(resource, index + 1),
                    href=resource.href,
                    sequence_number=index,
                    content=content,
                )
            )
        return chapters

    def extract_cover_image(self, raw: RawBook) -> Image | None:
        """Extract the cover image from the book."""
        if raw.cover is None:
            return None

        try:
            return Image(
                data=raw.read(raw.cover),
                mime_type=raw.cover.media_type or self.DEFAULT_COVER_MIME_TYPE,
            )
        except Exception as e:
            log.warning("Failed to extract cover image: %s", e)
            return None
