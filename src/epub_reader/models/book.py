"""Data models for parsed book structure."""

from datetime import date
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Reads a resource from the archive by its href
ContentLoader = Callable[[str], bytes]


class Chapter(BaseModel):
    """Single spine item of a book.

    ``content`` is ``None`` until the chapter has been loaded. Loading never
    mutates a chapter; :meth:`load` returns a loaded copy instead.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str | None = None
    href: str
    sequence_number: int = Field(ge=0)
    content: bytes | None = Field(default=None, repr=False)

    @property
    def is_content_loaded(self) -> bool:
        return self.content is not None

    def load(self, loader: ContentLoader) -> "Chapter":
        """Return this chapter with its content read through ``loader``."""
        if self.is_content_loaded:
            return self
        return self.model_copy(update={"content": loader(self.href)})


class BookMetadata(BaseModel):
    """Book-level metadata."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    authors: list[str] = Field(default_factory=list)
    publishers: list[str] = Field(default_factory=list)
    language: str | None = None
    isbn: str | None = None
    description: str | None = None
    publication_date: date | None = None
    subjects: list[str] = Field(default_factory=list)


class Image(BaseModel):
    """Raw image bytes with their MIME type."""

    model_config = ConfigDict(frozen=True)

    data: bytes | None = Field(default=None, repr=False)
    mime_type: str | None = None


class ParsedBook(BaseModel):
    """Complete parsed EPUB structure."""

    model_config = ConfigDict(frozen=True)

    metadata: BookMetadata | None = None
    chapters: list[Chapter] = Field(default_factory=list)
    cover_image: Image | None = None

    @model_validator(mode="after")
    def _check_spine_order(self) -> "ParsedBook":
        for position, chapter in enumerate(self.chapters):
            if chapter.sequence_number != position:
                raise ValueError(
                    f"Chapter {chapter.id!r} has sequence number "
                    f"{chapter.sequence_number}, expected {position}"
                )
        return self

    @property
    def title(self) -> str | None:
        return self.metadata.title if self.metadata else None

    def get_chapter(self, sequence_number: int) -> Chapter:
        """Return the chapter at ``sequence_number`` (zero-based)."""
        if not 0 <= sequence_number < len(self.chapters):
            raise IndexError(
                f"Chapter {sequence_number} out of range "
                f"(book has {len(self.chapters)} chapters)"
            )
        return self.chapters[sequence_number]
