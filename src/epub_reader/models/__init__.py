"""Data models."""

from epub_reader.models.book import (
    BookMetadata,
    Chapter,
    ContentLoader,
    Image,
    ParsedBook,
)
from epub_reader.models.output import (
    BookOutput,
    ChapterMetadata,
    ChapterOutput,
)
from epub_reader.models.raw import (
    RawAuthor,
    RawBook,
    RawIdentifier,
    RawMetadata,
    RawResource,
)

__all__ = [
    # Book models
    "Chapter",
    "ContentLoader",
    "BookMetadata",
    "Image",
    "ParsedBook",
    # Decoder models
    "RawAuthor",
    "RawIdentifier",
    "RawMetadata",
    "RawResource",
    "RawBook",
    # Output models
    "ChapterMetadata",
    "ChapterOutput",
    "BookOutput",
]
