"""Data models for exported chapter text."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class ChapterMetadata(BaseModel):
    """Metadata accompanying extracted chapter text."""

    chapter_id: str
    sequence_number: int
    title: str | None = None
    href: str
    source_path: str
    extracted_at: datetime = Field(default_factory=datetime.now)
    word_count: int
    character_count: int
    paragraph_count: int


class ChapterOutput(BaseModel):
    """Extracted chapter text with its metadata."""

    metadata: ChapterMetadata
    content: str
    paragraph_breaks: bool = True


class BookOutput(BaseModel):
    """Manifest describing an export directory."""

    book_title: str | None = None
    authors: list[str] = Field(default_factory=list)
    publishers: list[str] = Field(default_factory=list)
    language: str | None = None
    isbn: str | None = None
    publication_date: date | None = None
    total_chapters: int
    extracted_chapters: list[int]
    output_directory: str
    cover_file: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    chapters: list[ChapterMetadata]
