"""Write extracted chapter text to an output directory."""

import mimetypes
from datetime import datetime
from pathlib import Path

from epub_reader.core.text_extractor import TextExtractor
from epub_reader.models.book import Chapter, Image, ParsedBook
from epub_reader.models.output import BookOutput, ChapterMetadata, ChapterOutput


class OutputWriter:
    """Write extracted chapters, cover and manifest to a directory."""

    MANIFEST_FILE = "manifest.json"

    def __init__(
        self,
        output_dir: Path,
        source_path: Path,
        extractor: TextExtractor | None = None,
    ):
        """Initialize output writer.

        Args:
            output_dir: Directory to write output files
            source_path: Path to the source EPUB
            extractor: Text extractor, paragraph breaks enabled by default
        """
        self.output_dir = output_dir
        self.source_path = source_path
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.extractor = extractor or TextExtractor()

    def write_chapter(self, chapter: Chapter) -> tuple[Path, ChapterMetadata]:
        """Extract a loaded chapter and write it to a JSON file."""
        content = self.extractor.extract_text_from_chapter(chapter)
        stats = self.extractor.get_stats(content)

        metadata = ChapterMetadata(
            chapter_id=chapter.id,
            sequence_number=chapter.sequence_number,
            title=chapter.title,
            href=chapter.href,
            source_path=str(self.source_path),
            extracted_at=datetime.now(),
            word_count=stats["word_count"],
            character_count=stats["character_count"],
            paragraph_count=stats["paragraph_count"],
        )

        output = ChapterOutput(
            metadata=metadata,
            content=content,
            paragraph_breaks=self.extractor.paragraph_breaks,
        )

        filename = f"chapter_{chapter.sequence_number + 1:03d}.json"
        filepath = self.output_dir / filename
        filepath.write_text(output.model_dump_json(indent=2), encoding="utf-8")

        return filepath, metadata

    def write_cover(self, image: Image | None) -> Path | None:
        """Write the cover image, if there is one with data."""
        if image is None or not image.data:
            return None

        extension = mimetypes.guess_extension(image.mime_type or "") or ".jpg"
        if extension in (".jpe", ".jpeg"):
            extension = ".jpg"

        filepath = self.output_dir / f"cover{extension}"
        filepath.write_bytes(image.data)
        return filepath

    def write_manifest(
        self,
        parsed_book: ParsedBook,
        extracted_indices: list[int],
        chapter_metadata: list[ChapterMetadata],
        cover_path: Path | None = None,
    ) -> Path:
        """Write book manifest file."""
        metadata = parsed_book.metadata
        manifest = BookOutput(
            book_title=metadata.title if metadata else None,
            authors=metadata.authors if metadata else [],
            publishers=metadata.publishers if metadata else [],
            language=metadata.language if metadata else None,
            isbn=metadata.isbn if metadata else None,
            publication_date=metadata.publication_date if metadata else None,
            total_chapters=len(parsed_book.chapters),
            extracted_chapters=extracted_indices,
            output_directory=str(self.output_dir),
            cover_file=cover_path.name if cover_path else None,
            created_at=datetime.now(),
            chapters=chapter_metadata,
        )

        filepath = self.output_dir / self.MANIFEST_FILE
        filepath.write_text(manifest.model_dump_json(indent=2), encoding="utf-8")
        return filepath
