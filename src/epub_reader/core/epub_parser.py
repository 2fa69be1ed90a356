"""EPUB parsing facade: decode the archive, then assemble the book."""

import logging
from pathlib import Path

from epub_reader.core.book_assembler import BookAssembler
from epub_reader.core.epub_decoder import EpubDecoder
from epub_reader.models.book import ContentLoader, ParsedBook

log = logging.getLogger(__name__)


class EpubParser:
    """Parse EPUB files and extract structure."""

    def __init__(
        self,
        decoder: EpubDecoder | None = None,
        assembler: BookAssembler | None = None,
    ):
        self.decoder = decoder or EpubDecoder()
        self.assembler = assembler or BookAssembler()

    def parse(self, epub_path: Path, load_content: bool = True) -> ParsedBook:
        """Parse the EPUB file at ``epub_path``.

        Raises:
            FileNotFoundError: If the file does not exist
            EpubParsingError: If the archive cannot be decoded
        """
        epub_path = Path(epub_path)
        if not epub_path.exists():
            raise FileNotFoundError(f"EPUB file does not exist: {epub_path}")

        log.info("Parsing EPUB: %s", epub_path.resolve())
        raw = self.decoder.decode_file(epub_path)
        return self.assembler.assemble(raw, load_content=load_content)

    def parse_bytes(self, data: bytes, load_content: bool = True) -> ParsedBook:
        """Parse an EPUB held in memory."""
        raw = self.decoder.decode(data)
        return self.assembler.assemble(raw, load_content=load_content)

    def open(self, epub_path: Path) -> tuple[ParsedBook, ContentLoader]:
        """Parse without loading chapter content.

        Returns the book and a loader for ``Chapter.load``.
        """
        epub_path = Path(epub_path)
        if not epub_path.exists():
            raise FileNotFoundError(f"EPUB file does not exist: {epub_path}")

        raw = self.decoder.decode_file(epub_path)
        return self.assembler.assemble(raw, load_content=False), raw.reader
