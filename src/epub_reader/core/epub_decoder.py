"""EPUB container decoding using ebooklib."""

import io
import logging
import warnings
from pathlib import Path

import ebooklib
from ebooklib import epub

from epub_reader.errors import EpubParsingError
from epub_reader.models.raw import (
    RawAuthor,
    RawBook,
    RawIdentifier,
    RawMetadata,
    RawResource,
)

log = logging.getLogger(__name__)

ISBN_URN_PREFIX = "urn:isbn:"


def _attr(attrs: dict | None, name: str) -> str | None:
    """Look up a metadata attribute ignoring its XML namespace."""
    if not attrs:
        return None
    for key, value in attrs.items():
        if key.rsplit("}", 1)[-1] == name:
            return value
    return None


def split_author_name(name: str, file_as: str | None = None) -> RawAuthor:
    """Split a creator display name into given and family parts.

    Handles "Family, Given" and "Given Family". An ``opf:file-as`` value in the
    "Family, Given" form wins over the display name.
    """
    if file_as and "," in file_as:
        last, first = file_as.split(",", 1)
        return RawAuthor(first_name=first.strip(), last_name=last.strip())

    name = " ".join(name.split())
    if "," in name:
        last, first = name.split(",", 1)
        return RawAuthor(first_name=first.strip(), last_name=last.strip())

    parts = name.rsplit(" ", 1)
    if len(parts) == 2:
        return RawAuthor(first_name=parts[0], last_name=parts[1])
    return RawAuthor(first_name="", last_name=name)


class EpubDecoder:
    """Turn raw EPUB bytes into a :class:`RawBook`."""

    def decode(self, data: bytes) -> RawBook:
        """Decode an in-memory EPUB archive."""
        return self._decode(io.BytesIO(data))

    def decode_file(self, epub_path: Path) -> RawBook:
        """Decode the EPUB archive at ``epub_path``."""
        return self._decode(str(epub_path))

    def _decode(self, source) -> RawBook:
        try:
            with warnings.catch_warnings():
                # ebooklib warns about its future ignore_ncx default on every read
                warnings.simplefilter("ignore", UserWarning)
                warnings.simplefilter("ignore", FutureWarning)
                book = epub.read_epub(source)

            return RawBook(
                metadata=self._get_metadata(book),
                spine=self._get_spine(book),
                reader=self._make_reader(book),
                cover=self._get_cover(book),
            )
        except Exception as e:
            raise EpubParsingError("Failed to parse EPUB", e) from e

    def _get_metadata(self, book: epub.EpubBook) -> RawMetadata:
        """Collect Dublin Core metadata in declaration order."""

        def texts(name: str) -> list[str]:
            return [value or "" for value, _ in book.get_metadata("DC", name)]

        authors = [
            split_author_name(value or "", _attr(attrs, "file-as"))
            for value, attrs in book.get_metadata("DC", "creator")
        ]

        return RawMetadata(
            titles=texts("title"),
            authors=authors,
            publishers=texts("publisher"),
            languages=texts("language"),
            identifiers=[
                self._to_identifier(value or "", attrs)
                for value, attrs in book.get_metadata("DC", "identifier")
            ],
            descriptions=texts("description"),
            dates=texts("date"),
            subjects=texts("subject"),
        )

    def _to_identifier(self, value: str, attrs: dict | None) -> RawIdentifier:
        scheme = _attr(attrs, "scheme")
        value = value.strip()
        if not scheme and value.lower().startswith(ISBN_URN_PREFIX):
            return RawIdentifier(value=value[len(ISBN_URN_PREFIX):], scheme="ISBN")
        return RawIdentifier(value=value, scheme=scheme)

    def _get_spine(self, book: epub.EpubBook) -> list[RawResource]:
        """Resolve spine references to resources in reading order."""
        toc_titles = self._build_toc_title_map(book)

        resources = []
        for entry in book.spine:
            idref = entry[0] if isinstance(entry, tuple) else entry
            item = book.get_item_with_id(idref)
            if item is None:
                log.warning("Spine references unknown item: %s", idref)
                continue

            href = item.get_name()
            resources.append(
                RawResource(
                    id=item.get_id(),
                    href=href,
                    title=toc_titles.get(href) or getattr(item, "title", None) or None,
                    media_type=item.media_type,
                )
            )
        return resources

    def _build_toc_title_map(self, book: epub.EpubBook) -> dict[str, str]:
        """Build a map of file names to TOC titles."""
        title_map: dict[str, str] = {}
        self._collect_toc_titles(book.toc, title_map)
        return title_map

    def _collect_toc_titles(self, toc_items, title_map: dict[str, str]) -> None:
        """Recursively collect titles from TOC."""
        for item in toc_items:
            if isinstance(item, tuple):
                section, children = item
                self._add_toc_title(section, title_map)
                self._collect_toc_titles(children, title_map)
            else:
                self._add_toc_title(item, title_map)

    def _add_toc_title(self, entry, title_map: dict[str, str]) -> None:
        href = getattr(entry, "href", None)
        title = getattr(entry, "title", None)
        if href and title:
            # Extract file name (remove fragment)
            file_ref = href.split("#")[0]
            if file_ref not in title_map:
                title_map[file_ref] = title

    def _get_cover(self, book: epub.EpubBook) -> RawResource | None:
        """Find the cover image resource, if the book declares one."""
        try:
            item = self._find_cover_item(book)
        except Exception as e:
            log.warning("Failed to locate cover image: %s", e)
            return None

        if item is None:
            return None
        return RawResource(
            id=item.get_id(),
            href=item.get_name(),
            media_type=item.media_type or None,
        )

    def _find_cover_item(self, book: epub.EpubBook):
        for item in book.get_items():
            if item.get_type() == ebooklib.ITEM_COVER and self._is_image(item):
                return item

        for item in book.get_items():
            properties = getattr(item, "properties", None) or []
            if isinstance(properties, str):
                properties = properties.split()
            if "cover-image" in properties and self._is_image(item):
                return item

        try:
            cover_meta = book.get_metadata("OPF", "cover")
        except KeyError:
            cover_meta = []
        for _, attrs in cover_meta:
            cover_id = _attr(attrs, "content")
            item = book.get_item_with_id(cover_id) if cover_id else None
            if item is not None and self._is_image(item):
                return item

        for item in book.get_items_of_type(ebooklib.ITEM_IMAGE):
            if "cover" in (item.get_id() or "").lower() or "cover" in item.get_name().lower():
                return item

        return None

    @staticmethod
    def _is_image(item) -> bool:
        media_type = (item.media_type or "").lower()
        return not media_type or media_type.startswith("image/")

    @staticmethod
    def _make_reader(book: epub.EpubBook):
        def read(href: str) -> bytes:
            item = book.get_item_with_href(href)
            if item is None:
                raise KeyError(f"No resource named {href!r} in archive")
            return item.content

        return read
