"""Extract command implementation."""

import logging
import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from epub_reader.core.epub_parser import EpubParser
from epub_reader.core.output_writer import OutputWriter
from epub_reader.core.text_extractor import TextExtractor
from epub_reader.errors import ChapterNotLoadedError
from epub_reader.models.book import ParsedBook
from epub_reader.models.output import ChapterMetadata

log = logging.getLogger(__name__)


_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def parse_chapter_selection(selection: str, total_chapters: int) -> list[int]:
    """Turn a 1-based selection such as "1,3,5-7" or "all" into sorted 0-based indices.

    Unreadable parts and reversed ranges are skipped with a warning; numbers
    outside the book are dropped.
    """
    if selection.strip().lower() == "all":
        return list(range(total_chapters))

    chosen: set[int] = set()
    for token in filter(None, (part.strip() for part in selection.split(","))):
        if token.isdigit():
            chosen.add(int(token))
            continue

        bounds = _RANGE.match(token)
        if bounds is None:
            log.warning("Ignoring unreadable chapter selection: %r", token)
            continue

        first, last = int(bounds.group(1)), int(bounds.group(2))
        if first > last:
            log.warning("Ignoring reversed chapter range: %s", token)
            continue
        chosen.update(range(max(first, 1), min(last, total_chapters) + 1))

    return sorted(n - 1 for n in chosen if 1 <= n <= total_chapters)


def get_default_output_dir(book_path: Path) -> Path:
    """Get default output directory based on book filename."""
    stem = book_path.stem
    # Clean up the filename for directory name
    clean_stem = re.sub(r"[^\w\s-]", "", stem).strip()
    clean_stem = re.sub(r"[-\s]+", "_", clean_stem)
    return book_path.parent / f"{clean_stem}_chapters"


def display_book_info(parsed: ParsedBook, console: Console) -> None:
    """Display book metadata and the chapter list."""
    metadata = parsed.metadata
    info_lines = [f"[bold]{escape(parsed.title or '')}[/]", ""]
    if metadata:
        date = metadata.publication_date.isoformat() if metadata.publication_date else None
        for label, value in (
            ("Author(s)", ", ".join(metadata.authors)),
            ("Publisher(s)", ", ".join(metadata.publishers)),
            ("Language", metadata.language),
            ("ISBN", metadata.isbn),
            ("Published", date),
            ("Subjects", ", ".join(metadata.subjects)),
        ):
            info_lines.append(f"[dim]{label}:[/] {escape(value or 'Unknown')}")
    info_lines.append(f"[dim]Chapters:[/] {len(parsed.chapters)}")
    if parsed.cover_image:
        info_lines.append(f"[dim]Cover:[/] {parsed.cover_image.mime_type}")

    console.print()
    console.print(Panel("\n".join(info_lines), title="Book Information", border_style="green"))

    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Href", style="dim")
    table.add_column("Size", justify="right", style="green")

    for chapter in parsed.chapters:
        size = f"{len(chapter.content):,}" if chapter.is_content_loaded else "—"
        table.add_row(
            str(chapter.sequence_number + 1),
            escape(chapter.title or ""),
            escape(chapter.href),
            size,
        )

    console.print(table)
    console.print()


def export_chapters(
    parsed: ParsedBook,
    book_path: Path,
    indices: list[int],
    output_dir: Path,
    extractor: TextExtractor,
    quiet: bool,
    console: Console,
) -> Path:
    """Write the selected chapters, the cover and a manifest to ``output_dir``."""
    writer = OutputWriter(output_dir, book_path, extractor)
    chapter_metadata: list[ChapterMetadata] = []
    written: list[int] = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        disable=quiet,
        transient=True,
    ) as progress:
        task = progress.add_task("Extracting chapters...", total=len(indices))
        for index in indices:
            chapter = parsed.chapters[index]
            progress.update(task, description=f"Extracting {escape(chapter.title or chapter.href)}")
            try:
                _, metadata = writer.write_chapter(chapter)
            except ChapterNotLoadedError as e:
                log.warning("Skipping chapter %d: %s", index + 1, e)
            else:
                chapter_metadata.append(metadata)
                written.append(index)
            progress.advance(task)

    cover_path = writer.write_cover(parsed.cover_image)
    manifest_path = writer.write_manifest(parsed, written, chapter_metadata, cover_path)

    if not quiet:
        console.print(
            f"[green]Wrote {len(written)} chapter(s) to {escape(str(output_dir))}[/]"
        )
    return manifest_path


def execute_extract(
    book_path: Path,
    chapter: int | None,
    sections: str | None,
    output_dir: Path | None,
    paragraph_breaks: bool,
    show_info: bool,
    quiet: bool,
    console: Console,
) -> None:
    """Execute the extract command.

    Raises:
        EpubParsingError: If the archive cannot be decoded
        IndexError: If ``chapter`` is out of range
        ChapterNotLoadedError: If the requested chapter could not be read
        ValueError: If ``sections`` selects nothing
    """
    parsed = EpubParser().parse(book_path)
    console.out(f"Epub parsed. Title: {parsed.title}", highlight=False)

    if show_info:
        display_book_info(parsed, console)

    extractor = TextExtractor(paragraph_breaks=paragraph_breaks)

    if chapter is not None:
        selected = parsed.get_chapter(chapter - 1)
        console.out(extractor.extract_text_from_chapter(selected), highlight=False)

    if sections is not None or output_dir is not None:
        indices = parse_chapter_selection(sections or "all", len(parsed.chapters))
        if not indices:
            raise ValueError(f"No valid chapters selected: {sections}")
        export_chapters(
            parsed,
            book_path,
            indices,
            output_dir or get_default_output_dir(book_path),
            extractor,
            quiet,
            console,
        )
