"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from epub_reader import __version__
from epub_reader.commands.extract import execute_extract

app = typer.Typer(
    name="epub-reader",
    help="Extract metadata, chapter text and cover images from EPUB files.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    if value:
        console.out(f"epub-reader {__version__}", highlight=False)
        raise typer.Exit()


@app.command()
def main(
    epub_path: Annotated[
        Optional[Path],
        typer.Argument(help="Path to the EPUB file"),
    ] = None,
    chapter: Annotated[
        Optional[int],
        typer.Option(
            "--chapter",
            "-c",
            help="Print the extracted text of this chapter (1-based)",
        ),
    ] = None,
    sections: Annotated[
        Optional[str],
        typer.Option(
            "--sections",
            "-s",
            help="Chapters to export by index: '1,3,5-7' or 'all'",
        ),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output-dir",
            "-o",
            help="Export directory (default: {book_name}_chapters/)",
        ),
    ] = None,
    paragraphs: Annotated[
        bool,
        typer.Option(
            "--paragraphs/--no-paragraphs",
            help="Separate block elements with a blank line instead of a newline",
        ),
    ] = True,
    info: Annotated[
        bool,
        typer.Option(
            "--info",
            "-i",
            help="Display book metadata and the chapter list",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print errors"),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = None,
) -> None:
    """Parse an EPUB file and print its title."""
    if epub_path is None:
        return

    configure_logging(verbose, quiet)

    if not epub_path.exists():
        err_console.print(
            f"[red]ERROR: epub file does not exist: {escape(str(epub_path.resolve()))}[/]",
            soft_wrap=True,
        )
        raise typer.Exit(1)

    try:
        execute_extract(
            book_path=epub_path.resolve(),
            chapter=chapter,
            sections=sections,
            output_dir=output_dir,
            paragraph_breaks=paragraphs,
            show_info=info,
            quiet=quiet,
            console=console,
        )
    except Exception as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/]", soft_wrap=True)
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    app()
