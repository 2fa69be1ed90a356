"""Extract metadata, chapter text and cover images from EPUB files."""

__version__ = "0.1.0"
