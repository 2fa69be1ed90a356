"""Exceptions raised across the EPUB reading pipeline."""


class EpubReaderError(Exception):
    """Base class for errors raised by epub_reader."""


class EpubParsingError(EpubReaderError):
    """The archive could not be decoded at all.

    The underlying exception is chained and also kept on ``cause``.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return super().__str__()
        return f"{super().__str__()}: {self.cause}"


class ChapterNotLoadedError(EpubReaderError, ValueError):
    """Text extraction was requested for a chapter whose content is absent."""
