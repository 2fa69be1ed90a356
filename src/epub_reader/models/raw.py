"""Records produced by the EPUB decoder, before any defaults are applied."""

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class RawAuthor:
    """Declared creator split into name parts."""

    first_name: str = ""
    last_name: str = ""


@dataclass
class RawIdentifier:
    value: str
    scheme: str | None = None


@dataclass
class RawMetadata:
    """Dublin Core values exactly as declared, in declaration order."""

    titles: list[str] = field(default_factory=list)
    authors: list[RawAuthor] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    identifiers: list[RawIdentifier] = field(default_factory=list)
    descriptions: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    subjects: list[str] = field(default_factory=list)


@dataclass
class RawResource:
    """Named blob inside the archive."""

    id: str
    href: str
    title: str | None = None
    media_type: str | None = None


@dataclass
class RawBook:
    """Decoded archive: metadata, spine resources and a reader for their bytes."""

    metadata: RawMetadata
    spine: list[RawResource]
    reader: Callable[[str], bytes]
    cover: RawResource | None = None

    def read(self, resource: RawResource) -> bytes:
        return self.reader(resource.href)
