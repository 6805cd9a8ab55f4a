"""Marker tree and merged document models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field


class MarkerKind(str, Enum):
    """Recognized marker kinds."""

    BOOK = "Book"
    CHAPTER = "Chapter"
    VERSE = "Verse"
    PARAGRAPH = "Paragraph"
    FOOTNOTE = "Footnote"
    CROSS_REFERENCE = "CrossReference"
    TEXT_RUN = "TextRun"
    OTHER = "Other"


class Marker(BaseModel):
    """One node of a parsed USFM file.

    ``kind`` is kept as a plain string because markers come from an external
    parser; the layout transform rejects anything outside ``MarkerKind``.
    ``number`` is only meaningful for chapters and verses.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    number: int | None = None
    text: str | None = None
    children: tuple["Marker", ...] = ()

    def iter_tree(self) -> Iterator["Marker"]:
        """Yield this marker and its descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_tree()


class SourceFile(BaseModel):
    """Slice of ``Document.markers`` contributed by one input file."""

    model_config = ConfigDict(frozen=True)

    path: Path
    start: int = Field(..., ge=0)
    stop: int = Field(..., ge=0)


class Document(BaseModel):
    """Ordered merge of every input file's top-level markers."""

    model_config = ConfigDict(frozen=True)

    markers: tuple[Marker, ...] = ()
    sources: tuple[SourceFile, ...] = ()

    def books(self) -> list[Marker]:
        """Return top-level book markers in document order."""
        return [marker for marker in self.markers if marker.kind == MarkerKind.BOOK]

    def markers_from(self, source: SourceFile) -> tuple[Marker, ...]:
        return self.markers[source.start : source.stop]

    @property
    def title(self) -> str | None:
        """Title of the first book, if any."""
        for book in self.books():
            if book.text:
                return book.text
        return None
