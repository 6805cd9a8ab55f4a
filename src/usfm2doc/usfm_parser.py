"""Parse USFM text into marker trees."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from usfm2doc.config import USFM2DOC_IGNORED_MARKERS
from usfm2doc.exceptions import ParseError
from usfm2doc.schemas import Marker, MarkerKind

_MARKER_RE = re.compile(r"\\(\+?[A-Za-z]+[0-9]*(?:-[se])?\*?|\*)")
_NUMBER_RE = re.compile(r"^\s*(\d+)")
# Milestones (\zaln-s ... \*, \qt-e\*, \ts\*) carry no scripture text.
_MILESTONE_RE = re.compile(r"^[A-Za-z]+[0-9]*-[se]$")
_MILESTONE_MARKERS = frozenset({"ts"})
_SELF_CLOSE = "*"

_BOOK_TITLE_MARKERS = ("h", "toc2", "toc1", "mt", "mt1")
_PARAGRAPH_MARKERS = frozenset(
    {
        "p", "m", "po", "pr", "cls", "pmo", "pm", "pmc", "pmr", "pi", "pi1",
        "pi2", "pi3", "mi", "nb", "pc", "ph", "ph1", "ph2", "q", "q1", "q2",
        "q3", "q4", "qr", "qc", "qm", "qm1", "qm2", "li", "li1", "li2", "li3",
        "b",
    }
)
_HEADING_MARKERS = frozenset(
    {"s", "s1", "s2", "s3", "s4", "ms", "ms1", "ms2", "mr", "r", "d", "sp", "qa", "sr"}
)
# Identification markers whose text is metadata, not content.
_METADATA_MARKERS = frozenset(
    {"ide", "sts", "rem", "usfm", "toc3", "toca1", "toca2", "toca3", "mt2", "mt3", "cp", "ca", "va", "vp"}
)
_NOTE_OPENERS = {
    "f": MarkerKind.FOOTNOTE,
    "fe": MarkerKind.FOOTNOTE,
    "x": MarkerKind.CROSS_REFERENCE,
}
_NOTE_CLOSERS = {"f*": "f", "fe*": "fe", "x*": "x"}
# Note fields repeating the reference or origin instead of note text.
_SKIPPED_NOTE_FIELDS = frozenset({"fr", "xo", "fv"})
_STRUCTURAL_MARKERS = frozenset({"id", "c", "v"}) | _PARAGRAPH_MARKERS


@dataclass
class _Node:
    kind: MarkerKind
    number: int | None = None
    text: str | None = None
    children: list[_Node] = field(default_factory=list)

    def freeze(self) -> Marker:
        return Marker(
            kind=self.kind.value,
            number=self.number,
            text=self.text,
            children=tuple(child.freeze() for child in self.children),
        )


@dataclass
class _OpenNote:
    node: _Node
    opener: str
    line: int
    current_field: str | None = None
    parts: list[str] = field(default_factory=list)


class _TreeBuilder:
    """Tracks the open book/chapter/paragraph/verse while markers stream in."""

    def __init__(self, ignored_markers: frozenset[str]) -> None:
        self.ignored = ignored_markers
        self.roots: list[_Node] = []
        self.book: _Node | None = None
        self.book_title_rank: int | None = None
        self.book_chapter_label: str | None = None
        self.chapter: _Node | None = None
        self.paragraph: _Node | None = None
        self.verse: _Node | None = None
        self.note: _OpenNote | None = None

    def handle(self, name: str, text: str, line: int) -> None:
        base = name.lstrip("+")
        # Word attributes run from "|" to the closing marker.
        text = text.split("|", 1)[0]
        if base in self.ignored or base.rstrip("*") in self.ignored:
            self.add_text(text)
            return

        if base == _SELF_CLOSE or _is_milestone(base):
            self.add_text(text)
            return

        if self.note is not None:
            self._handle_in_note(self.note, base, text, line)
            return

        if base in _NOTE_OPENERS:
            self._open_note(base, text, line)
        elif base == "id":
            self._open_book(text)
        elif base in _BOOK_TITLE_MARKERS:
            self._set_book_title(base, text)
        elif base == "c":
            self._open_chapter(text, line)
        elif base == "cl":
            self._set_chapter_label(text)
        elif base in _PARAGRAPH_MARKERS:
            self.verse = None
            self.paragraph = _Node(MarkerKind.PARAGRAPH)
            self._block_parent().append(self.paragraph)
            self.add_text(text)
        elif base == "v":
            self._open_verse(text, line)
        elif base in _HEADING_MARKERS:
            self.paragraph = None
            self.verse = None
            self._block_parent().append(_Node(MarkerKind.OTHER, text=_clean(text) or None))
        elif base in _METADATA_MARKERS:
            return
        elif base in _NOTE_CLOSERS:
            raise ParseError(f"Closing marker \\{base} without an open note", line=line)
        else:
            # Character markers (\wj, \add, \nd, their closers) keep their text inline.
            self.add_text(text)

    def add_text(self, text: str) -> None:
        cleaned = _clean(text)
        if not cleaned:
            return
        if self.note is not None:
            if self.note.current_field not in _SKIPPED_NOTE_FIELDS:
                self.note.parts.append(cleaned)
            return
        self._content_parent().append(_Node(MarkerKind.TEXT_RUN, text=cleaned))

    def finish(self) -> tuple[Marker, ...]:
        if self.note is not None:
            raise ParseError(
                f"Unterminated note \\{self.note.opener}", line=self.note.line
            )
        return tuple(node.freeze() for node in self.roots)

    def _block_parent(self) -> list[_Node]:
        for container in (self.chapter, self.book):
            if container is not None:
                return container.children
        return self.roots

    def _content_parent(self) -> list[_Node]:
        for container in (self.verse, self.paragraph):
            if container is not None:
                return container.children
        return self._block_parent()

    def _open_book(self, text: str) -> None:
        code = text.split()[0] if text.split() else None
        self.book = _Node(MarkerKind.BOOK, text=code)
        self.book_title_rank = None
        self.book_chapter_label = None
        self.chapter = self.paragraph = self.verse = None
        self.roots.append(self.book)

    def _set_book_title(self, name: str, text: str) -> None:
        title = _clean(text)
        if self.book is None or not title:
            return
        rank = _BOOK_TITLE_MARKERS.index(name)
        if self.book_title_rank is None or rank < self.book_title_rank:
            self.book.text = title
            self.book_title_rank = rank

    def _open_chapter(self, text: str, line: int) -> None:
        number, rest = _leading_number(text, "c", line)
        self.paragraph = self.verse = None
        label = f"{self.book_chapter_label} {number}" if self.book_chapter_label else None
        self.chapter = _Node(MarkerKind.CHAPTER, number=number, text=label)
        (self.book.children if self.book is not None else self.roots).append(self.chapter)
        self.add_text(rest)

    def _set_chapter_label(self, text: str) -> None:
        if self.chapter is not None:
            self.chapter.text = _clean(text) or None
        elif self.book is not None:
            # A \cl before the first chapter prefixes every chapter number of the book.
            self.book_chapter_label = _clean(text) or None

    def _open_verse(self, text: str, line: int) -> None:
        number, rest = _leading_number(text, "v", line)
        self.verse = None
        verse = _Node(MarkerKind.VERSE, number=number)
        self._content_parent().append(verse)
        self.verse = verse
        self.add_text(rest)

    def _open_note(self, name: str, text: str, line: int) -> None:
        node = _Node(_NOTE_OPENERS[name])
        self._content_parent().append(node)
        self.note = _OpenNote(node=node, opener=name, line=line)
        # The first token after the opener is the caller (+, - or a letter).
        parts = text.strip().split(None, 1)
        if len(parts) > 1:
            self.add_text(parts[1])

    def _handle_in_note(self, note: _OpenNote, name: str, text: str, line: int) -> None:
        if name in _NOTE_CLOSERS:
            if _NOTE_CLOSERS[name] != note.opener:
                raise ParseError(
                    f"\\{name} closes a note opened with \\{note.opener}", line=line
                )
            note.node.text = " ".join(note.parts) or None
            self.note = None
            self.add_text(text)
            return
        if name in _STRUCTURAL_MARKERS or name in _NOTE_OPENERS:
            raise ParseError(
                f"\\{name} inside note opened with \\{note.opener}", line=line
            )
        if not name.endswith("*"):
            note.current_field = name
        self.add_text(text)


def parse_usfm(
    text: str,
    *,
    ignored_markers: Iterable[str] | None = None,
) -> tuple[Marker, ...]:
    """Parse USFM source into top-level markers.

    Args:
        text: USFM file contents.
        ignored_markers: Marker names dropped entirely. Defaults to the
            configured ``USFM2DOC_IGNORED_MARKERS``.

    Returns:
        The file's top-level markers, normally one book.

    Raises:
        ParseError: On missing chapter/verse numbers or unbalanced notes.
    """
    ignored = frozenset(ignored_markers if ignored_markers is not None else USFM2DOC_IGNORED_MARKERS)
    builder = _TreeBuilder(ignored)
    source = text.lstrip("\ufeff")

    matches = list(_MARKER_RE.finditer(source))
    builder.add_text(source[: matches[0].start()] if matches else source)
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(source)
        line = source.count("\n", 0, match.start()) + 1
        builder.handle(match.group(1), source[match.end() : end], line)
    return builder.finish()


def _leading_number(text: str, marker: str, line: int) -> tuple[int, str]:
    match = _NUMBER_RE.match(text)
    if not match:
        raise ParseError(f"\\{marker} requires a number", line=line)
    rest = text[match.end() :]
    # Verse ranges and segments ("1-2", "3a") keep their first number.
    rest = re.sub(r"^[\-\u2013,]?\d*[a-z]?", "", rest, count=1)
    return int(match.group(1)), rest


def _is_milestone(name: str) -> bool:
    return name in _MILESTONE_MARKERS or _MILESTONE_RE.match(name) is not None


def _clean(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
