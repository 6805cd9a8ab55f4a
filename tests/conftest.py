"""Test setup for usfm2doc."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from usfm2doc.schemas import Marker, MarkerKind  # noqa: E402


GENESIS_USFM = r"""\id GEN Unlocked Literal Bible
\h Genesis
\toc1 The Book of Genesis
\mt Genesis
\s5
\c 1
\p
\v 1 In the beginning, God created the heavens and the earth.\f + \fr 1:1 \ft Or \fq in the beginning\f*
\v 2 The earth was without form and empty.
\c 2
\p
\v 1 Then the heavens and the earth were finished.\x - \xo 2:1 \xt Exod 20:11\x*
"""

EXODUS_USFM = r"""\id EXO
\h Exodus
\c 1
\p
\v 1 These are the names of the sons of Israel.\f + \ft A footnote in Exodus.\f*
"""


@pytest.fixture
def genesis_usfm() -> str:
    """Two chapters, one footnote and one cross-reference."""
    return GENESIS_USFM


@pytest.fixture
def exodus_usfm() -> str:
    """One chapter with a footnote."""
    return EXODUS_USFM


@pytest.fixture
def write_usfm(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write USFM text under tmp_path and return the file path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def text_run(text: str) -> Marker:
    return Marker(kind=MarkerKind.TEXT_RUN.value, text=text)


def footnote(text: str) -> Marker:
    return Marker(kind=MarkerKind.FOOTNOTE.value, text=text)


def verse(number: int, *children: Marker) -> Marker:
    return Marker(kind=MarkerKind.VERSE.value, number=number, children=children)


def paragraph(*children: Marker) -> Marker:
    return Marker(kind=MarkerKind.PARAGRAPH.value, children=children)


def chapter(number: int, *children: Marker) -> Marker:
    return Marker(kind=MarkerKind.CHAPTER.value, number=number, children=children)


def book(title: str, *children: Marker) -> Marker:
    return Marker(kind=MarkerKind.BOOK.value, text=title, children=children)
