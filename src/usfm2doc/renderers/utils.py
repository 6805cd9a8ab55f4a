"""Common helpers shared by renderer implementations."""

from __future__ import annotations

from usfm2doc.schemas import LayoutNode, LayoutTree, MarkerKind
from usfm2doc.toc import chapter_title

FOOTNOTE_PREFIX = "footnote_"
NOTES_TITLE = "Notes"
TOC_TITLE = "Contents"


def footnote_name(number: int) -> str:
    """Anchor of a footnote body, shared by both output formats."""
    return f"{FOOTNOTE_PREFIX}{number}"


def heading_title(layout: LayoutTree, node: LayoutNode) -> str:
    """Heading text for books and chapters, matching the TOC titles."""
    if node.kind is MarkerKind.CHAPTER:
        return chapter_title(layout, node)
    return node.text or ""


def note_text(layout: LayoutTree, node: LayoutNode) -> str:
    """Flatten a footnote or cross-reference body, including any child runs."""
    parts = [node.text] if node.text else []
    for child in layout.children_of(node.anchor_id):
        text = note_text(layout, child)
        if text:
            parts.append(text)
    return " ".join(parts)
