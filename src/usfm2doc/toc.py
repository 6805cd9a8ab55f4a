"""Table-of-contents collection over a finished layout tree."""

from __future__ import annotations

from usfm2doc.schemas import FormatConfiguration, LayoutNode, LayoutTree, MarkerKind, TocEntry

BOOK_LEVEL = 0
CHAPTER_LEVEL = 1


def build_toc(layout: LayoutTree, config: FormatConfiguration) -> list[TocEntry]:
    """Collect book and chapter entries in document order.

    Runs after the layout transform so every anchor is final. Returns an
    empty list when the configuration does not ask for a table of contents.
    """
    if not config.include_table_of_contents:
        return []

    entries: list[TocEntry] = []
    book_ordinal = 0
    for node in layout.walk():
        if node.kind is MarkerKind.BOOK:
            book_ordinal += 1
            entries.append(
                TocEntry(
                    title=node.text or f"Book {book_ordinal}",
                    anchor_id=node.anchor_id,
                    level=BOOK_LEVEL,
                )
            )
        elif node.kind is MarkerKind.CHAPTER:
            entries.append(
                TocEntry(
                    title=chapter_title(layout, node),
                    anchor_id=node.anchor_id,
                    level=CHAPTER_LEVEL,
                )
            )
    return entries


def chapter_title(layout: LayoutTree, node: LayoutNode) -> str:
    """Chapter label if the source gave one, else "<book title> <number>"."""
    if node.text:
        return node.text
    book_title = layout.book_title_of(node.anchor_id)
    if book_title:
        return f"{book_title} {node.number}"
    return f"Chapter {node.number}"
