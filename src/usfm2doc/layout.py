"""Transform a merged document into an anchored, break-annotated layout tree."""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from usfm2doc.exceptions import MalformedDocumentError
from usfm2doc.schemas import (
    Document,
    FormatConfiguration,
    LayoutMetadata,
    LayoutNode,
    LayoutTree,
    Marker,
    MarkerKind,
)

logger = logging.getLogger(__name__)

FOOTNOTE_BASE = 1
_NUMBERED_KINDS = (MarkerKind.CHAPTER, MarkerKind.VERSE)


class _Counters(NamedTuple):
    """Accumulator threaded through the traversal."""

    next_anchor: int = 0
    next_footnote: int = FOOTNOTE_BASE


def transform(document: Document, config: FormatConfiguration) -> LayoutTree:
    """Walk the document once, depth-first and pre-order, into a layout tree.

    Surviving nodes receive anchor ids 0, 1, 2, ... in traversal order.
    Chapters and verses get ``break_before`` from the matching configuration
    flag. Footnotes are either pruned with their subtree or numbered from a
    single counter shared by the whole document. Layout options that apply
    uniformly are carried once in ``LayoutTree.metadata``.

    The result depends only on ``document`` and ``config``.

    Args:
        document: Merged document from the assembler.
        config: Validated formatting configuration.

    Returns:
        The finished, immutable layout tree.

    Raises:
        MalformedDocumentError: If a marker has an unrecognized kind or a
            chapter/verse number is missing, non-positive or repeated among
            its siblings. No partial tree is returned.
    """
    nodes: list[LayoutNode | None] = []
    roots: list[int] = []
    counters = _Counters()

    for marker in document.markers:
        anchor, counters = _visit(marker, None, config, nodes, counters)
        if anchor is not None:
            roots.append(anchor)

    layout = LayoutTree(
        nodes=tuple(node for node in nodes if node is not None),
        roots=tuple(roots),
        metadata=LayoutMetadata.from_config(config),
        footnote_count=counters.next_footnote - FOOTNOTE_BASE,
    )
    logger.debug(
        "Layout transform produced %d nodes and %d footnotes",
        len(layout.nodes),
        layout.footnote_count,
    )
    return layout


def _visit(
    marker: Marker,
    parent: int | None,
    config: FormatConfiguration,
    nodes: list[LayoutNode | None],
    counters: _Counters,
) -> tuple[int | None, _Counters]:
    kind = _resolve_kind(marker)
    if kind is MarkerKind.FOOTNOTE and not config.include_footnotes:
        return None, counters

    _check_number(marker, kind)
    _check_sibling_numbers(marker.children)

    anchor = counters.next_anchor
    footnote_number = None
    next_footnote = counters.next_footnote
    if kind is MarkerKind.FOOTNOTE:
        footnote_number = next_footnote
        next_footnote += 1
    counters = _Counters(next_anchor=anchor + 1, next_footnote=next_footnote)

    # Reserve the slot so descendants land after their parent.
    nodes.append(None)
    children: list[int] = []
    for child in marker.children:
        child_anchor, counters = _visit(child, anchor, config, nodes, counters)
        if child_anchor is not None:
            children.append(child_anchor)

    nodes[anchor] = LayoutNode(
        anchor_id=anchor,
        kind=kind,
        number=marker.number,
        text=marker.text,
        parent=parent,
        children=tuple(children),
        break_before=_break_before(kind, config),
        footnote_number=footnote_number,
    )
    return anchor, counters


def _resolve_kind(marker: Marker) -> MarkerKind:
    try:
        return MarkerKind(marker.kind)
    except ValueError as exc:
        raise MalformedDocumentError(
            f"Unrecognized marker kind {marker.kind!r}"
        ) from exc


def _check_number(marker: Marker, kind: MarkerKind) -> None:
    if kind not in _NUMBERED_KINDS:
        return
    if marker.number is None or marker.number < 1:
        raise MalformedDocumentError(
            f"{kind.value} marker requires a positive number, got {marker.number!r}"
        )


def _check_sibling_numbers(children: Sequence[Marker]) -> None:
    seen: set[tuple[str, int]] = set()
    for child in children:
        if child.kind not in _NUMBERED_KINDS or child.number is None:
            continue
        key = (child.kind, child.number)
        if key in seen:
            raise MalformedDocumentError(
                f"Duplicate {child.kind} number {child.number} under the same parent"
            )
        seen.add(key)


def _break_before(kind: MarkerKind, config: FormatConfiguration) -> bool:
    if kind is MarkerKind.CHAPTER:
        return config.insert_chapter_break
    if kind is MarkerKind.VERSE:
        return config.insert_verse_break
    return False
