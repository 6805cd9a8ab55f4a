"""Render the layout tree into a standalone HTML document."""

from __future__ import annotations

from typing import Sequence

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML output (pip install beautifulsoup4)."
    ) from exc

from usfm2doc.renderers.utils import (
    NOTES_TITLE,
    TOC_TITLE,
    footnote_name,
    heading_title,
    note_text,
)
from usfm2doc.schemas import (
    Document,
    LayoutMetadata,
    LayoutNode,
    LayoutTree,
    MarkerKind,
    TextAlignment,
    TextDirection,
    TocEntry,
)

_SKELETON = (
    "<!DOCTYPE html><html><head><meta charset=\"utf-8\"/>"
    "<title></title><style></style></head><body></body></html>"
)
_INLINE_PARENTS = {"p", "span", "sup", "li"}
# Browsers render "normal" line height at roughly 1.2 of the font size.
_BASE_LINE_HEIGHT = 1.2


class HtmlRenderer:
    """Produce a single HTML page with anchors shared with the TOC."""

    def emit(
        self, document: Document, layout: LayoutTree, toc: Sequence[TocEntry]
    ) -> bytes:
        soup = BeautifulSoup(_SKELETON, "lxml")
        metadata = layout.metadata
        soup.html["dir"] = (
            "rtl" if metadata.direction is TextDirection.RIGHT_TO_LEFT else "ltr"
        )
        soup.title.string = document.title or "Scripture"
        soup.style.string = _stylesheet(metadata)

        if toc:
            soup.body.append(_build_toc(soup, toc))

        main = soup.new_tag("main", attrs={"class": "scripture"})
        notes: list[LayoutNode] = []
        for node in layout.root_nodes():
            _append_node(soup, main, layout, node, notes)
        soup.body.append(main)

        if notes:
            soup.body.append(_build_notes(soup, layout, notes))

        return soup.decode().encode("utf-8")


def _stylesheet(metadata: LayoutMetadata) -> str:
    align = "justify" if metadata.alignment is TextAlignment.JUSTIFIED else "left"
    line_height = _BASE_LINE_HEIGHT * metadata.line_spacing.multiplier
    return "\n".join(
        [
            f"body {{ font-size: {metadata.text_size.points}pt; line-height: {line_height:g}; }}",
            f"main.scripture {{ text-align: {align}; column-count: {metadata.column_count}; column-gap: 2em; }}",
            "section.chapter.break-before { break-before: page; page-break-before: always; }",
            "span.verse.break-before { display: block; }",
            "sup.verse-number { font-weight: bold; }",
            "nav.toc ul { list-style: none; }",
            "nav.toc li.level-1 { margin-inline-start: 1.5em; }",
            ".other { font-weight: bold; }",
            ".xref { font-style: italic; }",
        ]
    )


def _build_toc(soup: BeautifulSoup, toc: Sequence[TocEntry]) -> Tag:
    nav = soup.new_tag("nav", attrs={"class": "toc"})
    heading = soup.new_tag("h2")
    heading.string = TOC_TITLE
    nav.append(heading)
    items = soup.new_tag("ul")
    for entry in toc:
        item = soup.new_tag("li", attrs={"class": f"level-{entry.level}"})
        link = soup.new_tag("a", href=f"#{entry.anchor_name}")
        link.string = entry.title
        item.append(link)
        items.append(item)
    nav.append(items)
    return nav


def _append_node(
    soup: BeautifulSoup,
    parent: Tag,
    layout: LayoutTree,
    node: LayoutNode,
    notes: list[LayoutNode],
) -> None:
    kind = node.kind
    if kind is MarkerKind.TEXT_RUN:
        if node.text:
            parent.append(f"{node.text} ")
        return

    if kind is MarkerKind.FOOTNOTE:
        notes.append(node)
        ref = soup.new_tag("sup", attrs={"class": "footnote-ref", "id": node.anchor_name})
        link = soup.new_tag("a", href=f"#{footnote_name(node.footnote_number)}")
        link.string = str(node.footnote_number)
        ref.append(link)
        parent.append(ref)
        return

    if kind is MarkerKind.CROSS_REFERENCE:
        span = soup.new_tag("span", attrs={"class": "xref", "id": node.anchor_name})
        span.string = f"({note_text(layout, node)})"
        parent.append(span)
        parent.append(" ")
        return

    container = _container_for(soup, parent, layout, node)
    parent.append(container)
    for child in layout.children_of(node.anchor_id):
        _append_node(soup, container, layout, child, notes)


def _container_for(
    soup: BeautifulSoup, parent: Tag, layout: LayoutTree, node: LayoutNode
) -> Tag:
    classes = ["break-before"] if node.break_before else []
    kind = node.kind

    if kind in (MarkerKind.BOOK, MarkerKind.CHAPTER):
        is_book = kind is MarkerKind.BOOK
        section = soup.new_tag(
            "section",
            attrs={"class": " ".join(["book" if is_book else "chapter", *classes]), "id": node.anchor_name},
        )
        heading = soup.new_tag("h1" if is_book else "h2")
        heading.string = heading_title(layout, node)
        section.append(heading)
        return section

    if kind is MarkerKind.PARAGRAPH:
        return soup.new_tag("p", attrs={"id": node.anchor_name})

    if kind is MarkerKind.VERSE:
        span = soup.new_tag("span", attrs={"class": " ".join(["verse", *classes]), "id": node.anchor_name})
        number = soup.new_tag("sup", attrs={"class": "verse-number"})
        number.string = str(node.number)
        span.append(number)
        span.append(" ")
        return span

    tag_name = "span" if parent.name in _INLINE_PARENTS else "div"
    other = soup.new_tag(tag_name, attrs={"class": "other", "id": node.anchor_name})
    if node.text:
        other.append(node.text)
    return other


def _build_notes(soup: BeautifulSoup, layout: LayoutTree, notes: Sequence[LayoutNode]) -> Tag:
    section = soup.new_tag("section", attrs={"class": "footnotes"})
    heading = soup.new_tag("h2")
    heading.string = NOTES_TITLE
    section.append(heading)
    items = soup.new_tag("ol")
    for node in notes:
        item = soup.new_tag(
            "li",
            attrs={"id": footnote_name(node.footnote_number), "value": str(node.footnote_number)},
        )
        item.append(f"{note_text(layout, node)} ")
        back = soup.new_tag("a", href=f"#{node.anchor_name}")
        back.string = "↩"
        item.append(back)
        items.append(item)
    section.append(items)
    return section
