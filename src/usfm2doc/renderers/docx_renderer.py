"""Render the layout tree into a Word document using python-docx."""

from __future__ import annotations

import io
import logging
from typing import Sequence

from docx import Document as WordDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt

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

logger = logging.getLogger(__name__)

# w:pPr children that must follow w:bidi in schema order.
_PPR_AFTER_BIDI = (
    "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
    "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)
_COLUMN_SPACE_TWIPS = "708"
_TOC_INDENT_INCHES = 0.3


class DocxRenderer:
    """Produce a .docx package whose bookmarks match the layout anchors."""

    def emit(
        self, document: Document, layout: LayoutTree, toc: Sequence[TocEntry]
    ) -> bytes:
        word = WordDocument()
        _apply_metadata(word, layout.metadata)
        if document.title:
            word.core_properties.title = document.title

        if toc:
            _add_toc(word, toc)

        writer = _BodyWriter(word, layout)
        for node in layout.root_nodes():
            writer.write(node)
        writer.write_notes()

        buffer = io.BytesIO()
        word.save(buffer)
        return buffer.getvalue()


def _apply_metadata(word, metadata: LayoutMetadata) -> None:
    normal = word.styles["Normal"]
    normal.font.size = Pt(metadata.text_size.points)
    paragraph_format = normal.paragraph_format
    paragraph_format.line_spacing = metadata.line_spacing.multiplier
    paragraph_format.alignment = (
        WD_ALIGN_PARAGRAPH.JUSTIFY
        if metadata.alignment is TextAlignment.JUSTIFIED
        else WD_ALIGN_PARAGRAPH.LEFT
    )
    if metadata.direction is TextDirection.RIGHT_TO_LEFT:
        p_pr = normal.element.get_or_add_pPr()
        p_pr.insert_element_before(OxmlElement("w:bidi"), *_PPR_AFTER_BIDI)

    _set_column_count(word.sections[0], metadata.column_count)


def _set_column_count(section, column_count: int) -> None:
    sect_pr = section._sectPr
    existing = sect_pr.xpath("./w:cols")
    cols = existing[0] if existing else OxmlElement("w:cols")
    if not existing:
        sect_pr.append(cols)
    cols.set(qn("w:num"), str(column_count))
    cols.set(qn("w:space"), _COLUMN_SPACE_TWIPS)


def _add_bookmark(paragraph, name: str, bookmark_id: int) -> None:
    start = OxmlElement("w:bookmarkStart")
    start.set(qn("w:id"), str(bookmark_id))
    start.set(qn("w:name"), name)
    end = OxmlElement("w:bookmarkEnd")
    end.set(qn("w:id"), str(bookmark_id))
    paragraph._p.append(start)
    paragraph._p.append(end)


def _add_internal_link(paragraph, text: str, anchor: str) -> None:
    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("w:anchor"), anchor)
    hyperlink.set(qn("w:history"), "1")

    run = OxmlElement("w:r")
    run_pr = OxmlElement("w:rPr")
    underline = OxmlElement("w:u")
    underline.set(qn("w:val"), "single")
    run_pr.append(underline)
    run.append(run_pr)
    text_element = OxmlElement("w:t")
    text_element.set(qn("xml:space"), "preserve")
    text_element.text = text
    run.append(text_element)

    hyperlink.append(run)
    paragraph._p.append(hyperlink)


def _add_toc(word, toc: Sequence[TocEntry]) -> None:
    word.add_heading(TOC_TITLE, level=1)
    for entry in toc:
        paragraph = word.add_paragraph()
        paragraph.paragraph_format.left_indent = Inches(_TOC_INDENT_INCHES * entry.level)
        _add_internal_link(paragraph, entry.title, entry.anchor_name)
    word.add_page_break()


class _BodyWriter:
    """Streams layout nodes into the document, tracking the open paragraph."""

    def __init__(self, word, layout: LayoutTree) -> None:
        self.word = word
        self.layout = layout
        self.paragraph = None
        self.notes: list[LayoutNode] = []

    def write(self, node: LayoutNode) -> None:
        kind = node.kind
        if kind is MarkerKind.BOOK or kind is MarkerKind.CHAPTER:
            self._write_heading(node)
        elif kind is MarkerKind.PARAGRAPH:
            self.paragraph = self.word.add_paragraph()
            _add_bookmark(self.paragraph, node.anchor_name, node.anchor_id)
            self._write_children(node)
            self.paragraph = None
        elif kind is MarkerKind.VERSE:
            self._write_verse(node)
        elif kind is MarkerKind.TEXT_RUN:
            if node.text:
                self._current_paragraph().add_run(f"{node.text} ")
        elif kind is MarkerKind.FOOTNOTE:
            paragraph = self._current_paragraph()
            _add_bookmark(paragraph, node.anchor_name, node.anchor_id)
            run = paragraph.add_run(str(node.footnote_number))
            run.font.superscript = True
            self.notes.append(node)
        elif kind is MarkerKind.CROSS_REFERENCE:
            paragraph = self._current_paragraph()
            _add_bookmark(paragraph, node.anchor_name, node.anchor_id)
            paragraph.add_run(f"({note_text(self.layout, node)}) ").italic = True
        else:
            self._write_other(node)

    def write_notes(self) -> None:
        if not self.notes:
            return
        self.word.add_heading(NOTES_TITLE, level=2)
        offset = len(self.layout.nodes)
        for node in self.notes:
            paragraph = self.word.add_paragraph()
            _add_bookmark(
                paragraph, footnote_name(node.footnote_number), offset + node.footnote_number
            )
            run = paragraph.add_run(str(node.footnote_number))
            run.font.superscript = True
            paragraph.add_run(f" {note_text(self.layout, node)}")
        logger.debug("Wrote %d footnotes", len(self.notes))

    def _current_paragraph(self):
        if self.paragraph is None:
            self.paragraph = self.word.add_paragraph()
        return self.paragraph

    def _write_children(self, node: LayoutNode) -> None:
        for child in self.layout.children_of(node.anchor_id):
            self.write(child)

    def _write_heading(self, node: LayoutNode) -> None:
        level = 1 if node.kind is MarkerKind.BOOK else 2
        heading = self.word.add_heading(level=level)
        heading.paragraph_format.page_break_before = node.break_before
        _add_bookmark(heading, node.anchor_name, node.anchor_id)
        heading.add_run(heading_title(self.layout, node))
        self.paragraph = None
        self._write_children(node)
        self.paragraph = None

    def _write_verse(self, node: LayoutNode) -> None:
        paragraph = self._current_paragraph()
        if node.break_before and paragraph.runs:
            paragraph.add_run().add_break()
        _add_bookmark(paragraph, node.anchor_name, node.anchor_id)
        number = paragraph.add_run(f"{node.number} ")
        number.font.superscript = True
        number.bold = True
        self._write_children(node)

    def _write_other(self, node: LayoutNode) -> None:
        if self.paragraph is not None:
            _add_bookmark(self.paragraph, node.anchor_name, node.anchor_id)
            if node.text:
                self.paragraph.add_run(f"{node.text} ").italic = True
            self._write_children(node)
            return
        self.paragraph = self.word.add_paragraph()
        _add_bookmark(self.paragraph, node.anchor_name, node.anchor_id)
        if node.text:
            self.paragraph.add_run(node.text).bold = True
        self._write_children(node)
        self.paragraph = None
