"""Select the emitter for an output format and hand it the finished layout."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from usfm2doc.exceptions import UnsupportedFormatError
from usfm2doc.renderers.docx_renderer import DocxRenderer
from usfm2doc.renderers.html_renderer import HtmlRenderer
from usfm2doc.schemas import Document, LayoutTree, OutputFormat, TocEntry

logger = logging.getLogger(__name__)


class Emitter(Protocol):
    """Turns a consistent (document, layout, toc) triple into output bytes."""

    def emit(
        self, document: Document, layout: LayoutTree, toc: Sequence[TocEntry]
    ) -> bytes: ...


def parse_output_format(tag: str | OutputFormat) -> OutputFormat:
    """Resolve a user-supplied format tag, case-insensitively.

    Raises:
        UnsupportedFormatError: If no emitter exists for ``tag``.
    """
    if isinstance(tag, OutputFormat):
        return tag
    if isinstance(tag, str):
        try:
            return OutputFormat(tag.strip().upper())
        except ValueError:
            pass
    raise UnsupportedFormatError(tag)


def emitter_for(output_format: OutputFormat) -> Emitter:
    match output_format:
        case OutputFormat.DOCX:
            return DocxRenderer()
        case OutputFormat.HTML:
            return HtmlRenderer()
    raise UnsupportedFormatError(output_format)


def render(
    output_format: str | OutputFormat,
    document: Document,
    layout: LayoutTree,
    toc: Sequence[TocEntry],
) -> bytes:
    """Render with exactly one emitter.

    The format tag is checked before any emitter runs. Nothing is written to
    disk here; the caller owns the output file.
    """
    fmt = parse_output_format(output_format)
    emitter = emitter_for(fmt)
    logger.info("Rendering %d layout nodes as %s", len(layout.nodes), fmt.value)
    return emitter.emit(document, layout, toc)
