"""Output emitters and format dispatch."""

from usfm2doc.renderers.dispatch import Emitter, emitter_for, parse_output_format, render
from usfm2doc.renderers.docx_renderer import DocxRenderer
from usfm2doc.renderers.html_renderer import HtmlRenderer

__all__ = [
    "DocxRenderer",
    "Emitter",
    "HtmlRenderer",
    "emitter_for",
    "parse_output_format",
    "render",
]
