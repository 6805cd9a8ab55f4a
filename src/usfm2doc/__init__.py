"""usfm2doc: convert USFM scripture files into DOCX and HTML documents."""

from usfm2doc.assembler import assemble
from usfm2doc.conversion import convert
from usfm2doc.exceptions import (
    ConversionCancelledError,
    EmptyInputError,
    InputError,
    InputFileError,
    MalformedDocumentError,
    OutputPermissionError,
    ParseError,
    UnsupportedFormatError,
    UnsupportedOptionError,
    Usfm2docError,
)
from usfm2doc.layout import transform
from usfm2doc.options import build_configuration
from usfm2doc.renderers import render
from usfm2doc.schemas import (
    ConversionResult,
    Document,
    FormatConfiguration,
    LayoutTree,
    Marker,
    MarkerKind,
    OutputFormat,
    TocEntry,
)
from usfm2doc.toc import build_toc
from usfm2doc.usfm_parser import parse_usfm

__all__ = [
    "ConversionCancelledError",
    "ConversionResult",
    "Document",
    "EmptyInputError",
    "FormatConfiguration",
    "InputError",
    "InputFileError",
    "LayoutTree",
    "MalformedDocumentError",
    "Marker",
    "MarkerKind",
    "OutputFormat",
    "OutputPermissionError",
    "ParseError",
    "TocEntry",
    "UnsupportedFormatError",
    "UnsupportedOptionError",
    "Usfm2docError",
    "assemble",
    "build_configuration",
    "build_toc",
    "convert",
    "parse_usfm",
    "render",
    "transform",
]
