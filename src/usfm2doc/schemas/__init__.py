"""Shared schemas for usfm2doc."""

from usfm2doc.schemas.conversion import ConversionResult
from usfm2doc.schemas.layout import (
    LayoutMetadata,
    LayoutNode,
    LayoutTree,
    TocEntry,
    anchor_name,
)
from usfm2doc.schemas.markers import Document, Marker, MarkerKind, SourceFile
from usfm2doc.schemas.options import (
    FormatConfiguration,
    LineSpacing,
    OutputFormat,
    TextAlignment,
    TextDirection,
    TextSize,
)

__all__ = [
    "ConversionResult",
    "Document",
    "FormatConfiguration",
    "LayoutMetadata",
    "LayoutNode",
    "LayoutTree",
    "LineSpacing",
    "Marker",
    "MarkerKind",
    "OutputFormat",
    "SourceFile",
    "TextAlignment",
    "TextDirection",
    "TextSize",
    "TocEntry",
    "anchor_name",
]
