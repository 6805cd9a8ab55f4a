"""Conversion output model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from usfm2doc.schemas.layout import LayoutTree, TocEntry
from usfm2doc.schemas.options import OutputFormat


class ConversionResult(BaseModel):
    """Final conversion output."""

    model_config = ConfigDict(frozen=True)

    output_path: Path
    output_format: OutputFormat
    layout: LayoutTree
    toc: tuple[TocEntry, ...] = ()
    bytes_written: int = 0
