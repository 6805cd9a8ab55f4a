"""Conversion pipeline for USFM files -> DOCX/HTML."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from usfm2doc.assembler import MarkerParser, ProgressCallback, assemble
from usfm2doc.exceptions import OutputPermissionError
from usfm2doc.file_utils import check_write_permission, write_bytes_async
from usfm2doc.layout import transform
from usfm2doc.options import build_configuration
from usfm2doc.renderers import parse_output_format, render
from usfm2doc.schemas import ConversionResult, FormatConfiguration, OutputFormat
from usfm2doc.toc import build_toc
from usfm2doc.usfm_parser import parse_usfm

logger = logging.getLogger(__name__)


async def convert(
    files: Sequence[str | Path],
    output_path: str | Path,
    *,
    output_format: str | OutputFormat = OutputFormat.DOCX,
    options: FormatConfiguration | Mapping[str, Any] | None = None,
    parser: MarkerParser = parse_usfm,
    progress_callback: ProgressCallback | None = None,
    cancel_event: asyncio.Event | None = None,
) -> ConversionResult:
    """Convert USFM files into one DOCX or HTML document.

    The output format, the formatting options and the output path are all
    checked before the first input file is read. Any failure aborts the whole
    run and no output file is written.

    Args:
        files: Input USFM files in the order they should appear.
        output_path: Destination file.
        output_format: ``"DOCX"`` or ``"HTML"`` (case-insensitive).
        options: A built configuration, or raw option selections to build one.
        parser: Turns file contents into top-level markers.
        progress_callback: Optional observer of per-file progress.
        cancel_event: Optional event checked between file parses.

    Returns:
        The written path together with the layout tree and TOC it was built from.

    Raises:
        UnsupportedFormatError: If ``output_format`` has no emitter.
        UnsupportedOptionError: If an option value is invalid.
        OutputPermissionError: If ``output_path`` is not writable or the write fails.
        EmptyInputError, InputFileError, ParseError: On bad input files.
        MalformedDocumentError: If the merged marker tree is structurally invalid.
        ConversionCancelledError: If ``cancel_event`` is set mid-assembly.
    """
    fmt = parse_output_format(output_format)
    config = options if isinstance(options, FormatConfiguration) else build_configuration(options)
    destination = check_write_permission(output_path)

    logger.info("Converting %d file(s) to %s at %s", len(files), fmt.value, destination)
    document = await assemble(
        files,
        parser=parser,
        progress_callback=progress_callback,
        cancel_event=cancel_event,
    )

    layout = transform(document, config)
    toc = build_toc(layout, config)
    payload = render(fmt, document, layout, toc)

    try:
        written = await write_bytes_async(destination, payload)
    except OSError as exc:
        raise OutputPermissionError(destination, str(exc)) from exc
    logger.info("Wrote %d bytes to %s", written, destination)

    return ConversionResult(
        output_path=destination,
        output_format=fmt,
        layout=layout,
        toc=tuple(toc),
        bytes_written=written,
    )
