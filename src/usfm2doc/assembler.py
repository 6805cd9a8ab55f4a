"""Merge independently parsed USFM files into one document."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Sequence

from usfm2doc.config import USFM2DOC_FILE_ENCODING
from usfm2doc.exceptions import (
    ConversionCancelledError,
    EmptyInputError,
    InputFileError,
    ParseError,
)
from usfm2doc.file_utils import read_text_async
from usfm2doc.schemas import Document, Marker, MarkerKind, SourceFile
from usfm2doc.usfm_parser import parse_usfm

logger = logging.getLogger(__name__)

MarkerParser = Callable[[str], Sequence[Marker]]
ProgressCallback = Callable[[float], None]


async def assemble(
    ordered_files: Sequence[str | Path],
    *,
    parser: MarkerParser = parse_usfm,
    progress_callback: ProgressCallback | None = None,
    cancel_event: asyncio.Event | None = None,
    encoding: str = USFM2DOC_FILE_ENCODING,
) -> Document:
    """Read and parse each file in order and concatenate the results.

    Files are handled strictly one after another. After each file is parsed,
    ``progress_callback`` receives ``completed_index / total * 100``, so the
    first call reports 0 and no call ever reports 100.

    Args:
        ordered_files: Input paths in the order they should appear.
        parser: Turns file contents into top-level markers.
        progress_callback: Optional observer called between file parses.
        cancel_event: Optional event checked before each file is parsed.
        encoding: Text encoding of the input files.

    Returns:
        The merged document. Nothing is returned if any file fails.

    Raises:
        EmptyInputError: If ``ordered_files`` is empty.
        InputFileError: If a file cannot be read.
        ParseError: If a file contains malformed markup or the parser fails.
        ConversionCancelledError: If ``cancel_event`` is set.
    """
    paths = [Path(item) for item in ordered_files]
    if not paths:
        raise EmptyInputError("At least one input file is required")

    markers: list[Marker] = []
    sources: list[SourceFile] = []
    seen_books: dict[str, Path] = {}
    total = len(paths)

    for index, path in enumerate(paths):
        if cancel_event is not None and cancel_event.is_set():
            raise ConversionCancelledError(f"Conversion cancelled before {path}")

        try:
            text = await read_text_async(path, encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise InputFileError(path, str(exc)) from exc

        try:
            parsed = await asyncio.to_thread(parser, text)
        except ParseError as exc:
            raise exc.with_path(path) from exc
        except Exception as exc:
            raise ParseError(str(exc) or type(exc).__name__, path=path) from exc

        start = len(markers)
        markers.extend(parsed)
        sources.append(SourceFile(path=path, start=start, stop=len(markers)))
        _note_duplicate_books(parsed, path, seen_books)
        logger.debug("Parsed %s: %d top-level markers", path, len(parsed))

        if progress_callback is not None:
            progress_callback(index / total * 100)

    return Document(markers=tuple(markers), sources=tuple(sources))


def _note_duplicate_books(
    parsed: Sequence[Marker], path: Path, seen_books: dict[str, Path]
) -> None:
    for marker in parsed:
        if marker.kind != MarkerKind.BOOK or not marker.text:
            continue
        first = seen_books.setdefault(marker.text, path)
        if first != path:
            logger.warning(
                "Book %s appears in both %s and %s; keeping both in file order",
                marker.text,
                first,
                path,
            )
