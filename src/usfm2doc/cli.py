"""Command-line entry point for usfm2doc."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from usfm2doc.config import USFM2DOC_LOG_LEVEL
from usfm2doc.conversion import convert
from usfm2doc.exceptions import Usfm2docError
from usfm2doc.file_utils import collect_input_files
from usfm2doc.renderers import parse_output_format
from usfm2doc.schemas import LineSpacing, OutputFormat, TextSize

logger = logging.getLogger("usfm2doc")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="usfm2doc",
        description="Convert USFM scripture files into a DOCX or HTML document.",
    )
    parser.add_argument("inputs", nargs="+", help="USFM files or directories, in output order")
    parser.add_argument("-o", "--output", help="Output file (default: first input with the format's extension)")
    parser.add_argument(
        "-f",
        "--format",
        default=OutputFormat.DOCX.value,
        help="Output format: DOCX or HTML (default: DOCX)",
    )
    parser.add_argument(
        "--text-size",
        help=f"Text size: {', '.join(size.value for size in TextSize)} (default: Medium)",
    )
    parser.add_argument(
        "--line-spacing",
        help=f"Line spacing: {', '.join(spacing.value for spacing in LineSpacing)} (default: Single)",
    )
    parser.add_argument("--justified", action="store_true", help="Justify paragraphs")
    parser.add_argument("--rtl", action="store_true", help="Right-to-left text")
    parser.add_argument("--columns", type=int, default=1, help="Number of text columns")
    parser.add_argument("--chapter-break", action="store_true", help="Start each chapter on a new page")
    parser.add_argument("--verse-break", action="store_true", help="Start each verse on a new line")
    parser.add_argument("--footnotes", action="store_true", help="Include footnotes")
    parser.add_argument("--toc", action="store_true", help="Include a table of contents")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else USFM2DOC_LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    options = {
        "text_size": args.text_size,
        "line_spacing": args.line_spacing,
        "justified": args.justified,
        "left_to_right": not args.rtl,
        "column_count": args.columns,
        "insert_chapter_break": args.chapter_break,
        "insert_verse_break": args.verse_break,
        "include_footnotes": args.footnotes,
        "include_table_of_contents": args.toc,
    }

    try:
        fmt = parse_output_format(args.format)
        files = collect_input_files(args.inputs)
        output = Path(args.output) if args.output else _default_output(files, args.inputs, fmt)
        result = asyncio.run(
            convert(
                files,
                output,
                output_format=fmt,
                options=options,
                progress_callback=_log_progress,
            )
        )
    except Usfm2docError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Done: %s", result.output_path)
    return 0


def _default_output(files: Sequence[Path], inputs: Sequence[str], fmt: OutputFormat) -> Path:
    first = Path(files[0]) if files else Path(inputs[0])
    if first.is_dir():
        return first / f"{first.name}{fmt.extension}"
    return first.with_suffix(fmt.extension)


def _log_progress(percent: float) -> None:
    logger.info("Parsed input files: %.0f%%", percent)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
