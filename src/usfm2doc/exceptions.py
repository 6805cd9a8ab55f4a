"""Custom exceptions for usfm2doc."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class Usfm2docError(Exception):
    """Base exception for usfm2doc operations."""


class InputError(Usfm2docError):
    """Error caused by user-supplied input (files, options, output path)."""


class EmptyInputError(InputError):
    """No input files were supplied."""


class InputFileError(InputError):
    """An input file could not be read."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


class ParseError(InputError):
    """Malformed USFM markup.

    The parser raises this without a path; the assembler re-raises it with
    the offending file attached.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        line: int | None = None,
    ) -> None:
        self.reason = message
        self.path = Path(path) if path is not None else None
        self.line = line
        location = ""
        if self.path is not None:
            location = f"{self.path}"
            if line is not None:
                location += f":{line}"
            location += ": "
        elif line is not None:
            location = f"line {line}: "
        super().__init__(f"{location}{message}")

    def with_path(self, path: str | Path) -> ParseError:
        """Return a copy of this error identifying ``path``."""
        return ParseError(self.reason, path=path, line=self.line)


class UnsupportedOptionError(InputError):
    """A formatting option value is outside its supported domain."""

    def __init__(self, field: str, value: Any, message: str | None = None) -> None:
        self.field = field
        self.value = value
        detail = message or f"unsupported value {value!r}"
        super().__init__(f"Unsupported option '{field}': {detail}")


class OutputPermissionError(InputError):
    """The output destination cannot be written."""

    def __init__(self, path: str | Path, message: str = "path is not writable") -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


class MalformedDocumentError(Usfm2docError):
    """The marker tree violates the recognized kind or numbering invariants."""


class UnsupportedFormatError(Usfm2docError):
    """The requested output format has no emitter."""

    def __init__(self, format_tag: object) -> None:
        self.format_tag = format_tag
        super().__init__(f"Output file format is not supported: {format_tag!r}")


class ConversionCancelledError(Usfm2docError):
    """Conversion was cancelled between file parses."""
