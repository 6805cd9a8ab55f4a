"""File helpers for reading inputs and writing the converted document."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Iterable

from usfm2doc.config import USFM2DOC_SUPPORTED_EXTENSIONS
from usfm2doc.exceptions import InputFileError, OutputPermissionError


def check_write_permission(path: str | Path) -> Path:
    """Confirm that ``path`` can be written without touching it.

    An existing file must be writable; otherwise its parent directory must
    exist and be writable.

    Args:
        path: Destination of the converted document.

    Returns:
        The resolved destination path.

    Raises:
        OutputPermissionError: If the destination cannot be written.
    """
    target = Path(path).expanduser().resolve()
    if target.is_dir():
        raise OutputPermissionError(target, "path is a directory")
    if target.exists():
        if not os.access(target, os.W_OK):
            raise OutputPermissionError(target)
        return target
    parent = target.parent
    if not parent.is_dir():
        raise OutputPermissionError(target, f"directory does not exist: {parent}")
    if not os.access(parent, os.W_OK):
        raise OutputPermissionError(target, f"directory is not writable: {parent}")
    return target


def collect_input_files(
    paths: Iterable[str | Path],
    extensions: Iterable[str] | None = None,
) -> list[Path]:
    """Expand directories into the supported USFM files they contain.

    Files named explicitly are kept as given and in order. Directories are
    searched recursively and their matches appended in sorted order.

    Args:
        paths: Files and directories supplied by the user.
        extensions: Accepted suffixes. Defaults to the configured
            ``USFM2DOC_SUPPORTED_EXTENSIONS``.

    Returns:
        Input files in conversion order.

    Raises:
        InputFileError: If a path does not exist.
    """
    allowed = {ext.lower() for ext in (extensions or USFM2DOC_SUPPORTED_EXTENSIONS)}
    files: list[Path] = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_dir():
            files.extend(
                sorted(
                    child
                    for child in path.rglob("*")
                    if child.is_file() and child.suffix.lower() in allowed
                )
            )
        elif path.exists():
            files.append(path)
        else:
            raise InputFileError(path, "file not found")
    return files


async def read_text_async(path: Path, encoding: str = "utf-8") -> str:
    """Read text from a file asynchronously using a thread pool.

    Args:
        path: Path to the file to read.
        encoding: Text encoding to use.

    Returns:
        The file contents as a string.
    """
    return await asyncio.to_thread(path.read_text, encoding=encoding)


async def write_bytes_async(path: Path, content: bytes) -> int:
    """Write bytes to a file asynchronously using a thread pool.

    The content goes to a temporary file beside ``path`` which then replaces
    it, so a failed write never leaves a truncated document behind.

    Args:
        path: Path to the file to write.
        content: Bytes to write.

    Returns:
        Number of bytes written.

    Raises:
        OSError: If the temporary file cannot be written or moved into place.
    """
    return await asyncio.to_thread(_write_bytes_atomic, path, content)


def _write_bytes_atomic(path: Path, content: bytes) -> int:
    tmp = path.with_name(f".{path.name}.tmp{os.getpid()}")
    try:
        with open(tmp, "wb") as fh:
            written = fh.write(content)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    return written
