"""Local configuration for usfm2doc."""

from __future__ import annotations

import os


DEFAULT_FILE_ENCODING = "utf-8-sig"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SUPPORTED_EXTENSIONS = ".usfm,.txt,.sfm"
# Chunk markers inserted by translation tools; they carry no content.
DEFAULT_IGNORED_MARKERS = "s5"


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


USFM2DOC_FILE_ENCODING = os.getenv("USFM2DOC_FILE_ENCODING", DEFAULT_FILE_ENCODING)
USFM2DOC_LOG_LEVEL = os.getenv("USFM2DOC_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
USFM2DOC_SUPPORTED_EXTENSIONS = tuple(
    ext.lower()
    for ext in _split_list(
        os.getenv("USFM2DOC_SUPPORTED_EXTENSIONS", DEFAULT_SUPPORTED_EXTENSIONS)
    )
)
USFM2DOC_IGNORED_MARKERS = frozenset(
    _split_list(os.getenv("USFM2DOC_IGNORED_MARKERS", DEFAULT_IGNORED_MARKERS))
)
