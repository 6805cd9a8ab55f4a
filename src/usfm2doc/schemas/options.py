"""Formatting options and output format models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TextSize(str, Enum):
    """Body text size."""

    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"

    @property
    def points(self) -> int:
        return _TEXT_SIZE_POINTS[self]


class LineSpacing(str, Enum):
    """Line spacing selector."""

    SINGLE = "Single"
    ONE_AND_HALF = "OneAndHalf"
    DOUBLE = "Double"

    @property
    def multiplier(self) -> float:
        return _LINE_SPACING_MULTIPLIERS[self]


class TextAlignment(str, Enum):
    """Paragraph alignment."""

    LEFT = "Left"
    JUSTIFIED = "Justified"


class TextDirection(str, Enum):
    """Writing direction of the scripture text."""

    LEFT_TO_RIGHT = "LeftToRight"
    RIGHT_TO_LEFT = "RightToLeft"


class OutputFormat(str, Enum):
    """Supported output document formats."""

    DOCX = "DOCX"
    HTML = "HTML"

    @property
    def extension(self) -> str:
        return f".{self.value.lower()}"


_TEXT_SIZE_POINTS = {TextSize.SMALL: 10, TextSize.MEDIUM: 12, TextSize.LARGE: 16}
_LINE_SPACING_MULTIPLIERS = {
    LineSpacing.SINGLE: 1.0,
    LineSpacing.ONE_AND_HALF: 1.5,
    LineSpacing.DOUBLE: 2.0,
}


def _choice_key(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


def coerce_choice(value: Any, enum_cls: type[Enum], default: Enum) -> Enum:
    """Map a user-facing selector onto ``enum_cls``.

    ``None`` and blank strings select ``default``. Strings match member values
    or names case-insensitively, ignoring separators ("one-and-half",
    "ONE_AND_HALF" and "OneAndHalf" are equivalent).
    """
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        if not value.strip():
            return default
        key = _choice_key(value)
        for member in enum_cls:
            if key in (_choice_key(member.value), _choice_key(member.name)):
                return member
    allowed = ", ".join(member.value for member in enum_cls)
    raise ValueError(f"unsupported value {value!r} (expected one of: {allowed})")


class FormatConfiguration(BaseModel):
    """Validated, immutable rendering options.

    Attributes:
        text_size: Body text size.
        line_spacing: Line spacing.
        alignment: Left or justified paragraphs.
        direction: Left-to-right or right-to-left text.
        column_count: Number of text columns, at least 1.
        insert_chapter_break: Start every chapter on a new page.
        insert_verse_break: Start every verse on a new line.
        include_footnotes: Keep footnotes; when False they are pruned.
        include_table_of_contents: Emit a table of contents.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    text_size: TextSize = TextSize.MEDIUM
    line_spacing: LineSpacing = LineSpacing.SINGLE
    alignment: TextAlignment = TextAlignment.LEFT
    direction: TextDirection = TextDirection.LEFT_TO_RIGHT
    column_count: int = Field(default=1, ge=1)
    insert_chapter_break: bool = False
    insert_verse_break: bool = False
    include_footnotes: bool = False
    include_table_of_contents: bool = False

    @field_validator("text_size", mode="before")
    @classmethod
    def normalize_text_size(cls, v: Any) -> TextSize:
        return coerce_choice(v, TextSize, TextSize.MEDIUM)

    @field_validator("line_spacing", mode="before")
    @classmethod
    def normalize_line_spacing(cls, v: Any) -> LineSpacing:
        return coerce_choice(v, LineSpacing, LineSpacing.SINGLE)

    @field_validator("alignment", mode="before")
    @classmethod
    def normalize_alignment(cls, v: Any) -> TextAlignment:
        return coerce_choice(v, TextAlignment, TextAlignment.LEFT)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v: Any) -> TextDirection:
        return coerce_choice(v, TextDirection, TextDirection.LEFT_TO_RIGHT)

    @field_validator("column_count", mode="before")
    @classmethod
    def default_column_count(cls, v: Any) -> Any:
        """Treat an unset column count as a single column."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return 1
        return v
