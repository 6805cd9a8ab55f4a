"""Layout tree and table-of-contents models."""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field

from usfm2doc.schemas.markers import MarkerKind
from usfm2doc.schemas.options import (
    FormatConfiguration,
    LineSpacing,
    TextAlignment,
    TextDirection,
    TextSize,
)

ANCHOR_PREFIX = "anchor_"


def anchor_name(anchor_id: int) -> str:
    """Return the anchor string shared by every output format.

    Word bookmark names only allow letters, digits and underscores, so the
    same string doubles as an HTML id.
    """
    return f"{ANCHOR_PREFIX}{anchor_id}"


class LayoutNode(BaseModel):
    """A surviving marker annotated with its anchor, break and note number."""

    model_config = ConfigDict(frozen=True)

    anchor_id: int = Field(..., ge=0)
    kind: MarkerKind
    number: int | None = None
    text: str | None = None
    parent: int | None = None
    children: tuple[int, ...] = ()
    break_before: bool = False
    footnote_number: int | None = None

    @property
    def anchor_name(self) -> str:
        return anchor_name(self.anchor_id)


class LayoutMetadata(BaseModel):
    """Options that apply to the whole document rather than to single nodes."""

    model_config = ConfigDict(frozen=True)

    text_size: TextSize = TextSize.MEDIUM
    line_spacing: LineSpacing = LineSpacing.SINGLE
    alignment: TextAlignment = TextAlignment.LEFT
    direction: TextDirection = TextDirection.LEFT_TO_RIGHT
    column_count: int = Field(default=1, ge=1)

    @classmethod
    def from_config(cls, config: FormatConfiguration) -> LayoutMetadata:
        return cls(
            text_size=config.text_size,
            line_spacing=config.line_spacing,
            alignment=config.alignment,
            direction=config.direction,
            column_count=config.column_count,
        )


class LayoutTree(BaseModel):
    """Arena of layout nodes stored in pre-order.

    ``nodes[i].anchor_id == i`` for every node, so anchors double as arena
    indexes and iterating ``nodes`` is the document traversal order.
    """

    model_config = ConfigDict(frozen=True)

    nodes: tuple[LayoutNode, ...] = ()
    roots: tuple[int, ...] = ()
    metadata: LayoutMetadata = Field(default_factory=LayoutMetadata)
    footnote_count: int = 0

    def node(self, anchor_id: int) -> LayoutNode:
        return self.nodes[anchor_id]

    def contains(self, anchor_id: int) -> bool:
        return 0 <= anchor_id < len(self.nodes)

    def children_of(self, anchor_id: int) -> list[LayoutNode]:
        return [self.nodes[child] for child in self.nodes[anchor_id].children]

    def root_nodes(self) -> list[LayoutNode]:
        return [self.nodes[root] for root in self.roots]

    def walk(self) -> Iterator[LayoutNode]:
        """Yield nodes in document (pre-order) order."""
        return iter(self.nodes)

    def footnotes(self) -> list[LayoutNode]:
        return [node for node in self.nodes if node.kind == MarkerKind.FOOTNOTE]

    def book_title_of(self, anchor_id: int) -> str | None:
        """Return the title of the book enclosing ``anchor_id``, if any."""
        current: int | None = anchor_id
        while current is not None:
            node = self.nodes[current]
            if node.kind == MarkerKind.BOOK:
                return node.text
            current = node.parent
        return None


class TocEntry(BaseModel):
    """One table-of-contents row pointing at a layout anchor."""

    model_config = ConfigDict(frozen=True)

    title: str
    anchor_id: int = Field(..., ge=0)
    level: int = Field(..., ge=0)

    @property
    def anchor_name(self) -> str:
        return anchor_name(self.anchor_id)
