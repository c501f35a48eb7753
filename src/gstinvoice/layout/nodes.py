"""Typed nodes of a rendered document.

A VisualTree is an ordered list of fully resolved blocks: text is already
formatted, colors and sizes resolved against the template style, and column
widths normalized to percentages that add up to 100. Backends only draw.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class FieldNode:
    """One data field of a block; an empty label means the value stands alone."""

    name: str
    label: str
    value: str
    emphasis: bool = False

    @property
    def text(self) -> str:
        return f"{self.label}: {self.value}" if self.label else self.value


@dataclass(frozen=True)
class ColumnNode:
    """Resolved table column; `width` is a percentage of the table width."""

    id: str
    label: str
    field: str
    align: str
    width: float

    @property
    def fraction(self) -> float:
        return self.width / 100


@dataclass(frozen=True)
class TableNode:
    columns: tuple[ColumnNode, ...]
    rows: tuple[tuple[str, ...], ...]
    header_background: str
    header_color: str
    border_style: str

    @property
    def total_width(self) -> float:
        return sum(c.width for c in self.columns)


@dataclass(frozen=True)
class LogoNode:
    source: str
    align: str
    height: int


@dataclass(frozen=True)
class BlockStyle:
    text_color: str
    background_color: Optional[str]
    accent_color: str
    font_size: int
    bold: bool
    padding: int
    margin: int
    align: str = "left"


@dataclass(frozen=True)
class BlockNode:
    """One rendered section.

    `kind` is the section type value, or "placeholder" for a section that
    could not be rendered (in which case `error` says why).
    """

    kind: str
    section_id: str
    title: str
    style: BlockStyle
    heading: Optional[str] = None
    fields: tuple[FieldNode, ...] = ()
    table: Optional[TableNode] = None
    logo: Optional[LogoNode] = None
    error: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.kind == PLACEHOLDER


@dataclass(frozen=True)
class PageStyle:
    background_color: str
    text_color: str
    primary_color: str
    secondary_color: str
    font_family: str
    font_size: int
    border_style: str


@dataclass(frozen=True)
class VisualTree:
    template_id: str
    document_number: str
    page: PageStyle
    blocks: tuple[BlockNode, ...]

    @property
    def placeholders(self) -> list[BlockNode]:
        return [b for b in self.blocks if b.is_placeholder]
