"""Drawing backend interface and the painter that drives it.

A backend only knows how to measure and draw primitives; `paint` walks a
VisualTree top to bottom and decides where everything goes. Coordinates are
logical pixels at 96 dpi, with y growing downwards. Backends that produce
higher resolution output scale internally.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from gstinvoice.errors import ExportError
from gstinvoice.layout.nodes import BlockNode, TableNode, VisualTree

logger = logging.getLogger(__name__)

PAGE_MARGIN = 32
LINE_SPACING = 1.4
HEADING_SCALE = 1.75
TITLE_SCALE = 1.1
CELL_PADDING = 4
PLACEHOLDER_COLOR = "#9E9E9E"


@runtime_checkable
class DrawingBackend(Protocol):
    """Capabilities a backend must offer to be painted on."""

    def measure(self, text: str, size: float, bold: bool = False) -> float:
        """Width of `text` in logical pixels."""
        ...

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        size: float,
        color: str,
        bold: bool = False,
        align: str = "left",
        width: Optional[float] = None,
    ) -> None: ...

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[str] = None,
        outline: Optional[str] = None,
    ) -> None: ...

    def draw_table(
        self,
        x: float,
        y: float,
        width: float,
        table: TableNode,
        *,
        size: float,
        color: str,
        row_height: float,
    ) -> None: ...

    def draw_image(self, source: str, x: float, y: float, height: float, align: str, width: float) -> None: ...


@dataclass(frozen=True)
class _Line:
    text: str
    size: float
    bold: bool
    color: str


def wrap_text(text: str, max_width: float, size: float, backend: DrawingBackend, bold: bool = False) -> list[str]:
    """Greedy word wrap; a single word wider than the line stays on its own line."""
    lines: list[str] = []
    for paragraph in text.splitlines() or [""]:
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if current and backend.measure(candidate, size, bold) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


def _line_height(size: float) -> float:
    return size * LINE_SPACING


def table_row_height(size: float) -> float:
    return _line_height(size) + 2 * CELL_PADDING


def _block_lines(block: BlockNode, width: float, backend: DrawingBackend) -> list[_Line]:
    style = block.style
    lines: list[_Line] = []
    if block.heading:
        lines.append(_Line(block.heading, style.font_size * HEADING_SCALE, True, style.accent_color))
    if block.title:
        lines.append(_Line(block.title, style.font_size * TITLE_SCALE, True, style.accent_color))
    if block.is_placeholder:
        message = f"[{block.section_id}] section unavailable"
        lines.append(_Line(message, style.font_size, False, PLACEHOLDER_COLOR))
        return lines
    for field in block.fields:
        bold = style.bold or field.emphasis
        for text in wrap_text(field.text, width, style.font_size, backend, bold):
            lines.append(_Line(text, style.font_size, bold, style.text_color))
    return lines


def paint_block(block: BlockNode, backend: DrawingBackend, x: float, y: float, width: float) -> float:
    """Draw one block at (x, y) and return its height."""
    style = block.style
    inner_x = x + style.padding
    inner_w = max(width - 2 * style.padding, 1)
    lines = _block_lines(block, inner_w, backend)

    logo_h = block.logo.height if block.logo is not None else 0
    table_h = 0.0
    if block.table is not None:
        table_h = table_row_height(style.font_size) * (len(block.table.rows) + 1)
    height = (
        2 * style.padding
        + logo_h
        + sum(_line_height(line.size) for line in lines)
        + table_h
    )

    if style.background_color:
        backend.draw_rect(x, y, width, height, fill=style.background_color)
    if block.is_placeholder:
        backend.draw_rect(x, y, width, height, outline=PLACEHOLDER_COLOR)

    cursor = y + style.padding
    if block.logo is not None:
        backend.draw_image(block.logo.source, inner_x, cursor, logo_h, block.logo.align, inner_w)
        cursor += logo_h
    for line in lines:
        backend.draw_text(
            inner_x,
            cursor,
            line.text,
            size=line.size,
            color=line.color,
            bold=line.bold,
            align=style.align,
            width=inner_w,
        )
        cursor += _line_height(line.size)
    if block.table is not None and block.table.columns:
        backend.draw_table(
            inner_x,
            cursor,
            inner_w,
            block.table,
            size=style.font_size,
            color=style.text_color,
            row_height=table_row_height(style.font_size),
        )
    return height


def paint(
    tree: VisualTree,
    backend: DrawingBackend,
    width: float,
    cancel: Optional[threading.Event] = None,
) -> float:
    """Paint every block of `tree`, stacked vertically.

    Returns:
        Total height used, page margins included.

    Raises:
        ExportError: `cancel` was set before the last block was painted.
    """
    y = float(PAGE_MARGIN)
    inner = width - 2 * PAGE_MARGIN
    for block in tree.blocks:
        if cancel is not None and cancel.is_set():
            raise ExportError(f"Painting of {tree.document_number} cancelled")
        y += block.style.margin
        y += paint_block(block, backend, PAGE_MARGIN, y, inner)
        y += block.style.margin
    logger.debug("Painted %d blocks of %s, height %.1f", len(tree.blocks), tree.document_number, y)
    return y + PAGE_MARGIN
