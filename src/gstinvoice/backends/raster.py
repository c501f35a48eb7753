"""Pillow backend: draws a VisualTree onto an RGB image.

Logical coordinates are multiplied by `scale`, so a 794 px wide layout drawn
at scale 2 yields a 1588 px wide image. Without a font file Pillow's bundled
font is used; it has no rupee glyph, which is why raster output formats
currency with "Rs." by default.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

from gstinvoice.backends.base import CELL_PADDING
from gstinvoice.layout.nodes import TableNode

logger = logging.getLogger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

HEADER_RULE = "#BDBDBD"
ROW_RULE = "#E0E0E0"


class RasterBackend:
    """Drawing backend over a Pillow image."""

    def __init__(
        self,
        width: float,
        height: float,
        *,
        scale: float = 2.0,
        background: str = "#FFFFFF",
        font_path: Optional[Path] = None,
    ) -> None:
        self.scale = scale
        self.font_path = font_path
        self.image = Image.new(
            "RGB", (math.ceil(width * scale), math.ceil(height * scale)), background
        )
        self._draw = ImageDraw.Draw(self.image)
        self._fonts: dict[int, FontType] = {}

    def _px(self, value: float) -> int:
        return round(value * self.scale)

    def _font(self, size: float) -> FontType:
        px = max(self._px(size), 1)
        if px not in self._fonts:
            if self.font_path is not None:
                self._fonts[px] = ImageFont.truetype(str(self.font_path), px)
            else:
                self._fonts[px] = ImageFont.load_default(size=px)
        return self._fonts[px]

    def _stroke(self, bold: bool) -> int:
        return max(1, round(self.scale / 2)) if bold else 0

    def measure(self, text: str, size: float, bold: bool = False) -> float:
        length = self._draw.textlength(text, font=self._font(size))
        return (length + 2 * self._stroke(bold)) / self.scale

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
    ) -> None:
        if width is not None and align != "left":
            free = width - self.measure(text, size, bold)
            x += free if align == "right" else free / 2
        stroke = self._stroke(bold)
        self._draw.text(
            (self._px(x), self._px(y)),
            text,
            fill=color,
            font=self._font(size),
            stroke_width=stroke,
            stroke_fill=color if stroke else None,
        )

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[str] = None,
        outline: Optional[str] = None,
    ) -> None:
        box = [self._px(x), self._px(y), self._px(x + width), self._px(y + height)]
        self._draw.rectangle(box, fill=fill, outline=outline, width=self._stroke(True))

    def _line(self, x0: float, y0: float, x1: float, y1: float, color: str) -> None:
        self._draw.line(
            [self._px(x0), self._px(y0), self._px(x1), self._px(y1)],
            fill=color,
            width=max(1, round(self.scale / 2)),
        )

    def _fit(self, text: str, max_width: float, size: float, bold: bool = False) -> str:
        if self.measure(text, size, bold) <= max_width:
            return text
        while text and self.measure(f"{text}...", size, bold) > max_width:
            text = text[:-1]
        return f"{text}..." if text else ""

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
    ) -> None:
        bottom = y + row_height * (len(table.rows) + 1)
        self.draw_rect(x, y, width, row_height, fill=table.header_background)

        lefts = []
        cursor = x
        for column in table.columns:
            lefts.append(cursor)
            cursor += width * column.fraction

        for left, column in zip(lefts, table.columns):
            cell_w = width * column.fraction - 2 * CELL_PADDING
            label = self._fit(column.label, cell_w, size, bold=True)
            self.draw_text(left + CELL_PADDING, y + CELL_PADDING, label, size=size,
                           color=table.header_color, bold=True, align=column.align, width=cell_w)

        for r, row in enumerate(table.rows, start=1):
            top = y + r * row_height
            for left, column, value in zip(lefts, table.columns, row):
                cell_w = width * column.fraction - 2 * CELL_PADDING
                self.draw_text(left + CELL_PADDING, top + CELL_PADDING,
                               self._fit(value, cell_w, size), size=size, color=color,
                               align=column.align, width=cell_w)
            if table.border_style != "none":
                self._line(x, top + row_height, x + width, top + row_height, ROW_RULE)

        if table.border_style == "full":
            self.draw_rect(x, y, width, bottom - y, outline=HEADER_RULE)
            for left in lefts[1:]:
                self._line(left, y, left, bottom, HEADER_RULE)

    def draw_image(self, source: str, x: float, y: float, height: float, align: str, width: float) -> None:
        path = Path(source)
        if not path.is_file():
            logger.warning("Logo %s is not a local file, skipped", source)
            return
        try:
            with Image.open(path) as img:
                logo = img.convert("RGBA")
        except OSError as exc:
            logger.warning("Cannot read logo %s: %s", source, exc)
            return
        target_h = self._px(height)
        target_w = max(1, round(logo.width * target_h / logo.height))
        logo = logo.resize((target_w, target_h), Image.Resampling.LANCZOS)
        left = self._px(x)
        if align == "right":
            left = self._px(x + width) - target_w
        elif align == "center":
            left = self._px(x + width / 2) - target_w // 2
        self.image.paste(logo, (left, self._px(y)), logo)

    def crop(self, height: float) -> Image.Image:
        """Return the drawn image cut down to `height` logical pixels."""
        return self.image.crop((0, 0, self.image.width, min(self.image.height, self._px(height))))
