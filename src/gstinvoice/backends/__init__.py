"""Drawing backends: HTML preview (Jinja2) and raster image (Pillow)."""

from gstinvoice.backends.base import DrawingBackend, paint, paint_block, wrap_text
from gstinvoice.backends.html import render_html, write_html
from gstinvoice.backends.raster import RasterBackend

__all__ = [
    "DrawingBackend",
    "RasterBackend",
    "paint",
    "paint_block",
    "render_html",
    "wrap_text",
    "write_html",
]
