"""Single-page PDF export.

The document is painted onto a supersampled raster image, which is then
scaled uniformly to fit the page and centered on it. Content taller than the
page is shrunk, never split across pages.
"""

from __future__ import annotations

import asyncio
import io
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from PIL import Image

from gstinvoice.backends.base import paint
from gstinvoice.backends.raster import RasterBackend
from gstinvoice.documents.models import InvoiceDocument
from gstinvoice.errors import ExportError
from gstinvoice.layout.nodes import VisualTree
from gstinvoice.layout.renderer import render
from gstinvoice.template.models import InvoiceTemplate

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72


@dataclass(frozen=True)
class PageSize:
    """Page dimensions in PDF points."""

    name: str
    width: float
    height: float

    def landscape(self) -> PageSize:
        return replace(self, width=self.height, height=self.width)

    def pixels(self, dpi: int) -> tuple[int, int]:
        return (
            round(self.width / POINTS_PER_INCH * dpi),
            round(self.height / POINTS_PER_INCH * dpi),
        )


A4 = PageSize("A4", 595.28, 841.89)
LETTER = PageSize("letter", 612.0, 792.0)
PAGE_SIZES = {"A4": A4, "letter": LETTER}


def page_size(name: str, orientation: str = "portrait") -> PageSize:
    try:
        page = PAGE_SIZES[name]
    except KeyError:
        raise ExportError(f"Unknown page size {name!r} (expected {', '.join(PAGE_SIZES)})") from None
    if orientation == "landscape":
        return page.landscape()
    if orientation != "portrait":
        raise ExportError(f"Unknown orientation {orientation!r}")
    return page


@dataclass(frozen=True)
class ExportOptions:
    page: PageSize = A4
    scale: float = 2.0
    dpi: int = 150
    content_width: int = 794
    timeout: float = 30.0
    currency_symbol: str = "Rs."
    font_path: Optional[Path] = None


@dataclass(frozen=True)
class Placement:
    """Where the content image lands on the page, in page units."""

    x: float
    y: float
    width: float
    height: float
    ratio: float


def compute_placement(
    content_width: float, content_height: float, page_width: float, page_height: float
) -> Placement:
    """Uniform scale-to-fit of the content, centered on the page.

    Raises:
        ExportError: Empty content.
    """
    if content_width <= 0 or content_height <= 0:
        raise ExportError(f"Nothing to export: content is {content_width}x{content_height}")
    ratio = min(page_width / content_width, page_height / content_height)
    width = content_width * ratio
    height = content_height * ratio
    return Placement(
        x=(page_width - width) / 2,
        y=(page_height - height) / 2,
        width=width,
        height=height,
        ratio=ratio,
    )


def rasterize(
    tree: VisualTree,
    width: int = 794,
    scale: float = 2.0,
    font_path: Optional[Path] = None,
    cancel: Optional[threading.Event] = None,
) -> Image.Image:
    """Paint the tree onto an image `width * scale` pixels wide, cropped to its content.

    Raises:
        ExportError: Pillow could not draw the document, or `cancel` was set.
    """
    height = width * 1.5
    try:
        for _ in range(2):
            backend = RasterBackend(
                width, height, scale=scale, background=tree.page.background_color,
                font_path=font_path,
            )
            used = paint(tree, backend, width, cancel)
            if used <= height:
                return backend.crop(used)
            logger.debug("Content of %s needs %.0f px, repainting", tree.document_number, used)
            height = used
        return backend.crop(used)
    except (OSError, ValueError) as exc:
        raise ExportError(f"Rasterization of {tree.document_number} failed: {exc}") from exc


def compose_page(image: Image.Image, page: PageSize = A4, dpi: int = 150) -> tuple[Image.Image, Placement]:
    """Scale the content image to fit a white page bitmap and center it."""
    page_w, page_h = page.pixels(dpi)
    placement = compute_placement(image.width, image.height, page_w, page_h)
    scaled = image.resize(
        (max(1, round(placement.width)), max(1, round(placement.height))),
        Image.Resampling.LANCZOS,
    )
    canvas = Image.new("RGB", (page_w, page_h), "#FFFFFF")
    canvas.paste(scaled, (round(placement.x), round(placement.y)))
    return canvas, placement


def build_pdf(image: Image.Image, page: PageSize = A4, dpi: int = 150) -> bytes:
    """Place the image on a single page and encode it as PDF."""
    canvas, _ = compose_page(image, page, dpi)
    buffer = io.BytesIO()
    try:
        canvas.save(buffer, format="PDF", resolution=dpi)
    except (OSError, ValueError) as exc:
        raise ExportError(f"PDF encoding failed: {exc}") from exc
    return buffer.getvalue()


def export_pdf_sync(
    template: InvoiceTemplate,
    document: Optional[InvoiceDocument] = None,
    options: ExportOptions = ExportOptions(),
    cancel: Optional[threading.Event] = None,
) -> bytes:
    """Render, rasterize and encode in the calling thread.

    Setting `cancel` from another thread stops the work at the next block
    boundary with an ExportError.
    """
    tree = render(template, document, currency_symbol=options.currency_symbol)
    image = rasterize(tree, options.content_width, options.scale, options.font_path, cancel)
    if cancel is not None and cancel.is_set():
        raise ExportError(f"Export of {tree.document_number} cancelled")
    return build_pdf(image, options.page, options.dpi)


def _settle(future: asyncio.Future, data: Optional[bytes], error: Optional[Exception]) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(data)


async def export_pdf(
    template: InvoiceTemplate,
    document: Optional[InvoiceDocument] = None,
    options: ExportOptions = ExportOptions(),
) -> bytes:
    """Export a document to a one-page PDF without blocking the event loop.

    The work runs on a daemon thread that nobody joins, so a timeout or a
    cancellation returns control at once. The thread is told to stop and
    drops its buffers at the next block boundary.

    Returns:
        The PDF bytes. Nothing is written to disk.

    Raises:
        ExportError: Rendering failed or took longer than `options.timeout`.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()
    cancel = threading.Event()

    def work() -> None:
        try:
            data, error = export_pdf_sync(template, document, options, cancel), None
        except Exception as exc:
            data, error = None, exc
        try:
            loop.call_soon_threadsafe(_settle, future, data, error)
        except RuntimeError:
            # Event loop already closed: the caller gave up on this export.
            logger.debug("Export with template %s finished after its caller left", template.id)

    threading.Thread(target=work, name=f"export-{template.id}", daemon=True).start()
    try:
        data = await asyncio.wait_for(future, timeout=options.timeout)
    except asyncio.TimeoutError as exc:
        cancel.set()
        raise ExportError(f"Export timed out after {options.timeout}s") from exc
    except asyncio.CancelledError:
        cancel.set()
        logger.warning("Export with template %s cancelled", template.id)
        raise
    logger.info("Exported PDF with template %s (%d bytes)", template.id, len(data))
    return data


def save_pdf(data: bytes, output_path: Path) -> Path:
    """Write the PDF atomically: the target is either complete or untouched."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=output_path.parent, suffix=".pdf.tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, output_path)
    except OSError:
        Path(tmp).unlink(missing_ok=True)
        raise
    return output_path
