"""Tests for the single-page PDF export."""

from __future__ import annotations

import asyncio
import datetime
import threading
import time
from decimal import Decimal
from pathlib import Path

import pytest
from PIL import Image, ImageChops

from gstinvoice.backends.raster import RasterBackend
from gstinvoice.documents.models import BillerInfo, Client, InvoiceDocument, LineItem
from gstinvoice.errors import ExportError
from gstinvoice.export import pipeline
from gstinvoice.export.pipeline import (
    A4,
    ExportOptions,
    build_pdf,
    compose_page,
    compute_placement,
    export_pdf,
    export_pdf_sync,
    page_size,
    rasterize,
    save_pdf,
)
from gstinvoice.gst.calculator import apply_totals
from gstinvoice.layout.renderer import render
from gstinvoice.template.defaults import DEFAULT_TEMPLATE

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_document(lines: int = 1, **kwargs) -> InvoiceDocument:
    defaults = dict(
        number="INV-42",
        document_date=datetime.date(2025, 6, 1),
        biller_info=BillerInfo(business_name="Acme Traders", state="Karnataka"),
        client=Client(name="Globex", state="Karnataka"),
        line_items=[
            LineItem(id=str(i), product_name=f"Item {i}", quantity=Decimal("1"),
                     rate=Decimal("100"), tax_rate=Decimal("12"))
            for i in range(lines)
        ],
    )
    defaults.update(kwargs)
    return apply_totals(InvoiceDocument(**defaults))


def _content_bbox(canvas: Image.Image) -> tuple[int, int, int, int]:
    white = Image.new("RGB", canvas.size, "#FFFFFF")
    return ImageChops.difference(canvas, white).getbbox()


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class TestPlacement:
    def test_wide_content_fills_width(self):
        placement = compute_placement(1588, 2000, 1240, 1754)
        assert placement.x == pytest.approx(0)
        assert placement.width == pytest.approx(1240)
        assert placement.y == pytest.approx((1754 - placement.height) / 2)
        assert placement.width / placement.height == pytest.approx(1588 / 2000)

    def test_tall_content_scaled_down_and_centered(self):
        placement = compute_placement(1000, 5000, 1240, 1754)
        assert placement.height == pytest.approx(1754)
        assert placement.ratio == pytest.approx(1754 / 5000)
        assert placement.x == pytest.approx((1240 - 1000 * placement.ratio) / 2)

    def test_small_content_scaled_up(self):
        placement = compute_placement(100, 50, 200, 200)
        assert placement.ratio == 2
        assert (placement.x, placement.y, placement.width, placement.height) == (0, 50, 200, 100)

    def test_empty_content(self):
        with pytest.raises(ExportError):
            compute_placement(0, 100, 595, 842)


class TestPageSize:
    def test_a4_landscape(self):
        page = page_size("A4", "landscape")
        assert (page.width, page.height) == (A4.height, A4.width)

    def test_pixels(self):
        assert A4.pixels(72) == (595, 842)

    def test_unknown_page(self):
        with pytest.raises(ExportError, match="Unknown page size"):
            page_size("A3")

    def test_unknown_orientation(self):
        with pytest.raises(ExportError):
            page_size("A4", "sideways")


# ---------------------------------------------------------------------------
# Rasterization
# ---------------------------------------------------------------------------


class TestRasterize:
    def test_width_follows_scale(self):
        image = rasterize(render(DEFAULT_TEMPLATE, _make_document()), width=794, scale=2)
        assert image.mode == "RGB"
        assert image.width == 1588
        assert 0 < image.height < 794 * 1.5 * 2

    def test_long_document_repainted_taller(self):
        image = rasterize(render(DEFAULT_TEMPLATE, _make_document(lines=120)), width=794, scale=1)
        assert image.height > 794 * 1.5

    def test_missing_font_file(self):
        tree = render(DEFAULT_TEMPLATE, _make_document())
        with pytest.raises(ExportError, match="Rasterization"):
            rasterize(tree, font_path=Path("/nonexistent/font.ttf"))

    def test_missing_logo_is_skipped(self, caplog):
        biller = BillerInfo(business_name="Acme", logo_url="https://example.com/logo.png")
        tree = render(DEFAULT_TEMPLATE, _make_document(biller_info=biller))
        image = rasterize(tree, scale=1)
        assert image.width == 794
        assert "not a local file" in caplog.text

    def test_local_logo_drawn(self, tmp_path):
        logo_path = tmp_path / "logo.png"
        Image.new("RGB", (200, 100), "#FF0000").save(logo_path)
        biller = BillerInfo(business_name="Acme", logo_url=str(logo_path))
        backend = RasterBackend(400, 200, scale=1)
        backend.draw_image(str(logo_path), 10, 10, 50, "left", 380)
        assert backend.image.getpixel((20, 20)) == (255, 0, 0)
        tree = render(DEFAULT_TEMPLATE, _make_document(biller_info=biller))
        assert rasterize(tree, scale=1).width == 794


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------


class TestBuildPdf:
    def test_single_page_pdf(self):
        data = build_pdf(Image.new("RGB", (800, 1000), "#3F51B5"))
        assert data.startswith(b"%PDF")
        assert b"/Count 1" in data

    @pytest.mark.parametrize("size", [(800, 1000), (1588, 900), (300, 3000)])
    def test_aspect_ratio_preserved(self, size):
        canvas, placement = compose_page(Image.new("RGB", size, "#FF0000"), A4, dpi=72)
        left, top, right, bottom = _content_bbox(canvas)
        assert canvas.size == A4.pixels(72)
        assert (right - left) / (bottom - top) == pytest.approx(size[0] / size[1], rel=0.02)
        assert left == pytest.approx(canvas.width - right, abs=1)
        assert top == pytest.approx(canvas.height - bottom, abs=1)

    def test_landscape_page(self):
        canvas, _ = compose_page(Image.new("RGB", (100, 100)), page_size("A4", "landscape"), dpi=72)
        assert canvas.width > canvas.height


class TestExportPdf:
    def test_export_returns_pdf_bytes(self):
        data = asyncio.run(export_pdf(DEFAULT_TEMPLATE, _make_document()))
        assert data.startswith(b"%PDF")
        assert b"/Count 1" in data

    def test_export_sample_document(self):
        data = asyncio.run(export_pdf(DEFAULT_TEMPLATE, options=ExportOptions(scale=1, dpi=72)))
        assert data.startswith(b"%PDF")

    def test_long_document_still_one_page(self):
        data = asyncio.run(
            export_pdf(DEFAULT_TEMPLATE, _make_document(lines=150), ExportOptions(scale=1, dpi=72))
        )
        assert b"/Count 1" in data

    def test_timeout(self, monkeypatch):
        def slow(*args, **kwargs):
            time.sleep(2.0)
            return b"%PDF"

        monkeypatch.setattr(pipeline, "export_pdf_sync", slow)
        started = time.monotonic()
        with pytest.raises(ExportError, match="timed out"):
            asyncio.run(export_pdf(DEFAULT_TEMPLATE, options=ExportOptions(timeout=0.1)))
        assert time.monotonic() - started < 1.0

    def test_timeout_stops_worker(self, monkeypatch):
        seen = {}

        def slow(template, document, options, cancel):
            seen["cancel"] = cancel
            cancel.wait(2.0)
            raise ExportError("stopped")

        monkeypatch.setattr(pipeline, "export_pdf_sync", slow)
        with pytest.raises(ExportError, match="timed out"):
            asyncio.run(export_pdf(DEFAULT_TEMPLATE, options=ExportOptions(timeout=0.1)))
        assert seen["cancel"].is_set()

    def test_cancellation_stops_worker(self, monkeypatch):
        seen = {}

        def slow(template, document, options, cancel):
            seen["cancel"] = cancel
            cancel.wait(2.0)
            raise ExportError("stopped")

        async def cancel_soon():
            task = asyncio.create_task(export_pdf(DEFAULT_TEMPLATE))
            await asyncio.sleep(0.1)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        monkeypatch.setattr(pipeline, "export_pdf_sync", slow)
        started = time.monotonic()
        asyncio.run(cancel_soon())
        assert time.monotonic() - started < 1.0
        assert seen["cancel"].is_set()

    def test_cancel_event_stops_painting(self):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ExportError, match="cancelled"):
            export_pdf_sync(DEFAULT_TEMPLATE, options=ExportOptions(scale=1, dpi=72), cancel=cancel)

    def test_rasterization_failure(self):
        options = ExportOptions(font_path=Path("/nonexistent/font.ttf"))
        with pytest.raises(ExportError):
            asyncio.run(export_pdf(DEFAULT_TEMPLATE, options=options))


class TestSavePdf:
    def test_writes_file(self, tmp_path):
        path = save_pdf(b"%PDF-1.4 test", tmp_path / "out" / "doc.pdf")
        assert path.read_bytes() == b"%PDF-1.4 test"
        assert [p.name for p in path.parent.iterdir()] == ["doc.pdf"]

    def test_overwrites_existing(self, tmp_path):
        target = tmp_path / "doc.pdf"
        target.write_bytes(b"old")
        save_pdf(b"new", target)
        assert target.read_bytes() == b"new"
