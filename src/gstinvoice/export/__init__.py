"""PDF export of rendered documents."""

from gstinvoice.export.pipeline import (
    A4,
    LETTER,
    PAGE_SIZES,
    ExportOptions,
    PageSize,
    Placement,
    build_pdf,
    compose_page,
    compute_placement,
    export_pdf,
    export_pdf_sync,
    page_size,
    rasterize,
    save_pdf,
)

__all__ = [
    "A4",
    "LETTER",
    "PAGE_SIZES",
    "ExportOptions",
    "PageSize",
    "Placement",
    "build_pdf",
    "compose_page",
    "compute_placement",
    "export_pdf",
    "export_pdf_sync",
    "page_size",
    "rasterize",
    "save_pdf",
]
