"""Exceptions of the document engine.

ValidationError is raised before any computation, RenderError is caught by the
renderer and turned into a placeholder block, ExportError ends one export call.
"""

from __future__ import annotations


class GstInvoiceError(Exception):
    """Base class for every error raised by gstinvoice."""


class ValidationError(GstInvoiceError, ValueError):
    """Invalid line-item input or a mutation referencing an unknown id."""


class RenderError(GstInvoiceError):
    """A section could not be rendered (unknown type or bad field reference)."""

    def __init__(self, message: str, section_id: str | None = None) -> None:
        super().__init__(message)
        self.section_id = section_id


class ExportError(GstInvoiceError):
    """Rasterization failed or the export exceeded its timeout."""
