"""GST computation (CGST/SGST for intra-state, IGST for inter-state supplies)."""

from gstinvoice.gst.calculator import (
    DocumentTotals,
    LineTaxes,
    apply_totals,
    compute_line,
    compute_line_taxes,
    compute_totals,
    detect_inter_state,
    is_inter_state,
    validate_line_item,
)

__all__ = [
    "DocumentTotals",
    "LineTaxes",
    "apply_totals",
    "compute_line",
    "compute_line_taxes",
    "compute_totals",
    "detect_inter_state",
    "is_inter_state",
    "validate_line_item",
]
