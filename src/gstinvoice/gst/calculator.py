"""GST computation: line amounts, CGST/SGST/IGST split and document totals.

All arithmetic uses Decimal. Intermediate values keep full precision; only
the values handed back to the caller are quantized to the paisa with
ROUND_HALF_UP. Intra-state supplies split the tax into equal CGST and SGST
halves, inter-state supplies carry the whole tax as IGST.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from gstinvoice.documents.models import InvoiceDocument, LineItem
from gstinvoice.errors import ValidationError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def _q(value: Decimal) -> Decimal:
    """Quantize an amount to 2 decimal places."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineTaxes:
    """Unrounded breakdown of one line."""

    amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal

    @property
    def total(self) -> Decimal:
        return self.amount + self.cgst + self.sgst + self.igst


@dataclass(frozen=True)
class DocumentTotals:
    """Rounded totals of a document.

    grand_total is the sum of the four rounded components, so the identity
    grand_total == sub_total + total_cgst + total_sgst + total_igst holds
    exactly on the presented values.
    """

    sub_total: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    total_igst: Decimal
    grand_total: Decimal

    @property
    def total_tax(self) -> Decimal:
        return self.total_cgst + self.total_sgst + self.total_igst


def validate_line_item(item: LineItem) -> None:
    """Check the numeric inputs of a line item.

    Raises:
        ValidationError: quantity <= 0, rate < 0, discount outside [0, 100]
            or tax rate < 0.
    """
    label = item.id or item.product_name
    if item.quantity <= ZERO:
        raise ValidationError(f"Line {label!r}: quantity must be > 0 (got {item.quantity})")
    if item.rate < ZERO:
        raise ValidationError(f"Line {label!r}: rate must be >= 0 (got {item.rate})")
    if not ZERO <= item.discount_percentage <= HUNDRED:
        raise ValidationError(
            f"Line {label!r}: discount must be between 0 and 100 "
            f"(got {item.discount_percentage})"
        )
    if item.tax_rate < ZERO:
        raise ValidationError(f"Line {label!r}: tax rate must be >= 0 (got {item.tax_rate})")


def compute_line_taxes(item: LineItem, is_inter_state: bool) -> LineTaxes:
    """Compute the full-precision amount and tax split of one line.

    Args:
        item: Line item (only quantity, rate, discount and tax rate are read).
        is_inter_state: True for an inter-state supply (IGST).

    Returns:
        LineTaxes with unrounded values.
    """
    validate_line_item(item)

    amount = item.quantity * item.rate * (1 - item.discount_percentage / HUNDRED)
    line_tax = amount * item.tax_rate / HUNDRED

    if is_inter_state:
        return LineTaxes(amount=amount, cgst=ZERO, sgst=ZERO, igst=line_tax)
    half = line_tax / 2
    return LineTaxes(amount=amount, cgst=half, sgst=half, igst=ZERO)


def compute_line(item: LineItem, is_inter_state: bool) -> LineItem:
    """Return a copy of the line with its derived fields filled and rounded."""
    taxes = compute_line_taxes(item, is_inter_state)
    amount = _q(taxes.amount)
    cgst = _q(taxes.cgst)
    sgst = _q(taxes.sgst)
    igst = _q(taxes.igst)
    return item.model_copy(
        update={
            "amount": amount,
            "cgst": cgst,
            "sgst": sgst,
            "igst": igst,
            "total_amount": amount + cgst + sgst + igst,
        }
    )


def compute_totals(items: Iterable[LineItem], is_inter_state: bool) -> DocumentTotals:
    """Aggregate the lines of a document.

    Every line is validated before anything is summed, so an invalid line
    never yields partial totals.

    Raises:
        ValidationError: If one of the lines has invalid inputs.
    """
    lines = list(items)
    for item in lines:
        validate_line_item(item)

    sub_total = total_cgst = total_sgst = total_igst = ZERO
    for item in lines:
        taxes = compute_line_taxes(item, is_inter_state)
        sub_total += taxes.amount
        total_cgst += taxes.cgst
        total_sgst += taxes.sgst
        total_igst += taxes.igst

    sub_total = _q(sub_total)
    total_cgst = _q(total_cgst)
    total_sgst = _q(total_sgst)
    total_igst = _q(total_igst)

    return DocumentTotals(
        sub_total=sub_total,
        total_cgst=total_cgst,
        total_sgst=total_sgst,
        total_igst=total_igst,
        grand_total=sub_total + total_cgst + total_sgst + total_igst,
    )


def apply_totals(document: InvoiceDocument) -> InvoiceDocument:
    """Return a copy of the document with every line and total recomputed.

    Raises:
        ValidationError: If one of the lines has invalid inputs.
    """
    totals = compute_totals(document.line_items, document.is_inter_state)
    lines = [compute_line(item, document.is_inter_state) for item in document.line_items]
    logger.debug(
        "Totals for %s: sub_total=%s grand_total=%s",
        document.number,
        totals.sub_total,
        totals.grand_total,
    )
    return document.model_copy(
        update={
            "line_items": lines,
            "sub_total": totals.sub_total,
            "total_cgst": totals.total_cgst,
            "total_sgst": totals.total_sgst,
            "total_igst": totals.total_igst,
            "grand_total": totals.grand_total,
        }
    )


def _normalize_state(state: str) -> str:
    return " ".join(state.split()).casefold()


def is_inter_state(biller_state: str, supply_state: str) -> bool:
    """Tell whether a supply crosses state lines.

    Comparison ignores case and extra whitespace. When either state is
    unknown the supply is treated as intra-state.
    """
    if not biller_state.strip() or not supply_state.strip():
        logger.debug("State missing, defaulting to intra-state supply")
        return False
    return _normalize_state(biller_state) != _normalize_state(supply_state)


def detect_inter_state(document: InvoiceDocument) -> InvoiceDocument:
    """Return a copy whose is_inter_state flag follows biller and supply states."""
    flag = is_inter_state(document.biller_info.state, document.place_of_supply)
    return document.model_copy(update={"is_inter_state": flag})
