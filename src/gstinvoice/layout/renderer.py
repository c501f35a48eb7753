"""Template + document -> VisualTree.

Visible sections are laid out in position order. Each section type has its
own builder; a builder that cannot produce its block raises RenderError and
the section degrades to a placeholder block while the rest of the document
still renders.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from gstinvoice.documents.models import DocumentKind, InvoiceDocument, LineItem
from gstinvoice.errors import RenderError
from gstinvoice.layout.fixture import sample_document
from gstinvoice.layout.formatting import format_currency, format_date, format_value
from gstinvoice.layout.nodes import (
    PLACEHOLDER,
    BlockNode,
    BlockStyle,
    ColumnNode,
    FieldNode,
    LogoNode,
    PageStyle,
    TableNode,
    VisualTree,
)
from gstinvoice.template.defaults import AVAILABLE_FIELDS
from gstinvoice.template.models import (
    Align,
    ColumnField,
    FontWeight,
    InvoiceTemplate,
    LogoSize,
    SectionType,
    Spacing,
    TemplateColumn,
    TemplateSection,
)

logger = logging.getLogger(__name__)

SPACING_FACTORS = {
    Spacing.COMPACT: 0.5,
    Spacing.NORMAL: 1.0,
    Spacing.SPACIOUS: 1.5,
}

LOGO_HEIGHTS = {
    LogoSize.SMALL: 40,
    LogoSize.MEDIUM: 60,
    LogoSize.LARGE: 80,
}


@dataclass(frozen=True)
class RenderContext:
    template: InvoiceTemplate
    document: InvoiceDocument
    currency_symbol: str

    @property
    def is_quotation(self) -> bool:
        return self.document.kind == DocumentKind.QUOTATION


# ---------------------------------------------------------------------------
# Widths and styles
# ---------------------------------------------------------------------------


def normalize_widths(widths: Sequence[float]) -> list[float]:
    """Scale widths proportionally so that they add up to 100.

    The relative proportions are kept: w_i / sum(w) * 100.
    """
    total = sum(widths)
    if total <= 0:
        return [100 / len(widths)] * len(widths) if widths else []
    return [w / total * 100 for w in widths]


def resolve_style(section: TemplateSection, ctx: RenderContext, align: str = "left") -> BlockStyle:
    """Resolve a section's style against the template style."""
    style = ctx.template.style
    factor = SPACING_FACTORS[style.spacing]
    return BlockStyle(
        text_color=section.text_color or style.text_color,
        background_color=section.background_color,
        accent_color=style.primary_color,
        font_size=section.font_size or style.font_size,
        bold=section.font_weight == FontWeight.BOLD,
        padding=section.padding,
        margin=round(section.margin * factor),
        align=align,
    )


# ---------------------------------------------------------------------------
# Field projection
# ---------------------------------------------------------------------------


def _project(
    section: TemplateSection,
    values: dict[str, tuple[str, Any]],
    emphasis: Sequence[str] = (),
) -> tuple[FieldNode, ...]:
    """Keep only the fields listed by the section, in the listed order.

    `values` maps a field name to (label, formatted value). A listed field
    the section type does not offer is a malformed reference.
    """
    allowed = AVAILABLE_FIELDS[SectionType(section.type)]
    nodes = []
    for name in section.fields:
        if name not in allowed:
            raise RenderError(
                f"Field {name!r} is not available in {section.type} sections",
                section_id=section.id,
            )
        label, value = values[name]
        if value in (None, ""):
            continue
        nodes.append(FieldNode(name=name, label=label, value=str(value),
                               emphasis=name in emphasis))
    return tuple(nodes)


def _party_fields(party: Any, name_field: str, name_attr: str) -> dict[str, tuple[str, Any]]:
    return {
        name_field: ("", getattr(party, name_attr)),
        "addressLine1": ("", party.address_line1),
        "addressLine2": ("", party.address_line2),
        "city": ("", party.city),
        "state": ("", party.state),
        "postalCode": ("", party.postal_code),
        "gstin": ("GSTIN", party.gstin),
        "phone": ("Phone", party.phone),
        "email": ("Email", party.email),
    }


# ---------------------------------------------------------------------------
# Builders, one per section type
# ---------------------------------------------------------------------------


def build_header(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    doc = ctx.document
    number_label = "Quotation #" if ctx.is_quotation else "Invoice #"
    due_label = "Valid Until" if ctx.is_quotation else "Due Date"
    values = {
        "invoiceNumber": (number_label, doc.number),
        "invoiceDate": ("Date", format_date(doc.document_date)),
        "dueDate": (due_label, format_date(doc.due_date) if doc.due_date else ""),
        "status": ("Status", doc.status.title()),
    }
    style = ctx.template.style
    logo = None
    if doc.biller_info.logo_url:
        logo = LogoNode(
            source=doc.biller_info.logo_url,
            align=style.logo_position.value,
            height=LOGO_HEIGHTS[style.logo_size],
        )
    return BlockNode(
        kind=SectionType.HEADER.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx),
        heading=doc.title,
        fields=_project(section, values),
        logo=logo,
    )


def build_biller_info(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    values = _party_fields(ctx.document.biller_info, "businessName", "business_name")
    return BlockNode(
        kind=SectionType.BILLER_INFO.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx),
        fields=_project(section, values, emphasis=("businessName",)),
    )


def build_client_info(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    values = _party_fields(ctx.document.client, "name", "name")
    return BlockNode(
        kind=SectionType.CLIENT_INFO.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx),
        fields=_project(section, values, emphasis=("name",)),
    )


def _cell(item: LineItem, index: int, column: TemplateColumn, ctx: RenderContext) -> str:
    field = column.field
    if field == ColumnField.CUSTOM:
        return ""
    if field == ColumnField.INDEX:
        return str(index)
    if field == ColumnField.PRODUCT_NAME:
        return item.product_name
    value: Decimal = {
        ColumnField.QUANTITY: item.quantity,
        ColumnField.RATE: item.rate,
        ColumnField.DISCOUNT_PERCENTAGE: item.discount_percentage,
        ColumnField.TAX_RATE: item.tax_rate,
        ColumnField.AMOUNT: item.amount,
        ColumnField.CGST: item.cgst,
        ColumnField.SGST: item.sgst,
        ColumnField.IGST: item.igst,
        ColumnField.TOTAL_AMOUNT: item.total_amount,
    }[field]
    return format_value(value, column.format, ctx.currency_symbol)


def build_line_items(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    if section.columns is None:
        raise RenderError(f"Section {section.id!r} has no column definitions", section_id=section.id)

    visible = [c for c in section.columns if c.visible]
    widths = normalize_widths([c.width for c in visible])
    columns = tuple(
        ColumnNode(id=c.id, label=c.label, field=c.field.value, align=c.align.value, width=w)
        for c, w in zip(visible, widths)
    )
    rows = tuple(
        tuple(_cell(item, i, c, ctx) for c in visible)
        for i, item in enumerate(ctx.document.line_items, start=1)
    )
    style = ctx.template.style
    table = TableNode(
        columns=columns,
        rows=rows,
        header_background=style.primary_color,
        header_color="#FFFFFF",
        border_style=style.border_style.value,
    )
    return BlockNode(
        kind=SectionType.LINE_ITEMS.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx),
        table=table,
    )


def build_totals(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    doc = ctx.document
    symbol = ctx.currency_symbol
    inter = doc.is_inter_state
    # Only the lines of the document's tax regime are shown.
    values = {
        "subTotal": ("Sub Total", format_currency(doc.sub_total, symbol)),
        "totalCGST": ("CGST", None if inter else format_currency(doc.total_cgst, symbol)),
        "totalSGST": ("SGST", None if inter else format_currency(doc.total_sgst, symbol)),
        "totalIGST": ("IGST", format_currency(doc.total_igst, symbol) if inter else None),
        "grandTotal": ("Grand Total", format_currency(doc.grand_total, symbol)),
    }
    return BlockNode(
        kind=SectionType.TOTALS.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx, align=Align.RIGHT.value),
        fields=_project(section, values, emphasis=("grandTotal",)),
    )


def build_notes(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    return BlockNode(
        kind=SectionType.NOTES.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx),
        fields=_project(section, {"notes": ("", ctx.document.notes)}),
    )


def build_terms(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    values = {"termsAndConditions": ("", ctx.document.terms_and_conditions)}
    return BlockNode(
        kind=SectionType.TERMS.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx),
        fields=_project(section, values),
    )


def build_payment(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    biller = ctx.document.biller_info
    values = {
        "bankName": ("Bank", biller.bank_name),
        "accountNumber": ("Account No.", biller.account_number),
        "ifscCode": ("IFSC", biller.ifsc_code),
        "upiId": ("UPI", biller.upi_id),
    }
    return BlockNode(
        kind=SectionType.PAYMENT.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx),
        fields=_project(section, values),
    )


def build_footer(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    values = {"thankYouMessage": ("", ctx.document.thank_you_message)}
    return BlockNode(
        kind=SectionType.FOOTER.value,
        section_id=section.id,
        title=section.title,
        style=resolve_style(section, ctx, align=Align.CENTER.value),
        fields=_project(section, values),
    )


Builder = Callable[[TemplateSection, RenderContext], BlockNode]

BUILDERS: dict[SectionType, Builder] = {
    SectionType.HEADER: build_header,
    SectionType.BILLER_INFO: build_biller_info,
    SectionType.CLIENT_INFO: build_client_info,
    SectionType.LINE_ITEMS: build_line_items,
    SectionType.TOTALS: build_totals,
    SectionType.NOTES: build_notes,
    SectionType.TERMS: build_terms,
    SectionType.PAYMENT: build_payment,
    SectionType.FOOTER: build_footer,
}


def render_section(section: TemplateSection, ctx: RenderContext) -> BlockNode:
    """Build the block of one section, or a placeholder if it cannot be built."""
    try:
        builder = BUILDERS.get(section.type) if isinstance(section.type, SectionType) else None
        if builder is None:
            raise RenderError(f"Unsupported section type {section.type!r}", section_id=section.id)
        return builder(section, ctx)
    except RenderError as exc:
        logger.warning("Section %s rendered as placeholder: %s", section.id, exc)
        return BlockNode(
            kind=PLACEHOLDER,
            section_id=section.id,
            title=section.title,
            style=resolve_style(section, ctx),
            error=str(exc),
        )


def render(
    template: InvoiceTemplate,
    data: Optional[InvoiceDocument] = None,
    *,
    currency_symbol: str = "₹",
) -> VisualTree:
    """Lay out `data` with `template`.

    Args:
        template: Template to apply.
        data: Document to show; the sample document when None (live preview).
        currency_symbol: Prefix of currency-formatted values.

    Returns:
        The visual tree of the visible sections in position order.
    """
    document = data if data is not None else sample_document()
    ctx = RenderContext(template=template, document=document, currency_symbol=currency_symbol)
    blocks = tuple(
        render_section(section, ctx)
        for section in template.ordered_sections
        if section.visible
    )
    style = template.style
    page = PageStyle(
        background_color=style.background_color,
        text_color=style.text_color,
        primary_color=style.primary_color,
        secondary_color=style.secondary_color,
        font_family=style.font_family,
        font_size=style.font_size,
        border_style=style.border_style.value,
    )
    logger.debug(
        "Rendered %s with template %s: %d blocks", document.number, template.id, len(blocks)
    )
    return VisualTree(
        template_id=template.id,
        document_number=document.number,
        page=page,
        blocks=blocks,
    )
