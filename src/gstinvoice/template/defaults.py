"""Seed values: the system default template and the field catalogue.

DEFAULT_TEMPLATE is validated when the module is imported; it is both the
template used when a user has none and the base of every new template.
"""

from __future__ import annotations

import uuid
from typing import Optional

from gstinvoice.template.models import (
    Align,
    ColumnField,
    ColumnFormat,
    FontWeight,
    InvoiceTemplate,
    SectionType,
    TemplateColumn,
    TemplateSection,
    TemplateStyle,
)

# Data fields each section type may surface, in display order.
AVAILABLE_FIELDS: dict[SectionType, tuple[str, ...]] = {
    SectionType.HEADER: ("invoiceNumber", "invoiceDate", "dueDate", "status"),
    SectionType.BILLER_INFO: (
        "businessName",
        "addressLine1",
        "addressLine2",
        "city",
        "state",
        "postalCode",
        "gstin",
        "phone",
        "email",
    ),
    SectionType.CLIENT_INFO: (
        "name",
        "addressLine1",
        "addressLine2",
        "city",
        "state",
        "postalCode",
        "gstin",
        "email",
        "phone",
    ),
    SectionType.LINE_ITEMS: (),
    SectionType.TOTALS: ("subTotal", "totalCGST", "totalSGST", "totalIGST", "grandTotal"),
    SectionType.NOTES: ("notes",),
    SectionType.TERMS: ("termsAndConditions",),
    SectionType.PAYMENT: ("bankName", "accountNumber", "ifscCode", "upiId"),
    SectionType.FOOTER: ("thankYouMessage",),
}

DEFAULT_COLUMNS: tuple[TemplateColumn, ...] = (
    TemplateColumn(id="col_index", label="#", field=ColumnField.INDEX, width=5,
                   align=Align.CENTER, format=ColumnFormat.TEXT),
    TemplateColumn(id="col_product", label="Item / Service", field=ColumnField.PRODUCT_NAME,
                   width=30, format=ColumnFormat.TEXT),
    TemplateColumn(id="col_quantity", label="Qty", field=ColumnField.QUANTITY, width=10,
                   align=Align.RIGHT, format=ColumnFormat.TEXT),
    TemplateColumn(id="col_rate", label="Rate", field=ColumnField.RATE, width=15,
                   align=Align.RIGHT, format=ColumnFormat.CURRENCY),
    TemplateColumn(id="col_discount", label="Disc.", field=ColumnField.DISCOUNT_PERCENTAGE,
                   width=10, align=Align.RIGHT, format=ColumnFormat.PERCENTAGE),
    TemplateColumn(id="col_tax_rate", label="GST", field=ColumnField.TAX_RATE, width=10,
                   align=Align.RIGHT, format=ColumnFormat.PERCENTAGE),
    TemplateColumn(id="col_amount", label="Amount", field=ColumnField.AMOUNT, width=20,
                   align=Align.RIGHT, format=ColumnFormat.CURRENCY),
    TemplateColumn(id="col_cgst", label="CGST", field=ColumnField.CGST, width=10,
                   align=Align.RIGHT, visible=False, format=ColumnFormat.CURRENCY),
    TemplateColumn(id="col_sgst", label="SGST", field=ColumnField.SGST, width=10,
                   align=Align.RIGHT, visible=False, format=ColumnFormat.CURRENCY),
    TemplateColumn(id="col_igst", label="IGST", field=ColumnField.IGST, width=10,
                   align=Align.RIGHT, visible=False, format=ColumnFormat.CURRENCY),
    TemplateColumn(id="col_total", label="Total", field=ColumnField.TOTAL_AMOUNT, width=15,
                   align=Align.RIGHT, visible=False, format=ColumnFormat.CURRENCY),
)

DEFAULT_STYLE = TemplateStyle()

DEFAULT_SECTIONS: tuple[TemplateSection, ...] = (
    TemplateSection(
        id="header", type=SectionType.HEADER, title="", position=1,
        font_size=16, font_weight=FontWeight.BOLD,
        fields=AVAILABLE_FIELDS[SectionType.HEADER][:3],
    ),
    TemplateSection(
        id="billerInfo", type=SectionType.BILLER_INFO, title="From", position=2,
        fields=("businessName", "addressLine1", "addressLine2", "city", "state",
                "postalCode", "gstin"),
    ),
    TemplateSection(
        id="clientInfo", type=SectionType.CLIENT_INFO, title="Bill To", position=3,
        fields=("name", "addressLine1", "addressLine2", "city", "state", "postalCode",
                "gstin"),
    ),
    TemplateSection(
        id="lineItems", type=SectionType.LINE_ITEMS, title="Items", position=4,
        columns=DEFAULT_COLUMNS,
    ),
    TemplateSection(
        id="totals", type=SectionType.TOTALS, title="", position=5,
        fields=AVAILABLE_FIELDS[SectionType.TOTALS],
    ),
    TemplateSection(
        id="notes", type=SectionType.NOTES, title="Notes", position=6,
        fields=("notes",),
    ),
    TemplateSection(
        id="terms", type=SectionType.TERMS, title="Terms & Conditions", position=7,
        fields=("termsAndConditions",),
    ),
    TemplateSection(
        id="payment", type=SectionType.PAYMENT, title="Payment Details", position=8,
        fields=AVAILABLE_FIELDS[SectionType.PAYMENT],
    ),
    TemplateSection(
        id="footer", type=SectionType.FOOTER, title="", position=9, font_size=10,
        fields=("thankYouMessage",),
    ),
)

DEFAULT_TEMPLATE = InvoiceTemplate(
    id="default",
    name="Classic",
    description="Standard GST invoice layout",
    is_public=True,
    is_default=True,
    sections=DEFAULT_SECTIONS,
    style=DEFAULT_STYLE,
)


def new_template(
    name: str,
    description: str = "",
    user_id: Optional[str] = None,
    base: InvoiceTemplate = DEFAULT_TEMPLATE,
    template_id: Optional[str] = None,
) -> InvoiceTemplate:
    """Build a user template from a seed template.

    The copy is private when a user_id is given, is never the default and
    starts with a usage count of 0.
    """
    return base.model_copy(
        update={
            "id": template_id or f"template_{uuid.uuid4().hex[:12]}",
            "name": name,
            "description": description,
            "user_id": user_id,
            "is_public": user_id is None,
            "is_default": False,
            "usage_count": 0,
        }
    )
