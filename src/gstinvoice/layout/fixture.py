"""Deterministic sample document for the live preview of a template.

Used while editing a template that has no real document yet: one intra-state
line of 2 x 1,000 at 18% GST (2,000 + 180 CGST + 180 SGST = 2,360).
"""

from __future__ import annotations

import datetime
from decimal import Decimal

from gstinvoice.documents.models import BillerInfo, Client, InvoiceDocument, LineItem
from gstinvoice.gst.calculator import apply_totals

SAMPLE_BILLER = BillerInfo(
    business_name="Your Business Name",
    gstin="29ABCDE1234F1Z5",
    address_line1="123 Business Street",
    city="Bengaluru",
    state="Karnataka",
    postal_code="123456",
    phone="080-12345678",
    email="accounts@example.com",
    bank_name="Sample Bank",
    account_number="1234567890",
    ifsc_code="SAMP0001234",
    upi_id="business@upi",
)

SAMPLE_CLIENT = Client(
    id="client-sample",
    name="Client Name",
    gstin="29AAAAA0000A1Z5",
    email="client@example.com",
    phone="9876543210",
    address_line1="456 Client Avenue",
    city="Client City",
    state="Karnataka",
    postal_code="654321",
)


def sample_document() -> InvoiceDocument:
    """Return the illustrative invoice shown in template previews."""
    document = InvoiceDocument(
        id="sample",
        number="INV-2025-001",
        document_date=datetime.date(2025, 1, 8),
        due_date=datetime.date(2025, 1, 23),
        biller_info=SAMPLE_BILLER,
        client=SAMPLE_CLIENT,
        line_items=[
            LineItem(
                id="item-sample",
                product_name="Sample Item",
                quantity=Decimal("2"),
                rate=Decimal("1000"),
                discount_percentage=Decimal("0"),
                tax_rate=Decimal("18"),
            )
        ],
        is_inter_state=False,
        notes="Thank you for your business! Payment is due within the specified date.",
        terms_and_conditions="Payment terms and conditions will appear here.",
    )
    return apply_totals(document)
