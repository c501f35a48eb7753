"""Data models for billable documents.

LineItem, Client, BillerInfo and InvoiceDocument (which also carries
quotations). Field names are snake_case in Python and camelCase on the wire,
so records exported by the document store validate as-is.
"""

from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

ZERO = Decimal("0")


def to_decimal(v: object) -> Decimal:
    """Coerce a numeric input to Decimal, going through str for floats.

    Raises:
        ValueError: The input is not a number.
    """
    if isinstance(v, Decimal):
        return v
    if isinstance(v, float):
        return Decimal(str(v))
    try:
        return Decimal(v)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"{v!r} is not a number") from exc


class Record(BaseModel):
    """Base for immutable store records (camelCase aliases, snake_case names)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class DocumentKind(str, Enum):
    """Kind of billable document."""

    INVOICE = "invoice"
    QUOTATION = "quotation"


class InvoiceStatus(str, Enum):
    """Status of an invoice."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class QuotationStatus(str, Enum):
    """Status of a quotation."""

    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


STATUSES: dict[DocumentKind, type[Enum]] = {
    DocumentKind.INVOICE: InvoiceStatus,
    DocumentKind.QUOTATION: QuotationStatus,
}


class LineItem(Record):
    """One billable product or service line.

    The derived fields (amount, cgst, sgst, igst, total_amount) are filled by
    gstinvoice.gst.calculator and must be recomputed whenever an input changes.
    """

    id: str = ""
    product_name: str
    quantity: Decimal
    rate: Decimal
    discount_percentage: Decimal = ZERO
    tax_rate: Decimal = ZERO
    amount: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    total_amount: Decimal = ZERO

    @field_validator(
        "quantity",
        "rate",
        "discount_percentage",
        "tax_rate",
        "amount",
        "cgst",
        "sgst",
        "igst",
        "total_amount",
        mode="before",
    )
    @classmethod
    def _coerce_decimal(cls, v: object) -> Decimal:
        return to_decimal(v)


class Client(Record):
    """Customer billed by the document (also used for the shipping address)."""

    id: str = ""
    name: str
    gstin: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address_line1: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "India"


class BillerInfo(Record):
    """Business issuing the document, with its bank details."""

    business_name: str
    gstin: str = ""
    address_line1: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "India"
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    upi_id: Optional[str] = None


class InvoiceDocument(Record):
    """Invoice or quotation with its line items and GST totals.

    `due_date` holds the payment due date of an invoice, or the validity
    limit of a quotation. Totals are only trustworthy once the document went
    through gstinvoice.gst.calculator.apply_totals.
    """

    id: str = ""
    kind: DocumentKind = DocumentKind.INVOICE
    number: str = Field(
        validation_alias=AliasChoices("number", "invoiceNumber", "quotationNumber")
    )
    document_date: datetime.date = Field(
        validation_alias=AliasChoices(
            "documentDate", "document_date", "invoiceDate", "quotationDate"
        )
    )
    due_date: Optional[datetime.date] = Field(
        default=None,
        validation_alias=AliasChoices("dueDate", "due_date", "validUntil"),
    )
    biller_info: BillerInfo
    client: Client
    shipping_address: Optional[Client] = None
    line_items: list[LineItem] = Field(default_factory=list)
    is_inter_state: bool = False
    notes: str = ""
    terms_and_conditions: str = ""
    thank_you_message: str = "Thank you for your business!"
    sub_total: Decimal = ZERO
    total_cgst: Decimal = Field(default=ZERO, alias="totalCGST")
    total_sgst: Decimal = Field(default=ZERO, alias="totalSGST")
    total_igst: Decimal = Field(default=ZERO, alias="totalIGST")
    grand_total: Decimal = ZERO
    status: str = "draft"

    @field_validator(
        "sub_total", "total_cgst", "total_sgst", "total_igst", "grand_total", mode="before"
    )
    @classmethod
    def _coerce_decimal(cls, v: object) -> Decimal:
        return to_decimal(v)

    @field_validator("status")
    @classmethod
    def _check_status(cls, v: str, info: ValidationInfo) -> str:
        v = getattr(v, "value", v)
        kind = info.data.get("kind", DocumentKind.INVOICE)
        allowed = [s.value for s in STATUSES[kind]]
        if v not in allowed:
            raise ValueError(
                f"Invalid {kind.value} status: {v!r}. Valid statuses: {', '.join(allowed)}"
            )
        return v

    @property
    def place_of_supply(self) -> str:
        """State where the goods or services are delivered."""
        if self.shipping_address is not None and self.shipping_address.state:
            return self.shipping_address.state
        return self.client.state

    @property
    def title(self) -> str:
        """Heading printed on the document."""
        return "QUOTATION" if self.kind == DocumentKind.QUOTATION else "INVOICE"
