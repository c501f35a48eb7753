"""Billable documents: line items, parties, invoices and quotations."""

from gstinvoice.documents.models import (
    BillerInfo,
    Client,
    DocumentKind,
    InvoiceDocument,
    InvoiceStatus,
    LineItem,
    QuotationStatus,
)

__all__ = [
    "BillerInfo",
    "Client",
    "DocumentKind",
    "InvoiceDocument",
    "InvoiceStatus",
    "LineItem",
    "QuotationStatus",
]
