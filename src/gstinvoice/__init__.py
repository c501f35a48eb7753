"""gstinvoice - GST invoice engine: tax computation, document templates and PDF export."""

__version__ = "0.1.0"
