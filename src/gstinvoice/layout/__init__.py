"""Layout: turns a template and a document into a backend-independent VisualTree."""

from gstinvoice.layout.fixture import sample_document
from gstinvoice.layout.formatting import (
    format_amount,
    format_currency,
    format_date,
    format_percentage,
    format_value,
    group_indian,
)
from gstinvoice.layout.nodes import (
    BlockNode,
    BlockStyle,
    ColumnNode,
    FieldNode,
    LogoNode,
    PageStyle,
    TableNode,
    VisualTree,
)
from gstinvoice.layout.renderer import BUILDERS, normalize_widths, render, render_section

__all__ = [
    "BUILDERS",
    "BlockNode",
    "BlockStyle",
    "ColumnNode",
    "FieldNode",
    "LogoNode",
    "PageStyle",
    "TableNode",
    "VisualTree",
    "format_amount",
    "format_currency",
    "format_date",
    "format_percentage",
    "format_value",
    "group_indian",
    "normalize_widths",
    "render",
    "render_section",
]
