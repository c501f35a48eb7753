"""Document template schema: sections, line-item columns and global style.

Templates are immutable values. Every change goes through the pure functions
of gstinvoice.template.editing and gstinvoice.template.ordering, which
return a new InvoiceTemplate.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import Field, model_validator

from gstinvoice.documents.models import Record


class SectionType(str, Enum):
    """Kinds of blocks a template can contain."""

    HEADER = "header"
    BILLER_INFO = "billerInfo"
    CLIENT_INFO = "clientInfo"
    LINE_ITEMS = "lineItems"
    TOTALS = "totals"
    NOTES = "notes"
    TERMS = "terms"
    PAYMENT = "payment"
    FOOTER = "footer"


class ColumnField(str, Enum):
    """Line-item attribute shown by a table column."""

    INDEX = "index"
    PRODUCT_NAME = "productName"
    QUANTITY = "quantity"
    RATE = "rate"
    DISCOUNT_PERCENTAGE = "discountPercentage"
    TAX_RATE = "taxRate"
    AMOUNT = "amount"
    CGST = "cgst"
    SGST = "sgst"
    IGST = "igst"
    TOTAL_AMOUNT = "totalAmount"
    CUSTOM = "custom"


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ColumnFormat(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"


class FontWeight(str, Enum):
    NORMAL = "normal"
    BOLD = "bold"


class LogoSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class Spacing(str, Enum):
    COMPACT = "compact"
    NORMAL = "normal"
    SPACIOUS = "spacious"


class BorderStyle(str, Enum):
    NONE = "none"
    MINIMAL = "minimal"
    FULL = "full"


class TemplateColumn(Record):
    """One column of the line-items table. Order is the list order."""

    id: str
    label: str
    field: ColumnField = ColumnField.CUSTOM
    width: float = Field(default=15, ge=5, le=50)
    align: Align = Align.LEFT
    visible: bool = True
    format: ColumnFormat = ColumnFormat.TEXT


class TemplateSection(Record):
    """One configurable block of a template.

    `type` accepts unknown strings so that templates written by a newer
    editor still load; the renderer turns such sections into placeholders.
    `fields` is the allow-list of data fields to show (ignored by lineItems),
    `columns` is only meaningful for lineItems. Unset colors and font size
    fall back to the template style.
    """

    id: str
    type: Union[SectionType, str] = Field(union_mode="left_to_right")
    title: str = ""
    visible: bool = True
    position: int = Field(ge=1)
    text_color: Optional[str] = None
    background_color: Optional[str] = None
    font_size: Optional[int] = Field(default=None, ge=6, le=72)
    font_weight: FontWeight = FontWeight.NORMAL
    padding: int = Field(default=10, ge=0)
    margin: int = Field(default=10, ge=0)
    fields: tuple[str, ...] = ()
    columns: Optional[tuple[TemplateColumn, ...]] = None


class TemplateStyle(Record):
    """Global look of a template; sections fall back to these values."""

    primary_color: str = "#3F51B5"
    secondary_color: str = "#FF9800"
    background_color: str = "#FFFFFF"
    text_color: str = "#212121"
    font_family: str = "Helvetica"
    font_size: int = Field(default=12, ge=6, le=72)
    logo_position: Align = Align.LEFT
    logo_size: LogoSize = LogoSize.MEDIUM
    spacing: Spacing = Spacing.NORMAL
    border_style: BorderStyle = BorderStyle.MINIMAL


class InvoiceTemplate(Record):
    """Reusable, ordered set of sections plus a style.

    Section positions always form the contiguous set {1..N} and section ids
    are unique.
    """

    id: str
    name: str
    description: str = ""
    is_public: bool = False
    is_default: bool = False
    user_id: Optional[str] = None
    sections: tuple[TemplateSection, ...] = ()
    style: TemplateStyle = Field(default_factory=TemplateStyle)
    usage_count: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_sections(self) -> InvoiceTemplate:
        ids = [s.id for s in self.sections]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate section ids in template {self.id!r}")
        positions = sorted(s.position for s in self.sections)
        if positions != list(range(1, len(self.sections) + 1)):
            raise ValueError(
                f"Section positions must be exactly 1..{len(self.sections)}, got {positions}"
            )
        return self

    @property
    def ordered_sections(self) -> list[TemplateSection]:
        """Sections sorted by position."""
        return sorted(self.sections, key=lambda s: s.position)

    def find_section(self, section_id: str) -> Optional[TemplateSection]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    @property
    def line_items_section(self) -> Optional[TemplateSection]:
        """First lineItems section in position order, the one columns apply to."""
        for section in self.ordered_sections:
            if section.type == SectionType.LINE_ITEMS:
                return section
        return None
