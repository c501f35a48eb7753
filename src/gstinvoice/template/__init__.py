"""Document templates: schema, seed values, editing and ordering operations."""

from gstinvoice.template.defaults import (
    AVAILABLE_FIELDS,
    DEFAULT_COLUMNS,
    DEFAULT_SECTIONS,
    DEFAULT_STYLE,
    DEFAULT_TEMPLATE,
    new_template,
)
from gstinvoice.template.editing import (
    add_column,
    add_section,
    record_usage,
    remove_column,
    remove_section,
    replace_columns,
    update_column,
    update_details,
    update_section,
    update_style,
)
from gstinvoice.template.models import (
    Align,
    BorderStyle,
    ColumnField,
    ColumnFormat,
    FontWeight,
    InvoiceTemplate,
    LogoSize,
    SectionType,
    Spacing,
    TemplateColumn,
    TemplateSection,
    TemplateStyle,
)
from gstinvoice.template.ordering import (
    ColumnDirection,
    SectionDirection,
    move_column,
    move_section,
    move_template_column,
)

__all__ = [
    "AVAILABLE_FIELDS",
    "DEFAULT_COLUMNS",
    "DEFAULT_SECTIONS",
    "DEFAULT_STYLE",
    "DEFAULT_TEMPLATE",
    "Align",
    "BorderStyle",
    "ColumnDirection",
    "ColumnField",
    "ColumnFormat",
    "FontWeight",
    "InvoiceTemplate",
    "LogoSize",
    "SectionDirection",
    "SectionType",
    "Spacing",
    "TemplateColumn",
    "TemplateSection",
    "TemplateStyle",
    "add_column",
    "add_section",
    "move_column",
    "move_section",
    "move_template_column",
    "new_template",
    "record_usage",
    "remove_column",
    "remove_section",
    "replace_columns",
    "update_column",
    "update_details",
    "update_section",
    "update_style",
]
