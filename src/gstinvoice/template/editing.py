"""Pure editing operations on templates.

Each function takes the current InvoiceTemplate and returns the next one; the
input is never modified. An unknown section or column id, or a patch that
would produce an invalid template, raises ValidationError.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Optional, TypeVar

import pydantic
from pydantic import BaseModel

from gstinvoice.errors import ValidationError
from gstinvoice.template.models import (
    Align,
    ColumnField,
    ColumnFormat,
    FontWeight,
    InvoiceTemplate,
    SectionType,
    TemplateColumn,
    TemplateSection,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _resolve_keys(model_cls: type[BaseModel], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Map patch keys (field names or camelCase aliases) to field names."""
    by_alias = {f.alias: name for name, f in model_cls.model_fields.items() if f.alias}
    resolved: dict[str, Any] = {}
    for key, value in patch.items():
        if key in model_cls.model_fields:
            resolved[key] = value
        elif key in by_alias:
            resolved[by_alias[key]] = value
        else:
            raise ValidationError(f"Unknown {model_cls.__name__} attribute: {key!r}")
    return resolved


def _validate(model_cls: type[M], data: dict[str, Any]) -> M:
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(str(exc)) from exc


def _merge(model: M, patch: Mapping[str, Any]) -> M:
    """Return a validated copy of `model` with `patch` merged in."""
    data = model.model_dump()
    data.update(_resolve_keys(type(model), patch))
    return _validate(type(model), data)


def _with_sections(
    template: InvoiceTemplate, sections: Sequence[TemplateSection]
) -> InvoiceTemplate:
    data = template.model_dump()
    data["sections"] = [s.model_dump() for s in sections]
    return _validate(InvoiceTemplate, data)


def _require_section(template: InvoiceTemplate, section_id: str) -> TemplateSection:
    section = template.find_section(section_id)
    if section is None:
        raise ValidationError(f"Section {section_id!r} not found in template {template.id!r}")
    return section


def renumber(sections: Sequence[TemplateSection]) -> list[TemplateSection]:
    """Reassign positions 1..N following the current position order.

    List order is kept; only the position values change.
    """
    rank = {
        s.id: i
        for i, s in enumerate(sorted(sections, key=lambda s: s.position), start=1)
    }
    return [s.model_copy(update={"position": rank[s.id]}) for s in sections]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def add_section(
    template: InvoiceTemplate,
    section_id: Optional[str] = None,
    section_type: SectionType = SectionType.NOTES,
    title: str = "New Section",
) -> InvoiceTemplate:
    """Append a visible section with default style at position N+1."""
    section = TemplateSection(
        id=section_id or f"section_{uuid.uuid4().hex[:8]}",
        type=section_type,
        title=title,
        visible=True,
        position=len(template.sections) + 1,
        text_color="#212529",
        font_size=12,
        font_weight=FontWeight.NORMAL,
        padding=10,
        margin=10,
        fields=(),
    )
    if template.find_section(section.id) is not None:
        raise ValidationError(f"Section {section.id!r} already exists in template {template.id!r}")
    logger.debug("Adding section %s to template %s", section.id, template.id)
    return _with_sections(template, [*template.sections, section])


def update_section(
    template: InvoiceTemplate, section_id: str, patch: Mapping[str, Any]
) -> InvoiceTemplate:
    """Merge `patch` into the section `section_id`.

    Raises:
        ValidationError: Unknown section, unknown attribute or invalid value.
    """
    _require_section(template, section_id)
    sections = [
        _merge(s, patch) if s.id == section_id else s for s in template.sections
    ]
    return _with_sections(template, sections)


def remove_section(template: InvoiceTemplate, section_id: str) -> InvoiceTemplate:
    """Remove a section and renumber the remaining ones to 1..N."""
    _require_section(template, section_id)
    remaining = [s for s in template.sections if s.id != section_id]
    logger.debug("Removing section %s from template %s", section_id, template.id)
    return _with_sections(template, renumber(remaining))


# ---------------------------------------------------------------------------
# Columns of the (first) lineItems section
# ---------------------------------------------------------------------------


def _require_line_items(template: InvoiceTemplate) -> TemplateSection:
    section = template.line_items_section
    if section is None:
        raise ValidationError(f"Template {template.id!r} has no lineItems section")
    return section


def replace_columns(
    template: InvoiceTemplate, columns: Sequence[TemplateColumn]
) -> InvoiceTemplate:
    """Return a template whose lineItems section carries `columns`."""
    section = _require_line_items(template)
    ids = [c.id for c in columns]
    if len(set(ids)) != len(ids):
        raise ValidationError(f"Duplicate column ids in section {section.id!r}")
    updated = section.model_copy(update={"columns": tuple(columns)})
    sections = [updated if s.id == section.id else s for s in template.sections]
    return _with_sections(template, sections)


def add_column(
    template: InvoiceTemplate,
    column_id: Optional[str] = None,
    label: str = "New Column",
    field: ColumnField = ColumnField.CUSTOM,
    width: float = 15,
) -> InvoiceTemplate:
    """Append a visible, left-aligned text column to the line-items table."""
    section = _require_line_items(template)
    column = _validate(
        TemplateColumn,
        {
            "id": column_id or f"col_{uuid.uuid4().hex[:8]}",
            "label": label,
            "field": field,
            "width": width,
            "align": Align.LEFT,
            "visible": True,
            "format": ColumnFormat.TEXT,
        },
    )
    return replace_columns(template, [*(section.columns or ()), column])


def _require_column(section: TemplateSection, column_id: str) -> None:
    if not any(c.id == column_id for c in section.columns or ()):
        raise ValidationError(f"Column {column_id!r} not found in section {section.id!r}")


def update_column(
    template: InvoiceTemplate, column_id: str, patch: Mapping[str, Any]
) -> InvoiceTemplate:
    """Merge `patch` into the column `column_id` of the line-items table."""
    section = _require_line_items(template)
    _require_column(section, column_id)
    columns = [
        _merge(c, patch) if c.id == column_id else c for c in section.columns or ()
    ]
    return replace_columns(template, columns)


def remove_column(template: InvoiceTemplate, column_id: str) -> InvoiceTemplate:
    """Remove a column from the line-items table."""
    section = _require_line_items(template)
    _require_column(section, column_id)
    return replace_columns(
        template, [c for c in section.columns or () if c.id != column_id]
    )


# ---------------------------------------------------------------------------
# Template-level attributes
# ---------------------------------------------------------------------------


def update_style(template: InvoiceTemplate, patch: Mapping[str, Any]) -> InvoiceTemplate:
    """Merge `patch` into the global style."""
    style = _merge(template.style, patch)
    return template.model_copy(update={"style": style})


def update_details(template: InvoiceTemplate, patch: Mapping[str, Any]) -> InvoiceTemplate:
    """Change name, description, visibility or default flag."""
    editable = {"name", "description", "isPublic", "is_public", "isDefault", "is_default"}
    rejected = set(patch) - editable
    if rejected:
        raise ValidationError(
            f"Only name, description, is_public and is_default can be changed here "
            f"(got {', '.join(sorted(rejected))})"
        )
    return _merge(template, patch)


def record_usage(template: InvoiceTemplate) -> InvoiceTemplate:
    """Return a copy with usage_count incremented by one."""
    return template.model_copy(update={"usage_count": template.usage_count + 1})
