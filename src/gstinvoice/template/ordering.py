"""Reordering of sections and line-item columns.

Sections carry an explicit position; moving one swaps its position with the
neighbour. Columns have no position field: their order is the list order and
moving one swaps two adjacent elements. Moves past either end are no-ops.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Union

from gstinvoice.errors import ValidationError
from gstinvoice.template.editing import replace_columns
from gstinvoice.template.models import InvoiceTemplate, TemplateColumn


class SectionDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class ColumnDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"


def _direction(value: Union[str, Enum], enum_cls: type[Enum]) -> Enum:
    try:
        return enum_cls(value)
    except ValueError:
        expected = ", ".join(d.value for d in enum_cls)
        raise ValidationError(f"Invalid direction {value!r} (expected {expected})") from None


def move_section(
    template: InvoiceTemplate,
    section_id: str,
    direction: Union[SectionDirection, str],
) -> InvoiceTemplate:
    """Move a section one step up or down.

    Args:
        template: Current template.
        section_id: Section to move.
        direction: "up" (towards position 1) or "down".

    Returns:
        A new template with the two position values swapped, or `template`
        itself when the section is already first (up) or last (down).

    Raises:
        ValidationError: Unknown section id or direction.
    """
    step = _direction(direction, SectionDirection)
    section = template.find_section(section_id)
    if section is None:
        raise ValidationError(f"Section {section_id!r} not found in template {template.id!r}")

    target = section.position - 1 if step == SectionDirection.UP else section.position + 1
    if target < 1 or target > len(template.sections):
        return template

    neighbour = next(s for s in template.sections if s.position == target)
    sections = []
    for s in template.sections:
        if s.id == section.id:
            sections.append(s.model_copy(update={"position": target}))
        elif s.id == neighbour.id:
            sections.append(s.model_copy(update={"position": section.position}))
        else:
            sections.append(s)
    return template.model_copy(update={"sections": tuple(sections)})


def move_column(
    columns: Sequence[TemplateColumn],
    column_id: str,
    direction: Union[ColumnDirection, str],
) -> tuple[TemplateColumn, ...]:
    """Swap a column with its left or right neighbour.

    Widths are left untouched; they do not have to add up to 100 here, the
    renderer normalizes them.

    Raises:
        ValidationError: Unknown column id or direction.
    """
    step = _direction(direction, ColumnDirection)
    index = next((i for i, c in enumerate(columns) if c.id == column_id), None)
    if index is None:
        raise ValidationError(f"Column {column_id!r} not found")

    target = index - 1 if step == ColumnDirection.LEFT else index + 1
    if target < 0 or target >= len(columns):
        return tuple(columns)

    reordered = list(columns)
    reordered[index], reordered[target] = reordered[target], reordered[index]
    return tuple(reordered)


def move_template_column(
    template: InvoiceTemplate,
    column_id: str,
    direction: Union[ColumnDirection, str],
) -> InvoiceTemplate:
    """Apply move_column to the line-items table of a template."""
    section = template.line_items_section
    if section is None:
        raise ValidationError(f"Template {template.id!r} has no lineItems section")
    columns = section.columns or ()
    moved = move_column(columns, column_id, direction)
    if moved == tuple(columns):
        return template
    return replace_columns(template, moved)
