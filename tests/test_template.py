"""Tests for template editing and ordering operations."""

from __future__ import annotations

import pydantic
import pytest

from gstinvoice.errors import ValidationError
from gstinvoice.template import (
    DEFAULT_COLUMNS,
    DEFAULT_TEMPLATE,
    ColumnField,
    InvoiceTemplate,
    SectionType,
    Spacing,
    TemplateSection,
    add_column,
    add_section,
    move_column,
    move_section,
    move_template_column,
    new_template,
    record_usage,
    remove_column,
    remove_section,
    update_column,
    update_details,
    update_section,
    update_style,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_template(*ids: str) -> InvoiceTemplate:
    """Template whose sections are `ids` at positions 1..N."""
    sections = [
        TemplateSection(id=section_id, type=SectionType.NOTES, title=section_id, position=i)
        for i, section_id in enumerate(ids, start=1)
    ]
    return InvoiceTemplate(id="t1", name="Test", sections=sections)


def _order(template: InvoiceTemplate) -> list[str]:
    return [s.id for s in template.ordered_sections]


def _positions(template: InvoiceTemplate) -> list[int]:
    return sorted(s.position for s in template.sections)


def _column_ids(template: InvoiceTemplate) -> list[str]:
    return [c.id for c in template.line_items_section.columns]


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestTemplateSchema:
    def test_default_template_is_valid(self):
        assert _positions(DEFAULT_TEMPLATE) == list(range(1, 10))
        assert DEFAULT_TEMPLATE.is_default is True
        assert DEFAULT_TEMPLATE.line_items_section.id == "lineItems"

    def test_default_visible_widths_add_up(self):
        assert sum(c.width for c in DEFAULT_COLUMNS if c.visible) == 100

    def test_positions_must_be_contiguous(self):
        with pytest.raises(pydantic.ValidationError, match="positions"):
            InvoiceTemplate(
                id="t",
                name="Gap",
                sections=[
                    TemplateSection(id="a", type=SectionType.NOTES, position=1),
                    TemplateSection(id="b", type=SectionType.NOTES, position=3),
                ],
            )

    def test_section_ids_unique(self):
        with pytest.raises(pydantic.ValidationError, match="Duplicate"):
            InvoiceTemplate(
                id="t",
                name="Dup",
                sections=[
                    TemplateSection(id="a", type=SectionType.NOTES, position=1),
                    TemplateSection(id="a", type=SectionType.TERMS, position=2),
                ],
            )

    def test_known_type_string_becomes_enum(self):
        section = TemplateSection.model_validate({"id": "n", "type": "notes", "position": 1})
        assert section.type is SectionType.NOTES

    def test_unknown_type_still_loads(self):
        section = TemplateSection.model_validate({"id": "s", "type": "signature", "position": 1})
        assert section.type == "signature"
        assert not isinstance(section.type, SectionType)

    def test_camel_case_record(self):
        template = InvoiceTemplate.model_validate(
            {
                "id": "t",
                "name": "Store",
                "isPublic": True,
                "usageCount": 4,
                "style": {"primaryColor": "#000000", "logoSize": "large"},
                "sections": [{"id": "a", "type": "footer", "position": 1, "fontSize": 9}],
            }
        )
        assert template.is_public is True
        assert template.usage_count == 4
        assert template.style.primary_color == "#000000"
        assert template.sections[0].font_size == 9

    def test_dump_and_reload(self):
        data = DEFAULT_TEMPLATE.model_dump(mode="json", by_alias=True)
        assert InvoiceTemplate.model_validate(data) == DEFAULT_TEMPLATE


# ---------------------------------------------------------------------------
# Section operations
# ---------------------------------------------------------------------------


class TestSectionEditing:
    def test_add_section_appends(self):
        template = add_section(DEFAULT_TEMPLATE, section_id="extra")
        added = template.find_section("extra")
        assert added.position == 10
        assert added.type == SectionType.NOTES
        assert added.visible is True
        assert added.title == "New Section"
        assert _positions(template) == list(range(1, 11))
        assert DEFAULT_TEMPLATE.find_section("extra") is None

    def test_add_section_generates_id(self):
        template = add_section(_make_template("a"))
        assert len(template.sections) == 2
        assert template.ordered_sections[-1].id.startswith("section_")

    def test_add_section_duplicate_id(self):
        with pytest.raises(ValidationError, match="already exists"):
            add_section(_make_template("a"), section_id="a")

    def test_update_section_merges_patch(self):
        template = update_section(DEFAULT_TEMPLATE, "notes", {"title": "Remarks", "textColor": "#111111"})
        section = template.find_section("notes")
        assert section.title == "Remarks"
        assert section.text_color == "#111111"
        assert section.position == 6

    def test_update_section_unknown_id(self):
        with pytest.raises(ValidationError, match="not found"):
            update_section(DEFAULT_TEMPLATE, "nope", {"title": "x"})

    def test_update_section_unknown_attribute(self):
        with pytest.raises(ValidationError, match="Unknown"):
            update_section(DEFAULT_TEMPLATE, "notes", {"colour": "red"})

    def test_update_section_invalid_value(self):
        with pytest.raises(ValidationError):
            update_section(DEFAULT_TEMPLATE, "notes", {"fontSize": 200})

    def test_update_section_cannot_break_positions(self):
        with pytest.raises(ValidationError):
            update_section(DEFAULT_TEMPLATE, "notes", {"position": 42})

    def test_remove_section_renumbers(self):
        template = remove_section(_make_template("a", "b", "c", "d"), "b")
        assert _order(template) == ["a", "c", "d"]
        assert _positions(template) == [1, 2, 3]

    def test_remove_section_unknown_id(self):
        with pytest.raises(ValidationError):
            remove_section(_make_template("a"), "z")


# ---------------------------------------------------------------------------
# Section ordering
# ---------------------------------------------------------------------------


class TestMoveSection:
    def test_move_up_swaps_with_previous(self):
        template = move_section(_make_template("a", "b", "c"), "b", "up")
        assert _order(template) == ["b", "a", "c"]
        assert _positions(template) == [1, 2, 3]

    def test_move_down_swaps_with_next(self):
        template = move_section(_make_template("a", "b", "c"), "b", "down")
        assert _order(template) == ["a", "c", "b"]

    def test_first_up_is_noop(self):
        template = _make_template("a", "b", "c")
        assert move_section(template, "a", "up") is template

    def test_last_down_is_noop(self):
        template = _make_template("a", "b", "c")
        assert move_section(template, "c", "down") is template

    def test_round_trip(self):
        template = _make_template("a", "b", "c")
        moved = move_section(move_section(template, "a", "down"), "a", "up")
        assert moved == template

    def test_unknown_section(self):
        with pytest.raises(ValidationError, match="not found"):
            move_section(_make_template("a"), "x", "up")

    def test_invalid_direction(self):
        with pytest.raises(ValidationError, match="direction"):
            move_section(_make_template("a", "b"), "a", "left")

    def test_positions_stay_contiguous_on_default(self):
        template = DEFAULT_TEMPLATE
        for section_id in ("footer", "header", "totals", "footer"):
            template = move_section(template, section_id, "up")
            template = move_section(template, section_id, "down")
            template = move_section(template, section_id, "down")
        assert _positions(template) == list(range(1, 10))


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------


class TestColumnEditing:
    def test_add_column(self):
        template = add_column(DEFAULT_TEMPLATE, column_id="col_hsn", label="HSN", width=10)
        column = template.line_items_section.columns[-1]
        assert column.id == "col_hsn"
        assert column.field == ColumnField.CUSTOM
        assert column.visible is True

    def test_add_column_duplicate_id(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            add_column(DEFAULT_TEMPLATE, column_id="col_index")

    def test_add_column_width_bounds(self):
        with pytest.raises(ValidationError):
            add_column(DEFAULT_TEMPLATE, column_id="wide", width=60)

    def test_update_column(self):
        template = update_column(DEFAULT_TEMPLATE, "col_cgst", {"visible": True, "width": 12})
        column = next(c for c in template.line_items_section.columns if c.id == "col_cgst")
        assert column.visible is True
        assert column.width == 12

    def test_update_column_unknown(self):
        with pytest.raises(ValidationError, match="not found"):
            update_column(DEFAULT_TEMPLATE, "col_nope", {"width": 12})

    def test_remove_column(self):
        template = remove_column(DEFAULT_TEMPLATE, "col_discount")
        assert "col_discount" not in _column_ids(template)
        assert len(_column_ids(template)) == len(DEFAULT_COLUMNS) - 1

    def test_no_line_items_section(self):
        with pytest.raises(ValidationError, match="lineItems"):
            add_column(_make_template("a"))


class TestMoveColumn:
    def test_move_left(self):
        moved = move_column(DEFAULT_COLUMNS, "col_product", "left")
        assert [c.id for c in moved[:2]] == ["col_product", "col_index"]

    def test_move_right(self):
        moved = move_column(DEFAULT_COLUMNS, "col_product", "right")
        assert [c.id for c in moved[1:3]] == ["col_quantity", "col_product"]

    def test_boundaries_are_noops(self):
        assert move_column(DEFAULT_COLUMNS, "col_index", "left") == DEFAULT_COLUMNS
        assert move_column(DEFAULT_COLUMNS, "col_total", "right") == DEFAULT_COLUMNS

    def test_widths_untouched(self):
        moved = move_column(DEFAULT_COLUMNS, "col_rate", "left")
        assert sorted(c.width for c in moved) == sorted(c.width for c in DEFAULT_COLUMNS)

    def test_unknown_column(self):
        with pytest.raises(ValidationError):
            move_column(DEFAULT_COLUMNS, "nope", "left")

    def test_invalid_direction(self):
        with pytest.raises(ValidationError):
            move_column(DEFAULT_COLUMNS, "col_rate", "up")

    def test_move_template_column(self):
        template = move_template_column(DEFAULT_TEMPLATE, "col_amount", "left")
        ids = _column_ids(template)
        assert ids.index("col_amount") == ids.index("col_tax_rate") - 1

    def test_move_template_column_boundary(self):
        assert move_template_column(DEFAULT_TEMPLATE, "col_index", "left") is DEFAULT_TEMPLATE


# ---------------------------------------------------------------------------
# Template-level helpers
# ---------------------------------------------------------------------------


class TestTemplateHelpers:
    def test_new_user_template(self):
        template = new_template("Minimal", user_id="user-1")
        assert template.id.startswith("template_")
        assert template.user_id == "user-1"
        assert template.is_public is False
        assert template.is_default is False
        assert template.usage_count == 0
        assert template.sections == DEFAULT_TEMPLATE.sections

    def test_new_template_without_user_is_public(self):
        assert new_template("Shared").is_public is True

    def test_record_usage(self):
        template = record_usage(record_usage(new_template("Used")))
        assert template.usage_count == 2

    def test_update_style(self):
        template = update_style(DEFAULT_TEMPLATE, {"spacing": "compact", "primaryColor": "#000000"})
        assert template.style.spacing == Spacing.COMPACT
        assert template.style.primary_color == "#000000"
        assert DEFAULT_TEMPLATE.style.spacing == Spacing.NORMAL

    def test_update_details(self):
        template = update_details(DEFAULT_TEMPLATE, {"name": "Modern"})
        assert template.name == "Modern"

    def test_update_details_rejects_sections(self):
        with pytest.raises(ValidationError, match="Only name"):
            update_details(DEFAULT_TEMPLATE, {"sections": []})
