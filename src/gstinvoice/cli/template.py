"""CLI subcommands editing template files.

Each command loads the template, applies one pure operation and writes the
result back to the same file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gstinvoice.errors import ValidationError
from gstinvoice.files import dump_model, load_template
from gstinvoice.template.defaults import new_template
from gstinvoice.template.editing import (
    add_column,
    add_section,
    remove_column,
    remove_section,
    update_column,
    update_section,
    update_style,
)
from gstinvoice.template.models import ColumnField, InvoiceTemplate, SectionType
from gstinvoice.template.ordering import move_section, move_template_column

template_app = typer.Typer(no_args_is_help=True)
console = Console()


def _apply(path: Path, operation: Callable[[InvoiceTemplate], InvoiceTemplate]) -> InvoiceTemplate:
    """Load, transform and save a template; exit 1 on invalid input."""
    try:
        template = operation(load_template(path))
    except ValidationError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    dump_model(template, path)
    return template


def _parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """Turn KEY=VALUE arguments into a patch; [a, b] values are read as lists."""
    patch: dict[str, Any] = {}
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        if not sep or not key:
            console.print(f"[red]Expected KEY=VALUE, got {assignment!r}[/red]")
            raise typer.Exit(1)
        patch[key.strip()] = yaml.safe_load(raw) if raw.strip().startswith("[") else raw
    return patch


@template_app.command(name="init")
def init(
    path: Path = typer.Argument(..., help="Template file to create"),
    name: str = typer.Option("My Template", "--name", "-n", help="Template name"),
    user: Optional[str] = typer.Option(None, "--user", help="Owner id (private template)"),
) -> None:
    """Create a template file from the default layout."""
    if path.exists():
        console.print(f"[red]{path} already exists[/red]")
        raise typer.Exit(1)
    template = new_template(name, user_id=user)
    dump_model(template, path)
    console.print(f"[green]Template {template.id} written to {path}[/green]")


@template_app.command(name="show")
def show(path: Path = typer.Argument(..., help="Template file")) -> None:
    """List the sections and line-item columns of a template."""
    try:
        template = load_template(path)
    except ValidationError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]{template.name}[/bold] ({template.id})")
    if template.description:
        console.print(f"  {template.description}")

    sections = Table(title="Sections", show_header=True)
    sections.add_column("Pos", justify="right")
    sections.add_column("Id", style="cyan")
    sections.add_column("Type")
    sections.add_column("Title")
    sections.add_column("Visible")
    for s in template.ordered_sections:
        kind = s.type.value if isinstance(s.type, SectionType) else f"[red]{s.type}[/red]"
        sections.add_row(str(s.position), s.id, kind, s.title, "yes" if s.visible else "[dim]no[/dim]")
    console.print(sections)

    line_items = template.line_items_section
    if line_items is not None and line_items.columns:
        columns = Table(title="Columns", show_header=True)
        columns.add_column("Id", style="cyan")
        columns.add_column("Label")
        columns.add_column("Field")
        columns.add_column("Width", justify="right")
        columns.add_column("Format")
        columns.add_column("Visible")
        for c in line_items.columns:
            columns.add_row(c.id, c.label, c.field.value, f"{c.width:g}", c.format.value,
                            "yes" if c.visible else "[dim]no[/dim]")
        console.print(columns)


@template_app.command(name="add-section")
def add_section_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    section_type: SectionType = typer.Option(SectionType.NOTES, "--type", "-t"),
    title: str = typer.Option("New Section", "--title"),
    section_id: Optional[str] = typer.Option(None, "--id"),
) -> None:
    """Append a section at the last position."""
    template = _apply(path, lambda t: add_section(t, section_id, section_type, title))
    added = max(template.sections, key=lambda s: s.position)
    console.print(f"[green]Section {added.id} added at position {added.position}[/green]")


@template_app.command(name="remove-section")
def remove_section_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    section_id: str = typer.Argument(..., help="Section id"),
) -> None:
    """Remove a section; the others are renumbered."""
    _apply(path, lambda t: remove_section(t, section_id))
    console.print(f"[green]Section {section_id} removed[/green]")


@template_app.command(name="update-section")
def update_section_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    section_id: str = typer.Argument(..., help="Section id"),
    assignments: list[str] = typer.Argument(..., help="KEY=VALUE pairs, e.g. visible=false"),
) -> None:
    """Change attributes of a section."""
    patch = _parse_assignments(assignments)
    _apply(path, lambda t: update_section(t, section_id, patch))
    console.print(f"[green]Section {section_id} updated[/green]")


@template_app.command(name="move-section")
def move_section_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    section_id: str = typer.Argument(..., help="Section id"),
    direction: str = typer.Argument(..., help="up or down"),
) -> None:
    """Move a section one position up or down."""
    template = _apply(path, lambda t: move_section(t, section_id, direction))
    section = template.find_section(section_id)
    console.print(f"[green]Section {section_id} at position {section.position}[/green]")


@template_app.command(name="add-column")
def add_column_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    label: str = typer.Option("New Column", "--label"),
    field: ColumnField = typer.Option(ColumnField.CUSTOM, "--field"),
    width: float = typer.Option(15, "--width"),
    column_id: Optional[str] = typer.Option(None, "--id"),
) -> None:
    """Append a column to the line-items table."""
    _apply(path, lambda t: add_column(t, column_id, label, field, width))
    console.print(f"[green]Column {label} added[/green]")


@template_app.command(name="remove-column")
def remove_column_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    column_id: str = typer.Argument(..., help="Column id"),
) -> None:
    """Remove a column from the line-items table."""
    _apply(path, lambda t: remove_column(t, column_id))
    console.print(f"[green]Column {column_id} removed[/green]")


@template_app.command(name="update-column")
def update_column_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    column_id: str = typer.Argument(..., help="Column id"),
    assignments: list[str] = typer.Argument(..., help="KEY=VALUE pairs, e.g. width=20"),
) -> None:
    """Change attributes of a line-items column."""
    patch = _parse_assignments(assignments)
    _apply(path, lambda t: update_column(t, column_id, patch))
    console.print(f"[green]Column {column_id} updated[/green]")


@template_app.command(name="move-column")
def move_column_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    column_id: str = typer.Argument(..., help="Column id"),
    direction: str = typer.Argument(..., help="left or right"),
) -> None:
    """Swap a column with its left or right neighbour."""
    _apply(path, lambda t: move_template_column(t, column_id, direction))
    console.print(f"[green]Column {column_id} moved {direction}[/green]")


@template_app.command(name="style")
def style_cmd(
    path: Path = typer.Argument(..., help="Template file"),
    assignments: list[str] = typer.Argument(..., help="KEY=VALUE pairs, e.g. spacing=compact"),
) -> None:
    """Change the global style of a template."""
    patch = _parse_assignments(assignments)
    _apply(path, lambda t: update_style(t, patch))
    console.print("[green]Style updated[/green]")
