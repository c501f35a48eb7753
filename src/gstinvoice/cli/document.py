"""CLI commands working on documents: totals, preview and export."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gstinvoice.backends.html import write_html
from gstinvoice.documents.models import InvoiceDocument
from gstinvoice.errors import ExportError, ValidationError
from gstinvoice.export.pipeline import export_pdf, save_pdf
from gstinvoice.files import load_document, load_template
from gstinvoice.gst.calculator import apply_totals, detect_inter_state
from gstinvoice.layout.formatting import format_currency, format_value
from gstinvoice.layout.renderer import render
from gstinvoice.template.defaults import DEFAULT_TEMPLATE
from gstinvoice.template.models import ColumnFormat

console = Console()


def _load_document(path: Path, detect: bool) -> InvoiceDocument:
    from gstinvoice.cli.app import get_config

    document = load_document(path, default_biller=get_config().biller)
    if detect:
        document = detect_inter_state(document)
    return apply_totals(document)


def totals(
    document_path: Path = typer.Argument(..., help="Document YAML file"),
    detect: bool = typer.Option(
        False, "--detect-inter-state", help="Derive the regime from biller and supply states"
    ),
) -> None:
    """Compute line amounts and totals of a document."""
    from gstinvoice.cli.app import get_config

    try:
        symbol = get_config().currency_symbol
        document = _load_document(document_path, detect)
    except ValidationError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    regime = "IGST (inter-state)" if document.is_inter_state else "CGST + SGST (intra-state)"
    console.print(f"\n[bold]{document.title.title()} {escape(document.number)}[/bold]")
    console.print(f"  Client: {escape(document.client.name)}")
    console.print(f"  Regime: {regime}")

    table = Table(show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Item")
    table.add_column("Qty", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Amount", justify="right")
    table.add_column("GST", justify="right")
    table.add_column("Total", justify="right")
    for i, item in enumerate(document.line_items, start=1):
        table.add_row(
            str(i),
            escape(item.product_name),
            str(item.quantity),
            format_currency(item.rate, symbol),
            format_currency(item.amount, symbol),
            format_value(item.tax_rate, ColumnFormat.PERCENTAGE),
            format_currency(item.total_amount, symbol),
        )
    console.print(table)

    console.print(f"  Sub total: {format_currency(document.sub_total, symbol)}")
    if document.is_inter_state:
        console.print(f"  IGST: {format_currency(document.total_igst, symbol)}")
    else:
        console.print(f"  CGST: {format_currency(document.total_cgst, symbol)}")
        console.print(f"  SGST: {format_currency(document.total_sgst, symbol)}")
    console.print(f"  [bold]Grand total: {format_currency(document.grand_total, symbol)}[/bold]")


def preview(
    template_path: Optional[Path] = typer.Argument(
        None, help="Template YAML file (default template if omitted)"
    ),
    document_path: Optional[Path] = typer.Option(
        None, "--document", "-d", help="Document YAML file (sample document if omitted)"
    ),
    output: Path = typer.Option(Path("preview.html"), "--output", "-o", help="HTML output file"),
) -> None:
    """Render a template to an HTML preview."""
    from gstinvoice.cli.app import get_config

    try:
        config = get_config()
        template = load_template(template_path) if template_path else DEFAULT_TEMPLATE
        document = _load_document(document_path, False) if document_path else None
    except ValidationError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    tree = render(template, document, currency_symbol=config.currency_symbol)
    write_html(tree, output, config.content_width)
    for block in tree.placeholders:
        console.print(
            f"[yellow]Section {block.section_id} not rendered: {escape(str(block.error))}[/yellow]"
        )
    console.print(f"[green]Preview written: {output}[/green]")


def export(
    template_path: Path = typer.Argument(..., help="Template YAML file"),
    document_path: Path = typer.Argument(..., help="Document YAML file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="PDF output file (default: <number>.pdf)"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds before the export is abandoned"
    ),
) -> None:
    """Export a document to a single-page PDF."""
    from gstinvoice.cli.app import get_config

    try:
        config = get_config()
        template = load_template(template_path)
        document = _load_document(document_path, False)
    except ValidationError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    options = config.export_options()
    if timeout is not None:
        options = replace(options, timeout=timeout)

    try:
        data = asyncio.run(export_pdf(template, document, options))
    except ExportError as exc:
        console.print(f"[red]Export failed: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    try:
        path = save_pdf(data, output or Path(f"{document.number}.pdf"))
    except OSError as exc:
        console.print(f"[red]Cannot write PDF: {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]PDF written: {path}[/green]")
