"""Main gstinvoice CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

import gstinvoice
from gstinvoice.config import EngineConfig, load_config

app = typer.Typer(
    name="gsti",
    help="gstinvoice - GST invoices: tax totals, templates and PDF export",
    no_args_is_help=True,
)

console = Console()

# Global options stored by the callback
_config_path: Optional[Path] = None


def get_config() -> EngineConfig:
    """Load the configuration selected by --config."""
    return load_config(_config_path)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gstinvoice version {gstinvoice.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (default: $GSTINVOICE_CONFIG or ./gstinvoice.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the gstinvoice version",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """gstinvoice - GST tax computation, document templates and PDF export."""
    global _config_path
    _config_path = Path(config) if config else None
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Subcommand registration
from gstinvoice.cli.document import export, preview, totals  # noqa: E402
from gstinvoice.cli.template import template_app  # noqa: E402

app.add_typer(template_app, name="template", help="Edit document templates")
app.command(name="totals", help="Compute and show the GST totals of a document")(totals)
app.command(name="preview", help="Write an HTML preview of a template")(preview)
app.command(name="export", help="Export a document to a one-page PDF")(export)
