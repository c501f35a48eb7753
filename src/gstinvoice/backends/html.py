"""HTML preview of a VisualTree, rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, PackageLoader

from gstinvoice.layout.nodes import VisualTree


def render_html(tree: VisualTree, content_width: int = 794) -> str:
    """Return a standalone HTML page showing the document."""
    env = Environment(
        loader=PackageLoader("gstinvoice.backends", "templates"),
        autoescape=True,
    )
    template = env.get_template("preview.html.j2")
    return template.render(tree=tree, page=tree.page, content_width=content_width)


def write_html(tree: VisualTree, output_path: Path, content_width: int = 794) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_html(tree, content_width), encoding="utf-8")
    return output_path
