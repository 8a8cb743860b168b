"""
renderer.py

Responsibility: Render the jinja2 templates bundled in `xchelper/templates/`.

Templates are addressed by their path inside the package, e.g.
`xcarchive/Info.plist`. Missing context values and missing templates are
errors, never silent blanks. `.plist` templates are XML-escaped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from xchelper.errors import XcHelperError

_env = Environment(
    loader=PackageLoader("xchelper", "templates"),
    undefined=StrictUndefined,
    autoescape=select_autoescape(["plist"]),
    keep_trailing_newline=True,
)


class RenderError(XcHelperError):
    pass


def render_template(name: str, context: Mapping[str, Any]) -> str:
    try:
        return _env.get_template(name).render(**context)
    except TemplateError as e:
        raise RenderError(f"Failed rendering template {name}: {e}") from e


def write_template(name: str, destination: str | Path, context: Mapping[str, Any]) -> Path:
    """Render `name` into `destination`, creating parent directories."""
    out = Path(destination)
    text = render_template(name, context)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8", newline="\n")
    return out
