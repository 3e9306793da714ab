"""Jinja2 template rendering for generated project files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``service_starter/scaffolder/templates/`` directory and renders them with a
context built from the wizard selection.  Rendering is pure: templates are
read from the package, results are returned as strings, nothing is written.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined placeholders raise instead of rendering
    as empty text, and a template that uses no placeholders renders
    byte-for-byte as stored.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["clj_ns"] = clj_namespace
        self.env.filters["clj_path"] = clj_path
        self.env.filters["snake_case"] = snake_case

    # -- Rendering -----------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"src/system.clj.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    # -- Utility -------------------------------------------------------------

    def source(self, template_path: str) -> str:
        """Return the raw, unrendered text of a template."""
        return (self.template_dir / template_path).read_text(encoding="utf-8")

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Name filters
# ---------------------------------------------------------------------------

def clj_namespace(value: str) -> str:
    """Convert a project name to a Clojure namespace segment.

    E.g. ``'My Service'`` -> ``'my-service'``.
    """
    segment = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return segment.strip("-") or "app"


def clj_path(value: str) -> str:
    """Convert a namespace segment to its source-path form (``-`` -> ``_``)."""
    return value.replace("-", "_")


def snake_case(value: str) -> str:
    """Convert ``my-service`` or ``My Service`` to ``my_service``."""
    return clj_path(clj_namespace(value))
