"""
Jinja2 environment used by the generators.

Each generator owns one engine loading the ``.j2`` files next to its module;
an engine without a directory starts empty and takes in-memory templates.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import DictLoader, Environment, FileSystemLoader, select_autoescape


class TemplateError(Exception):
    """Raised when a template is missing or fails to render."""

    pass


def comment_lines(value: Any, marker: str = "//") -> str:
    """Prefix every line of ``value`` with a line comment marker."""
    return "\n".join(
        f"{marker} {line}" if line.strip() else marker for line in str(value).split("\n")
    )


class TemplateEngine:
    """Jinja2 environment with the filters the code templates use."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = template_dir
        if template_dir is not None and template_dir.is_dir():
            loader = FileSystemLoader(str(template_dir))
        else:
            loader = DictLoader({})

        self._env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["comment"] = comment_lines

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a named template.

        Raises:
            TemplateError: If the template is missing or rendering fails
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, source: str, context: Dict[str, Any]) -> str:
        """Render template source given as a string."""
        try:
            return self._env.from_string(source).render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template string: {e}") from e

    def add_template(self, name: str, content: str):
        """Register an in-memory template, replacing a file loader if needed."""
        if not isinstance(self._env.loader, DictLoader):
            self._env.loader = DictLoader({})
        self._env.loader.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        return template_name in self._env.loader.list_templates()


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, file-backed when a directory is given."""
    return TemplateEngine(template_dir)
