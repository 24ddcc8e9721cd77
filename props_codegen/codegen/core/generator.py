"""
Generator contracts shared by every output language.

A FieldRenderer turns one Field into target-language tokens; a
CodeGenerator lays the rendered fields of a Schema out as one document.
"""

from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import GeneratorConfig
from .schema import Field, Schema
from .templates import TemplateEngine, create_template_engine


class GeneratorError(Exception):
    """Raised when a schema cannot be rendered."""

    pass


# Tokens glued to the token before them.
_NO_SPACE_BEFORE = {":", ";", ","}


def join_tokens(tokens: List[str]) -> str:
    """Join rendered tokens with conventional spacing."""
    parts: List[str] = []
    for token in tokens:
        if parts and token not in _NO_SPACE_BEFORE:
            parts.append(" ")
        parts.append(token)
    return "".join(parts)


class FieldRenderer(ABC):
    """Renders a single field as target-language tokens."""

    @abstractmethod
    def render(self, field: Field) -> List[str]:
        """Return the ordered output tokens for one field."""

    def render_line(self, field: Field) -> str:
        return join_tokens(self.render(field))


class CodeGenerator(ABC):
    """Base class of the per-language document generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self._engine: Optional[TemplateEngine] = None

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Registry name of the output language, e.g. 'rust'."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Extension of generated files, e.g. '.d.ts'."""

    def get_template_directory(self) -> Optional[Path]:
        """
        Directory holding this generator's ``.j2`` files.

        The default of None gives an empty in-memory engine that templates
        can be added to with ``TemplateEngine.add_template``.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        # Created on first use
        if self._engine is None:
            self._engine = create_template_engine(self.get_template_directory())
        return self._engine

    @property
    def indent(self) -> str:
        """One indentation level according to the configuration."""
        return "\t" if self.config.use_tabs else " " * self.config.indent_size

    @property
    def header_comment(self) -> Optional[str]:
        """Header comment text, or None when comments are disabled."""
        if self.config.add_comments and self.config.header_comment:
            return self.config.header_comment
        return None

    @abstractmethod
    def create_renderer(self) -> FieldRenderer:
        """Create a fresh field renderer for one document."""

    @abstractmethod
    def generate(self, schema: Schema) -> str:
        """Render the whole document for a schema."""

    def validate_schema(self, schema: Schema) -> List[str]:
        """
        Check a schema before rendering.

        Subclasses extend the list with language-specific findings. Nothing
        here is fatal: every entry is a warning string.
        """
        warnings = []
        if not schema.fields:
            warnings.append(f"Schema '{schema.name}' has no fields")

        for name, count in Counter(schema.field_names).items():
            if count > 1:
                warnings.append(
                    f"Field '{name}' appears {count} times in schema '{schema.name}'"
                )
        return warnings

    def format_code(self, code: str) -> str:
        """
        Normalize whitespace of generated code.

        Trailing whitespace is stripped, runs of blank lines collapse to one,
        leading and trailing blank lines are dropped and every line ends
        with the configured line ending. An empty document stays empty.
        """
        lines: List[str] = []
        for raw in code.split("\n"):
            line = raw.rstrip()
            if line or (lines and lines[-1]):
                lines.append(line)

        while lines and not lines[-1]:
            lines.pop()
        if not lines:
            return ""

        ending = self.config.line_ending
        return ending.join(lines) + ending

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render one of this generator's templates."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Generated code plus warnings and metadata, or a failure description."""

    def __init__(
        self,
        code: str,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(
        cls, message: str, exception: Optional[Exception] = None
    ) -> "GenerationResult":
        """Build a failed result."""
        failed = cls("")
        failed.success = False
        failed.error_message = message
        failed.exception = exception
        return failed


def generate_code(generator: CodeGenerator, schema: Schema) -> GenerationResult:
    """
    Validate, render and format a schema with one generator.

    Exceptions raised while rendering are captured in a failed
    GenerationResult instead of propagating.

    Args:
        generator: Configured generator
        schema: Schema to render

    Returns:
        GenerationResult; ``metadata`` names the language, extension,
        schema and field count
    """
    try:
        warnings = generator.validate_schema(schema)
        code = generator.format_code(generator.generate(schema))
    except Exception as e:
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "schema": schema.name,
        "field_count": len(schema),
    }
    return GenerationResult(code, warnings, metadata)
