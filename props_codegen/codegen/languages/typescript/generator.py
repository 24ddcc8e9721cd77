"""
TypeScript code generator implementation.

Renders each schema field as a standalone ambient declaration such as
``export declare const userId: number;``.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.generator import CodeGenerator, FieldRenderer
from ...core.naming import CollisionStrategy, NameSanitizer, to_camel_case
from ...core.schema import Field, FieldType, Schema
from .naming import TYPESCRIPT_RESERVED_WORDS, create_typescript_sanitizer

TYPESCRIPT_TYPE_NAMES = {
    FieldType.BOOLEAN: "boolean",
    FieldType.STRING: "string",
    FieldType.NUMBER: "number",
}


class TypeScriptFieldRenderer(FieldRenderer):
    """Renders ``export declare const <camelName>: <type>;``."""

    def __init__(self, sanitizer: NameSanitizer, declaration_keyword: str = "const"):
        self.sanitizer = sanitizer
        self.declaration_keyword = declaration_keyword

    def render(self, field: Field) -> List[str]:
        name = self.sanitizer.sanitize_name(field.name)
        return [
            "export",
            "declare",
            self.declaration_keyword,
            name,
            ":",
            TYPESCRIPT_TYPE_NAMES[field.type],
            ";",
        ]


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript ambient declarations."""

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "typescript"

    @property
    def file_extension(self) -> str:
        """Return TypeScript declaration file extension."""
        return ".d.ts"

    def get_template_directory(self) -> Optional[Path]:
        """Return the TypeScript templates directory."""
        return Path(__file__).parent / "templates"

    @property
    def collision_strategy(self) -> CollisionStrategy:
        """Collision policy from ``name_collision``; unknown values raise ValueError."""
        return CollisionStrategy(self.config.name_collision)

    def create_renderer(self) -> TypeScriptFieldRenderer:
        # A fresh sanitizer per document; collisions are tracked per file.
        return TypeScriptFieldRenderer(
            create_typescript_sanitizer(self.collision_strategy),
            self.config.custom.get("declaration_keyword", "const"),
        )

    def generate(self, schema: Schema) -> str:
        """Generate one declaration per field, in schema order."""
        renderer = self.create_renderer()

        context: Dict[str, Any] = {
            "header": self.header_comment,
            "declarations": [renderer.render_line(field) for field in schema.fields],
        }

        return self.render_template("declarations.d.ts.j2", context)

    def validate_schema(self, schema: Schema) -> List[str]:
        """Validate schema for TypeScript generation."""
        warnings = super().validate_schema(schema)

        # Dry run the naming to report renamed fields up front
        sanitizer = create_typescript_sanitizer(CollisionStrategy.SUFFIX)
        for field in schema.fields:
            camel_name = to_camel_case(field.name)
            final_name = sanitizer.sanitize_name(field.name)
            if camel_name in TYPESCRIPT_RESERVED_WORDS:
                warnings.append(
                    f"Field {schema.name}.{field.name} renamed to {final_name} "
                    f"to avoid a TypeScript reserved word"
                )
            elif final_name != camel_name:
                warnings.append(f"Field {schema.name}.{field.name} renamed to {final_name}")

        return warnings
