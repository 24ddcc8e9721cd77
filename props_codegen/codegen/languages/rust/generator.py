"""
Rust code generator implementation.

Renders a Schema back into a single Rust struct definition.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.generator import CodeGenerator, FieldRenderer
from ...core.schema import Field, FieldType, NumericKind, Schema

DEFAULT_DERIVES = ["Debug", "Clone"]

RUST_TYPE_NAMES = {
    FieldType.BOOLEAN: "bool",
    FieldType.STRING: "String",
}

RUST_NUMERIC_TYPES = {
    NumericKind.INT32: "i32",
    NumericKind.INT64: "i64",
    NumericKind.UINT32: "u32",
    NumericKind.UINT64: "u64",
    NumericKind.FLOAT32: "f32",
    NumericKind.FLOAT64: "f64",
}


def rust_type_name(field: Field) -> str:
    """Return the Rust spelling of a field's canonical type."""
    if field.type is FieldType.NUMBER:
        return RUST_NUMERIC_TYPES[field.numeric_kind]
    return RUST_TYPE_NAMES[field.type]


class RustFieldRenderer(FieldRenderer):
    """Renders ``name: type``; the identifier is never re-cased."""

    def __init__(self, field_visibility: str = ""):
        self.field_visibility = field_visibility

    def render(self, field: Field) -> List[str]:
        tokens = [self.field_visibility] if self.field_visibility else []
        tokens.extend([field.name, ":", rust_type_name(field)])
        return tokens


class RustGenerator(CodeGenerator):
    """Code generator for the native Rust Props struct."""

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "rust"

    @property
    def file_extension(self) -> str:
        """Return Rust file extension."""
        return ".rs"

    def get_template_directory(self) -> Optional[Path]:
        """Return the Rust templates directory."""
        return Path(__file__).parent / "templates"

    def create_renderer(self) -> RustFieldRenderer:
        return RustFieldRenderer(self.config.custom.get("field_visibility", ""))

    def generate(self, schema: Schema) -> str:
        """Generate the struct definition for the schema."""
        renderer = self.create_renderer()
        visibility = self.config.custom.get("visibility", "pub")

        context: Dict[str, Any] = {
            "header": self.header_comment,
            "derives": self.config.custom.get("derives", DEFAULT_DERIVES),
            "visibility": f"{visibility} " if visibility else "",
            "struct_name": self.config.struct_name or schema.name,
            "fields": [renderer.render_line(field) for field in schema.fields],
            "indent": self.indent,
        }

        return self.render_template("struct.rs.j2", context)

    def validate_schema(self, schema: Schema) -> List[str]:
        """Validate schema for Rust generation."""
        warnings = super().validate_schema(schema)

        struct_name = self.config.struct_name or schema.name
        if not struct_name.isidentifier():
            warnings.append(f"Invalid Rust struct name: {struct_name}")

        return warnings
