"""
Props Codegen Code Generation Module

Renders an extracted Props schema as Rust and TypeScript source.
"""

from .core.generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .core.schema import Schema, Field, FieldType, NumericKind
from .core.config import GeneratorConfig, ConfigManager, load_config
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    is_language_supported,
    list_supported_languages,
    register_generator,
)
from .emitter import (
    emit_schema,
    generate_artifacts,
    render_schema,
    write_rust_module,
    write_typescript_declarations,
)


# Convenience functions
def generate_from_source(source_path, language="typescript", config=None):
    """
    Generate code from a Rust source file.

    Args:
        source_path: Path to the Rust file declaring ``Props``
        language: Target language name
        config: Generator configuration dict or path

    Returns:
        GenerationResult with generated code
    """
    from ..extractor import extract_schema

    return render_schema(extract_schema(source_path), language, config)


def quick_generate(source_text, language="typescript", **options):
    """
    Quick code generation from Rust source text.

    Args:
        source_text: Rust source declaring ``Props``
        language: Target language
        **options: Generator options

    Returns:
        Generated code string
    """
    from ..extractor import SchemaExtractor

    schema = SchemaExtractor().extract_source(source_text).schema
    result = render_schema(schema, language, options or None)

    if result.success:
        return result.code
    else:
        raise GeneratorError(f"Code generation failed: {result.error_message}")


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "Schema",
    "Field",
    "FieldType",
    "NumericKind",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "generate_code",
    "generate_from_source",
    "quick_generate",
    "get_generator",
    "get_language_info",
    "get_registry",
    "is_language_supported",
    "list_supported_languages",
    "register_generator",
    "render_schema",
    "emit_schema",
    "write_rust_module",
    "write_typescript_declarations",
    "generate_artifacts",
]
