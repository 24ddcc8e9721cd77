"""
props-codegen: keep a Rust ``Props`` struct and its TypeScript declarations in sync.

Extracts the supported fields of the ``Props`` struct in a Rust source file
and writes them back out as a Rust module and as ``export declare const``
TypeScript declarations.
"""

from .logging_config import configure_logging, get_logger
from .utils import PropsIOError, read_source, write_output
from .parser import RustParseError, parse_source
from .codegen import (
    GenerationResult,
    GeneratorConfig,
    GeneratorError,
    RegistryError,
    Schema,
    Field,
    FieldType,
    NumericKind,
    emit_schema,
    generate_artifacts,
    render_schema,
    write_rust_module,
    write_typescript_declarations,
)
from .codegen.core.config import ConfigError
from .codegen.core.naming import NameCollisionError
from .codegen.core.templates import TemplateError
from .extractor import (
    ExtractionError,
    ExtractionResult,
    ExtractorConfig,
    MissingSchemaError,
    SchemaExtractor,
    SkippedField,
    Strictness,
    UnsupportedFieldError,
    extract,
    extract_schema,
)

__version__ = "0.1.0"

__all__ = [
    "configure_logging",
    "get_logger",
    "read_source",
    "write_output",
    "parse_source",
    "Schema",
    "Field",
    "FieldType",
    "NumericKind",
    "GenerationResult",
    "GeneratorConfig",
    "ExtractorConfig",
    "ExtractionResult",
    "SchemaExtractor",
    "SkippedField",
    "Strictness",
    "extract",
    "extract_schema",
    "render_schema",
    "emit_schema",
    "write_rust_module",
    "write_typescript_declarations",
    "generate_artifacts",
    # Errors
    "PropsIOError",
    "RustParseError",
    "ExtractionError",
    "MissingSchemaError",
    "UnsupportedFieldError",
    "GeneratorError",
    "NameCollisionError",
    "ConfigError",
    "TemplateError",
    "RegistryError",
]
