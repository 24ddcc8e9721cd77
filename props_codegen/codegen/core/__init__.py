"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import (
    CodeGenerator,
    FieldRenderer,
    GeneratorError,
    GenerationResult,
    generate_code,
    join_tokens,
)
from .schema import (
    PROPS_STRUCT_NAME,
    Field,
    FieldType,
    NumericKind,
    Schema,
    canonicalize_type,
)
from .naming import (
    CollisionStrategy,
    NameCollisionError,
    NameSanitizer,
    split_words,
    to_camel_case,
)
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "FieldRenderer",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "join_tokens",
    # Schema system - core data structures
    "PROPS_STRUCT_NAME",
    "Field",
    "FieldType",
    "NumericKind",
    "Schema",
    "canonicalize_type",
    # Naming utilities - language-agnostic
    "CollisionStrategy",
    "NameCollisionError",
    "NameSanitizer",
    "split_words",
    "to_camel_case",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
