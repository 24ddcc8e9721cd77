"""
TypeScript code generator module.

Generates ambient ``export declare const`` declarations from an extracted schema.
"""

from .generator import TypeScriptFieldRenderer, TypeScriptGenerator
from .naming import TYPESCRIPT_RESERVED_WORDS, create_typescript_sanitizer

__all__ = [
    "TypeScriptFieldRenderer",
    "TypeScriptGenerator",
    "TYPESCRIPT_RESERVED_WORDS",
    "create_typescript_sanitizer",
]
