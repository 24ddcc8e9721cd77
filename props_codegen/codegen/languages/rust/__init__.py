"""
Rust code generator module.

Generates the native Props struct from an extracted schema.
"""

from .generator import RustFieldRenderer, RustGenerator, rust_type_name

__all__ = [
    "RustFieldRenderer",
    "RustGenerator",
    "rust_type_name",
]
