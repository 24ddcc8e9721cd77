"""
Language-specific code generators.

This module contains generators for the native Rust module and the
TypeScript declaration file.
"""

from .rust import RustGenerator
from .typescript import TypeScriptGenerator

__all__ = [
    "RustGenerator",
    "TypeScriptGenerator",
]
