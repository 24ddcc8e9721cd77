"""
TypeScript-specific naming utilities and sanitization.

Handles TypeScript reserved words for ambient declarations.
"""

from ...core.naming import CollisionStrategy, NameSanitizer


# Reserved words that cannot name a `const` binding
TYPESCRIPT_RESERVED_WORDS = {
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "null",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    # strict mode
    "arguments",
    "await",
    "eval",
    "implements",
    "interface",
    "let",
    "package",
    "private",
    "protected",
    "public",
    "static",
    "yield",
}


def create_typescript_sanitizer(
    collision_strategy: CollisionStrategy = CollisionStrategy.SUFFIX,
) -> NameSanitizer:
    """Create a name sanitizer configured for TypeScript."""
    return NameSanitizer(TYPESCRIPT_RESERVED_WORDS, collision_strategy)
