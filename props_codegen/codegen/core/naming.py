"""
Naming utilities for safe code generation.

Handles case conversion, reserved-word conflicts and name collisions
between fields that map to the same target identifier.
"""

import re
from enum import Enum
from typing import Dict, List, Optional, Set


class CollisionStrategy(Enum):
    """How to react when two fields map to the same name."""

    SUFFIX = "suffix"  # userId, userId2, ...
    ERROR = "error"


class NameCollisionError(ValueError):
    """Raised when two fields map to the same target name."""

    pass


_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_LETTER_DIGIT_BOUNDARY = re.compile(r"(?<=[A-Za-z])(?=[0-9])|(?<=[0-9])(?=[A-Za-z])")
_SEPARATORS = re.compile(r"[_\-\s]+")


def split_words(name: str) -> List[str]:
    """Split an identifier into words at separators and case boundaries."""
    if name.startswith("r#"):
        name = name[2:]
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _LOWER_UPPER_BOUNDARY.sub(r"\1_\2", name)
    name = _LETTER_DIGIT_BOUNDARY.sub("_", name)
    return [word for word in _SEPARATORS.split(name) if word]


def to_camel_case(name: str) -> str:
    """Convert to camelCase."""
    words = split_words(str(name))
    if not words:
        return ""
    # First word lowercase, rest title case
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


class NameSanitizer:
    """Handles case conversion, reserved words and collision tracking."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        collision_strategy: CollisionStrategy = CollisionStrategy.SUFFIX,
        reserved_suffix: str = "_",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Words of the target language that cannot be names
            collision_strategy: Reaction to two fields mapping to one name
            reserved_suffix: Appended to names that hit a reserved word
        """
        self.reserved_words = reserved_words or set()
        self.collision_strategy = collision_strategy
        self.reserved_suffix = reserved_suffix
        # target name -> source name that claimed it
        self._used_names: Dict[str, str] = {}

    def sanitize_name(self, name: str) -> str:
        """
        Convert a source identifier into a unique, safe camelCase name.

        Args:
            name: Original field identifier

        Returns:
            Name safe for use in the target language

        Raises:
            NameCollisionError: If the name is already taken and the
                strategy is ERROR
        """
        converted = to_camel_case(name) or "field"

        if converted[0].isdigit():
            converted = f"_{converted}"

        if converted in self.reserved_words:
            converted = f"{converted}{self.reserved_suffix}"

        final_name = self._resolve_collision(name, converted)
        self._used_names[final_name] = name
        return final_name

    def _resolve_collision(self, original: str, candidate: str) -> str:
        if candidate not in self._used_names:
            return candidate

        if self.collision_strategy is CollisionStrategy.ERROR:
            raise NameCollisionError(
                f"Fields '{self._used_names[candidate]}' and '{original}' "
                f"both map to '{candidate}'"
            )

        counter = 2
        while f"{candidate}{counter}" in self._used_names:
            counter += 1
        return f"{candidate}{counter}"

    def reset_used_names(self):
        """Reset the tracking of used names."""
        self._used_names.clear()
