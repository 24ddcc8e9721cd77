"""
Core schema representation for code generation.

Rust field types are canonicalized into a small closed set so that every
generator can handle every field without knowing about Rust.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Callable, Dict, Iterator, List, Optional


PROPS_STRUCT_NAME = "Props"


class FieldType(Enum):
    """Supported field types across all target languages."""

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"


class NumericKind(Enum):
    """Canonical width and signedness of a numeric field."""

    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"


@dataclass(frozen=True)
class Field:
    """Represents a single field of the Props struct."""

    name: str  # declared identifier, verbatim
    type: FieldType
    numeric_kind: Optional[NumericKind] = None

    def __post_init__(self):
        if (self.type is FieldType.NUMBER) != (self.numeric_kind is not None):
            raise ValueError(
                f"Field '{self.name}': numeric_kind must be set exactly for NUMBER fields"
            )

    @classmethod
    def boolean(cls, name: str) -> "Field":
        return cls(name, FieldType.BOOLEAN)

    @classmethod
    def string(cls, name: str) -> "Field":
        return cls(name, FieldType.STRING)

    @classmethod
    def number(cls, name: str, kind: NumericKind) -> "Field":
        return cls(name, FieldType.NUMBER, kind)


@dataclass
class Schema:
    """Ordered fields extracted from one source declaration."""

    name: str = PROPS_STRUCT_NAME
    fields: List[Field] = field(default_factory=list)
    source: Optional[str] = None

    def add_field(self, field: Field) -> None:
        """Add a field to this schema."""
        self.fields.append(field)

    def get_field(self, name: str) -> Optional[Field]:
        """Get the first field with the given name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)


FieldFactory = Callable[[str], Field]

# Every width of a signedness class collapses to its 32-bit kind.
RUST_TYPE_MAP: Dict[str, FieldFactory] = {
    "bool": Field.boolean,
    "String": Field.string,
    "i8": partial(Field.number, kind=NumericKind.INT32),
    "i16": partial(Field.number, kind=NumericKind.INT32),
    "i32": partial(Field.number, kind=NumericKind.INT32),
    "i64": partial(Field.number, kind=NumericKind.INT32),
    "u8": partial(Field.number, kind=NumericKind.UINT32),
    "u16": partial(Field.number, kind=NumericKind.UINT32),
    "u32": partial(Field.number, kind=NumericKind.UINT32),
    "u64": partial(Field.number, kind=NumericKind.UINT32),
    "f32": partial(Field.number, kind=NumericKind.FLOAT32),
    "f64": partial(Field.number, kind=NumericKind.FLOAT32),
}


def canonicalize_type(type_name: str) -> Optional[FieldFactory]:
    """
    Map a Rust primitive type name to a Field constructor.

    Args:
        type_name: Final path segment of the declared type, e.g. ``"u64"``

    Returns:
        Callable taking the field name and returning a Field, or None when
        the type is not supported
    """
    return RUST_TYPE_MAP.get(type_name)
