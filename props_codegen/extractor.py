"""
Schema extraction from Rust source files.

Walks the top-level ``Props`` struct(s) of a parsed file and keeps the
fields whose declared type maps onto the canonical type system. Fields with
any other type are skipped and reported, never fatal unless the extractor
runs in strict mode.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from .codegen.core.schema import PROPS_STRUCT_NAME, Schema, canonicalize_type
from .logging_config import get_logger
from .parser import SourceFile, StructField, StructItem, parse_source
from .utils import read_source

logger = get_logger(__name__)


class ExtractionError(Exception):
    """Base exception for schema extraction errors."""

    pass


class MissingSchemaError(ExtractionError):
    """Raised when the source declares no schema struct and one is required."""

    pass


class UnsupportedFieldError(ExtractionError):
    """Raised for a field that cannot be canonicalized in strict mode."""

    def __init__(self, skipped: "SkippedField"):
        super().__init__(
            f"Unsupported field {skipped.struct_name}.{skipped.field_name or '<unnamed>'}"
            f": {skipped.type_text} ({skipped.reason})"
        )
        self.skipped = skipped


class Strictness(Enum):
    """How the extractor reacts to fields it cannot canonicalize."""

    LENIENT = "lenient"
    WARN = "warn"
    STRICT = "strict"


@dataclass
class ExtractorConfig:
    """Configuration for schema extraction."""

    struct_name: str = PROPS_STRUCT_NAME
    strictness: Strictness = Strictness.LENIENT
    require_struct: bool = False
    encoding: str = "utf-8"

    def __post_init__(self):
        # Accept plain strings such as "warn" from config files
        if not isinstance(self.strictness, Strictness):
            self.strictness = Strictness(str(self.strictness).lower())


@dataclass(frozen=True)
class SkippedField:
    """A struct field left out of the schema."""

    struct_name: str
    field_name: Optional[str]
    type_text: str
    reason: str
    line: int = 0


@dataclass
class ExtractionResult:
    """Schema plus a record of everything that did not make it in."""

    schema: Schema
    skipped: List[SkippedField] = field(default_factory=list)
    structs_found: int = 0

    @property
    def warnings(self) -> List[str]:
        messages = []
        if self.structs_found > 1:
            messages.append(
                f"Found {self.structs_found} `{self.schema.name}` structs; "
                f"fields were concatenated in file order"
            )
        for skipped in self.skipped:
            name = skipped.field_name or "<unnamed>"
            messages.append(
                f"Skipped {skipped.struct_name}.{name}: {skipped.type_text} "
                f"({skipped.reason})"
            )
        return messages


class SchemaExtractor:
    """Builds a Schema from the schema struct of a Rust source file."""

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    def extract(self, path: Union[str, Path]) -> ExtractionResult:
        """
        Extract the schema from a source file.

        Args:
            path: Path to a Rust source file

        Returns:
            ExtractionResult with the schema and skipped fields

        Raises:
            PropsIOError: If the file cannot be read
            RustParseError: If the file is not valid Rust
            ExtractionError: On missing struct or strict-mode failures
        """
        path = Path(path)
        source = read_source(path, encoding=self.config.encoding)
        return self.extract_source(source, source_name=str(path))

    def extract_source(
        self, source: str, source_name: Optional[str] = None
    ) -> ExtractionResult:
        """Extract the schema from source text."""
        tree = parse_source(source)
        return self.extract_tree(tree, source_name=source_name)

    def extract_tree(
        self, tree: SourceFile, source_name: Optional[str] = None
    ) -> ExtractionResult:
        """Extract the schema from an already parsed file."""
        struct_name = self.config.struct_name
        structs = list(tree.structs(struct_name))

        if not structs:
            if self.config.require_struct:
                raise MissingSchemaError(
                    f"No struct named `{struct_name}` in {source_name or 'source'}"
                )
            logger.info("No `%s` struct found; schema is empty", struct_name)
        elif len(structs) > 1:
            logger.warning(
                "Found %d `%s` structs (lines %s); concatenating their fields",
                len(structs),
                struct_name,
                ", ".join(str(s.line) for s in structs),
            )

        # Build into locals so a strict-mode failure leaves nothing behind
        schema = Schema(name=struct_name, source=source_name)
        skipped: List[SkippedField] = []

        for struct in structs:
            for struct_field in struct.fields:
                self._visit_field(struct, struct_field, schema, skipped)

        logger.debug(
            "Extracted %d fields (%d skipped) from %s",
            len(schema),
            len(skipped),
            source_name or "source",
        )
        return ExtractionResult(schema, skipped, len(structs))

    def _visit_field(
        self,
        struct: StructItem,
        struct_field: StructField,
        schema: Schema,
        skipped: List[SkippedField],
    ) -> None:
        type_ref = struct_field.type

        if struct_field.name is None:
            reason = "unnamed tuple field"
        elif type_ref.name is None:
            reason = "not a simple named type"
        else:
            factory = canonicalize_type(type_ref.name)
            if factory is not None:
                schema.add_field(factory(struct_field.name))
                return
            reason = "unsupported type"

        record = SkippedField(
            struct.name, struct_field.name, type_ref.text, reason, struct_field.line
        )
        self._report_skip(record)
        skipped.append(record)

    def _report_skip(self, record: SkippedField) -> None:
        strictness = self.config.strictness
        if strictness is Strictness.STRICT:
            raise UnsupportedFieldError(record)

        level_log = logger.warning if strictness is Strictness.WARN else logger.debug
        level_log(
            "Skipping field %s.%s at line %d: %s (%s)",
            record.struct_name,
            record.field_name or "<unnamed>",
            record.line,
            record.type_text,
            record.reason,
        )


def extract(
    path: Union[str, Path], config: Optional[ExtractorConfig] = None
) -> ExtractionResult:
    """Extract the schema and skip report from a Rust source file."""
    return SchemaExtractor(config).extract(path)


def extract_schema(
    path: Union[str, Path], config: Optional[ExtractorConfig] = None
) -> Schema:
    """Extract just the schema from a Rust source file."""
    return extract(path, config).schema
