"""Tests for schema extraction from Rust source files."""

import logging

import pytest

from props_codegen.codegen.core.schema import Field, FieldType, NumericKind
from props_codegen.extractor import (
    ExtractorConfig,
    MissingSchemaError,
    SchemaExtractor,
    SkippedField,
    Strictness,
    UnsupportedFieldError,
    extract,
    extract_schema,
)
from props_codegen.parser import RustParseError
from props_codegen.utils import PropsIOError

MIXED_SOURCE = """
struct Props {
    a: u32,
    tags: Vec<String>,
    initial: char,
    d: bool,
    maybe: Option<u8>,
    f: std::string::String,
    size: usize,
}
"""


def extract_text(source, **config):
    return SchemaExtractor(ExtractorConfig(**config)).extract_source(source)


class TestExtraction:
    """Recognized fields are kept in declaration order."""

    def test_canonical_scenario(self, props_file):
        schema = extract_schema(props_file)
        assert schema.name == "Props"
        assert schema.fields == [
            Field.number("user_id", NumericKind.UINT32),
            Field.string("name"),
            Field.boolean("is_active"),
        ]
        assert schema.source == str(props_file)

    def test_unsupported_fields_are_dropped_in_order(self):
        result = extract_text(MIXED_SOURCE)
        assert result.schema.field_names == ["a", "d", "f"]
        assert [s.field_name for s in result.skipped] == [
            "tags",
            "initial",
            "maybe",
            "size",
        ]

    def test_skip_records(self):
        result = extract_text(MIXED_SOURCE)
        by_name = {s.field_name: s for s in result.skipped}
        assert by_name["tags"] == SkippedField(
            "Props", "tags", "Vec<String>", "not a simple named type", 4
        )
        assert by_name["initial"].reason == "unsupported type"
        assert by_name["size"].type_text == "usize"

    def test_all_numeric_widths(self):
        source = "struct Props { a: i8, b: i16, c: i32, d: i64, e: u8, f: u16, g: u32, h: u64, i: f32, j: f64 }"
        schema = extract_text(source).schema
        kinds = [f.numeric_kind for f in schema]
        assert kinds == [NumericKind.INT32] * 4 + [NumericKind.UINT32] * 4 + [
            NumericKind.FLOAT32
        ] * 2
        assert all(f.type is FieldType.NUMBER for f in schema)

    def test_other_structs_and_nested_modules_are_ignored(self):
        source = """
        struct Other { x: u32 }
        mod inner { struct Props { y: u32 } }
        pub struct Props { z: bool }
        """
        assert extract_text(source).schema.field_names == ["z"]

    def test_raw_identifier_kept_verbatim(self):
        schema = extract_text("struct Props { r#type: String }").schema
        assert schema.field_names == ["r#type"]

    def test_custom_struct_name(self):
        source = "struct Props { a: u32 }\nstruct Settings { b: bool }"
        result = extract_text(source, struct_name="Settings")
        assert result.schema.name == "Settings"
        assert result.schema.field_names == ["b"]


class TestMissingAndDuplicateStructs:
    def test_no_struct_gives_empty_schema(self):
        result = extract_text("fn main() {}")
        assert len(result.schema) == 0
        assert result.structs_found == 0

    def test_require_struct(self):
        with pytest.raises(MissingSchemaError, match="No struct named `Props`"):
            extract_text("struct Other;", require_struct=True)

    def test_duplicate_structs_are_concatenated(self, caplog):
        source = "struct Props { a: u32 }\nstruct Props { b: bool, a: String }"
        with caplog.at_level(logging.WARNING, logger="props_codegen"):
            result = extract_text(source)
        assert result.schema.field_names == ["a", "b", "a"]
        assert result.structs_found == 2
        assert "Found 2 `Props` structs" in caplog.text
        assert any("concatenated" in w for w in result.warnings)

    def test_tuple_props_has_unnamed_fields(self):
        result = extract_text("struct Props(u32, bool);")
        assert len(result.schema) == 0
        assert [s.reason for s in result.skipped] == ["unnamed tuple field"] * 2


class TestStrictness:
    def test_lenient_is_quiet(self, caplog):
        with caplog.at_level(logging.WARNING, logger="props_codegen"):
            result = extract_text(MIXED_SOURCE)
        assert len(result.skipped) == 4
        assert "Skipping field" not in caplog.text

    def test_warn_logs_each_skip(self, caplog):
        with caplog.at_level(logging.WARNING, logger="props_codegen"):
            result = extract_text(MIXED_SOURCE, strictness=Strictness.WARN)
        assert result.schema.field_names == ["a", "d", "f"]
        assert caplog.text.count("Skipping field") == 4
        assert "Props.tags" in caplog.text

    def test_strict_raises_on_first_skip(self):
        with pytest.raises(UnsupportedFieldError) as exc_info:
            extract_text(MIXED_SOURCE, strictness=Strictness.STRICT)
        assert exc_info.value.skipped.field_name == "tags"
        assert "Props.tags: Vec<String>" in str(exc_info.value)

    def test_strict_accepts_clean_source(self, props_source):
        result = extract_text(props_source, strictness="strict")
        assert len(result.schema) == 3

    def test_strictness_from_string(self):
        assert ExtractorConfig(strictness="WARN").strictness is Strictness.WARN
        with pytest.raises(ValueError):
            ExtractorConfig(strictness="loud")


class TestSourceErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(PropsIOError) as exc_info:
            extract(tmp_path / "absent.rs")
        assert exc_info.value.path == tmp_path / "absent.rs"

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "latin1.rs"
        path.write_bytes(b"struct Props { caf\xe9: u32 }")
        with pytest.raises(PropsIOError, match="Cannot decode"):
            extract(path)

    def test_custom_encoding(self, tmp_path):
        path = tmp_path / "latin1.rs"
        path.write_bytes(b"// caf\xe9\nstruct Props { a: u32 }")
        schema = extract_schema(path, ExtractorConfig(encoding="latin-1"))
        assert schema.field_names == ["a"]

    def test_invalid_syntax(self, write_source):
        path = write_source("struct Props { a: u32")
        with pytest.raises(RustParseError):
            extract(path)

    def test_extract_returns_result(self, props_file):
        result = extract(props_file)
        assert result.skipped == []
        assert result.structs_found == 1
        assert result.warnings == []
