"""End-to-end tests for rendering and writing generated files."""

import os

import pytest

from props_codegen.codegen import quick_generate, generate_from_source
from props_codegen.codegen.core.config import ConfigError, GeneratorConfig
from props_codegen.codegen.core.generator import GeneratorError
from props_codegen.codegen.core.naming import NameCollisionError
from props_codegen.codegen.core.schema import Field, NumericKind, Schema
from props_codegen.codegen.emitter import (
    emit_schema,
    generate_artifacts,
    render_schema,
    write_rust_module,
    write_typescript_declarations,
)
from props_codegen.codegen.registry import RegistryError
from props_codegen.extractor import extract_schema
from props_codegen.utils import PropsIOError, write_output

EXPECTED_RUST = (
    "#[derive(Debug, Clone)]\n"
    "pub struct Props {\n"
    "    user_id: u32,\n"
    "    name: String,\n"
    "    is_active: bool,\n"
    "}\n"
)

EXPECTED_TS = (
    "export declare const userId: number;\n"
    "export declare const name: string;\n"
    "export declare const isActive: boolean;\n"
)


@pytest.fixture
def schema():
    return Schema(
        fields=[
            Field.number("user_id", NumericKind.UINT32),
            Field.string("name"),
            Field.boolean("is_active"),
        ]
    )


class TestRenderSchema:
    def test_rust(self, schema):
        result = render_schema(schema, "rust")
        assert result.success
        assert result.code == EXPECTED_RUST
        assert result.metadata["language"] == "rust"
        assert result.metadata["field_count"] == 3

    def test_typescript(self, schema):
        result = render_schema(schema, "ts")
        assert result.success
        assert result.code == EXPECTED_TS
        assert result.metadata["file_extension"] == ".d.ts"

    def test_empty_schema(self):
        rust = render_schema(Schema(), "rust")
        assert rust.code == "#[derive(Debug, Clone)]\npub struct Props {}\n"
        assert [w for w in rust.warnings if "no fields" in w] == [
            "Schema 'Props' has no fields"
        ]

        ts = render_schema(Schema(), "typescript")
        assert ts.success
        assert ts.code == ""

    def test_header_comment_and_options(self, schema):
        config = {
            "add_comments": True,
            "header_comment": "Generated file",
            "derives": ["Debug"],
            "indent_size": 2,
            "field_visibility": "pub",
        }
        code = render_schema(schema, "rust", config).code
        assert code.startswith("// Generated file\n\n#[derive(Debug)]\npub struct Props {\n")
        assert "  pub user_id: u32,\n" in code

        ts = render_schema(schema, "ts", {"add_comments": True}).code
        assert ts.startswith("// Generated by props-codegen. Do not edit by hand.\n\n")
        assert ts.endswith(EXPECTED_TS)

    def test_plain_struct_without_derives(self, schema):
        code = render_schema(schema, "rust", {"derives": [], "visibility": ""}).code
        assert code.startswith("struct Props {\n")

    def test_crlf_line_endings(self, schema):
        code = render_schema(schema, "ts", {"line_ending": "\r\n"}).code
        assert code == EXPECTED_TS.replace("\n", "\r\n")

    def test_native_names_never_recased(self):
        schema = Schema(fields=[Field.string("userName"), Field.string("r#type")])
        rust = render_schema(schema, "rust").code
        assert "    userName: String,\n" in rust
        assert "    r#type: String,\n" in rust
        ts = render_schema(schema, "ts").code
        assert "export declare const type: string;" in ts

    def test_camel_case_collisions_get_suffix(self):
        schema = Schema(fields=[Field.boolean("user_id"), Field.string("userId")])
        result = render_schema(schema, "ts")
        assert result.code == (
            "export declare const userId: boolean;\n"
            "export declare const userId2: string;\n"
        )
        assert any("renamed to userId2" in w for w in result.warnings)

    def test_collision_error_policy(self):
        schema = Schema(fields=[Field.boolean("user_id"), Field.string("userId")])
        result = render_schema(schema, "ts", {"name_collision": "error"})
        assert not result.success
        assert isinstance(result.exception, NameCollisionError)

    @pytest.mark.parametrize("policy", ["Error", "errors", "rename"])
    def test_unknown_collision_policy_is_rejected(self, schema, policy):
        with pytest.raises(RegistryError, match=f"Invalid name_collision: {policy}") as exc_info:
            render_schema(schema, "ts", {"name_collision": policy})
        assert isinstance(exc_info.value.__cause__, ConfigError)

    def test_unknown_language(self, schema):
        with pytest.raises(RegistryError, match="cobol"):
            render_schema(schema, "cobol")

    def test_generator_config_instance(self, schema):
        config = GeneratorConfig(struct_name="Settings", custom={"derives": []})
        code = render_schema(schema, "rust", config).code
        assert code.startswith("pub struct Settings {\n")


class TestWriting:
    def test_write_both_modules(self, schema, tmp_path):
        rust_path = tmp_path / "props.rs"
        ts_path = tmp_path / "props.d.ts"

        write_rust_module(schema, rust_path)
        result = write_typescript_declarations(schema, ts_path)

        assert rust_path.read_bytes() == EXPECTED_RUST.encode()
        assert ts_path.read_bytes() == EXPECTED_TS.encode()
        assert result.metadata["output_file"] == str(ts_path)

    def test_overwrite_leaves_no_temp_files(self, schema, tmp_path):
        path = tmp_path / "props.d.ts"
        path.write_text("stale", encoding="utf-8")

        emit_schema(schema, path, "typescript")

        assert path.read_text(encoding="utf-8") == EXPECTED_TS
        assert sorted(p.name for p in tmp_path.iterdir()) == ["props.d.ts"]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
    def test_existing_mode_is_preserved(self, schema, tmp_path):
        path = tmp_path / "props.rs"
        path.write_text("", encoding="utf-8")
        os.chmod(path, 0o600)

        write_rust_module(schema, path)

        assert path.stat().st_mode & 0o777 == 0o600

    def test_unwritable_destination(self, schema, tmp_path):
        path = tmp_path / "missing" / "props.rs"
        with pytest.raises(PropsIOError) as exc_info:
            write_rust_module(schema, path)
        assert exc_info.value.path == path
        assert not path.parent.exists()

    def test_non_atomic_write(self, tmp_path):
        path = write_output(tmp_path / "out.txt", "a\r\nb\n", atomic=False)
        assert path.read_bytes() == b"a\r\nb\n"

    def test_collision_error_raises_and_writes_nothing(self, tmp_path):
        schema = Schema(fields=[Field.boolean("user_id"), Field.string("userId")])
        path = tmp_path / "props.d.ts"

        with pytest.raises(GeneratorError) as exc_info:
            write_typescript_declarations(schema, path, {"name_collision": "error"})

        assert isinstance(exc_info.value.__cause__, NameCollisionError)
        assert not path.exists()


class TestPipeline:
    def test_generate_artifacts(self, props_file, tmp_path):
        rust_path = tmp_path / "out" / "props.rs"
        rust_path.parent.mkdir()
        ts_path = tmp_path / "out" / "props.d.ts"

        rust_result, ts_result = generate_artifacts(props_file, rust_path, ts_path)

        assert rust_path.read_text(encoding="utf-8") == EXPECTED_RUST
        assert ts_path.read_text(encoding="utf-8") == EXPECTED_TS
        assert rust_result.success and ts_result.success

    def test_regeneration_is_byte_identical(self, props_file, tmp_path):
        rust_path = tmp_path / "props_gen.rs"
        ts_path = tmp_path / "props.d.ts"

        generate_artifacts(props_file, rust_path, ts_path)
        first = (rust_path.read_bytes(), ts_path.read_bytes())
        generate_artifacts(props_file, rust_path, ts_path)

        assert (rust_path.read_bytes(), ts_path.read_bytes()) == first

    def test_generated_rust_round_trips(self, props_file, tmp_path):
        rust_path = tmp_path / "props_gen.rs"
        generate_artifacts(props_file, rust_path, tmp_path / "props.d.ts")

        assert extract_schema(rust_path).fields == extract_schema(props_file).fields

    def test_interleaved_unsupported_fields(self, write_source, tmp_path):
        source = write_source(
            "pub struct Props {\n"
            "    count: i64,\n"
            "    tags: Vec<String>,\n"
            "    ratio: f64,\n"
            "    owner: Option<String>,\n"
            "    label: String,\n"
            "}\n"
        )
        rust_result, ts_result = generate_artifacts(
            source, tmp_path / "a.rs", tmp_path / "a.d.ts"
        )

        assert rust_result.code == (
            "#[derive(Debug, Clone)]\n"
            "pub struct Props {\n"
            "    count: i32,\n"
            "    ratio: f32,\n"
            "    label: String,\n"
            "}\n"
        )
        assert ts_result.code == (
            "export declare const count: number;\n"
            "export declare const ratio: number;\n"
            "export declare const label: string;\n"
        )
        assert any("Skipped Props.tags" in w for w in ts_result.warnings)

    def test_failed_render_leaves_outputs_untouched(self, write_source, tmp_path):
        source = write_source("struct Props { user_id: u32, userId: bool }")
        rust_path = tmp_path / "props_gen.rs"

        with pytest.raises(GeneratorError):
            generate_artifacts(
                source, rust_path, tmp_path / "props.d.ts", ts_config={"name_collision": "error"}
            )

        assert not rust_path.exists()

    def test_convenience_helpers(self, props_file, props_source):
        assert generate_from_source(props_file, "rust").code == EXPECTED_RUST
        assert quick_generate(props_source) == EXPECTED_TS
        assert quick_generate(props_source, "rs", derives=["Clone"]).startswith(
            "#[derive(Clone)]\n"
        )
