"""Tests for per-field renderers and the template engine."""

import pytest

from props_codegen.codegen.core.generator import join_tokens
from props_codegen.codegen.core.naming import CollisionStrategy, NameCollisionError
from props_codegen.codegen.core.schema import Field, NumericKind
from props_codegen.codegen.core.templates import TemplateEngine, TemplateError
from props_codegen.codegen.languages.rust import RustFieldRenderer, rust_type_name
from props_codegen.codegen.languages.typescript import (
    TypeScriptFieldRenderer,
    create_typescript_sanitizer,
)


def ts_renderer(strategy=CollisionStrategy.SUFFIX, keyword="const"):
    return TypeScriptFieldRenderer(create_typescript_sanitizer(strategy), keyword)


class TestJoinTokens:
    def test_spacing(self):
        assert join_tokens(["a", ":", "u32"]) == "a: u32"
        assert join_tokens(["export", "x", ":", "number", ";"]) == "export x: number;"
        assert join_tokens([]) == ""


class TestRustFieldRenderer:
    def test_tokens(self):
        field = Field.number("user_id", NumericKind.UINT32)
        assert RustFieldRenderer().render(field) == ["user_id", ":", "u32"]

    @pytest.mark.parametrize(
        "field,line",
        [
            (Field.boolean("is_active"), "is_active: bool"),
            (Field.string("name"), "name: String"),
            (Field.number("n", NumericKind.INT32), "n: i32"),
            (Field.number("n", NumericKind.INT64), "n: i64"),
            (Field.number("n", NumericKind.UINT64), "n: u64"),
            (Field.number("n", NumericKind.FLOAT32), "n: f32"),
            (Field.number("n", NumericKind.FLOAT64), "n: f64"),
            (Field.string("userName"), "userName: String"),
        ],
    )
    def test_lines(self, field, line):
        assert RustFieldRenderer().render_line(field) == line

    def test_field_visibility(self):
        renderer = RustFieldRenderer(field_visibility="pub")
        assert renderer.render_line(Field.boolean("ok")) == "pub ok: bool"

    def test_type_names(self):
        assert rust_type_name(Field.string("s")) == "String"


class TestTypeScriptFieldRenderer:
    def test_tokens(self):
        field = Field.number("user_id", NumericKind.UINT32)
        assert ts_renderer().render(field) == [
            "export",
            "declare",
            "const",
            "userId",
            ":",
            "number",
            ";",
        ]

    @pytest.mark.parametrize(
        "field,line",
        [
            (Field.string("name"), "export declare const name: string;"),
            (Field.boolean("is_active"), "export declare const isActive: boolean;"),
            (
                Field.number("ratio", NumericKind.FLOAT32),
                "export declare const ratio: number;",
            ),
        ],
    )
    def test_lines(self, field, line):
        assert ts_renderer().render_line(field) == line

    def test_declaration_keyword(self):
        line = ts_renderer(keyword="let").render_line(Field.string("a"))
        assert line == "export declare let a: string;"

    def test_collisions_within_one_renderer(self):
        renderer = ts_renderer()
        lines = [renderer.render_line(Field.string(n)) for n in ("user_id", "userId")]
        assert lines[1] == "export declare const userId2: string;"

        strict = ts_renderer(CollisionStrategy.ERROR)
        strict.render(Field.string("user_id"))
        with pytest.raises(NameCollisionError):
            strict.render(Field.string("userId"))


class TestTemplateEngine:
    def test_comment_filter(self):
        engine = TemplateEngine()
        out = engine.render_string("{{ text | comment }}", {"text": "one\n\ntwo"})
        assert out == "// one\n//\n// two"

    def test_in_memory_templates(self):
        engine = TemplateEngine()
        engine.add_template("t.j2", "{{ x }}")
        assert engine.template_exists("t.j2")
        assert engine.render_template("t.j2", {"x": 1}) == "1"

    def test_missing_template(self):
        engine = TemplateEngine()
        assert not engine.template_exists("nope.j2")
        with pytest.raises(TemplateError, match="nope.j2"):
            engine.render_template("nope.j2", {})
