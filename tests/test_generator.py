"""Tests for the template generator and the package-level shortcuts."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from gogen import generate_from_source, quick_generate
from gogen.core.config import Configuration
from gogen.core.generator import (
    GeneratorError,
    OutputIOError,
    TemplateGenerator,
    generate_code,
)
from gogen.core.model import CompilationUnit
from gogen.core.templates import TemplateExecutionError, TemplateLoadError
from gogen.languages.go.extractor import GoExtractor

ECHO_TEMPLATE = (
    "{% for t in types %}{% for f in t.fields %}"
    "{{ f.name }}: {{ f.type | map_type }}\n"
    "{% endfor %}{% endfor %}"
)

ITEM_SOURCE = """package sample

type Base struct {
	ID int64 `json:"id"`
}

type Item struct {
	Name string `json:"name"`
	Base
	Parent *Item `json:"parent,omitempty"`
	Tags []string `json:"tags"`
}
"""


def _generator(template: str, **options) -> TemplateGenerator:
    config = Configuration()
    config.apply_options(**options)
    generator = TemplateGenerator(config.freeze())
    generator.load_template_string(template, "test.j2")
    return generator


@pytest.fixture
def item_unit(extractor: GoExtractor) -> CompilationUnit:
    return extractor.extract(ITEM_SOURCE, path="item.go")


def test_echo_template_end_to_end(item_unit: CompilationUnit) -> None:
    generator = _generator(ECHO_TEMPLATE, include_types=["Item"])
    assert generator.render(item_unit) == (
        "Name: string\nID: number\nParent: Item | null\nTags: string[]\n"
    )


def test_per_type_concatenates_in_declaration_order(item_unit: CompilationUnit) -> None:
    generator = _generator("{{ type.name }}({{ types | length }});", per_type=True)
    assert generator.render(item_unit) == "Base(2);Item(2);"


def test_single_pass_has_no_current_type(item_unit: CompilationUnit) -> None:
    generator = _generator("{{ 'none' if type is none else type.name }}")
    assert generator.render(item_unit) == "none"


def test_per_type_error_names_declaration(item_unit: CompilationUnit) -> None:
    generator = _generator("{{ type.fields[3].name }}", per_type=True)
    with pytest.raises(TemplateExecutionError, match="executing template for Base"):
        generator.render(item_unit)


def test_render_without_template_raises(item_unit: CompilationUnit) -> None:
    generator = TemplateGenerator(Configuration())
    assert not generator.has_template
    with pytest.raises(GeneratorError, match="No template loaded"):
        generator.render(item_unit)


def test_unknown_helper_rejected_before_rendering() -> None:
    generator = TemplateGenerator(Configuration())
    with pytest.raises(TemplateLoadError, match="frobnicate"):
        generator.load_template_string("{{ frobnicate(types) }}", "bad.j2")
    assert not generator.has_template


def test_unknown_filter_rejected_before_rendering() -> None:
    generator = TemplateGenerator(Configuration())
    with pytest.raises(TemplateLoadError, match="frobnicate"):
        generator.load_template_string("{{ types | frobnicate }}", "bad.j2")
    assert not generator.has_template


def test_context_exposes_file_config_and_mappings(item_unit: CompilationUnit) -> None:
    generator = _generator(
        "{{ file.package_name }} {{ config.options.tag_key }} {{ type_mappings['bool'] }}"
    )
    assert generator.render(item_unit) == "sample json boolean"


def test_generate_writes_nothing_on_failure(item_unit: CompilationUnit) -> None:
    sink = io.StringIO()
    generator = _generator("{{ types[0].missing }}")
    with pytest.raises(TemplateExecutionError):
        generator.generate(item_unit, sink)
    assert sink.getvalue() == ""

    ok = _generator("{{ types | length }}")
    assert ok.generate(item_unit, sink) == "2"
    assert sink.getvalue() == "2"


def test_write_creates_file(tmp_path: Path, item_unit: CompilationUnit) -> None:
    output = tmp_path / "out.txt"
    _generator("{{ types | length }}").write(item_unit, output)
    assert output.read_text(encoding="utf-8") == "2"


def test_write_failures(tmp_path: Path, item_unit: CompilationUnit) -> None:
    output = tmp_path / "out.txt"
    with pytest.raises(TemplateExecutionError):
        _generator("{{ types[0].missing }}").write(item_unit, output)
    assert not output.exists()

    with pytest.raises(OutputIOError):
        _generator("x").write(item_unit, tmp_path / "no" / "such" / "dir.txt")


def test_validate_warnings(extractor: GoExtractor) -> None:
    unit = extractor.extract(
        """package sample

import "sync"

type Empty struct{}

type Worker struct {
	sync.Mutex
	Ghost
	Jobs chan int
}
""",
        path="worker.go",
    )
    generator = _generator("", include_types=["Empty", "Worker", "Missing"])
    warnings = generator.validate(unit)

    assert "Included type 'Missing' is not declared in the source" in warnings
    assert "Embedded field Worker.Ghost cannot be resolved and is dropped" in warnings
    assert "Type 'Empty' has no fields" in warnings
    assert "Unsupported type in Worker.Jobs mapped to unknown" in warnings


def test_generate_code_result(models_unit: CompilationUnit) -> None:
    generator = TemplateGenerator(Configuration())
    generator.load_template("builtin:typescript")
    result = generate_code(generator, models_unit)

    assert result.success
    assert result.metadata["template"] == "typescript.ts.j2"
    assert result.metadata["package"] == "models"
    assert result.metadata["type_count"] == 8
    assert result.warnings == []


def test_generate_code_error(models_unit: CompilationUnit) -> None:
    generator = TemplateGenerator(Configuration())
    result = generate_code(generator, models_unit)
    assert not result.success
    assert "No template loaded" in result.error_message
    assert isinstance(result.exception, GeneratorError)


def test_builtin_typescript(models_unit: CompilationUnit) -> None:
    generator = TemplateGenerator(Configuration())
    generator.load_template("builtin:typescript")
    code = generator.render(models_unit)

    assert code.startswith("// Code generated by gogen from package models.")
    assert "/** Role represents a user role in the system. */" in code
    assert "export interface User {" in code
    assert "  // ID is the unique identifier for the user\n  id: string;" in code
    assert "  age?: number;" in code
    assert "  updatedAt?: string | null;" in code
    assert "  metadata?: Record<string, unknown>;" in code
    assert "  tags: string[];" in code
    assert "  items: OrderItem[];" in code
    assert "  total: number;\n  createdAt: string;" in code
    assert "export type Role = string;" in code
    assert "export type OrderStatus = number;" in code
    assert "export type ProductCategory = string;" in code
    assert "internalState" not in code


def test_builtin_valibot(models_unit: CompilationUnit) -> None:
    generator = TemplateGenerator(Configuration())
    generator.load_template("builtin:valibot")
    code = generator.render(models_unit)

    assert "import * as v from 'valibot';" in code
    assert "export const UserSchema = v.object({" in code
    assert "  email: v.pipe(v.optional(v.string(), ''), v.email())," in code
    assert "  tags: v.optional(v.array(v.string()), [])," in code
    assert "export type User = v.InferOutput<typeof UserSchema>;" in code
    assert "export const RoleSchema = v.string();" in code
    assert "export const OrderStatusSchema = v.number();" in code


def test_builtin_typescript_per_type_has_no_header(models_unit: CompilationUnit) -> None:
    config = Configuration()
    config.apply_options(per_type=True, include_types=["Address"])
    generator = TemplateGenerator(config)
    generator.load_template("builtin:typescript")
    code = generator.render(models_unit)

    assert "Code generated" not in code
    assert "  zipCode?: string;" in code


def test_generate_from_source(models_source: str) -> None:
    result = generate_from_source(models_source, "builtin:typescript", path="models.go")
    assert result.success
    assert "export interface Order {" in result.code


def test_quick_generate_options(models_source: str) -> None:
    code = quick_generate(models_source, exported_only=False, include_types=["internalState"])
    assert "export interface internalState {" in code
    assert "  counter: number;" in code
