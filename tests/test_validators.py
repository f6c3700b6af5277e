"""Tests for validate tag rules and the Valibot helpers."""

from __future__ import annotations

from gogen.core.model import Field, FieldMetadata, TypeKind, TypeReference
from gogen.core.validators import (
    ValidateRule,
    get_validate_value,
    has_validate_rule,
    parse_validate_tag,
    valibot_elem_type,
    valibot_form_field,
)


def _prim(name: str) -> TypeReference:
    return TypeReference(kind=TypeKind.PRIMITIVE, name=name, raw=name)


def _named(qualifier: str, name: str) -> TypeReference:
    return TypeReference(
        kind=TypeKind.NAMED, name=name, qualifier=qualifier, raw=f"{qualifier}.{name}"
    )


def _field(ref: TypeReference, validate: str | None = None) -> Field:
    values = {"validate": validate} if validate is not None else {}
    return Field(name="F", type=ref, metadata=FieldMetadata(values=values))


def test_parse_validate_tag_keeps_order() -> None:
    f = _field(_prim("string"), "required, min=1,,max=45")
    assert parse_validate_tag(f) == [
        ValidateRule("required"),
        ValidateRule("min", "1"),
        ValidateRule("max", "45"),
    ]
    assert parse_validate_tag(_field(_prim("string"))) == []


def test_rule_lookups() -> None:
    f = _field(_prim("int"), "required,oneof=1 2 3")
    assert has_validate_rule(f, "required")
    assert not has_validate_rule(f, "email")
    assert get_validate_value(f, "oneof") == "1 2 3"
    assert get_validate_value(f, "missing") == ""


def test_valibot_form_field_scalars() -> None:
    assert valibot_form_field(_field(_prim("string"))) == "v.optional(v.string(), '')"
    assert valibot_form_field(_field(_prim("bool"))) == "v.optional(v.boolean(), false)"
    assert valibot_form_field(_field(_prim("uint16"))) == "v.optional(v.number(), 0)"
    assert (
        valibot_form_field(_field(_prim("Role")))
        == "v.optional(v.unknown(), undefined)"
    )


def test_valibot_form_field_pipes_validators() -> None:
    text = _field(_prim("string"), "required,email,min=3,max=45")
    assert valibot_form_field(text) == (
        "v.pipe(v.optional(v.string(), ''), v.email(), v.minLength(3), v.maxLength(45))"
    )
    number = _field(_prim("float64"), "min=0,max=10")
    assert valibot_form_field(number) == (
        "v.pipe(v.optional(v.number(), 0), v.minValue(0), v.maxValue(10))"
    )


def test_valibot_form_field_composites() -> None:
    tags = TypeReference(kind=TypeKind.SEQUENCE, element=_prim("string"), raw="[]string")
    labels = TypeReference(
        kind=TypeKind.DICTIONARY, key=_prim("string"), value=_prim("int"), raw=""
    )
    shipping = TypeReference(
        kind=TypeKind.POINTER, element=_prim("Address"), raw="*Address"
    )

    assert valibot_form_field(_field(tags)) == "v.optional(v.array(v.string()), [])"
    assert (
        valibot_form_field(_field(labels))
        == "v.optional(v.record(v.string(), v.number()), {})"
    )
    assert valibot_form_field(_field(shipping)) == "v.nullable(v.unknown())"


def test_valibot_named_types() -> None:
    assert valibot_form_field(_field(_named("time", "Time"))) == "v.optional(v.string(), '')"
    assert valibot_form_field(_field(_named("shop", "Item"))) == "ItemSchema"
    assert valibot_elem_type(_named("time", "Time")) == "v.pipe(v.string(), v.isoDateTime())"
    assert valibot_elem_type(_named("uuid", "UUID")) == "v.pipe(v.string(), v.uuid())"


def test_valibot_elem_type_nesting() -> None:
    nested = TypeReference(
        kind=TypeKind.SEQUENCE,
        element=TypeReference(kind=TypeKind.POINTER, element=_prim("bool"), raw="*bool"),
        raw="[]*bool",
    )
    assert valibot_elem_type(nested) == "v.array(v.nullable(v.boolean()))"
    assert valibot_elem_type(None) == "v.unknown()"
    assert (
        valibot_elem_type(TypeReference(kind=TypeKind.INTERFACE, name="interface{}"))
        == "v.unknown()"
    )
