"""
Validation helpers driven by ``validate`` struct tags.

A tag such as ``validate:"required,min=1,max=45"`` is read as an
ordered list of rules. The Valibot helpers turn a field and its rules
into a schema expression for form validation.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..languages.go.naming import is_numeric_type
from .model import Field, TypeKind, TypeReference

# Named types that serialize as plain strings
_STRING_NAMED_TYPES = {"time.Time", "uuid.UUID"}


@dataclass
class ValidateRule:
    """A single rule of a validate tag."""

    name: str
    value: str = ""


def parse_validate_tag(f: Field) -> List[ValidateRule]:
    """Parse the validate tag of a field into ordered rules."""
    tag_value = f.metadata.get("validate")
    if not tag_value:
        return []

    rules = []
    for part in tag_value.split(","):
        part = part.strip()
        if not part:
            continue
        name, sep, value = part.partition("=")
        if sep and name:
            rules.append(ValidateRule(name=name, value=value))
        else:
            rules.append(ValidateRule(name=part))
    return rules


def has_validate_rule(f: Field, rule_name: str) -> bool:
    """Check if a field has a specific validate rule."""
    return any(rule.name == rule_name for rule in parse_validate_tag(f))


def get_validate_value(f: Field, rule_name: str) -> str:
    """Value of the first rule with the given name, or an empty string."""
    for rule in parse_validate_tag(f):
        if rule.name == rule_name:
            return rule.value
    return ""


def valibot_elem_type(ref: Optional[TypeReference]) -> str:
    """Valibot schema for a type reference nested inside a field type."""
    if ref is None:
        return "v.unknown()"

    if ref.kind == TypeKind.PRIMITIVE:
        if ref.name == "string":
            return "v.string()"
        if ref.name == "bool":
            return "v.boolean()"
        if is_numeric_type(ref.name):
            return "v.number()"
        return "v.unknown()"

    if ref.kind == TypeKind.NAMED:
        if ref.raw == "time.Time":
            return "v.pipe(v.string(), v.isoDateTime())"
        if ref.raw == "uuid.UUID":
            return "v.pipe(v.string(), v.uuid())"
        return f"{ref.name}Schema"

    if ref.kind in (TypeKind.SEQUENCE, TypeKind.FIXED_ARRAY):
        return f"v.array({valibot_elem_type(ref.element)})"

    if ref.kind == TypeKind.DICTIONARY:
        return f"v.record({valibot_elem_type(ref.key)}, {valibot_elem_type(ref.value)})"

    if ref.kind == TypeKind.POINTER:
        return f"v.nullable({valibot_elem_type(ref.element)})"

    return "v.unknown()"


def valibot_form_field(f: Field) -> str:
    """
    Valibot expression for a form field.

    Scalars become ``v.optional(base, default)``, piped through the
    validators derived from the field's validate tag. Collections get
    empty defaults, pointers become nullable, and other named types
    refer to their own ``<Name>Schema``.
    """
    ref = f.type
    is_numeric = False

    if ref.kind == TypeKind.PRIMITIVE:
        if ref.name == "string":
            base_type, default = "v.string()", "''"
        elif ref.name == "bool":
            base_type, default = "v.boolean()", "false"
        elif is_numeric_type(ref.name):
            base_type, default = "v.number()", "0"
            is_numeric = True
        else:
            base_type, default = "v.unknown()", "undefined"
    elif ref.kind == TypeKind.NAMED:
        if ref.raw not in _STRING_NAMED_TYPES:
            return f"{ref.name}Schema"
        base_type, default = "v.string()", "''"
    elif ref.kind in (TypeKind.SEQUENCE, TypeKind.FIXED_ARRAY):
        return f"v.optional(v.array({valibot_elem_type(ref.element)}), [])"
    elif ref.kind == TypeKind.DICTIONARY:
        key_type = valibot_elem_type(ref.key)
        value_type = valibot_elem_type(ref.value)
        return f"v.optional(v.record({key_type}, {value_type}), {{}})"
    elif ref.kind == TypeKind.POINTER:
        return f"v.nullable({valibot_elem_type(ref.element)})"
    else:
        base_type, default = "v.unknown()", "undefined"

    validators = []
    for rule in parse_validate_tag(f):
        if rule.name == "min":
            check = "minValue" if is_numeric else "minLength"
            validators.append(f"v.{check}({rule.value})")
        elif rule.name == "max":
            check = "maxValue" if is_numeric else "maxLength"
            validators.append(f"v.{check}({rule.value})")
        elif rule.name in ("email", "url", "uuid"):
            validators.append(f"v.{rule.name}()")

    expression = f"v.optional({base_type}, {default})"
    if not validators:
        return expression

    return f"v.pipe({', '.join([expression] + validators)})"
