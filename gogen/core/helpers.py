"""
Template helper functions.

Pure functions over the intermediate model that templates call to
inspect types, read struct tags, convert names and format comments.
register_default_helpers binds the configuration-dependent ones and
adds everything to a HelperRegistry.
"""

from typing import Any, Iterable, List, Optional, Union, TYPE_CHECKING

from .model import Field, TypeDeclaration, TypeKind, TypeReference
from .naming import (
    NamingCase,
    convert_case,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)
from .validators import (
    get_validate_value,
    has_validate_rule,
    parse_validate_tag,
    valibot_elem_type,
    valibot_form_field,
)

if TYPE_CHECKING:
    from ..registry import HelperRegistry
    from .config import Configuration
    from .resolver import TypeResolver

Typed = Union[TypeReference, TypeDeclaration, Field]


def _kind(value: Optional[Typed]) -> Optional[TypeKind]:
    # Fields are judged by their type
    if isinstance(value, Field):
        return value.type.kind
    return getattr(value, "kind", None)


# Type predicates


def is_struct(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.RECORD


def is_named(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.NAMED


def is_alias(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.ALIAS


def is_slice(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.SEQUENCE


def is_array(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.FIXED_ARRAY


def is_map(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.DICTIONARY


def is_pointer(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.POINTER


def is_basic(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.PRIMITIVE


def is_interface(value: Optional[Typed]) -> bool:
    return _kind(value) == TypeKind.INTERFACE


def is_optional(f: Field) -> bool:
    """A field is optional when it is a pointer or its json tag has omitempty."""
    if f.type.kind == TypeKind.POINTER:
        return True
    return "omitempty" in f.metadata.get("json")


def elem_type(ref: TypeReference) -> Optional[TypeReference]:
    return ref.element


def key_type(ref: TypeReference) -> Optional[TypeReference]:
    return ref.key


def value_type(ref: TypeReference) -> Optional[TypeReference]:
    return ref.value


# Struct tags


def tag(f: Field, key: str) -> str:
    """Raw tag value for a key, or an empty string."""
    return f.metadata.get(key)


def has_tag(f: Field, key: str) -> bool:
    return key in f.metadata


def tag_or_name(f: Field, key: str = "json") -> str:
    """
    Name from the first element of a tag value, or the field name.

    ``json:"-"`` and ``json:",omitempty"`` fall back to the field name.
    """
    if key in f.metadata:
        name = f.metadata.get(key).split(",")[0]
        if name and name != "-":
            return name
    return f.name


def json_name(f: Field) -> str:
    return tag_or_name(f, "json")


# Strings


def lower(s: str) -> str:
    return s.lower()


def upper(s: str) -> str:
    return s.upper()


def trim(s: str) -> str:
    return s.strip()


def replace(s: str, old: str, new: str) -> str:
    return s.replace(old, new)


def has_prefix(s: str, prefix: str) -> bool:
    return s.startswith(prefix)


def has_suffix(s: str, suffix: str) -> bool:
    return s.endswith(suffix)


def case(name: str, style: str) -> str:
    """Convert a name to a case style given by its value, e.g. "snake"."""
    return convert_case(name, NamingCase(style))


# Lists and conditionals


def join(items: Iterable[Any], sep: str) -> str:
    return sep.join(str(item) for item in items)


def contains(items: Iterable[Any], value: Any) -> bool:
    return value in items


def default(value: Any, fallback: Any) -> Any:
    """Return value unless it is empty."""
    return value if value else fallback


def ternary(condition: Any, a: Any, b: Any) -> Any:
    return a if condition else b


def not_last(i: int, length: int) -> bool:
    return i < length - 1


# Comments


def comment(text: str, prefix: str = "// ") -> str:
    """Prefix every line of a comment; empty text stays empty."""
    if not text:
        return ""
    return "\n".join(prefix + line.strip() for line in text.strip().split("\n"))


def doc_comment(text: str) -> str:
    """
    Format a documentation comment as JSDoc.

    One line gives ``/** text */``; several lines give a block with
    `` * `` prefixed lines.
    """
    if not text:
        return ""
    lines = text.strip().split("\n")
    if len(lines) == 1:
        return f"/** {lines[0].strip()} */"
    body = [f" * {line.strip()}" for line in lines]
    return "\n".join(["/**"] + body + [" */"])


def validate_rules(f: Field) -> List[dict]:
    """Validate tag rules as plain dicts with "name" and "value" keys."""
    return [{"name": r.name, "value": r.value} for r in parse_validate_tag(f)]


def register_default_helpers(
    registry: "HelperRegistry", config: "Configuration", resolver: "TypeResolver"
):
    """
    Register the standard helper set.

    map_type and tag_or_name are bound to the given resolver and
    configuration; all other helpers are plain functions.
    """

    def map_type(ref: Optional[TypeReference]) -> str:
        if isinstance(ref, Field):
            ref = ref.type
        return resolver.map_reference(ref)

    def configured_tag_or_name(f: Field, key: Optional[str] = None) -> str:
        return tag_or_name(f, key or config.options.tag_key)

    # name, function, camelCase alias, also a filter
    helpers = [
        ("map_type", map_type, "mapType", True),
        ("is_struct", is_struct, "isStruct", False),
        ("is_named", is_named, "isNamed", False),
        ("is_alias", is_alias, "isAlias", False),
        ("is_slice", is_slice, "isSlice", False),
        ("is_array", is_array, "isArray", False),
        ("is_map", is_map, "isMap", False),
        ("is_pointer", is_pointer, "isPointer", False),
        ("is_basic", is_basic, "isBasic", False),
        ("is_interface", is_interface, "isInterface", False),
        ("is_optional", is_optional, "isOptional", False),
        ("elem_type", elem_type, "elemType", False),
        ("key_type", key_type, "keyType", False),
        ("value_type", value_type, "valueType", False),
        ("tag", tag, None, False),
        ("tag_or_name", configured_tag_or_name, "tagOrName", True),
        ("json_name", json_name, "jsonName", True),
        ("has_tag", has_tag, "hasTag", False),
        ("camel_case", to_camel_case, "camelCase", True),
        ("pascal_case", to_pascal_case, "pascalCase", True),
        ("snake_case", to_snake_case, "snakeCase", True),
        ("kebab_case", to_kebab_case, "kebabCase", True),
        ("convert_case", case, "convertCase", True),
        ("lower", lower, None, False),
        ("upper", upper, None, False),
        ("trim", trim, None, False),
        ("replace", replace, None, False),
        ("has_prefix", has_prefix, "hasPrefix", False),
        ("has_suffix", has_suffix, "hasSuffix", False),
        ("join", join, None, False),
        ("contains", contains, None, False),
        ("default", default, None, False),
        ("ternary", ternary, None, False),
        ("comment", comment, None, True),
        ("doc_comment", doc_comment, "docComment", True),
        ("not_last", not_last, "notLast", False),
        ("validate_rules", validate_rules, "validateRules", False),
        ("has_validate_rule", has_validate_rule, "hasValidateRule", False),
        ("get_validate_value", get_validate_value, "getValidateValue", False),
        ("valibot_form_field", valibot_form_field, "valibotFormField", True),
        ("valibot_elem_type", valibot_elem_type, "valibotElemType", True),
    ]

    for name, func, alias, is_filter in helpers:
        registry.register(
            name, func, aliases=[alias] if alias else None, is_filter=is_filter
        )
