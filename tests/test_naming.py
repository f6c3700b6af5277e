"""Tests for case conversion and Go naming rules."""

from __future__ import annotations

import pytest

from gogen.core.naming import (
    NamingCase,
    convert_case,
    split_words,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)
from gogen.languages.go.naming import is_exported, is_numeric_type


@pytest.mark.parametrize(
    ("name", "words"),
    [
        ("userName", ["user", "Name"]),
        ("HTTPServer", ["HTTP", "Server"]),
        ("user_id", ["user", "id"]),
        ("zip-code here", ["zip", "code", "here"]),
        ("ID", ["ID"]),
        ("", []),
    ],
)
def test_split_words(name: str, words: list[str]) -> None:
    assert split_words(name) == words


def test_case_converters() -> None:
    assert to_camel_case("CreatedAt") == "createdAt"
    assert to_camel_case("HTTPServer") == "httpServer"
    assert to_pascal_case("user_id") == "UserId"
    assert to_snake_case("UserID") == "user_id"
    assert to_kebab_case("ZipCode") == "zip-code"
    assert to_camel_case("") == ""


def test_convert_case_dispatch() -> None:
    assert convert_case("OrderItem", NamingCase.SNAKE_CASE) == "order_item"
    assert convert_case("OrderItem", NamingCase.SCREAMING_SNAKE) == "ORDER_ITEM"
    assert convert_case("order_item", NamingCase.PASCAL_CASE) == "OrderItem"


def test_go_visibility() -> None:
    assert is_exported("User")
    assert not is_exported("user")
    assert not is_exported("_hidden")
    assert not is_exported("")


def test_go_numeric_types() -> None:
    for name in ("int", "uint8", "float32", "byte", "rune", "uintptr"):
        assert is_numeric_type(name), name
    for name in ("string", "bool", "complex64", "Decimal"):
        assert not is_numeric_type(name), name
