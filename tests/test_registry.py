"""Tests for the helper registry."""

from __future__ import annotations

import pytest
from jinja2 import Environment

from gogen.registry import HelperRegistry, RegistryError


def _shout(value: str) -> str:
    return value.upper() + "!"


def test_register_and_lookup_by_alias() -> None:
    registry = HelperRegistry()
    registry.register("shout", _shout, aliases=["Shout", "shout"], is_filter=True)

    assert registry.get("shout") is _shout
    assert registry.get("Shout") is _shout
    assert registry.is_registered("Shout")
    assert registry.list_helpers() == ["shout"]
    assert registry.list_all_names() == {"shout": ["shout", "Shout"]}


def test_register_rejects_conflicts() -> None:
    registry = HelperRegistry()
    registry.register("shout", _shout, aliases=["yell"])

    with pytest.raises(RegistryError):
        registry.register("shout", str.lower)
    with pytest.raises(RegistryError):
        registry.register("whisper", str.lower, aliases=["yell"])
    with pytest.raises(RegistryError):
        registry.register("yell", str.lower)
    with pytest.raises(RegistryError):
        registry.register("broken", "not callable")  # type: ignore[arg-type]

    registry.register("shout", str.lower, replace=True)
    assert registry.get("shout") is str.lower


def test_unregister_removes_aliases() -> None:
    registry = HelperRegistry()
    registry.register("shout", _shout, aliases=["yell"])
    registry.unregister("shout")

    assert not registry.is_registered("yell")
    with pytest.raises(RegistryError):
        registry.get("shout")


def test_install_sets_globals_and_filters() -> None:
    registry = HelperRegistry()
    registry.register("shout", _shout, aliases=["Shout"], is_filter=True)
    registry.register("twice", lambda s: s * 2)
    env = Environment()
    registry.install(env)

    assert env.from_string("{{ 'hi' | Shout }} {{ twice('a') }}").render() == "HI! aa"
    assert "twice" not in env.filters
