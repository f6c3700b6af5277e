"""
Helper registry for templates.

Maps stable helper names (plus their camelCase aliases) to callables
and installs them into a Jinja2 environment as globals and filters.
The set of registered names is what template validation checks
against, so a template using an unknown helper fails when loaded.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from .logging_config import get_logger

if TYPE_CHECKING:
    from jinja2 import Environment

    from .core.config import Configuration
    from .core.resolver import TypeResolver

logger = get_logger(__name__)


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


@dataclass
class HelperSpec:
    """A registered helper."""

    name: str
    func: Callable[..., Any]
    is_filter: bool = False


class HelperRegistry:
    """Registry for template helper functions."""

    def __init__(self):
        """Initialize empty registry."""
        self._helpers: Dict[str, HelperSpec] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        name: str,
        func: Callable[..., Any],
        aliases: Optional[List[str]] = None,
        is_filter: bool = False,
        replace: bool = False,
    ):
        """
        Register a helper.

        Args:
            name: Primary helper name (snake_case)
            func: Callable exposed to templates
            aliases: Alternative names, e.g. the camelCase spelling
            is_filter: Also expose the helper as a Jinja filter
            replace: If True, replace an existing registration

        Raises:
            RegistryError: If func is not callable or a name is already taken
        """
        if not callable(func):
            raise RegistryError(f"Helper '{name}' must be callable")

        if not replace:
            if name in self._helpers:
                raise RegistryError(f"Helper '{name}' is already registered")
            if name in self._aliases:
                raise RegistryError(
                    f"Helper '{name}' conflicts with alias of '{self._aliases[name]}'"
                )

        self._helpers[name] = HelperSpec(name=name, func=func, is_filter=is_filter)

        for alias in aliases or []:
            if alias == name:
                continue
            if not replace:
                if alias in self._helpers:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing helper"
                    )
                if alias in self._aliases and self._aliases[alias] != name:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias]}'"
                    )
            self._aliases[alias] = name

    def unregister(self, name: str):
        """Unregister a helper and its aliases."""
        self._helpers.pop(name, None)
        for alias in [a for a, target in self._aliases.items() if target == name]:
            del self._aliases[alias]

    def get(self, name: str) -> Callable[..., Any]:
        """
        Get a helper by name or alias.

        Raises:
            RegistryError: If the name is not registered
        """
        name = self._aliases.get(name, name)
        if name not in self._helpers:
            raise RegistryError(f"No helper registered as '{name}'")
        return self._helpers[name].func

    def is_registered(self, name: str) -> bool:
        return name in self._helpers or name in self._aliases

    def list_helpers(self) -> List[str]:
        """Get sorted primary helper names."""
        return sorted(self._helpers)

    def get_aliases_for_helper(self, name: str) -> List[str]:
        return sorted(a for a, target in self._aliases.items() if target == name)

    def list_all_names(self) -> Dict[str, List[str]]:
        """Map each primary name to itself plus its aliases."""
        return {
            name: [name] + self.get_aliases_for_helper(name)
            for name in self.list_helpers()
        }

    def globals(self) -> Dict[str, Callable[..., Any]]:
        """Every helper under every name."""
        result = {name: spec.func for name, spec in self._helpers.items()}
        for alias, target in self._aliases.items():
            result[alias] = self._helpers[target].func
        return result

    def filters(self) -> Dict[str, Callable[..., Any]]:
        """Helpers marked as filters, under every name."""
        result = {
            name: spec.func for name, spec in self._helpers.items() if spec.is_filter
        }
        for alias, target in self._aliases.items():
            if self._helpers[target].is_filter:
                result[alias] = self._helpers[target].func
        return result

    def install(self, env: "Environment"):
        """Expose all helpers in a Jinja2 environment."""
        env.globals.update(self.globals())
        env.filters.update(self.filters())
        logger.debug(f"Installed {len(self._helpers)} template helpers")


def create_helper_registry(
    config: "Configuration", resolver: Optional["TypeResolver"] = None
) -> HelperRegistry:
    """
    Build a registry holding the default helpers bound to a configuration.

    Args:
        config: Active configuration (type mappings, tag key)
        resolver: Resolver used by map_type; built from config if omitted

    Returns:
        Populated registry
    """
    from .core.helpers import register_default_helpers
    from .core.resolver import TypeResolver

    registry = HelperRegistry()
    register_default_helpers(registry, config, resolver or TypeResolver(config))
    return registry
