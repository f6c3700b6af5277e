"""
Template engine wrapper for code generation.

Wraps a Jinja2 environment with the registered helpers and checks
templates when they are loaded: syntax errors, unknown filters and
unknown names are all reported before anything is rendered.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING

from jinja2 import (
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    meta,
    select_autoescape,
)

from ..logging_config import get_logger
from ..utils import SourceLoadError, load_text

if TYPE_CHECKING:
    from ..registry import HelperRegistry

logger = get_logger(__name__)

BUILTIN_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
BUILTIN_PREFIX = "builtin:"
TEMPLATE_SUFFIX = ".j2"


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateLoadError(TemplateError):
    """Template is missing, malformed or uses unknown helpers."""

    pass


class TemplateExecutionError(TemplateError):
    """Rendering failed."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, registry: Optional["HelperRegistry"] = None):
        """
        Initialize template engine.

        Args:
            registry: Helpers to expose as globals and filters
        """
        self.registry = registry
        self._env: Environment = self._setup_environment()

    def _setup_environment(self) -> Environment:
        """Setup Jinja2 environment with code generation utilities."""
        env = Environment(
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        if self.registry is not None:
            self.registry.install(env)

        return env

    @property
    def environment(self) -> Environment:
        return self._env

    def compile(
        self,
        source: str,
        name: str = "<template>",
        context_names: Iterable[str] = (),
    ) -> Template:
        """
        Parse, check and compile a template.

        Args:
            source: Template text
            name: Name used in error messages
            context_names: Variables the template will be rendered with

        Returns:
            Compiled template

        Raises:
            TemplateLoadError: On syntax errors, unknown filters or names
                that are neither helpers nor context variables
        """
        try:
            tree = self._env.parse(source, name=name)
        except TemplateSyntaxError as e:
            raise TemplateLoadError(f"{name}:{e.lineno}: {e.message}") from e

        try:
            # Unknown filters and tests are rejected at this stage
            code = self._env.compile(tree, name=name)
            undeclared = meta.find_undeclared_variables(tree)
        except TemplateSyntaxError as e:
            raise TemplateLoadError(f"{name}:{e.lineno}: {e.message}") from e

        known = set(self._env.globals) | set(context_names)
        unknown = undeclared - known
        if unknown:
            raise TemplateLoadError(
                f"{name}: unknown helper or variable: {', '.join(sorted(unknown))}"
            )

        return self._env.template_class.from_code(
            self._env, code, self._env.make_globals(None)
        )

    def render(self, template: Template, context: Dict[str, Any]) -> str:
        """
        Render a compiled template.

        Raises:
            TemplateExecutionError: If rendering fails for any reason
        """
        try:
            return template.render(**context)
        except Exception as e:
            raise TemplateExecutionError(f"{type(e).__name__}: {e}") from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """Compile and render a template string in one step."""
        template = self.compile(template_string, context_names=context.keys())
        return self.render(template, context)


def list_builtin_templates() -> List[str]:
    """Names of the templates shipped with the package."""
    if not BUILTIN_TEMPLATE_DIR.exists():
        return []
    return sorted(
        path.name.split(".")[0] for path in BUILTIN_TEMPLATE_DIR.glob(f"*{TEMPLATE_SUFFIX}")
    )


def builtin_template_path(name: str) -> Path:
    """
    Path of a built-in template.

    Raises:
        TemplateLoadError: If no such template ships with the package
    """
    for path in BUILTIN_TEMPLATE_DIR.glob(f"*{TEMPLATE_SUFFIX}"):
        if path.name.split(".")[0] == name:
            return path
    available = ", ".join(list_builtin_templates())
    raise TemplateLoadError(
        f"No built-in template named '{name}'. Available: {available}"
    )


def read_template_source(location: str) -> Tuple[str, str]:
    """
    Read template text from a path, URL or ``builtin:<name>``.

    Returns:
        (template name, template text)

    Raises:
        TemplateLoadError: If the template cannot be read
    """
    if location.startswith(BUILTIN_PREFIX):
        path = builtin_template_path(location[len(BUILTIN_PREFIX) :])
    else:
        path = location

    try:
        source = load_text(path)
    except SourceLoadError as e:
        raise TemplateLoadError(f"loading template: {e}") from e

    logger.debug(f"Loaded template {location} ({len(source)} chars)")
    return Path(str(path)).name, source
