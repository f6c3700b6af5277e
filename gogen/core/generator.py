"""
Template-driven generation.

Resolves the declarations of a compilation unit and renders them
through a loaded template, either once for all types or once per type.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

from jinja2 import Template

from ..logging_config import get_logger
from ..registry import HelperRegistry, create_helper_registry
from .config import Configuration
from .model import CompilationUnit, TypeDeclaration, TypeKind, TypeReference
from .resolver import TypeResolver
from .templates import (
    TemplateEngine,
    TemplateError,
    TemplateExecutionError,
    read_template_source,
)

logger = get_logger(__name__)

# Variables every template is rendered with
CONTEXT_NAMES = ("file", "types", "type", "config", "type_mappings")


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class OutputIOError(GeneratorError):
    """The rendered output could not be written."""

    pass


class TemplateGenerator:
    """Renders resolved declarations through a Jinja2 template."""

    def __init__(
        self, config: Configuration, registry: Optional[HelperRegistry] = None
    ):
        """
        Initialize generator with a configuration.

        Args:
            config: Active configuration
            registry: Helper registry; the default helpers when omitted
        """
        self.config = config
        self.resolver = TypeResolver(config)
        self.registry = registry or create_helper_registry(config, self.resolver)
        self.engine = TemplateEngine(self.registry)
        self.template_name: Optional[str] = None
        self._template: Optional[Template] = None

    @property
    def has_template(self) -> bool:
        return self._template is not None

    def load_template(self, location: str):
        """
        Load a template from a path, URL or ``builtin:<name>``.

        Raises:
            TemplateLoadError: If the template cannot be read or checked
        """
        name, source = read_template_source(location)
        self.load_template_string(source, name)

    def load_template_string(self, source: str, name: str = "<template>"):
        """Compile template text; see TemplateEngine.compile."""
        self._template = self.engine.compile(source, name, CONTEXT_NAMES)
        self.template_name = name
        logger.debug(f"Compiled template {name}")

    def build_context(
        self,
        unit: CompilationUnit,
        types: List[TypeDeclaration],
        current: Optional[TypeDeclaration] = None,
    ) -> Dict[str, Any]:
        """Variables visible to the template."""
        return {
            "file": unit,
            "types": types,
            "type": current,
            "config": self.config,
            "type_mappings": self.config.type_mappings,
        }

    def render(self, unit: CompilationUnit) -> str:
        """
        Render the loaded template for a unit.

        Returns:
            Full rendered text

        Raises:
            GeneratorError: If no template is loaded
            TemplateExecutionError: If rendering fails
        """
        if self._template is None:
            raise GeneratorError("No template loaded")

        types = self.resolver.resolve(unit)

        if not self.config.options.per_type:
            context = self.build_context(unit, types)
            try:
                return self.engine.render(self._template, context)
            except TemplateExecutionError as e:
                raise TemplateExecutionError(f"executing template: {e}") from e

        parts = []
        for declaration in types:
            context = self.build_context(unit, types, declaration)
            try:
                parts.append(self.engine.render(self._template, context))
            except TemplateExecutionError as e:
                raise TemplateExecutionError(
                    f"executing template for {declaration.name}: {e}"
                ) from e
        return "".join(parts)

    def generate(self, unit: CompilationUnit, sink: TextIO) -> str:
        """
        Render a unit and write the result to a text stream.

        Nothing is written when rendering fails.

        Raises:
            OutputIOError: If writing fails
        """
        text = self.render(unit)
        try:
            sink.write(text)
            sink.flush()
        except OSError as e:
            raise OutputIOError(f"writing output: {e}") from e
        return text

    def write(self, unit: CompilationUnit, output_path: Union[str, Path]) -> str:
        """Render a unit, then create output_path and write the result to it."""
        text = self.render(unit)
        path = Path(output_path)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise OutputIOError(f"creating output file {path}: {e}") from e
        logger.debug(f"Wrote {len(text)} chars to {path}")
        return text

    def validate(self, unit: CompilationUnit) -> List[str]:
        """
        Check a unit for things that will silently degrade the output.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []
        declared = unit.declarations_by_name()

        for name in self.config.options.include_types:
            if name not in declared:
                warnings.append(f"Included type '{name}' is not declared in the source")

        for owner, f in self.resolver.unresolved_embeddings(unit):
            owner_decl = declared[owner]
            if self.config.should_include(owner, owner_decl.is_exported):
                warnings.append(
                    f"Embedded field {owner}.{f.name} cannot be resolved and is dropped"
                )

        for declaration in self.resolver.resolve(unit):
            if declaration.kind == TypeKind.RECORD and not declaration.fields:
                warnings.append(f"Type '{declaration.name}' has no fields")

            for f in declaration.fields:
                if _contains_unknown(f.type):
                    warnings.append(
                        f"Unsupported type in {declaration.name}.{f.name} mapped to unknown"
                    )

            if declaration.underlying is not None and _contains_unknown(
                declaration.underlying
            ):
                warnings.append(
                    f"Unsupported underlying type of {declaration.name} mapped to unknown"
                )

        return warnings


def _contains_unknown(ref: Optional[TypeReference]) -> bool:
    if ref is None:
        return False
    if ref.is_unknown:
        return True
    return any(_contains_unknown(child) for child in (ref.element, ref.key, ref.value))


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    generator: TemplateGenerator, unit: CompilationUnit
) -> GenerationResult:
    """
    Generate code with the loaded template, collecting warnings.

    Args:
        generator: Generator with a template loaded
        unit: Extracted compilation unit

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        warnings = generator.validate(unit)
        code = generator.render(unit)

        metadata = {
            "template": generator.template_name,
            "package": unit.package_name,
            "source": unit.path,
            "type_count": len(generator.resolver.resolve(unit)),
            "per_type": generator.config.options.per_type,
        }

        return GenerationResult(code, warnings, metadata)

    except (TemplateError, GeneratorError) as e:
        logger.debug(f"Code generation failed: {e}")
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)
