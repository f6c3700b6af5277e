"""
gogen: template-driven code generation from Go type declarations.

Parses Go structs, aliases and named types, maps their field types to
a target language and renders them through Jinja2 templates.
"""

from typing import Optional, Union
from pathlib import Path

from .core import (
    CompilationUnit,
    Configuration,
    GenerationResult,
    GeneratorError,
    TemplateGenerator,
    TypeDeclaration,
    TypeKind,
    TypeReference,
    generate_code,
    load_config,
)
from .languages.go import GoExtractor, SourceSyntaxError, extract_source
from .registry import HelperRegistry, create_helper_registry

# Version info
__version__ = "0.1.0"


# Convenience functions
def generate_from_source(
    source: Union[str, bytes],
    template: str,
    config: Optional[Union[Configuration, str, Path]] = None,
    path: str = "",
) -> GenerationResult:
    """
    Generate code from Go source text.

    Args:
        source: Go source code
        template: Template path, URL or ``builtin:<name>``
        config: Configuration instance or path of a YAML/JSON config file
        path: Source path used in messages

    Returns:
        GenerationResult with generated code

    Raises:
        SourceSyntaxError: If the source does not parse
        TemplateLoadError: If the template cannot be loaded
    """
    if not isinstance(config, Configuration):
        config = load_config(config_file=config)

    unit = extract_source(source, path)
    generator = TemplateGenerator(config.freeze())
    generator.load_template(template)
    return generate_code(generator, unit)


def quick_generate(
    source: Union[str, bytes], template: str = "builtin:typescript", **options
) -> str:
    """
    Quick code generation from Go source text.

    Args:
        source: Go source code
        template: Template path, URL or ``builtin:<name>``
        **options: Keyword arguments for Configuration.apply_options

    Returns:
        Generated code string
    """
    config = load_config(overrides=options)
    result = generate_from_source(source, template, config)

    if result.success:
        return result.code
    raise GeneratorError(result.error_message)


# Export main interfaces
__all__ = [
    "CompilationUnit",
    "Configuration",
    "GenerationResult",
    "GeneratorError",
    "GoExtractor",
    "HelperRegistry",
    "SourceSyntaxError",
    "TemplateGenerator",
    "TypeDeclaration",
    "TypeKind",
    "TypeReference",
    "create_helper_registry",
    "extract_source",
    "generate_code",
    "generate_from_source",
    "load_config",
    "quick_generate",
    "__version__",
]
