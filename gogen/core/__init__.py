"""
Core of the generator: intermediate model, configuration,
resolution and template rendering.
"""

from .model import (
    CompilationUnit,
    Field,
    FieldMetadata,
    Import,
    TypeDeclaration,
    TypeKind,
    TypeReference,
)
from .config import (
    Configuration,
    ConfigError,
    ConfigFormatError,
    Options,
    DEFAULT_TYPE_MAPPINGS,
    load_config,
)
from .resolver import TypeResolver
from .templates import (
    TemplateEngine,
    TemplateError,
    TemplateExecutionError,
    TemplateLoadError,
    list_builtin_templates,
)
from .generator import (
    GenerationResult,
    GeneratorError,
    OutputIOError,
    TemplateGenerator,
    generate_code,
)

__all__ = [
    "CompilationUnit",
    "Field",
    "FieldMetadata",
    "Import",
    "TypeDeclaration",
    "TypeKind",
    "TypeReference",
    "Configuration",
    "ConfigError",
    "ConfigFormatError",
    "Options",
    "DEFAULT_TYPE_MAPPINGS",
    "load_config",
    "TypeResolver",
    "TemplateEngine",
    "TemplateError",
    "TemplateExecutionError",
    "TemplateLoadError",
    "list_builtin_templates",
    "GenerationResult",
    "GeneratorError",
    "OutputIOError",
    "TemplateGenerator",
    "generate_code",
]
