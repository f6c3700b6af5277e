"""
Go source front end.

Extracts struct, alias and named type declarations from Go files
into the intermediate model.
"""

from .extractor import (
    ExtractorError,
    GoExtractor,
    SourceSyntaxError,
    extract_source,
    get_extractor,
)
from .naming import is_exported, is_numeric_type
from .tags import parse_struct_tag, unquote_go_string

__all__ = [
    "ExtractorError",
    "GoExtractor",
    "SourceSyntaxError",
    "extract_source",
    "get_extractor",
    "is_exported",
    "is_numeric_type",
    "parse_struct_tag",
    "unquote_go_string",
]
