"""
Intermediate model for parsed Go type declarations.

Normalizes the syntax tree of one Go source file into plain data
that the resolver and templates can work with consistently.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum


class TypeKind(Enum):
    """Closed set of shapes a declaration or type reference can take."""

    RECORD = "struct"
    ALIAS = "alias"
    NAMED = "named"
    PRIMITIVE = "basic"
    SEQUENCE = "slice"
    FIXED_ARRAY = "array"
    DICTIONARY = "map"
    POINTER = "pointer"
    INTERFACE = "interface"

    def __str__(self) -> str:
        return self.value


# Struct tag keys kept by the extractor; everything else is dropped
RECOGNIZED_TAG_KEYS = (
    "json",
    "yaml",
    "xml",
    "db",
    "form",
    "validate",
    "binding",
    "bson",
)

# Sentinel spelling for shapes the extractor does not model
UNKNOWN_TYPE_NAME = "unknown"


@dataclass
class TypeReference:
    """
    Reference to a type as spelled in a field or declaration body.

    Only the children valid for ``kind`` are set: ``element`` for slices,
    arrays and pointers, ``key``/``value`` for maps.
    """

    kind: TypeKind
    name: str = ""
    raw: str = ""
    qualifier: Optional[str] = None  # Package name, e.g. "time" for time.Time

    # For slices, arrays and pointers
    element: Optional["TypeReference"] = None

    # For maps
    key: Optional["TypeReference"] = None
    value: Optional["TypeReference"] = None

    @property
    def full_name(self) -> str:
        """Qualified name (e.g. "time.Time"), or the bare name."""
        if self.qualifier:
            return f"{self.qualifier}.{self.name}"
        return self.name

    @classmethod
    def unknown(cls) -> "TypeReference":
        """Fallback reference for unsupported spellings."""
        return cls(
            kind=TypeKind.PRIMITIVE, name=UNKNOWN_TYPE_NAME, raw=UNKNOWN_TYPE_NAME
        )

    @property
    def is_unknown(self) -> bool:
        return self.kind == TypeKind.PRIMITIVE and self.name == UNKNOWN_TYPE_NAME


@dataclass
class FieldMetadata:
    """Parsed struct tag of a field."""

    raw: str = ""
    values: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str = "") -> str:
        return self.values.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self.values


@dataclass
class Field:
    """A single struct field."""

    name: str
    type: TypeReference
    metadata: FieldMetadata = field(default_factory=FieldMetadata)
    doc: str = ""
    is_exported: bool = False
    is_embedded: bool = False


@dataclass
class TypeDeclaration:
    """A top-level ``type`` declaration."""

    name: str
    kind: TypeKind
    doc: str = ""
    fields: List[Field] = field(default_factory=list)  # Structs only
    underlying: Optional[TypeReference] = None  # Aliases and named types
    is_exported: bool = False

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class Import:
    """An import statement."""

    path: str
    alias: Optional[str] = None


@dataclass
class CompilationUnit:
    """Everything extracted from one Go source file."""

    package_name: str
    path: str = ""
    imports: List[Import] = field(default_factory=list)
    declarations: List[TypeDeclaration] = field(default_factory=list)

    def add_declaration(self, declaration: TypeDeclaration) -> None:
        """Append a declaration, keeping source order."""
        self.declarations.append(declaration)

    def get_declaration(self, name: str) -> Optional[TypeDeclaration]:
        """Get the last declaration with the given name."""
        return self.declarations_by_name().get(name)

    def declarations_by_name(self) -> Dict[str, TypeDeclaration]:
        """
        Index declarations by name.

        Names are expected to be unique within a file; if they are not,
        the later declaration shadows the earlier one in the index.
        """
        return {decl.name: decl for decl in self.declarations}
