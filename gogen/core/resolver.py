"""
Type resolution and embedded-field flattening.

Maps source type references to target spellings through the
configuration and inlines embedded struct fields into their container.
Neither operation raises: missing or cyclic data degrades to a
best-effort result.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Set, Tuple

from ..logging_config import get_logger
from .config import Configuration
from .model import (
    CompilationUnit,
    Field,
    TypeDeclaration,
    TypeKind,
    TypeReference,
    UNKNOWN_TYPE_NAME,
)

logger = get_logger(__name__)


class TypeResolver:
    """Filters, flattens and maps declarations of a compilation unit."""

    def __init__(self, config: Configuration):
        self.config = config

    def resolve(self, unit: CompilationUnit) -> List[TypeDeclaration]:
        """
        Select declarations for generation and flatten their embedded fields.

        Declarations are filtered with Configuration.should_include, in
        source order. Records are returned as copies with a flattened
        field list; the unit itself is left untouched.
        """
        index = unit.declarations_by_name()
        resolved = []

        for declaration in unit.declarations:
            if not self.config.should_include(declaration.name, declaration.is_exported):
                logger.debug(f"Skipping type {declaration.name}")
                continue

            if declaration.kind == TypeKind.RECORD:
                fields = self.flatten(declaration.fields, index, {declaration.name})
                declaration = replace(declaration, fields=fields)

            resolved.append(declaration)

        logger.debug(
            f"Resolved {len(resolved)} of {len(unit.declarations)} types "
            f"from {unit.path or '<source>'}"
        )
        return resolved

    def map_reference(self, ref: Optional[TypeReference]) -> str:
        """
        Map a type reference to its target spelling.

        Priority: raw spelling, qualified name, bare name, then the
        structural rule for the reference kind. A mapping onto the
        lookup key itself is not a match.
        """
        if ref is None:
            return UNKNOWN_TYPE_NAME

        for candidate in self._lookup_keys(ref):
            mapped = self.config.map_type(candidate)
            if mapped != candidate:
                return mapped

        if ref.kind in (TypeKind.SEQUENCE, TypeKind.FIXED_ARRAY):
            if ref.element is not None:
                return f"{self.map_reference(ref.element)}[]"
        elif ref.kind == TypeKind.DICTIONARY:
            if ref.key is not None and ref.value is not None:
                return (
                    f"Record<{self.map_reference(ref.key)}, "
                    f"{self.map_reference(ref.value)}>"
                )
        elif ref.kind == TypeKind.POINTER:
            if ref.element is not None:
                return f"{self.map_reference(ref.element)} | null"
        elif ref.kind == TypeKind.INTERFACE:
            return UNKNOWN_TYPE_NAME

        return ref.name

    @staticmethod
    def _lookup_keys(ref: TypeReference) -> List[str]:
        keys = []
        if ref.raw:
            keys.append(ref.raw)
        if ref.qualifier:
            keys.append(f"{ref.qualifier}.{ref.name}")
        if ref.name:
            keys.append(ref.name)
        return keys

    def flatten(
        self,
        fields: List[Field],
        declarations_by_name: Dict[str, TypeDeclaration],
        seen: Optional[Set[str]] = None,
    ) -> List[Field]:
        """
        Inline embedded record fields in place, recursively.

        Args:
            fields: Field list of a record
            declarations_by_name: Index of every declaration in the unit
            seen: Names on the current embedding path; an embed of one of
                them is dropped

        Returns:
            New field list; embeds that cannot be resolved are dropped
        """
        if seen is None:
            seen = set()

        result: List[Field] = []
        for f in fields:
            if not f.is_embedded:
                result.append(f)
                continue

            name = self.embedded_name(f)
            if name is None or name in seen:
                continue

            target = declarations_by_name.get(name)
            if target is None or target.kind != TypeKind.RECORD:
                logger.debug(f"Dropping unresolved embedded field {f.name}")
                continue

            # Siblings may embed the same type, so the name leaves the path again
            seen.add(name)
            result.extend(self.flatten(target.fields, declarations_by_name, seen))
            seen.discard(name)

        return result

    @staticmethod
    def embedded_name(f: Field) -> Optional[str]:
        """Declaration name an embedded field refers to, or None for external types."""
        ref = f.type
        if ref.kind == TypeKind.POINTER and ref.element is not None:
            ref = ref.element
        if ref.qualifier or not ref.name:
            return None
        return ref.name

    def unresolved_embeddings(self, unit: CompilationUnit) -> List[Tuple[str, Field]]:
        """List (declaration name, field) pairs whose embedding flattening drops."""
        index = unit.declarations_by_name()
        unresolved = []

        for declaration in unit.declarations:
            if declaration.kind != TypeKind.RECORD:
                continue
            for f in declaration.fields:
                if not f.is_embedded:
                    continue
                name = self.embedded_name(f)
                target = index.get(name) if name else None
                if target is None or target.kind != TypeKind.RECORD:
                    unresolved.append((declaration.name, f))

        return unresolved
