"""
Go source extraction.

Parses a Go file with tree-sitter and converts its top-level type
declarations into the intermediate model. Type expressions are
classified on a best-effort basis: any shape the model does not
cover becomes the ``unknown`` primitive instead of an error.
"""

import copy
from pathlib import Path
from typing import Iterator, List, Optional, Union

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ...core.model import (
    CompilationUnit,
    Field,
    FieldMetadata,
    Import,
    TypeDeclaration,
    TypeKind,
    TypeReference,
)
from ...logging_config import get_logger
from ...utils import load_bytes
from .naming import is_exported
from .tags import parse_struct_tag, unquote_go_string

logger = get_logger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())


class ExtractorError(Exception):
    """Base exception for source extraction errors."""

    pass


class SourceSyntaxError(ExtractorError):
    """Raised when the input is not a well-formed Go source file."""

    def __init__(self, message: str, path: str = "", line: Optional[int] = None):
        location = path or "<source>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")
        self.path = path
        self.line = line


class GoExtractor:
    """Extracts type declarations from Go source code."""

    def __init__(self):
        """Initialize the tree-sitter parser for Go."""
        self._parser = Parser(GO_LANGUAGE)

    def parse_file(self, path: Union[str, Path]) -> CompilationUnit:
        """
        Read and extract a Go source file.

        Args:
            path: Local path or http(s) URL of the source file

        Returns:
            CompilationUnit for the file
        """
        return self.extract(load_bytes(path), path=str(path))

    def extract(self, source: Union[str, bytes], path: str = "") -> CompilationUnit:
        """
        Extract package name, imports and type declarations.

        Args:
            source: Go source text
            path: Path recorded on the unit and used in error messages

        Returns:
            CompilationUnit with declarations in source order

        Raises:
            SourceSyntaxError: If the source does not parse
        """
        src = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._parser.parse(src)
        root = tree.root_node

        if root.has_error:
            bad = self._first_error(root)
            if bad.is_missing:
                message = f"syntax error: missing {bad.type!r}"
            else:
                snippet = self._node_text(bad, src).strip().splitlines()
                near = snippet[0][:40] if snippet else ""
                message = f"syntax error near {near!r}"
            raise SourceSyntaxError(message, path, bad.start_point[0] + 1)

        package_name = self._package_name(root, src)
        if package_name is None:
            raise SourceSyntaxError("expected 'package' clause", path, 1)

        unit = CompilationUnit(package_name=package_name, path=path)

        for child in root.children:
            if child.type == "import_declaration":
                unit.imports.extend(self._extract_imports(child, src))
            elif child.type == "type_declaration":
                for declaration in self._extract_type_declaration(child, src):
                    unit.add_declaration(declaration)

        logger.debug(
            f"Extracted {len(unit.declarations)} types and "
            f"{len(unit.imports)} imports from {path or '<source>'}"
        )
        return unit

    # Type expressions

    def type_reference(self, node: Optional[Node], src: bytes) -> TypeReference:
        """
        Convert a type expression node into a TypeReference.

        Total over all node types: unsupported shapes (channels, function
        types, generic instantiations, anonymous structs) fall back to the
        ``unknown`` primitive.
        """
        if node is None:
            return TypeReference.unknown()

        kind = node.type

        if kind in ("type_identifier", "identifier"):
            name = self._node_text(node, src)
            return TypeReference(kind=TypeKind.PRIMITIVE, name=name, raw=name)

        if kind == "qualified_type":
            package = self._node_text(node.child_by_field_name("package"), src)
            name = self._node_text(node.child_by_field_name("name"), src)
            return TypeReference(
                kind=TypeKind.NAMED,
                name=name,
                qualifier=package,
                raw=f"{package}.{name}",
            )

        if kind == "pointer_type":
            element = self.type_reference(self._last_type_child(node), src)
            return TypeReference(
                kind=TypeKind.POINTER, element=element, raw="*" + element.raw
            )

        if kind == "slice_type":
            element = self.type_reference(node.child_by_field_name("element"), src)
            return TypeReference(
                kind=TypeKind.SEQUENCE, element=element, raw="[]" + element.raw
            )

        if kind in ("array_type", "implicit_length_array_type"):
            length_node = node.child_by_field_name("length")
            length = self._node_text(length_node, src) if length_node else "..."
            element = self.type_reference(node.child_by_field_name("element"), src)
            return TypeReference(
                kind=TypeKind.FIXED_ARRAY,
                element=element,
                raw=f"[{length}]{element.raw}",
            )

        if kind == "map_type":
            key = self.type_reference(node.child_by_field_name("key"), src)
            value = self.type_reference(node.child_by_field_name("value"), src)
            return TypeReference(
                kind=TypeKind.DICTIONARY,
                key=key,
                value=value,
                raw=f"map[{key.raw}]{value.raw}",
            )

        if kind == "variadic_parameter_declaration":
            # Variadic parameter, treat as slice
            element = self.type_reference(node.child_by_field_name("type"), src)
            return TypeReference(
                kind=TypeKind.SEQUENCE, element=element, raw="..." + element.raw
            )

        if kind == "interface_type":
            return TypeReference(
                kind=TypeKind.INTERFACE, name="interface{}", raw="interface{}"
            )

        if kind == "parenthesized_type":
            return self.type_reference(self._last_type_child(node), src)

        return TypeReference.unknown()

    # Declarations

    def _extract_type_declaration(
        self, node: Node, src: bytes
    ) -> Iterator[TypeDeclaration]:
        """Yield one declaration per spec of a (possibly grouped) type declaration."""
        group_doc = self._doc_comment(node, src)
        for child in node.named_children:
            if child.type in ("type_spec", "type_alias"):
                doc = self._doc_comment(child, src) or group_doc
                yield self._extract_type_spec(child, doc, src)

    def _extract_type_spec(self, spec: Node, doc: str, src: bytes) -> TypeDeclaration:
        """Classify a single type spec."""
        name = self._node_text(spec.child_by_field_name("name"), src)
        declaration = TypeDeclaration(
            name=name,
            kind=TypeKind.NAMED,
            doc=doc,
            is_exported=is_exported(name),
        )

        type_node = self._unwrap_parens(spec.child_by_field_name("type"))

        if type_node is not None and type_node.type == "struct_type":
            declaration.kind = TypeKind.RECORD
            declaration.fields = self._extract_fields(type_node, src)
        elif type_node is not None and type_node.type == "interface_type":
            # Method sets are not extracted
            declaration.kind = TypeKind.INTERFACE
        else:
            if spec.type == "type_alias":
                declaration.kind = TypeKind.ALIAS
            declaration.underlying = self.type_reference(type_node, src)

        return declaration

    def _extract_fields(self, struct_node: Node, src: bytes) -> List[Field]:
        """Extract fields from a struct type."""
        fields: List[Field] = []
        field_list = next(
            (
                c
                for c in struct_node.named_children
                if c.type == "field_declaration_list"
            ),
            None,
        )
        if field_list is None:
            return fields

        for declaration in field_list.named_children:
            if declaration.type != "field_declaration":
                continue

            type_ref = self.type_reference(
                declaration.child_by_field_name("type"), src
            )
            tag_node = declaration.child_by_field_name("tag")
            metadata = (
                parse_struct_tag(self._string_value(tag_node, src))
                if tag_node is not None
                else FieldMetadata()
            )
            doc = self._doc_comment(declaration, src)
            names = declaration.children_by_field_name("name")

            if not names:
                # Embedded field: named after the referenced type
                if any(child.type == "*" for child in declaration.children):
                    type_ref = TypeReference(
                        kind=TypeKind.POINTER,
                        element=type_ref,
                        raw="*" + type_ref.raw,
                    )
                base = type_ref
                if base.kind == TypeKind.POINTER and base.element is not None:
                    base = base.element
                fields.append(
                    Field(
                        name=base.name,
                        type=type_ref,
                        metadata=metadata,
                        doc=doc,
                        is_exported=is_exported(base.name),
                        is_embedded=True,
                    )
                )
                continue

            for index, name_node in enumerate(names):
                name = self._node_text(name_node, src)
                fields.append(
                    Field(
                        name=name,
                        type=type_ref if index == 0 else copy.deepcopy(type_ref),
                        metadata=metadata
                        if index == 0
                        else copy.deepcopy(metadata),
                        doc=doc,
                        is_exported=is_exported(name),
                    )
                )

        return fields

    def _extract_imports(self, node: Node, src: bytes) -> Iterator[Import]:
        """Yield imports of a single or grouped import declaration."""
        specs: List[Node] = []
        for child in node.named_children:
            if child.type == "import_spec":
                specs.append(child)
            elif child.type == "import_spec_list":
                specs.extend(c for c in child.named_children if c.type == "import_spec")

        for spec in specs:
            path_node = spec.child_by_field_name("path")
            name_node = spec.child_by_field_name("name")
            yield Import(
                path=self._string_value(path_node, src) if path_node else "",
                alias=self._node_text(name_node, src) if name_node else None,
            )

    @staticmethod
    def _package_name(root: Node, src: bytes) -> Optional[str]:
        for child in root.children:
            if child.type != "package_clause":
                continue
            for name_node in child.named_children:
                if name_node.type in ("package_identifier", "identifier"):
                    return GoExtractor._node_text(name_node, src)
        return None

    # Comments

    def _doc_comment(self, node: Node, src: bytes) -> str:
        """
        Collect the comment group directly above a node.

        The group must end on the line before the node and must not be a
        trailing comment of the preceding line.
        """
        comments: List[Node] = []
        expected_row = node.start_point[0]
        sibling = node.prev_sibling

        while sibling is not None and sibling.type == "comment":
            if sibling.end_point[0] < expected_row - 1:
                break
            before = sibling.prev_sibling
            if before is not None and self._is_trailing(before, sibling):
                break
            comments.append(sibling)
            expected_row = sibling.start_point[0]
            sibling = before

        comments.reverse()
        return self._comment_text(comments, src)

    @staticmethod
    def _is_trailing(before: Node, comment: Node) -> bool:
        """True if comment shares a line with the token before it."""
        if before.type == "comment":
            return False
        # The newline terminator spans into the next row
        if before.type == "\n":
            return before.start_point[0] == comment.start_point[0]
        return before.end_point[0] == comment.start_point[0]

    def _comment_text(self, comments: List[Node], src: bytes) -> str:
        lines: List[str] = []
        for comment in comments:
            text = self._node_text(comment, src)
            if text.startswith("//"):
                body = text[2:]
                if body.startswith("go:"):
                    continue  # compiler directive
                if body.startswith(" "):
                    body = body[1:]
                lines.append(body.rstrip())
            else:
                body = text[2:-2]
                lines.extend(line.rstrip() for line in body.splitlines())
        return "\n".join(lines).strip()

    # Node helpers

    @staticmethod
    def _node_text(node: Optional[Node], src: bytes) -> str:
        if node is None:
            return ""
        return src[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def _string_value(self, node: Node, src: bytes) -> str:
        """Unquote a raw or interpreted string literal."""
        text = self._node_text(node, src)
        if len(text) < 2:
            return text
        body = text[1:-1]
        if node.type == "raw_string_literal":
            return body
        return unquote_go_string(body)

    @staticmethod
    def _last_type_child(node: Node) -> Optional[Node]:
        children = [c for c in node.named_children if c.type != "comment"]
        return children[-1] if children else None

    def _unwrap_parens(self, node: Optional[Node]) -> Optional[Node]:
        while node is not None and node.type == "parenthesized_type":
            node = self._last_type_child(node)
        return node

    @staticmethod
    def _first_error(node: Node) -> Node:
        """Depth-first search for the first error or missing node."""
        if node.is_error or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing or child.is_error:
                return GoExtractor._first_error(child)
        return node


_default_extractor: Optional[GoExtractor] = None


def get_extractor() -> GoExtractor:
    """Get the shared extractor instance."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = GoExtractor()
    return _default_extractor


def extract_source(source: Union[str, bytes], path: str = "") -> CompilationUnit:
    """Convenience function to extract a unit with the shared extractor."""
    return get_extractor().extract(source, path)
