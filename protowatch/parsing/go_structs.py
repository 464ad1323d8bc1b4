"""Tree-sitter powered Go struct extractor."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ..errors import ExtractionError
from ..logging import get_logger
from ..models import AggregateType, Field, Ident, Opaque, Qualified, Slice, TypeExpr
from .tags import serialized_name, unquote_tag_literal

GO_LANGUAGE = Language(tree_sitter_go.language())


class GoStructExtractor:
    """Extracts top-level struct declarations from Go source files."""

    def __init__(self) -> None:
        self.logger = get_logger("parsing")

    def extract(self, path: Path) -> Dict[str, AggregateType]:
        """Return the structs declared in ``path`` keyed by name, in declaration order."""
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise ExtractionError(f"Failed to read file: {path}: {exc}") from exc
        return self.extract_source(source, origin=str(path))

    def extract_source(self, source: bytes, *, origin: str = "<source>") -> Dict[str, AggregateType]:
        # Parsers are not thread-safe; each attempt gets its own.
        parser = Parser(GO_LANGUAGE)
        tree = parser.parse(source)
        root = tree.root_node
        if root.has_error:
            line = self._first_error_line(root)
            raise ExtractionError(f"Failed to parse file: {origin}: syntax error near line {line}")

        structs: Dict[str, AggregateType] = {}
        for spec in self._type_specs(root):
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None or type_node.type != "struct_type":
                continue
            name = _text(name_node)
            # Redeclarations keep the slot of the first one and the body of the last.
            structs[name] = AggregateType(name=name, fields=list(self._fields(type_node)))

        self.logger.debug("Extracted %d structs from %s", len(structs), origin)
        return structs

    @staticmethod
    def _type_specs(root: Node) -> Iterable[Node]:
        for decl in root.named_children:
            if decl.type != "type_declaration":
                continue
            for child in decl.named_children:
                if child.type == "type_spec":
                    yield child

    def _fields(self, struct_node: Node) -> Iterable[Field]:
        body = next(
            (child for child in struct_node.named_children if child.type == "field_declaration_list"),
            None,
        )
        if body is None:
            return
        for declaration in body.named_children:
            if declaration.type != "field_declaration":
                continue
            names = declaration.children_by_field_name("name")
            type_node = declaration.child_by_field_name("type")
            if not names or type_node is None:
                # embedded field
                continue
            tag_node = declaration.child_by_field_name("tag")
            tag = unquote_tag_literal(_text(tag_node)) if tag_node is not None else None
            type_expr = parse_type_expr(type_node)
            for name_node in names:
                name = _text(name_node)
                yield Field(name=name, type_expr=type_expr, serialized_name=serialized_name(name, tag))

    @staticmethod
    def _first_error_line(node: Node) -> int:
        stack: List[Node] = [node]
        while stack:
            current = stack.pop()
            if current.type == "ERROR" or current.is_missing:
                return current.start_point[0] + 1
            stack.extend(reversed(current.children))
        return node.start_point[0] + 1


def parse_type_expr(node: Optional[Node]) -> TypeExpr:
    """Convert a tree-sitter Go type node into a :data:`TypeExpr` variant."""
    if node is None:
        return Opaque("")
    if node.type == "type_identifier":
        return Ident(_text(node))
    if node.type == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is not None and name is not None:
            return Qualified(_text(package), _text(name))
    if node.type in {"slice_type", "array_type", "implicit_length_array_type"}:
        return Slice(parse_type_expr(node.child_by_field_name("element")))
    if node.type == "parenthesized_type" and node.named_child_count == 1:
        return parse_type_expr(node.named_children[0])
    return Opaque(_text(node))


def _text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="ignore")


__all__ = ["GoStructExtractor", "parse_type_expr", "GO_LANGUAGE"]
