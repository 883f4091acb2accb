from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import cast

from tree_sitter import Node, Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

from astgen.core.languages import FragmentContainer, fragment_container
from astgen.exceptions import ParseFailure
from astgen.models import SyntaxNode


class TreeSitterParser:
    """Parse source with tree-sitter and normalize the result.

    Implements the ``SourceParser`` protocol. Parsers are not shared between
    threads; each worker thread lazily builds its own per language.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def parse(self, source: bytes, language: str, method_only: bool = False) -> SyntaxNode:
        container: FragmentContainer | None = None
        if method_only:
            try:
                container = fragment_container(language)
            except ValueError as e:
                raise ParseFailure(str(e)) from None
            source = container.prefix.encode("utf-8") + source + container.suffix.encode("utf-8")

        tree = self._get_parser(language).parse(source)
        root = tree.root_node
        line_offset = container.line_offset if container else 0
        if root.has_error:
            raise ParseFailure(_describe_error(root, line_offset))

        if container is not None:
            root = _select_fragment(root, container)

        return _to_syntax_tree(root)

    def _get_parser(self, language: str) -> Parser:
        parsers: dict[str, Parser] | None = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = {}
            self._local.parsers = parsers
        parser = parsers.get(language)
        if parser is None:
            parser = get_parser(cast(SupportedLanguage, language))
            parsers[language] = parser
        return parser


def _text(node: Node) -> str:
    if node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _node_value(node: Node) -> str | None:
    """Source text for leaves, or the operator-like token bound to a field."""
    if node.named_child_count == 0:
        return _text(node)
    for index, child in enumerate(node.children):
        if not child.is_named and node.field_name_for_child(index) is not None:
            return _text(child)
    return None


def _to_syntax_tree(root: Node) -> SyntaxNode:
    converted = SyntaxNode(type=root.type, value=_node_value(root))
    stack = [(root, converted)]
    while stack:
        node, target = stack.pop()
        for child in node.named_children:
            if child.is_extra:
                continue
            child_converted = SyntaxNode(type=child.type, value=_node_value(child))
            target.children.append(child_converted)
            stack.append((child, child_converted))
    return converted


def _preorder(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _describe_error(root: Node, line_offset: int) -> str:
    for node in _preorder(root):
        if node.is_error or node.is_missing:
            row, column = node.start_point
            line = max(row - line_offset, 0) + 1
            if node.is_missing:
                return f"missing {node.type} at line {line}, column {column + 1}"
            return f"syntax error at line {line}, column {column + 1}"
    return "syntax error"


def _select_fragment(root: Node, container: FragmentContainer) -> Node:
    for node in _preorder(root):
        if node.type == container.container_type:
            for child in node.named_children:
                if not child.is_extra:
                    return child
            break
    raise ParseFailure("no declaration found")
