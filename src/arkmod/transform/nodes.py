"""
Small helpers over tree-sitter nodes shared by the transform components.
"""

from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node


def walk(node: Node, prune=None) -> Iterator[Node]:
    """
    Pre-order traversal. Children of nodes for which `prune(node)` is true
    are not visited (the node itself is).
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if prune is not None and current is not node and prune(current):
            continue
        stack.extend(reversed(current.children))


def node_key(node: Node) -> Tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
    if a is None or b is None:
        return False
    return node_key(a) == node_key(b)


def text_of(node: Node) -> str:
    return node.text.decode('utf-8')


def unquote(node: Node) -> str:
    """Value of a string literal node without its quotes."""
    raw = text_of(node)
    if len(raw) >= 2 and raw[0] in "\"'`" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def has_token(node: Node, token: str) -> bool:
    """True if an anonymous child token of this exact type is present."""
    return any(not child.is_named and child.type == token for child in node.children)


def argument_nodes(arguments: Optional[Node]) -> List[Node]:
    """Positional arguments of an `arguments` node, skipping comments and delimiters."""
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type != "comment"]
