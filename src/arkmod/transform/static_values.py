"""
Static-value classifier.

Decides whether an expression's value can be read off the source text
without running the program. Nodes are first projected onto a small tagged
view (`ExprView`) so the recursive predicate only ever switches on a closed
set of kinds.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set, Tuple

from tree_sitter import Node

from .nodes import node_key
from .resolver import BindingKind, ScopeResolver


class ExprKind(str, Enum):
    STRING = "string"
    TEMPLATE = "template"
    PARENTHESIZED = "parenthesized"
    IDENTIFIER = "identifier"
    BINARY_PLUS = "binary_plus"
    OTHER = "other"


@dataclass(frozen=True)
class ExprView:
    kind: ExprKind
    node: Node
    left: Optional[Node] = None
    right: Optional[Node] = None
    substitutions: int = 0


def view(node: Optional[Node]) -> ExprView:
    """Project a tree-sitter node onto the classifier's expression kinds."""
    if node is None:
        return ExprView(ExprKind.OTHER, node)
    kind = node.type
    if kind == "string":
        return ExprView(ExprKind.STRING, node)
    if kind == "template_string":
        count = sum(1 for child in node.named_children if child.type == "template_substitution")
        return ExprView(ExprKind.TEMPLATE, node, substitutions=count)
    if kind == "parenthesized_expression":
        inner = [child for child in node.named_children if child.type != "comment"]
        if len(inner) == 1:
            return ExprView(ExprKind.PARENTHESIZED, node, left=inner[0])
        return ExprView(ExprKind.OTHER, node)
    if kind == "identifier":
        return ExprView(ExprKind.IDENTIFIER, node)
    if kind == "binary_expression":
        operator = node.child_by_field_name("operator")
        if operator is not None and operator.type == "+":
            return ExprView(
                ExprKind.BINARY_PLUS,
                node,
                left=node.child_by_field_name("left"),
                right=node.child_by_field_name("right"),
            )
    return ExprView(ExprKind.OTHER, node)


def is_static(node: Optional[Node], resolver: ScopeResolver, _seen: Optional[Set[Tuple[int, int, str]]] = None) -> bool:
    """
    True if the expression's value is fully known from source text.

    Never raises; self-referential `const` initialisers are reported dynamic.
    """
    seen = _seen if _seen is not None else set()
    expr = view(node)

    if expr.kind == ExprKind.STRING:
        return True
    if expr.kind == ExprKind.TEMPLATE:
        return expr.substitutions == 0
    if expr.kind == ExprKind.PARENTHESIZED:
        return is_static(expr.left, resolver, seen)
    if expr.kind == ExprKind.BINARY_PLUS:
        return is_static(expr.left, resolver, seen) and is_static(expr.right, resolver, seen)
    if expr.kind == ExprKind.IDENTIFIER:
        binding = resolver.resolve(expr.node)
        if binding is None or binding.kind != BindingKind.VARIABLE:
            return False
        if not binding.is_const or binding.value is None:
            return False
        key = node_key(binding.declaration)
        if key in seen:
            return False
        seen.add(key)
        try:
            return is_static(binding.value, resolver, seen)
        finally:
            seen.discard(key)
    return False
