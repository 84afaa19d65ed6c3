"""
SiteLocator: Find the constructor sites that can be rewritten.

Enumerates `new RegExp(...)` (and optionally `RegExp(...)`) expressions,
keeps the ones whose callee is the ambient global and that pass 1 or 2
arguments, and classifies each argument as static or dynamic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from tree_sitter import Node

from arkmod.logging_config import logger
from arkmod.parser import SourceUnit
from arkmod.schemas import Classification
from .config import CodemodSettings
from .nodes import argument_nodes, same_node, text_of, walk
from .resolver import ScopeResolver
from .static_values import is_static

MAX_ARGUMENTS = 2

# Parents that bind tighter than a trailing `as` coercion
_TIGHT_PARENTS = {"unary_expression", "binary_expression", "update_expression", "non_null_expression"}


class SiteKind(str, Enum):
    CONSTRUCTOR = "constructor"
    CALL = "call"


@dataclass
class CandidateSite:
    kind: SiteKind
    node: Node
    callee: Node
    arguments: List[Node] = field(default_factory=list)
    requires_parens: bool = False

    @property
    def start_byte(self) -> int:
        return self.node.start_byte

    @property
    def end_byte(self) -> int:
        return self.node.end_byte

    def contains(self, other: "CandidateSite") -> bool:
        return (
            self.start_byte <= other.start_byte
            and other.end_byte <= self.end_byte
            and (self.start_byte, self.end_byte) != (other.start_byte, other.end_byte)
        )


def needs_parens(node: Node) -> bool:
    """
    True if the node is the receiver of a property/element access, the callee
    of a call, or an operand of an operator that binds tighter than `as`.
    """
    parent = node.parent
    if parent is None:
        return False
    if parent.type in ("member_expression", "subscript_expression"):
        return same_node(parent.child_by_field_name("object"), node)
    if parent.type == "call_expression":
        return same_node(parent.child_by_field_name("function"), node)
    return parent.type in _TIGHT_PARENTS


class SiteLocator:
    """
    Discover and filter candidate sites in one SourceUnit.
    """

    def __init__(self, unit: SourceUnit, resolver: ScopeResolver, settings: CodemodSettings):
        self.unit = unit
        self.resolver = resolver
        self.settings = settings

    def iter_candidates(self):
        """All syntactic matches, before filtering."""
        name = self.settings.constructor_name
        for node in walk(self.unit.root):
            if node.type == "new_expression":
                callee = node.child_by_field_name("constructor")
                kind = SiteKind.CONSTRUCTOR
            elif node.type == "call_expression" and self.settings.call_form:
                callee = node.child_by_field_name("function")
                kind = SiteKind.CALL
            else:
                continue
            if callee is None or callee.type != "identifier" or text_of(callee) != name:
                continue
            yield CandidateSite(
                kind=kind,
                node=node,
                callee=callee,
                arguments=argument_nodes(node.child_by_field_name("arguments")),
                requires_parens=needs_parens(node),
            )

    def discover(self) -> Tuple[List[CandidateSite], int]:
        """
        Returns:
            (accepted sites in source order, number of rejected matches)
        """
        accepted: List[CandidateSite] = []
        rejected = 0
        for site in self.iter_candidates():
            reason = self._reject_reason(site)
            if reason:
                rejected += 1
                line = site.node.start_point[0] + 1
                logger.debug(f"Skipping {self.settings.constructor_name} at {self.unit.path or '<memory>'}:{line}: {reason}")
                continue
            accepted.append(site)
        accepted.sort(key=lambda s: (s.start_byte, -s.end_byte))
        return accepted, rejected

    def _reject_reason(self, site: CandidateSite) -> Optional[str]:
        if not self.resolver.is_global(site.callee):
            return f"'{self.settings.constructor_name}' is {self.resolver.origin(site.callee).value}"
        count = len(site.arguments)
        if count == 0:
            return "no arguments"
        if count > MAX_ARGUMENTS:
            return f"{count} arguments"
        if any(arg.type == "spread_element" for arg in site.arguments):
            return "spread argument"
        return None

    def classify(self, site: CandidateSite) -> Classification:
        pattern = site.arguments[0] if site.arguments else None
        flags = site.arguments[1] if len(site.arguments) > 1 else None
        return Classification(
            identifier_is_global=self.resolver.is_global(site.callee),
            pattern_is_static=pattern is not None and is_static(pattern, self.resolver),
            flags_is_static=flags is None or is_static(flags, self.resolver),
        )
