"""
ReplacementBuilder: Produce the source text that replaces an accepted site.

    new RegExp(p, f)  ->  regex(p, f) as RegExp

Dynamic arguments are coerced to the replacement's parameter types, and the
whole expression is parenthesized where a trailing `as` would otherwise bind
to the wrong operand.
"""

from typing import Callable, Optional

from tree_sitter import Node

from arkmod.parser import SourceUnit
from arkmod.schemas import Classification, EditOp, ImportPlan
from .config import CodemodSettings, PRIMARY_EXPRESSIONS
from .locator import CandidateSite

RenderFn = Callable[[Node], str]


class ReplacementBuilder:
    def __init__(self, unit: SourceUnit, plan: ImportPlan, settings: CodemodSettings):
        self.unit = unit
        self.plan = plan
        self.settings = settings

    def parameter_type(self, index: int) -> str:
        return f"Parameters<typeof {self.plan.binding_name}>[{index}]"

    def coerce(self, text: str, node: Node, index: int) -> str:
        if node.type not in PRIMARY_EXPRESSIONS:
            text = f"({text})"
        return f"{text} as {self.parameter_type(index)}"

    def argument_text(self, node: Node, static: bool, index: int, render: RenderFn) -> str:
        text = render(node)
        if static or not self.unit.is_typed:
            return text
        return self.coerce(text, node, index)

    def build(self, site: CandidateSite, classification: Classification, render: Optional[RenderFn] = None) -> str:
        render = render or self.unit.node_text
        parts = [self.argument_text(site.arguments[0], classification.pattern_is_static, 0, render)]
        if len(site.arguments) > 1:
            parts.append(self.argument_text(site.arguments[1], classification.flags_is_static, 1, render))

        call = f"{self.plan.binding_name}({', '.join(parts)})"
        if not self.unit.is_typed:
            return call

        text = f"{call} as {self.settings.constructor_name}"
        if site.requires_parens:
            text = f"({text})"
        return text

    def edit_for(self, site: CandidateSite, classification: Classification, render: Optional[RenderFn] = None) -> EditOp:
        return EditOp(start=site.start_byte, end=site.end_byte, text=self.build(site, classification, render))
