"""
CommentAnnotator: Warn above sites whose pattern or flags are dynamic.

The marker check against the current and previous line keeps repeated runs
from stacking comments. A line start inside a template literal or JSX markup
is not code, so comments are never placed there.
"""

from typing import Optional, Set

from tree_sitter import Node

from arkmod.parser import SourceUnit
from arkmod.schemas import Classification, EditOp
from .config import DIAGNOSTIC_COMMENT, DIAGNOSTIC_MARKER

# Where a line comment would become text (or a syntax error)
NON_CODE_CONTAINERS = {
    "template_string",
    "string",
    "jsx_element",
    "jsx_fragment",
    "jsx_opening_element",
    "jsx_closing_element",
    "jsx_self_closing_element",
    "jsx_text",
}

# Embedded expressions switch back to code
CODE_CONTAINERS = {"template_substitution", "jsx_expression"}


class CommentAnnotator:
    def __init__(self, unit: SourceUnit, comment: str = DIAGNOSTIC_COMMENT, marker: str = DIAGNOSTIC_MARKER):
        self.unit = unit
        self.comment = comment
        self.marker = marker.encode('utf-8')
        self._scheduled: Set[int] = set()

    def line_start(self, offset: int) -> int:
        return self.unit.data.rfind(b"\n", 0, offset) + 1

    def non_code_container(self, line_start: int) -> Optional[Node]:
        """
        The outermost template literal or JSX node holding the line break
        before `line_start`, or None when that break sits in code.
        """
        if line_start == 0:
            return None
        node = self.unit.root.descendant_for_byte_range(line_start - 1, line_start)
        found = None
        while node is not None:
            if node.type in CODE_CONTAINERS:
                break
            if node.type in NON_CODE_CONTAINERS:
                found = node
            node = node.parent
        return found

    def already_annotated(self, offset: int) -> bool:
        data = self.unit.data
        start = self.line_start(offset)
        if self.marker in data[start:offset]:
            return True
        if start == 0:
            return False
        previous_start = self.line_start(start - 1)
        return self.marker in data[previous_start:start]

    def indentation(self, line_start: int) -> str:
        data = self.unit.data
        end = line_start
        while end < len(data) and data[end:end + 1] in (b" ", b"\t"):
            end += 1
        return data[line_start:end].decode('utf-8')

    def annotate(self, offset: int, classification: Classification) -> Optional[EditOp]:
        """
        Schedule the diagnostic comment above the line holding `offset`.

        Returns:
            The insertion, or None when the site is static, the file is
            untyped, the line is already annotated, or the line does not
            start in code.
        """
        if classification.is_static or not self.unit.is_typed:
            return None
        start = self.line_start(offset)
        if start in self._scheduled or self.already_annotated(offset):
            return None
        if self.non_code_container(start) is not None:
            return None
        self._scheduled.add(start)
        text = f"{self.indentation(start)}{self.comment}{self.unit.line_ending}"
        return EditOp(start=start, end=start, text=text)
