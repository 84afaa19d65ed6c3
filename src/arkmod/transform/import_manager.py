"""
ImportManager: Make the replacement function available under a safe name.

Existing-import detection runs two independent predicates (binding lookup
and a structural scan of import statements) and ORs them. Insertion runs an
ordered chain of placement strategies over the already-rewritten text,
starting from the last original import mapped through the committed edits.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set, Tuple

from tree_sitter import Node

from arkmod.logging_config import logger
from arkmod.parser import SourceUnit
from arkmod.schemas import EditOp, ImportPlan, InsertionStrategy
from .config import CodemodSettings
from .nodes import has_token, text_of, unquote, walk
from .resolver import BindingKind, ScopeResolver


@dataclass(frozen=True)
class ExistingImport:
    local_name: str
    aliased: bool


@dataclass(frozen=True)
class ImportAnchor:
    """The last original import statement and where it now ends in the rewritten text."""
    text: str
    position: int


class ImportManager:
    """
    Plan and insert the single `import { regex } from "arkregex"` line for one file.
    """

    def __init__(self, unit: SourceUnit, resolver: ScopeResolver, settings: CodemodSettings):
        self.unit = unit
        self.resolver = resolver
        self.settings = settings

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def _is_target_import(self, binding) -> bool:
        return (
            binding.kind == BindingKind.IMPORT
            and binding.source == self.settings.module_name
            and binding.imported_name == self.settings.function_name
        )

    def import_statements(self) -> List[Node]:
        return [node for node in walk(self.unit.root) if node.type == "import_statement"]

    def find_import_by_binding(self) -> Optional[ExistingImport]:
        """Semantic check: some live reference resolves to the target import."""
        prune = lambda n: n.type == "import_statement"
        for node in walk(self.unit.root, prune=prune):
            if node.type != "identifier":
                continue
            binding = self.resolver.resolve(node)
            if binding is not None and self._is_target_import(binding):
                return ExistingImport(local_name=binding.name, aliased=binding.name != self.settings.function_name)
        return None

    def find_import_by_structure(self) -> Optional[ExistingImport]:
        """Structural check: an import statement of the module names the function."""
        for statement in self.import_statements():
            source = statement.child_by_field_name("source")
            if source is None or unquote(source) != self.settings.module_name:
                continue
            if has_token(statement, "type"):
                continue
            for node in walk(statement):
                if node.type != "import_specifier" or has_token(node, "type"):
                    continue
                name = node.child_by_field_name("name")
                if name is None or text_of(name) != self.settings.function_name:
                    continue
                alias = node.child_by_field_name("alias")
                if alias is not None:
                    return ExistingImport(local_name=text_of(alias), aliased=True)
                return ExistingImport(local_name=text_of(name), aliased=False)
        return None

    def existing_import(self) -> Optional[ExistingImport]:
        return self.find_import_by_binding() or self.find_import_by_structure()

    def bound_names(self) -> Set[str]:
        """
        Names already taken in the file: declarations, parameters, imports
        from other modules and assignment targets.
        """
        names = {b.name for b in self.resolver.all_bindings() if not self._is_target_import(b)}
        for node in walk(self.unit.root):
            if node.type in ("assignment_expression", "augmented_assignment_expression"):
                left = node.child_by_field_name("left")
                if left is not None and left.type == "identifier":
                    names.add(text_of(left))
        return names

    def alternate_name(self, bound: Set[str]) -> str:
        name = self.settings.alternate_name
        suffix = 2
        while name in bound:
            name = f"{self.settings.alternate_name}{suffix}"
            suffix += 1
        return name

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self) -> ImportPlan:
        natural = self.settings.function_name
        existing = self.existing_import()
        bound = self.bound_names()

        if existing is not None and existing.aliased:
            binding_name = existing.local_name
        elif natural in bound:
            binding_name = self.alternate_name(bound)
        else:
            binding_name = natural

        required = existing is None or existing.local_name != binding_name
        plan = ImportPlan(
            required=required,
            binding_name=binding_name,
            alias_of=natural if binding_name != natural else None,
            existing_local_name=existing.local_name if existing else None,
        )
        logger.debug(f"Import plan for {self.unit.path or '<memory>'}: {plan}")
        return plan

    def import_line(self, plan: ImportPlan) -> str:
        natural = self.settings.function_name
        if plan.binding_name != natural:
            specifier = f"{natural} as {plan.binding_name}"
        else:
            specifier = natural
        return f'import {{ {specifier} }} from "{self.settings.module_name}";'

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def last_import(self) -> Optional[Node]:
        statements = [n for n in self.unit.root.named_children if n.type == "import_statement"]
        return statements[-1] if statements else None

    def anchor_for(self, text: str, edits: Iterable[EditOp] = ()) -> Optional[ImportAnchor]:
        """
        Locate the end of the last original import in rewritten text.

        The statement's end byte is shifted by the length change of every
        edit committed before it, then converted to a character offset.
        """
        statement = self.last_import()
        if statement is None:
            return None
        end = statement.end_byte
        shift = sum(len(e.text.encode('utf-8')) - (e.end - e.start) for e in edits if e.start < end)
        data = text.encode('utf-8')
        position = min(max(end + shift, 0), len(data))
        offset = len(data[:position].decode('utf-8', errors='ignore'))
        return ImportAnchor(text=self.unit.node_text(statement), position=offset)

    @staticmethod
    def _after_line_break(text: str, pos: int) -> int:
        while pos < len(text) and text[pos] in " \t":
            pos += 1
        newline = text.find("\n", pos)
        return len(text) if newline == -1 else newline + 1

    def find_exact_anchor(self, text: str, anchor: Optional[ImportAnchor]) -> Optional[int]:
        if anchor is None:
            return None
        start = anchor.position - len(anchor.text)
        if start < 0 or text[start:anchor.position] != anchor.text:
            return None
        return self._after_line_break(text, anchor.position)

    def find_keyword_line(self, text: str, anchor: Optional[ImportAnchor]) -> Optional[int]:
        lines = text.split('\n')
        last_import_line = -1
        for i, line in enumerate(lines):
            stripped = line.strip()
            if stripped.startswith('import ') or stripped.startswith('import{'):
                last_import_line = i
        if last_import_line < 0:
            return None
        offset = sum(len(line) + 1 for line in lines[:last_import_line + 1])
        return min(offset, len(text))

    def find_end_of_file(self, text: str, anchor: Optional[ImportAnchor]) -> Optional[int]:
        if anchor is None:
            return None
        return len(text)

    def find_start_of_file(self, text: str, anchor: Optional[ImportAnchor]) -> Optional[int]:
        if text.startswith("#!"):
            return self._after_line_break(text, 0)
        return 0

    def strategies(self) -> List[Tuple[InsertionStrategy, Callable[[str, Optional[ImportAnchor]], Optional[int]]]]:
        return [
            (InsertionStrategy.EXACT_ANCHOR, self.find_exact_anchor),
            (InsertionStrategy.KEYWORD_LINE, self.find_keyword_line),
            (InsertionStrategy.END_OF_FILE, self.find_end_of_file),
            (InsertionStrategy.START_OF_FILE, self.find_start_of_file),
        ]

    def insert(
        self, text: str, plan: ImportPlan, anchor: Optional[ImportAnchor] = None
    ) -> Tuple[str, Optional[InsertionStrategy]]:
        """
        Insert the planned import line into already-rewritten text.

        Args:
            text: Source after replacements were committed
            plan: The file's import plan
            anchor: End of the last original import in `text` (computed
                assuming `text` is unedited if omitted)

        Returns:
            (new text, strategy used) - text unchanged and None if no import is required
        """
        if not plan.required:
            return text, None
        if anchor is None:
            anchor = self.anchor_for(text)

        line_ending = self.unit.line_ending
        for strategy, locate in self.strategies():
            position = locate(text, anchor)
            if position is None:
                continue
            prefix = line_ending if position > 0 and text[position - 1] != "\n" else ""
            block = f"{prefix}{self.import_line(plan)}{line_ending}"
            logger.debug(f"Inserting import at {position} via {strategy.value}")
            return text[:position] + block + text[position:], strategy

        # find_start_of_file always answers
        raise AssertionError("no insertion strategy matched")
