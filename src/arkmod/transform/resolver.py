"""
ScopeResolver: Decide where an identifier gets its value from.

Bindings are collected lazily per scope node and cached for the lifetime of
the resolver (one file). Resolution walks scopes innermost-out; an
identifier with no binding record anywhere is treated as the ambient global.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from tree_sitter import Node

from arkmod.logging_config import logger
from arkmod.parser import SourceUnit
from .config import FUNCTION_SCOPES
from .nodes import has_token, node_key, text_of, unquote, walk


class BindingKind(str, Enum):
    IMPORT = "import"
    PARAMETER = "parameter"
    VARIABLE = "variable"
    FUNCTION = "function"
    CLASS = "class"
    ENUM = "enum"
    NAMESPACE = "namespace"
    CATCH = "catch"


class IdentifierOrigin(str, Enum):
    MEMBER_ACCESS = "member_access"
    LOCAL = "local"
    IMPORTED = "imported"
    GLOBAL = "global"


@dataclass(frozen=True)
class Binding:
    """
    A name introduced into a scope.

    `declaration` is the originating node (declarator, parameter, import
    specifier...). For variables, `value` is the initializer when the
    declarator binds a plain identifier.
    """
    name: str
    kind: BindingKind
    node: Node
    declaration: Node
    is_const: bool = False
    value: Optional[Node] = None
    source: Optional[str] = None
    imported_name: Optional[str] = None


SCOPE_NODES = FUNCTION_SCOPES | {
    "program",
    "statement_block",
    "switch_body",
    "for_statement",
    "for_in_statement",
    "catch_clause",
    "class",
}

MEMBER_PARENTS = {"member_expression", "nested_identifier", "qualified_name", "nested_type_identifier"}

_DECLARATION_KEYWORDS = ("const", "let", "var", "using")


def pattern_identifiers(node: Optional[Node]) -> List[Node]:
    """Identifier nodes bound by a (possibly destructuring) pattern."""
    if node is None:
        return []
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [node]
    if kind in ("required_parameter", "optional_parameter"):
        return pattern_identifiers(node.child_by_field_name("pattern"))
    if kind == "pair_pattern":
        return pattern_identifiers(node.child_by_field_name("value"))
    if kind in ("assignment_pattern", "object_assignment_pattern"):
        return pattern_identifiers(node.child_by_field_name("left"))
    if kind in ("object_pattern", "array_pattern", "rest_pattern"):
        found = []
        for child in node.named_children:
            found.extend(pattern_identifiers(child))
        return found
    return []


class ScopeResolver:
    """
    Resolve identifiers to bindings within one SourceUnit.
    """

    def __init__(self, unit: SourceUnit):
        self.unit = unit
        self._scopes: Dict[Tuple[int, int, str], Dict[str, Binding]] = {}

    def resolve(self, identifier: Node) -> Optional[Binding]:
        """
        Find the binding an identifier refers to, or None if it has none.
        """
        name = text_of(identifier)
        scope = identifier.parent
        while scope is not None:
            if scope.type in SCOPE_NODES:
                binding = self.bindings_in(scope).get(name)
                if binding is not None:
                    return binding
            scope = scope.parent
        return None

    def origin(self, identifier: Node) -> IdentifierOrigin:
        parent = identifier.parent
        if parent is not None and parent.type in MEMBER_PARENTS:
            return IdentifierOrigin.MEMBER_ACCESS
        binding = self.resolve(identifier)
        if binding is None:
            return IdentifierOrigin.GLOBAL
        if binding.kind == BindingKind.IMPORT:
            return IdentifierOrigin.IMPORTED
        return IdentifierOrigin.LOCAL

    def is_global(self, identifier: Node) -> bool:
        """True when the identifier still refers to the ambient binding."""
        return self.origin(identifier) == IdentifierOrigin.GLOBAL

    def bindings_in(self, scope: Node) -> Dict[str, Binding]:
        key = node_key(scope)
        if key not in self._scopes:
            self._scopes[key] = self._collect(scope)
        return self._scopes[key]

    def all_bindings(self) -> Iterator[Binding]:
        """Every binding declared anywhere in the file."""
        for node in walk(self.unit.root):
            if node.type in SCOPE_NODES:
                yield from self.bindings_in(node).values()

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def _collect(self, scope: Node) -> Dict[str, Binding]:
        out: Dict[str, Binding] = {}
        kind = scope.type

        if kind in ("program", "statement_block"):
            for statement in scope.named_children:
                self._declare_statement(statement, out)
            if kind == "program":
                self._declare_hoisted_vars(scope, out)
        elif kind == "switch_body":
            for case in scope.named_children:
                for statement in case.named_children:
                    self._declare_statement(statement, out)
        elif kind in FUNCTION_SCOPES:
            self._declare_function_scope(scope, out)
        elif kind == "for_statement":
            initializer = scope.child_by_field_name("initializer")
            if initializer is not None:
                self._declare_statement(initializer, out)
        elif kind == "for_in_statement":
            if any(has_token(scope, keyword) for keyword in _DECLARATION_KEYWORDS):
                is_const = has_token(scope, "const")
                left = scope.child_by_field_name("left")
                for ident in pattern_identifiers(left):
                    self._add(out, ident, BindingKind.VARIABLE, left, is_const=is_const)
        elif kind == "catch_clause":
            parameter = scope.child_by_field_name("parameter")
            for ident in pattern_identifiers(parameter):
                self._add(out, ident, BindingKind.CATCH, parameter)
        elif kind == "class":
            name = scope.child_by_field_name("name")
            if name is not None:
                self._add(out, name, BindingKind.CLASS, scope)

        logger.trace(f"Scope {kind}@{scope.start_byte} binds {sorted(out)}")
        return out

    def _add(self, out: Dict[str, Binding], ident: Node, kind: BindingKind, declaration: Node, **extra) -> None:
        name = text_of(ident)
        out.setdefault(name, Binding(name=name, kind=kind, node=ident, declaration=declaration, **extra))

    def _declare_statement(self, statement: Node, out: Dict[str, Binding]) -> None:
        kind = statement.type

        if kind == "export_statement":
            declaration = statement.child_by_field_name("declaration")
            if declaration is not None:
                self._declare_statement(declaration, out)
        elif kind in ("lexical_declaration", "variable_declaration"):
            self._declare_variables(statement, out)
        elif kind in ("function_declaration", "generator_function_declaration"):
            name = statement.child_by_field_name("name")
            if name is not None:
                self._add(out, name, BindingKind.FUNCTION, statement)
        elif kind in ("class_declaration", "abstract_class_declaration"):
            name = statement.child_by_field_name("name")
            if name is not None:
                self._add(out, name, BindingKind.CLASS, statement)
        elif kind == "enum_declaration":
            name = statement.child_by_field_name("name")
            if name is not None:
                self._add(out, name, BindingKind.ENUM, statement)
        elif kind in ("internal_module", "module"):
            name = statement.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                self._add(out, name, BindingKind.NAMESPACE, statement)
        elif kind == "expression_statement":
            # `namespace Foo {}` parses as an expression statement
            inner = statement.named_children[0] if statement.named_children else None
            if inner is not None and inner.type == "internal_module":
                self._declare_statement(inner, out)
        elif kind == "import_statement":
            self._declare_import(statement, out)
        # ambient (`declare ...`) and type-only declarations do not bind values

    def _declare_variables(self, declaration: Node, out: Dict[str, Binding]) -> None:
        is_const = has_token(declaration, "const")
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name is not None and name.type == "identifier":
                self._add(out, name, BindingKind.VARIABLE, declarator, is_const=is_const, value=value)
            else:
                for ident in pattern_identifiers(name):
                    self._add(out, ident, BindingKind.VARIABLE, declarator, is_const=is_const)

    def _declare_hoisted_vars(self, body: Node, out: Dict[str, Binding]) -> None:
        """`var` declarations anywhere below `body`, without entering nested functions or classes."""
        prune = lambda n: n.type in FUNCTION_SCOPES or n.type in ("class", "class_declaration", "class_body", "ambient_declaration")
        for node in walk(body, prune=prune):
            if node.type == "variable_declaration":
                self._declare_variables(node, out)

    def _declare_function_scope(self, function: Node, out: Dict[str, Binding]) -> None:
        single = function.child_by_field_name("parameter")
        if single is not None:
            for ident in pattern_identifiers(single):
                self._add(out, ident, BindingKind.PARAMETER, single)

        parameters = function.child_by_field_name("parameters")
        if parameters is not None:
            for parameter in parameters.named_children:
                for ident in pattern_identifiers(parameter):
                    self._add(out, ident, BindingKind.PARAMETER, parameter)

        if function.type in ("function_expression", "function", "generator_function"):
            name = function.child_by_field_name("name")
            if name is not None:
                self._add(out, name, BindingKind.FUNCTION, function)

        body = function.child_by_field_name("body")
        if body is not None and body.type == "statement_block":
            self._declare_hoisted_vars(body, out)

    def _declare_import(self, statement: Node, out: Dict[str, Binding]) -> None:
        if has_token(statement, "type"):
            return  # `import type {...}` binds no values
        source_node = statement.child_by_field_name("source")
        source = unquote(source_node) if source_node is not None else None

        for clause in statement.named_children:
            if clause.type == "import_require_clause":
                ident = clause.named_children[0] if clause.named_children else None
                require_source = clause.child_by_field_name("source")
                if ident is not None and ident.type == "identifier":
                    self._add(out, ident, BindingKind.IMPORT, clause,
                              source=unquote(require_source) if require_source is not None else source,
                              imported_name="default")
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    self._add(out, part, BindingKind.IMPORT, part, source=source, imported_name="default")
                elif part.type == "namespace_import":
                    for ident in part.named_children:
                        if ident.type == "identifier":
                            self._add(out, ident, BindingKind.IMPORT, part, source=source, imported_name="*")
                elif part.type == "named_imports":
                    for specifier in part.named_children:
                        self._declare_specifier(specifier, source, out)

    def _declare_specifier(self, specifier: Node, source: Optional[str], out: Dict[str, Binding]) -> None:
        if specifier.type != "import_specifier" or has_token(specifier, "type"):
            return
        name = specifier.child_by_field_name("name")
        alias = specifier.child_by_field_name("alias")
        local = alias if alias is not None else name
        if name is None or local is None or local.type != "identifier":
            return
        imported = unquote(name) if name.type == "string" else text_of(name)
        self._add(out, local, BindingKind.IMPORT, specifier, source=source, imported_name=imported)
