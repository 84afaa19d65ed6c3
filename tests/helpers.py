"""Parsing helpers shared by the test modules."""

from arkmod.parser import parse_source
from arkmod.transform.nodes import argument_nodes, text_of, walk


def parse(source: str, path: str = "test.ts"):
    return parse_source(source, path)


def find_nodes(unit, node_type: str):
    found = [n for n in walk(unit.root) if n.type == node_type]
    return sorted(found, key=lambda n: n.start_byte)


def find_identifier(unit, name: str, nth: int = 0):
    """The nth identifier node with the given text, in source order."""
    matches = [n for n in find_nodes(unit, "identifier") if text_of(n) == name]
    return matches[nth]


def first_argument(unit):
    """First argument of the first `new` expression."""
    new_expression = find_nodes(unit, "new_expression")[0]
    return argument_nodes(new_expression.child_by_field_name("arguments"))[0]
