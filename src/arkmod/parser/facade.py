from dataclasses import dataclass, field
from typing import Optional

from tree_sitter import Node, Tree

from arkmod.exceptions import ParserError
from arkmod.logging_config import logger
from .config import TYPED_LANGUAGES, language_for_path
from .language_manager import get_parser


@dataclass(frozen=True)
class SourceUnit:
    """
    One file's text plus its syntax tree. Read-only once built.
    """
    path: str
    language: str
    text: str
    data: bytes
    tree: Tree = field(repr=False, compare=False)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def is_typed(self) -> bool:
        return self.language in TYPED_LANGUAGES

    @property
    def line_ending(self) -> str:
        return '\r\n' if '\r\n' in self.text else '\n'

    def node_text(self, node: Node) -> str:
        return self.data[node.start_byte:node.end_byte].decode('utf-8')


def parse_source(text: str, path: Optional[str] = None, language: Optional[str] = None) -> SourceUnit:
    """
    Parse source text into a SourceUnit.

    Args:
        text: Full file content
        path: File path, used to pick the grammar
        language: Explicit grammar name (overrides the path)

    Raises:
        ParserError: If tree-sitter fails to produce a tree.
    """
    language = language or language_for_path(path)
    data = text.encode('utf-8')
    parser = get_parser(language)
    try:
        tree = parser.parse(data)
    except (ValueError, TypeError) as e:
        raise ParserError(path or "<memory>", str(e)) from e

    if tree.root_node.has_error:
        logger.debug(f"Syntax errors in {path or '<memory>'}; unaffected sites are still rewritten")

    return SourceUnit(path=path or "", language=language, text=text, data=data, tree=tree)
