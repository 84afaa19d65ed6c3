from typing import Dict

from tree_sitter import Language, Parser

from arkmod.exceptions import GrammarNotFoundError
from arkmod.logging_config import logger
from .config import GRAMMAR_PACKAGES

# Global cache for loaded languages to avoid repeated loading
_language_cache: Dict[str, Language] = {}


def _load_language(language_name: str) -> Language:
    if language_name in ("typescript", "tsx"):
        import tree_sitter_typescript as tstypescript
        if language_name == "tsx":
            return Language(tstypescript.language_tsx())
        return Language(tstypescript.language_typescript())
    if language_name == "javascript":
        import tree_sitter_javascript as tsjavascript
        return Language(tsjavascript.language())
    raise KeyError(language_name)


def get_language(language_name: str) -> Language:
    """
    Loads a tree-sitter language from its grammar wheel.

    Caches the loaded language object for efficiency.

    Raises:
        GrammarNotFoundError: If the grammar package is not installed or unknown.
    """
    if language_name in _language_cache:
        return _language_cache[language_name]

    package = GRAMMAR_PACKAGES.get(language_name, f"tree-sitter-{language_name}")
    try:
        lang = _load_language(language_name)
    except (ImportError, KeyError) as e:
        logger.error(f"Failed to load language '{language_name}'. Error: {e}")
        raise GrammarNotFoundError(language_name, f"pip install {package}") from e

    _language_cache[language_name] = lang
    logger.debug(f"Successfully loaded language '{language_name}'")
    return lang


def get_parser(language_name: str) -> Parser:
    """Create a parser bound to the given language."""
    return Parser(get_language(language_name))
