from typing import Dict, Optional
from pathlib import Path

# File extension -> grammar name
EXTENSION_LANGUAGES: Dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
}

# Grammars whose sources accept `expr as Type`
TYPED_LANGUAGES = {"typescript", "tsx"}

DEFAULT_LANGUAGE = "typescript"

GRAMMAR_PACKAGES: Dict[str, str] = {
    "typescript": "tree-sitter-typescript",
    "tsx": "tree-sitter-typescript",
    "javascript": "tree-sitter-javascript",
}


def language_for_path(path: Optional[str]) -> str:
    """
    Pick a grammar for a file path; unknown or missing extensions parse as TypeScript.
    """
    if not path:
        return DEFAULT_LANGUAGE
    return EXTENSION_LANGUAGES.get(Path(path).suffix.lower(), DEFAULT_LANGUAGE)
