from typing import List

from arkmod.exceptions import ConfigError

# Directories never worth descending into
IGNORED_DIRS = {"node_modules", ".git", "dist", "build"}

# Default patterns to ignore, mimicking common global gitignore settings
DEFAULT_IGNORE_PATTERNS = [
    ".git/",
    "node_modules/",
    "dist/",
    "build/",
    ".arkmod/",
    "*.d.ts",
]


def validate_extensions(extensions: List[str]) -> None:
    """
    Validate file extension filters.

    Raises:
        ConfigError: If extensions are invalid.
    """
    if not isinstance(extensions, list):
        raise ConfigError("Extensions must be a list of strings")

    for ext in extensions:
        if not isinstance(ext, str):
            raise ConfigError(f"Invalid extension: {ext} (must be a string)")
        if not ext.startswith('.'):
            raise ConfigError(f"Extension '{ext}' must start with a dot (e.g., '.ts')")
        if len(ext) < 2:
            raise ConfigError(f"Extension '{ext}' is too short (minimum: 2 characters)")
