"""
This facade exposes the public API for the scanner module.
Other parts of the application should only import from here,
not from internal modules.
"""
from .facade import iter_files, collect_targets
from .config import IGNORED_DIRS, DEFAULT_IGNORE_PATTERNS

__all__ = ["iter_files", "collect_targets", "IGNORED_DIRS", "DEFAULT_IGNORE_PATTERNS"]
