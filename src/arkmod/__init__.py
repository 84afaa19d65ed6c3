"""
arkmod - RegExp to arkregex codemod

Rewrites `new RegExp(...)` in TypeScript/JavaScript sources into typed
`regex(...)` calls from the arkregex package.
"""

__version__ = "0.1.0"

from arkmod.transform import transform, run_transform, process_file
from arkmod.transform.config import CodemodSettings, get_settings
from arkmod.manifest import add_dependency
from arkmod.installer import Installer

__all__ = [
    "__version__",
    "transform",
    "run_transform",
    "process_file",
    "CodemodSettings",
    "get_settings",
    "add_dependency",
    "Installer",
]
