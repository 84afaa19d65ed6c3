"""
Manifest editor: add the arkregex dependency to package.json files.

Only packages that actually import the module get the dependency; anything
that cannot be confirmed (malformed JSON, unreadable directories) is left
alone.
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from arkmod.logging_config import logger
from arkmod.scanner import IGNORED_DIRS
from arkmod.transform.config import CodemodSettings

MANIFEST_NAME = "package.json"
SOURCE_SUFFIXES = (".ts", ".tsx")
DEPENDENCY_GROUPS = ("dependencies", "devDependencies")


def references_package(content: str, package_name: str) -> bool:
    """True if the text imports from the package (`from "pkg"` or `from 'pkg'`)."""
    pattern = re.compile(r"""from\s*["']""" + re.escape(package_name) + r"""["']""")
    return pattern.search(content) is not None


def has_package_import(
    directory: Path,
    package_name: str,
    max_depth: Optional[int] = 5,
    current_depth: int = 0,
) -> bool:
    """
    Recursively search TypeScript files under `directory` for an import of the package.

    Unreadable directories and files count as "no import found".
    `max_depth=None` searches the whole subtree.
    """
    if max_depth is not None and current_depth > max_depth:
        return False

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug(f"Cannot list {directory}: {e}")
        return False

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                if entry.name in IGNORED_DIRS:
                    continue
                if has_package_import(Path(entry.path), package_name, max_depth, current_depth + 1):
                    return True
            elif entry.is_file() and entry.name.endswith(SOURCE_SUFFIXES):
                with open(entry.path, "r", encoding="utf-8") as f:
                    content = f.read()
                if references_package(content, package_name):
                    return True
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping unreadable {entry.path}: {e}")
            continue

    return False


def sort_object_keys(obj: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the mapping with keys in alphabetical order."""
    return {key: obj[key] for key in sorted(obj)}


def declares_dependency(manifest: Dict[str, Any], package_name: str) -> bool:
    for group in DEPENDENCY_GROUPS:
        entries = manifest.get(group)
        if isinstance(entries, dict) and entries.get(package_name):
            return True
    return False


def add_dependency(source: str, path: str, settings: Optional[CodemodSettings] = None) -> Optional[str]:
    """
    Add the package to a manifest's dependencies when its sources use it.

    Args:
        source: Manifest text
        path: Manifest path (must be named package.json)
        settings: Package name/version and scan depth

    Returns:
        The re-serialized manifest, or None when nothing should change.
    """
    settings = settings or CodemodSettings()
    manifest_path = Path(path)

    if manifest_path.name != MANIFEST_NAME:
        return None

    try:
        manifest = json.loads(source)
    except json.JSONDecodeError as e:
        logger.debug(f"Skipping {path}: invalid JSON ({e})")
        return None

    if not isinstance(manifest, dict) or (not manifest.get("name") and not manifest.get("version")):
        logger.debug(f"Skipping {path}: not a package manifest")
        return None

    package_name = settings.package_name
    if declares_dependency(manifest, package_name):
        logger.debug(f"Skipping {path}: {package_name} already declared")
        return None

    package_dir = manifest_path.parent
    if not has_package_import(package_dir, package_name, settings.max_scan_depth):
        logger.debug(f"Skipping {path}: no imports of {package_name} found")
        return None

    dependencies = manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        dependencies = {}
    dependencies[package_name] = settings.package_version
    manifest["dependencies"] = sort_object_keys(dependencies)
    if isinstance(manifest.get("devDependencies"), dict):
        manifest["devDependencies"] = sort_object_keys(manifest["devDependencies"])

    logger.info(f"Adding {package_name}@{settings.package_version} to {path}")
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
