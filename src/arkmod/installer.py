"""
Installer: run the project's package manager where the dependency is needed.

A package qualifies when its package.json does not declare the dependency
yet and some TypeScript file in its subtree imports the module.
"""

import json
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional

from arkmod.exceptions import InstallError
from arkmod.logging_config import logger
from arkmod.manifest import MANIFEST_NAME, declares_dependency, has_package_import
from arkmod.scanner import iter_files
from arkmod.schemas import InstallResult
from arkmod.transform.config import CodemodSettings

# Checked in this order; first match wins
LOCK_FILES = [
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("package-lock.json", "npm"),
]

DEFAULT_PACKAGE_MANAGER = "npm"

INSTALL_COMMANDS: Dict[str, List[str]] = {
    "pnpm": ["pnpm", "add"],
    "yarn": ["yarn", "add"],
    "bun": ["bun", "add"],
    "npm": ["npm", "install"],
}

WORKSPACE_MARKERS = ("pnpm-workspace.yaml", "lerna.json")


def detect_package_manager(directory: Path) -> Optional[str]:
    """Package manager implied by a lock file in `directory`, if any."""
    for lock_file, manager in LOCK_FILES:
        if (directory / lock_file).is_file():
            return manager
    return None


def has_workspace_marker(directory: Path) -> bool:
    if any((directory / marker).is_file() for marker in WORKSPACE_MARKERS):
        return True
    manifest = directory / MANIFEST_NAME
    if not manifest.is_file():
        return False
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return False
    return isinstance(data, dict) and "workspaces" in data


def find_workspace_root(directory: Path) -> Path:
    """
    Topmost ancestor of `directory` (inclusive) carrying a workspace marker,
    or `directory` itself when none does.
    """
    directory = directory.resolve()
    root = directory
    for candidate in [directory, *directory.parents]:
        if has_workspace_marker(candidate):
            root = candidate
    return root


class Installer:
    """
    Install the configured package into every package that uses it.
    """

    def __init__(
        self,
        settings: Optional[CodemodSettings] = None,
        dry_run: bool = False,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.settings = settings or CodemodSettings()
        self.dry_run = dry_run
        self.runner = runner

    @property
    def package_spec(self) -> str:
        return f"{self.settings.package_name}@{self.settings.package_version}"

    def package_manager_for(self, package_dir: Path) -> str:
        manager = detect_package_manager(package_dir)
        if manager is None:
            manager = detect_package_manager(find_workspace_root(package_dir))
        return manager or DEFAULT_PACKAGE_MANAGER

    def command_for(self, manager: str) -> List[str]:
        return [*INSTALL_COMMANDS[manager], self.package_spec]

    def needs_install(self, manifest_path: Path) -> Optional[str]:
        """
        Returns:
            None if the package should get the dependency, else the reason to skip.
        """
        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            return f"unreadable manifest ({e})"
        if not isinstance(manifest, dict):
            return "not a package manifest"
        if declares_dependency(manifest, self.settings.package_name):
            return f"{self.settings.package_name} already in dependencies or devDependencies"
        if not has_package_import(manifest_path.parent, self.settings.package_name, max_depth=None):
            return f"no imports of {self.settings.package_name} found"
        return None

    def install(self, package_dir: Path, manager: str) -> InstallResult:
        command = self.command_for(manager)
        if self.dry_run:
            return InstallResult(
                package_dir=str(package_dir), action="planned",
                package_manager=manager, command=command,
            )

        logger.info(f"Installing {self.package_spec} in {package_dir.name} using {manager}...")
        try:
            completed = self.runner(command, cwd=str(package_dir), check=False)
        except OSError as e:
            logger.error(f"Could not run {manager}: {e}")
            return InstallResult(
                package_dir=str(package_dir), action="failed", reason=str(e),
                package_manager=manager, command=command,
            )
        if completed.returncode != 0:
            error = InstallError(str(package_dir), command, completed.returncode)
            logger.error(str(error))
            return InstallResult(
                package_dir=str(package_dir), action="failed", reason=str(error),
                package_manager=manager, command=command,
            )
        return InstallResult(
            package_dir=str(package_dir), action="installed",
            package_manager=manager, command=command,
        )

    def run(self, target: Path) -> List[InstallResult]:
        """
        Visit every package.json under `target` and install where needed.
        """
        results: List[InstallResult] = []
        logger.info(f"Detected package manager at root: {self.package_manager_for(target)}")

        for manifest_path in iter_files(target, names=[MANIFEST_NAME], respect_gitignore=False):
            package_dir = manifest_path.parent
            reason = self.needs_install(manifest_path)
            if reason is not None:
                logger.info(f"Skipping {package_dir.name}: {reason}")
                results.append(InstallResult(package_dir=str(package_dir), action="skipped", reason=reason))
                continue
            results.append(self.install(package_dir, self.package_manager_for(package_dir)))

        return results
