"""
arkmod Path Configuration

Centralized path management for arkmod data files.
All paths are relative to the project root (current working directory).

Directory Structure:
.arkmod/
├── config.json          # Project-local configuration overrides
└── logs/                # Log files (opt-in)
"""

from pathlib import Path
from typing import Optional


class ArkmodPaths:
    """
    Centralized path configuration for arkmod.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    ARKMOD_DIR = ".arkmod"
    GLOBAL_DIR = Path.home() / ".arkmod"

    CONFIG_NAME = "config.json"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def arkmod_dir(self) -> Path:
        """Get the .arkmod directory path."""
        return self.project_root / self.ARKMOD_DIR

    @property
    def local_config(self) -> Path:
        return self.arkmod_dir / self.CONFIG_NAME

    @property
    def global_config(self) -> Path:
        return self.GLOBAL_DIR / self.CONFIG_NAME

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self.arkmod_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create all necessary directories if they don't exist."""
        self.arkmod_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


def get_paths(project_root: Optional[Path] = None) -> ArkmodPaths:
    """Get a paths object for the given (or current) project root."""
    return ArkmodPaths(project_root)
