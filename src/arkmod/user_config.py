"""
arkmod User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.arkmod/config.json (cross-project settings)
- Local: .arkmod/config.json (project-specific overrides)

Config structure:
{
  "codemod": {
    "constructor_name": "RegExp",   // Constructor being rewritten
    "function_name": "regex",       // Replacement function
    "module_name": "arkregex",      // Module exporting the replacement
    "alternate_name": "arkRegex",   // Binding used when "regex" is taken
    "call_form": false              // Also rewrite RegExp(...) without `new`
  },
  "dependency": {
    "package_name": "arkregex",
    "package_version": "0.0.5",
    "max_scan_depth": 5
  },
  "scan": {
    "extensions": [".ts", ".tsx", ".mts", ".cts"],
    "respect_gitignore": true
  }
}
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from arkmod.logging_config import logger
from arkmod.paths import get_paths


# Default configuration
DEFAULT_CONFIG = {
    "codemod": {
        "constructor_name": "RegExp",
        "function_name": "regex",
        "module_name": "arkregex",
        "alternate_name": "arkRegex",
        "call_form": False,
    },
    "dependency": {
        "package_name": "arkregex",
        "package_version": "0.0.5",
        "max_scan_depth": 5,
    },
    "scan": {
        "extensions": [".ts", ".tsx", ".mts", ".cts"],
        "respect_gitignore": True,
    },
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.arkmod/config.json)
    3. Local config (.arkmod/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
        """
        paths = get_paths(project_root)
        self.project_root = paths.project_root
        self.global_config_path = paths.global_config
        self.local_config_path = paths.local_config

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration with hierarchical override.

        Returns:
            Merged configuration dictionary
        """
        config = self._deep_merge({}, DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    logger.warning(f"Ignoring {label} config at {path}: top level must be an object")
                    continue
                config = self._deep_merge(config, loaded)
                logger.debug(f"Loaded {label} config from {path}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {label} config: {e}")

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            elif isinstance(value, dict):
                result[key] = self._deep_merge({}, value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Examples:
            config.get("codemod.function_name")  # "regex"
            config.get("dependency.max_scan_depth")  # 5
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def section(self, name: str) -> Dict[str, Any]:
        """Return a copy of a top-level config section ({} if absent)."""
        value = self._config.get(name, {})
        return dict(value) if isinstance(value, dict) else {}

    @property
    def config(self) -> Dict[str, Any]:
        """Get the full merged configuration."""
        return self._config
