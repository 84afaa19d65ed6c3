"""
Pytest configuration for the arkmod test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Isolation from the user's global ~/.arkmod config
- Temporary package fixtures
"""

import os
from pathlib import Path

import pytest

from arkmod.logging_config import setup_logging
from arkmod.paths import ArkmodPaths
from arkmod.transform import CodemodSettings


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for quiet, machine-readable operation."""
    os.environ.setdefault("ARKMOD_MACHINE_MODE", "1")


@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, enable_file_logging=False, force=True)


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path_factory, monkeypatch):
    """Point the global config directory at an empty temp dir."""
    home = tmp_path_factory.mktemp("arkmod_home")
    monkeypatch.setattr(ArkmodPaths, "GLOBAL_DIR", Path(home))


@pytest.fixture
def settings():
    return CodemodSettings()


@pytest.fixture
def temp_package(tmp_path):
    """
    A package directory with a manifest and one TypeScript source file.

    Returns:
        Path to the package directory.
    """
    package = tmp_path / "pkg"
    (package / "src").mkdir(parents=True)
    (package / "package.json").write_text('{\n  "name": "pkg",\n  "version": "1.0.0"\n}\n')
    (package / "src" / "index.ts").write_text('export const re = new RegExp("a");\n')
    yield package
