"""Tests for source file discovery."""

import pytest

from arkmod.exceptions import ConfigError
from arkmod.scanner import collect_targets, iter_files

pytestmark = pytest.mark.fast

TS = [".ts", ".tsx"]


@pytest.fixture
def project(tmp_path):
    for relative in [
        "src/a.ts",
        "src/b.tsx",
        "src/c.js",
        "src/types.d.ts",
        "src/generated/g.ts",
        "node_modules/dep/index.ts",
        "dist/out.ts",
        "package.json",
    ]:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x;\n")
    return tmp_path


def names(paths, root):
    return [p.relative_to(root).as_posix() for p in paths]


class TestIterFiles:
    def test_extensions_and_default_ignores(self, project):
        found = names(iter_files(project, TS, respect_gitignore=False), project)
        assert found == ["src/a.ts", "src/b.tsx", "src/generated/g.ts"]

    def test_gitignore_respected(self, project):
        (project / ".gitignore").write_text("generated/\n")
        found = names(iter_files(project, TS), project)
        assert found == ["src/a.ts", "src/b.tsx"]

    def test_gitignore_can_be_disabled(self, project):
        (project / ".gitignore").write_text("generated/\n")
        found = names(iter_files(project, TS, respect_gitignore=False), project)
        assert "src/generated/g.ts" in found

    def test_names_filter(self, project):
        found = names(iter_files(project, names=["package.json"]), project)
        assert found == ["package.json"]

    def test_no_filters_yields_everything_not_ignored(self, project):
        found = names(iter_files(project, respect_gitignore=False), project)
        assert "src/c.js" in found
        assert "dist/out.ts" not in found

    def test_invalid_extension(self, project):
        with pytest.raises(ConfigError):
            list(iter_files(project, ["ts"]))


class TestCollectTargets:
    def test_files_taken_as_is(self, project):
        target = project / "src" / "c.js"
        assert collect_targets([target], TS) == [target]

    def test_directories_scanned(self, project):
        found = names(collect_targets([project / "src"], TS), project)
        assert found == ["src/a.ts", "src/b.tsx", "src/generated/g.ts"]

    def test_missing_paths_skipped(self, project):
        assert collect_targets([project / "missing.ts"], TS) == []
