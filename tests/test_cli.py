"""CLI tests using typer's CliRunner."""

import json

import pytest
from typer.testing import CliRunner

from arkmod import __version__
from arkmod.cli.config import CLIConfig
from arkmod.main import app

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture(autouse=True)
def machine_mode(monkeypatch):
    monkeypatch.setattr(CLIConfig, "_machine_mode", None)
    monkeypatch.delenv("ARKMOD_HUMAN_MODE", raising=False)


@pytest.fixture
def project(tmp_path, monkeypatch):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.ts").write_text('const r = new RegExp("a");\n', encoding="utf-8")
    (tmp_path / "src" / "b.ts").write_text("const x = 1;\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def invoke(*args):
    return runner.invoke(app, list(args))


class TestTransformCommand:
    def test_rewrites_files(self, project):
        result = invoke("transform", "src", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["status"] == "ok"
        assert data["files_scanned"] == 2
        assert data["files_changed"] == 1
        assert data["files"][0]["sites_rewritten"] == 1
        assert (project / "src" / "a.ts").read_text(encoding="utf-8") == (
            'import { regex } from "arkregex";\nconst r = regex("a") as RegExp;\n'
        )

    def test_dry_run_leaves_files(self, project):
        result = invoke("transform", "src", "--dry-run")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["dry_run"] is True
        assert data["files_changed"] == 1
        assert (project / "src" / "a.ts").read_text(encoding="utf-8") == 'const r = new RegExp("a");\n'

    def test_call_form_flag(self, project):
        (project / "src" / "b.ts").write_text('const x = RegExp("b");\n', encoding="utf-8")
        result = invoke("transform", "src/b.ts", "--call-form")
        assert result.exit_code == 0, result.output
        assert 'regex("b") as RegExp' in (project / "src" / "b.ts").read_text(encoding="utf-8")

    def test_invalid_config(self, project):
        (project / ".arkmod").mkdir()
        (project / ".arkmod" / "config.json").write_text('{"codemod": {"function_name": "a b"}}')
        result = invoke("transform", "src")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "CONFIG_ERROR"

    def test_human_mode_summary(self, project):
        result = invoke("--human", "transform", "src", "--dry-run")
        assert result.exit_code == 0, result.output
        assert "would change" in result.stdout


class TestDependencyCommands:
    def test_add_dependency(self, temp_package, monkeypatch):
        (temp_package / "src" / "index.ts").write_text('import { regex } from "arkregex";\n')
        monkeypatch.chdir(temp_package)
        result = invoke("add-dependency")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["dependency"] == "arkregex@0.0.5"
        assert len(data["updated"]) == 1
        manifest = json.loads((temp_package / "package.json").read_text())
        assert manifest["dependencies"] == {"arkregex": "0.0.5"}

    def test_add_dependency_dry_run(self, temp_package):
        (temp_package / "src" / "index.ts").write_text('import { regex } from "arkregex";\n')
        result = invoke("add-dependency", str(temp_package), "--dry-run")
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)["updated"]) == 1
        assert "dependencies" not in json.loads((temp_package / "package.json").read_text())

    def test_install_dry_run(self, temp_package):
        (temp_package / "src" / "index.ts").write_text('import { regex } from "arkregex";\n')
        (temp_package / "yarn.lock").write_text("")
        result = invoke("install", str(temp_package), "--dry-run")
        assert result.exit_code == 0, result.output
        [entry] = json.loads(result.stdout)["results"]
        assert entry["action"] == "planned"
        assert entry["command"] == ["yarn", "add", "arkregex@0.0.5"]


def test_version():
    result = invoke("--version")
    assert result.exit_code == 0
    assert __version__ in result.stdout
