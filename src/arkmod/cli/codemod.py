"""
CLI Codemod Commands

transform, add-dependency, install
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from arkmod.exceptions import ArkmodError, ConfigError, GrammarNotFoundError
from arkmod.installer import Installer
from arkmod.logging_config import logger
from arkmod.manifest import MANIFEST_NAME, add_dependency
from arkmod.parser.language_manager import get_language
from arkmod.scanner import collect_targets, iter_files
from arkmod.schemas import FileReport
from arkmod.transform import CodemodSettings, get_settings, run_transform, write_back
from arkmod.transform.editor import read_source
from arkmod.user_config import UserConfig
from .config import CLIConfig
from .output import echo, get_console, print_error, print_json

console = get_console()


def _load_settings(json_output: bool, **overrides) -> CodemodSettings:
    try:
        return get_settings(**overrides)
    except ConfigError as e:
        print_error("CONFIG_ERROR", str(e), json_output, suggestions=["Check .arkmod/config.json"])
        raise typer.Exit(code=1)


def _require_grammars(json_output: bool) -> None:
    try:
        get_language("typescript")
    except GrammarNotFoundError as e:
        print_error("GRAMMAR_NOT_FOUND", str(e), json_output, suggestions=[e.install_command])
        raise typer.Exit(code=1)


def _report_table(reports: List[FileReport], title: str) -> Table:
    table = Table(title=title)
    table.add_column("File", style="cyan")
    table.add_column("Rewritten", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Import", style="green")
    for report in reports:
        import_cell = report.binding_name if report.import_added else "-"
        table.add_row(
            report.path,
            str(report.sites_rewritten),
            str(report.sites_skipped),
            str(report.comments_added),
            import_cell or "-",
        )
    return table


def transform_cmd(
    paths: List[Path] = typer.Argument(..., help="Files or directories to rewrite", exists=True),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report changes without writing"),
    call_form: Optional[bool] = typer.Option(
        None, "--call-form/--no-call-form", help="Also rewrite RegExp(...) called without `new`"
    ),
    no_gitignore: bool = typer.Option(False, "--no-gitignore", help="Do not honour .gitignore when scanning"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Rewrite `new RegExp(...)` into typed arkregex `regex(...)` calls.
    """
    settings = _load_settings(json_output, call_form=call_form)
    _require_grammars(json_output)

    config = UserConfig()
    extensions = config.get("scan.extensions", [".ts", ".tsx"])
    respect_gitignore = config.get("scan.respect_gitignore", True) and not no_gitignore
    try:
        targets = collect_targets(paths, extensions, respect_gitignore)
    except ConfigError as e:
        print_error("CONFIG_ERROR", str(e), json_output)
        raise typer.Exit(code=1)

    reports: List[FileReport] = []
    failures = 0
    for path in targets:
        try:
            source = read_source(str(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {path}: {e}")
            reports.append(FileReport(path=str(path), changed=False, error=str(e)))
            failures += 1
            continue

        outcome = run_transform(source, str(path), settings)
        report = outcome.report
        if outcome.changed and not dry_run:
            if not write_back(str(path), source, outcome.new_text):
                report.error = "write failed"
                failures += 1
        reports.append(report)

    changed = [r for r in reports if r.changed]
    if CLIConfig.is_machine_mode() or json_output:
        print_json({
            "status": "error" if failures else "ok",
            "dry_run": dry_run,
            "files_scanned": len(reports),
            "files_changed": len(changed),
            "files": [r.model_dump(mode="json") for r in reports if r.changed or r.error],
        })
    else:
        if changed:
            title = "Planned rewrites" if dry_run else "Rewritten files"
            console.print(_report_table(changed, title))
        console.print(f"[bold]{len(changed)}[/bold] of {len(reports)} file(s) {'would change' if dry_run else 'changed'}")
        for report in reports:
            if report.error:
                console.print(f"[red]✗ {report.path}: {report.error}[/red]")

    if failures:
        raise typer.Exit(code=1)


def add_dependency_cmd(
    directory: Path = typer.Argument(Path("."), help="Project or monorepo root", exists=True, file_okay=False),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report changes without writing"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Add arkregex to every package.json whose sources import it.
    """
    settings = _load_settings(json_output)

    updated: List[str] = []
    failures: List[str] = []
    for manifest_path in iter_files(directory, names=[MANIFEST_NAME], respect_gitignore=False):
        try:
            source = read_source(str(manifest_path))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {manifest_path}: {e}")
            continue
        new_source = add_dependency(source, str(manifest_path), settings)
        if new_source is None:
            continue
        if not dry_run and not write_back(str(manifest_path), source, new_source):
            failures.append(str(manifest_path))
            continue
        updated.append(str(manifest_path))

    if CLIConfig.is_machine_mode() or json_output:
        print_json({
            "status": "error" if failures else "ok",
            "dry_run": dry_run,
            "dependency": f"{settings.package_name}@{settings.package_version}",
            "updated": updated,
            "failed": failures,
        })
    else:
        for path in updated:
            console.print(f"[green]✓[/green] {path}")
        for path in failures:
            console.print(f"[red]✗ {path}: write failed[/red]")
        verb = "would be updated" if dry_run else "updated"
        console.print(f"[bold]{len(updated)}[/bold] manifest(s) {verb}")

    if failures:
        raise typer.Exit(code=1)


def install_cmd(
    directory: Path = typer.Argument(Path("."), help="Project or monorepo root", exists=True, file_okay=False),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show install commands without running them"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Install arkregex with the detected package manager where it is used.
    """
    settings = _load_settings(json_output)
    try:
        results = Installer(settings, dry_run=dry_run).run(directory)
    except ArkmodError as e:
        print_error("INSTALL_ERROR", str(e), json_output)
        raise typer.Exit(code=1)

    failed = [r for r in results if r.action == "failed"]
    if CLIConfig.is_machine_mode() or json_output:
        print_json({
            "status": "error" if failed else "ok",
            "dry_run": dry_run,
            "results": [r.model_dump(mode="json") for r in results],
        })
    else:
        for result in results:
            if result.action == "skipped":
                console.print(f"[dim]Skipping {result.package_dir}: {result.reason}[/dim]")
            elif result.action == "failed":
                console.print(f"[red]✗ {result.package_dir}: {result.reason}[/red]")
            else:
                verb = "Would run" if result.action == "planned" else "Ran"
                console.print(f"[green]✓[/green] {verb} `{' '.join(result.command)}` in {result.package_dir}")
        if not results:
            echo("No package.json files found")

    if failed:
        raise typer.Exit(code=1)
