"""
Output helpers shared by the arkmod commands.

Machine mode (the default) prints plain text and minified JSON so runs can
be piped into other tools; human mode goes through rich.
"""

import json
import re
from typing import Any, List, Optional

import typer
from rich.console import Console as RichConsole
from rich.table import Table

from arkmod.cli.config import CLIConfig

_MARKUP = re.compile(r'\[/?[a-z #]+\]')


class MachineAwareConsole:
    """
    rich Console stand-in: renders normally in human mode, strips markup
    and drops tables in machine mode.
    """

    def __init__(self):
        self._rich_console = RichConsole()

    def print(self, *args, **kwargs):
        if not CLIConfig.is_machine_mode():
            self._rich_console.print(*args, **kwargs)
            return
        for arg in args:
            if isinstance(arg, str):
                plain = _MARKUP.sub('', arg).strip()
                if plain:
                    print(plain)
            elif isinstance(arg, Table) or hasattr(arg, '__rich__'):
                continue  # --json carries the same data
            elif arg:
                print(arg)

    def __getattr__(self, name):
        return getattr(self._rich_console, name)


_console = MachineAwareConsole()


def get_console() -> MachineAwareConsole:
    return _console


def echo(message: str = "", **kwargs) -> None:
    if CLIConfig.is_machine_mode():
        print(message, **kwargs)
    else:
        typer.echo(message, **kwargs)


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """Minified in machine mode, indented for humans."""
    if minified is None:
        minified = CLIConfig.is_machine_mode()
    if minified:
        echo(json.dumps(data, separators=(',', ':')))
    else:
        echo(json.dumps(data, indent=2))


def structured_error(code: str, message: str, suggestions: Optional[List[str]] = None) -> dict:
    """
    Error payload for machine consumers.

    Args:
        code: Stable error code (e.g. "CONFIG_ERROR", "GRAMMAR_NOT_FOUND")
        message: Human-readable description
        suggestions: Commands or edits that would fix the problem
    """
    error = {"status": "error", "code": code, "message": message}
    if suggestions:
        error["suggestions"] = suggestions
    return error


def print_error(code: str, message: str, json_output: bool = False, suggestions: Optional[List[str]] = None) -> None:
    if CLIConfig.is_machine_mode() or json_output:
        print_json(structured_error(code, message, suggestions))
        return
    _console.print(f"[red]Error: {message}[/red]")
    if suggestions:
        _console.print(f"[dim]Try: {'; '.join(suggestions)}[/dim]")
