import typer

from arkmod import __version__
from arkmod.cli import codemod
from arkmod.cli.config import CLIConfig
from arkmod.logging_config import setup_logging

app = typer.Typer(help="Rewrite `new RegExp(...)` into arkregex `regex(...)` calls.")


def _version_callback(value: bool):
    if value:
        typer.echo(f"arkmod {__version__}")
        raise typer.Exit()


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: tables and colors (also via ARKMOD_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    if human:
        CLIConfig.set_machine_mode(False)
    if verbose:
        setup_logging(level="DEBUG", force=True)


app.command(name="transform")(codemod.transform_cmd)
app.command(name="add-dependency")(codemod.add_dependency_cmd)
app.command(name="install")(codemod.install_cmd)


if __name__ == "__main__":
    app()
