"""Depot repository management CLI."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from depot.cli import __version__
from depot.cli.commands import distribution, repository
from depot.cli.utils.context import CLIContext
from depot.cli.utils.output import OutputFormatter
from depot.core.config import Settings, get_settings
from depot.infrastructure.logging import setup_logging

app = typer.Typer(
    name="depot",
    help="Depot - manage a private CPAN-style distribution repository",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_enable=False,
    no_args_is_help=True,
)


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"Depot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        "-r",
        envvar="DEPOT_ROOT_DIR",
        help="Repository root directory",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug output",
    ),
    output_format: str = typer.Option(
        "table",
        "--output",
        "-o",
        help="Output format: table, json, yaml",
    ),
):
    """
    Depot repository management CLI

    Adds, imports and removes distributions while keeping the metadata
    database, the archive store and the package index in step.
    """
    overrides = {}
    if root is not None:
        overrides["root_dir"] = root
    if debug:
        overrides["log_level"] = "DEBUG"
    settings = Settings(**overrides) if overrides else get_settings()
    
    setup_logging(settings)
    
    console = Console()
    ctx.obj = CLIContext(
        debug=debug,
        settings=settings,
        formatter=OutputFormatter(output_format, console=console),
        console=console,
    )


app.command("init")(repository.init_repository)
app.command("index")(repository.write_index)
app.command("add")(distribution.add_distributions)
app.command("import")(distribution.import_distributions)
app.command("remove")(distribution.remove_distributions)
app.command("locate")(distribution.locate_package)


if __name__ == "__main__":
    app()
