"""Distribution management commands."""

from pathlib import Path
from typing import List, Optional

import typer

from depot.application.services import RepositoryCoordinator
from depot.cli.commands.repository import publish
from depot.cli.utils.context import CLIContext

MESSAGE_OPTION = typer.Option(None, "--message", "-m", help="Commit message")
NO_COMMIT_OPTION = typer.Option(False, "--no-commit", help="Do not commit the change")
TAG_OPTION = typer.Option(None, "--tag", "-t", help="Tag the resulting commit")


def _default_message(verb: str, paths: List[str]) -> str:
    return f"{verb} {', '.join(paths)}"


def add_distributions(
    ctx: typer.Context,
    archives: List[Path] = typer.Argument(..., help="Archives to add"),
    author: str = typer.Option(..., "--author", "-a", help="Author identifier, e.g. ALICE"),
    message: Optional[str] = MESSAGE_OPTION,
    no_commit: bool = NO_COMMIT_OPTION,
    tag: Optional[str] = TAG_OPTION,
):
    """
    Add local archives as distributions of an author.
    
    Example:
        depot add Foo-1.00.tar.gz --author ALICE
        depot add Foo-1.01.tar.gz Bar-0.1.tar.gz -a ALICE -m "Release Foo 1.01"
    """
    cli_ctx: CLIContext = ctx.obj
    
    async def operation(coordinator: RepositoryCoordinator):
        added = []
        for archive in archives:
            distribution = await coordinator.add_distribution(archive, author)
            added.append(distribution)
        paths = [dist.path for dist in added]
        await publish(coordinator, message or _default_message("Added", paths), no_commit, tag)
        return added
    
    for distribution in cli_ctx.run(operation):
        cli_ctx.formatter.print_success(
            f"Added {distribution.path} providing {distribution.package_count} packages"
        )
        if cli_ctx.debug:
            cli_ctx.formatter.print_detail(distribution.to_dict(), title="Distribution")


def import_distributions(
    ctx: typer.Context,
    urls: List[str] = typer.Argument(..., help="Distribution URLs inside an authors/id tree"),
    message: Optional[str] = MESSAGE_OPTION,
    no_commit: bool = NO_COMMIT_OPTION,
    tag: Optional[str] = TAG_OPTION,
):
    """
    Import distributions from upstream repositories.
    
    Example:
        depot import https://cpan.metacpan.org/authors/id/B/BO/BOB/Bar-2.0.tar.gz
    """
    cli_ctx: CLIContext = ctx.obj
    
    async def operation(coordinator: RepositoryCoordinator):
        imported = []
        for url in urls:
            distribution = await coordinator.import_distribution(url)
            imported.append(distribution)
        paths = [dist.path for dist in imported]
        await publish(coordinator, message or _default_message("Imported", paths), no_commit, tag)
        return imported
    
    for distribution in cli_ctx.run(operation):
        cli_ctx.formatter.print_success(
            f"Imported {distribution.path} from {distribution.source} "
            f"providing {distribution.package_count} packages"
        )
        if cli_ctx.debug:
            cli_ctx.formatter.print_detail(distribution.to_dict(), title="Distribution")


def remove_distributions(
    ctx: typer.Context,
    paths: List[str] = typer.Argument(..., help="Repository paths, e.g. A/AL/ALICE/Foo-1.00.tar.gz"),
    message: Optional[str] = MESSAGE_OPTION,
    no_commit: bool = NO_COMMIT_OPTION,
    tag: Optional[str] = TAG_OPTION,
):
    """
    Remove distributions and their archives.
    
    Example:
        depot remove A/AL/ALICE/Foo-1.00.tar.gz
    """
    cli_ctx: CLIContext = ctx.obj
    
    async def operation(coordinator: RepositoryCoordinator):
        removed = []
        for path in paths:
            distribution = await coordinator.remove_distribution(path)
            removed.append(distribution)
        await publish(coordinator, message or _default_message("Removed", paths), no_commit, tag)
        return removed
    
    for distribution in cli_ctx.run(operation):
        cli_ctx.formatter.print_success(
            f"Removed {distribution.path} with {distribution.package_count} packages"
        )
        if cli_ctx.debug:
            cli_ctx.formatter.print_detail(distribution.to_dict(), title="Distribution")


def locate_package(
    ctx: typer.Context,
    package: str = typer.Argument(..., help="Package name, e.g. Foo::Bar"),
    version: Optional[str] = typer.Option(None, "--version", "-V", help="Minimum version"),
):
    """
    Find the upstream distribution providing a package.
    
    Example:
        depot locate Foo::Bar --version 1.2
    """
    cli_ctx: CLIContext = ctx.obj
    
    async def operation(coordinator: RepositoryCoordinator):
        return await coordinator.locate_remotely(package, version)
    
    url = cli_ctx.run(operation)
    if url is None:
        cli_ctx.formatter.print_error(f"Package {package} not found on any source")
        raise typer.Exit(1)
    cli_ctx.formatter.print_value("url", url)
