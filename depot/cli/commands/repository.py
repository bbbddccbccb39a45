"""Repository-wide commands."""

from typing import Optional

import typer

from depot.application.services import RepositoryCoordinator
from depot.cli.utils.context import CLIContext


async def publish(
    coordinator: RepositoryCoordinator,
    message: str,
    no_commit: bool = False,
    tag: Optional[str] = None,
) -> None:
    """Rewrite the index, then commit and tag the store."""
    await coordinator.write_index()
    if not no_commit:
        await coordinator.commit(message)
    if tag:
        await coordinator.tag(tag)


def init_repository(
    ctx: typer.Context,
    no_commit: bool = typer.Option(False, "--no-commit", help="Do not commit the new repository"),
):
    """
    Create the repository root, metadata schema and store.
    
    Running it on an existing repository is harmless.
    
    Example:
        depot --root ./darkpan init
    """
    cli_ctx: CLIContext = ctx.obj
    
    async def operation(coordinator: RepositoryCoordinator):
        await publish(coordinator, "Initialized repository", no_commit=no_commit)
    
    cli_ctx.run(operation)
    cli_ctx.formatter.print_success(f"Repository initialized at {cli_ctx.settings.root_dir}")


def write_index(ctx: typer.Context):
    """
    Rewrite the package index from the metadata.
    
    Example:
        depot index
    """
    cli_ctx: CLIContext = ctx.obj
    
    async def operation(coordinator: RepositoryCoordinator):
        return await coordinator.write_index()
    
    index_file = cli_ctx.run(operation)
    cli_ctx.formatter.print_success(f"Index written to {index_file}")
