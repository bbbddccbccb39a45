"""CLI context management."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

import typer
from rich.console import Console

from depot.application.dependencies import build_coordinator
from depot.application.services import RepositoryCoordinator
from depot.cli.utils.output import OutputFormatter
from depot.core.config import Settings
from depot.core.exceptions import DepotError

T = TypeVar("T")


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""
    
    debug: bool
    settings: Settings
    formatter: OutputFormatter
    console: Console
    
    def run(self, operation: Callable[[RepositoryCoordinator], Awaitable[T]]) -> T:
        """
        Run an operation against an initialized repository coordinator.
        
        Args:
            operation: Coroutine function receiving the coordinator
            
        Returns:
            The operation's result
            
        Raises:
            typer.Exit: With code 1 if the operation fails
        """
        async def _run() -> T:
            async with build_coordinator(self.settings) as coordinator:
                return await operation(coordinator)
        
        try:
            return asyncio.run(_run())
        except DepotError as e:
            self.formatter.print_error(e.message)
            if self.debug and e.details:
                self.formatter.print_detail(e.details, title="Details")
            raise typer.Exit(1)
