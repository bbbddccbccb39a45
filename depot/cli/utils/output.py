"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, Optional

import yaml
from rich.console import Console


class OutputFormat(Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(self, format_type: str = "table", console: Optional[Console] = None):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            console: Console to print to
        """
        self.console = console or Console()
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TABLE

    def _dump(self, data: Any) -> None:
        # Structured output must survive redirection unwrapped and unstyled
        if self.format == OutputFormat.JSON:
            text = json.dumps(data, indent=2, default=str)
        else:
            text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip()
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def print_detail(
        self,
        item: Dict[str, Any],
        title: Optional[str] = None,
    ):
        """
        Print detailed view of a single item.

        Args:
            item: Item to print
            title: Optional title
        """
        if self.format != OutputFormat.TABLE:
            self._dump(item)
            return

        if title:
            self.console.print(f"[bold]{title}[/bold]")

        for key, value in item.items():
            formatted_key = key.replace("_", " ").title()

            if value is None:
                formatted_value = "[dim]Not set[/dim]"
            elif isinstance(value, (list, tuple)):
                formatted_value = ", ".join(str(v) for v in value) or "[dim]none[/dim]"
            else:
                formatted_value = str(value)

            self.console.print(f"[cyan]{formatted_key}:[/cyan] {formatted_value}", soft_wrap=True)

    def print_value(self, key: str, value: Optional[str]):
        """Print a single value, e.g. a located URL."""
        if self.format != OutputFormat.TABLE:
            self._dump({key: value})
        elif value is not None:
            self.console.print(value, markup=False, highlight=False, soft_wrap=True)

    def print_success(self, message: str):
        """Print success message."""
        self._print_status("success", message, "[green]✓[/green]")

    def print_error(self, message: str):
        """Print error message."""
        self._print_status("error", message, "[red]✗[/red]")

    def print_warning(self, message: str):
        """Print warning message."""
        self._print_status("warning", message, "[yellow]⚠[/yellow]")

    def _print_status(self, status: str, message: str, marker: str):
        if self.format == OutputFormat.TABLE:
            self.console.print(f"{marker} {message}", soft_wrap=True)
        else:
            self._dump({"status": status, "message": message})
