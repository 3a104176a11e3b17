"""CI-style terminal display for batch execution.

One line per step with a colored status icon, then the final response
pretty-printed as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from .context import serialize
from .engine import BatchListener
from .models import Request, Response

# Shared console instances; logs and errors go to stderr
console = Console()
err_console = Console(stderr=True)


@dataclass
class StatusIcons:
    """Status icons with colors for CI-style display."""

    RUNNING = "[cyan][bold]•[/bold][/cyan]"
    SUCCESS = "[green][bold]✓[/bold][/green]"
    FAILED = "[red][bold]✗[/bold][/red]"


def _format_duration(seconds: float) -> str:
    """Format duration in human-readable format."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}m {secs:02d}s"


def _status_icon(status: Optional[int]) -> str:
    if status is not None and status >= 400:
        return StatusIcons.FAILED
    return StatusIcons.SUCCESS


class ConsoleListener(BatchListener):
    """Prints each batch step as it runs."""

    def __init__(self, output: Optional[Console] = None) -> None:
        self.console = output or console
        self._current: Optional[Request] = None

    def on_request(self, index: int, total: int, request: Request) -> None:
        self._current = request
        self.console.print(
            f"{StatusIcons.RUNNING} [dim]\\[{index + 1}/{total}][/dim] "
            f"[bold]{request.http_method}[/bold] {escape(request.url)}"
        )

    def on_response(
        self, index: int, total: int, response: Response, duration: float
    ) -> None:
        method = self._current.http_method if self._current else ""
        url = escape(self._current.url) if self._current else ""
        self.console.print(
            f"{_status_icon(response.status)} [dim]\\[{index + 1}/{total}][/dim] "
            f"[bold]{method}[/bold] {url} "
            f"[dim]→ {response.status} ({_format_duration(duration)})[/dim]"
        )


def print_json(value: Any, output: Optional[Console] = None) -> None:
    """Pretty-print a built value as JSON."""
    (output or console).print_json(serialize(value))


def print_response(response: Response, output: Optional[Console] = None) -> None:
    """Print the final batch response: status, headers and JSON body."""
    out = output or console
    out.print()
    if response.status is not None:
        out.print(f"[bold]Status:[/bold] {response.status}")
    for key, values in (response.headers or {}).items():
        out.print(f"[bold]{escape(key)}:[/bold] {escape(', '.join(values))}")
    print_json(response.body, out)


def print_error(message: str, output: Optional[Console] = None) -> None:
    """Print an error line."""
    (output or err_console).print(f"[bold red]Error: {escape(message)}[/bold red]")
