"""Human-facing console output.

Wraps a Rich console with the small vocabulary of status lines used by
ops-tools features. Tool output is printed through :meth:`Console.raw`,
which never interprets Rich markup.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.rule import Rule


class Console:
    """Status-line printer used by the orchestrator and CLI commands."""

    def __init__(self, output: Optional[TextIO] = None, color: Optional[bool] = None):
        """Initialize Console.

        Args:
            output: Stream to write to (default: stdout).
            color: Force colour on/off; ``None`` lets Rich auto-detect.
        """
        self._console = RichConsole(
            file=output or sys.stdout,
            highlight=False,
            soft_wrap=True,
            no_color=color is False,
            force_terminal=color,
        )

    def header(self, title: str) -> None:
        self._console.print()
        self._console.print(Rule(escape(title), style="bold cyan"))

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]ℹ[/cyan] {escape(message)}")

    def success(self, message: str) -> None:
        self._console.print(f"[green]✔[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠ {escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self._console.print(f"[bold red]✖ {escape(message)}[/bold red]")

    def list_item(self, icon: str, message: str) -> None:
        self._console.print(f"  {icon} {escape(message)}")

    def success_item(self, message: str) -> None:
        self._console.print(f"  [green]✔[/green] {escape(message)}")

    def error_item(self, title: str, detail: str) -> None:
        self._console.print(f"  [red]✖[/red] {escape(title)}: [dim]{escape(detail)}[/dim]")

    def separator(self) -> None:
        self._console.print(Rule(style="dim"))

    def blank_line(self) -> None:
        self._console.print()

    def raw(self, text: str) -> None:
        """Print text verbatim, without markup or highlighting."""
        self._console.print(text, markup=False, highlight=False, end="")

    def show_summary(self, title: str, success: int, failed: int) -> None:
        """Print an aggregate success/failure line."""
        style = "green" if failed == 0 else "red"
        self._console.print(
            f"[bold]{escape(title)}[/bold]: "
            f"[green]{success} succeeded[/green], [{style}]{failed} failed[/{style}]"
        )
