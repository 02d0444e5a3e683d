"""User-facing notices printed to the terminal.

These are separate from logging: logs go to the log file, notices go to
the user's console.
"""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape

GATHERING = "Gathering branding data. This will take a while"
PERFORM_CHANGES = "Perform your changes within the UI"
PERSISTING = "Persisting branding data. This will take a while"
UPDATED = "Branding for the Universal Login updated"
DISCONNECTED = (
    "Disconnected from the UI. "
    "Test the Universal Login by running: 'auth0 test login'"
)


class Notifier:
    """Thin wrapper over a rich Console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def info(self, message: str) -> None:
        self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        self.console.print(f"{escape(message)} [green]✓[/green]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """Show a spinner while the block runs."""
        with self.console.status(message):
            yield
