"""Console output formatting."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormatter:
    """Writes human-readable or JSON output to the console.

    In quiet mode only errors are printed. In JSON mode informational
    messages are suppressed and results are emitted with print_json().
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def _show(self) -> bool:
        return not self.quiet and not self.json_output

    def print(self, message: str = "") -> None:
        if self._show():
            self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        if self._show():
            self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        if self._show():
            self.console.print(message, style="green", markup=False)

    def warning(self, message: str) -> None:
        if self._show():
            self.err_console.print(message, style="yellow", markup=False)

    def error(self, message: str) -> None:
        self.err_console.print(message, style="bold red", markup=False)

    def print_json(self, data: Any) -> None:
        self.console.print_json(json.dumps(data))

    def print_summary(self, title: str, items: list[tuple[str, str]]) -> None:
        """Print a two-column summary table.

        Args:
            title: Table title
            items: List of (label, value) rows
        """
        if self.json_output:
            self.print_json({label: value for label, value in items})
            return
        if self.quiet:
            return

        table = Table(title=title, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for label, value in items:
            table.add_row(label, value)
        self.console.print(table)
