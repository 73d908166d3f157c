"""Terminal output for the CLI, using Rich.

Regular output goes to stdout; errors and warnings go to stderr so that
``notion-cli search x > results.txt`` keeps diagnostics on the terminal.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape

from notioncli.converter.render import extract_property_value, extract_title, render_block

# Property names treated as the row title in query output.
_TITLE_PROPERTIES = frozenset({"title", "Name"})

# How many leading properties of a row are considered for display.
_QUERY_PROPERTY_COUNT = 3


class OutputHandler:
    """Writes CLI output with colour and symbols.

    Attributes:
        console: Rich console for regular output (stdout)
        err_console: Rich console for errors and warnings (stderr)
    """

    def __init__(self, no_color: bool = False):
        self.console = Console(no_color=no_color, highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, no_color=no_color, highlight=False, soft_wrap=True)

    def action(self, label: str, detail: str) -> None:
        """Announce what a command is about to do, e.g. ``Searching: "x"``."""
        self.console.print(f"[blue]{escape(label)}[/blue] {escape(detail)}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]✗[/red] {escape(message)}")

    def line(self, text: str = "", markup: bool = False) -> None:
        """Print one line; *text* is escaped unless it already holds markup."""
        self.console.print(text if markup else escape(text))

    def field(self, label: str, value: str, dim: bool = False) -> None:
        value = f"[dim]{escape(value)}[/dim]" if dim else escape(value)
        self.console.print(f"  {escape(label)}: {value}")

    # -- composite renderers ---------------------------------------------

    def result_count(self, count: int) -> None:
        self.console.print(f"[green]✓[/green] {count} results found\n")

    def search_result(self, item: dict[str, Any]) -> None:
        object_type = item.get("object", "unknown")
        item_id = item.get("id", "no-id")
        self.console.print(
            f"  [cyan]•[/cyan] {escape(f'[{object_type}]')} {escape(extract_title(item))}"
        )
        self.console.print(f"    ID: [dim]{escape(item_id)}[/dim]")

    def blocks(self, blocks: list[dict[str, Any]]) -> None:
        for block in blocks:
            rendered = render_block(block)
            if rendered is not None:
                self.console.print(rendered)

    def query_row(self, item: dict[str, Any]) -> None:
        item_id = item.get("id", "no-id")
        self.console.print(f"  [cyan]•[/cyan] {escape(extract_title(item))}")
        self.console.print(f"    ID: [dim]{escape(item_id)}[/dim]")

        props = item.get("properties")
        if not isinstance(props, dict):
            return
        for key, value in list(props.items())[:_QUERY_PROPERTY_COUNT]:
            if key in _TITLE_PROPERTIES or not isinstance(value, dict):
                continue
            rendered = extract_property_value(value)
            if rendered is not None:
                self.console.print(f"    [dim]{escape(key)}[/dim]: {escape(rendered)}")
