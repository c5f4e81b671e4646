"""
easyevents command-line tool.
"""

import sys

import typer
from rich.console import Console
from rich.table import Table

from easyevents import __version__
from easyevents.cli.commands import log
from easyevents.logging_config import setup_logging

app = typer.Typer(
    name="easyevents",
    help="Event dispatch and replay engine tooling",
    add_completion=False,
)

console = Console()


@app.callback()
def _startup():
    """Event dispatch and replay engine tooling"""
    # stdout carries command output
    setup_logging(stream=sys.stderr)


app.add_typer(log.app, name="log", help="Event log operations")


@app.command()
def version():
    """Show version information."""
    table = Table(show_header=False, box=None)
    table.add_row("[bold]easyevents[/bold]", f"v{__version__}")
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
