"""
Event log commands: tail, inspect, verify, stats

These read the raw JSONL chain entries, so they work without the event
classes that wrote the log.
"""

import json
import os
from collections import Counter
from typing import Any, Dict, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from easyevents.core.errors import EasyEventsError
from easyevents.log.file_store import FileEventStore
from easyevents.logging_config import get_logger

app = typer.Typer()
console = Console()
logger = get_logger(__name__, trace_id="cli")

DEFAULT_LOG = os.getenv("EASYEVENTS_STORE_PATH", "/tmp/easyevents/events.log")

LogOption = typer.Option(DEFAULT_LOG, "--log", "-l", help="Path to JSONL event log")
JsonOption = typer.Option(False, "--json", help="Output as JSON")


def _fail(message: str, json_output: bool, **fields: Any) -> NoReturn:
    if json_output:
        print(json.dumps({"error": message, **fields}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)


def _load_entries(log_path: str, json_output: bool) -> List[Dict[str, Any]]:
    if not os.path.exists(log_path):
        _fail("Log file not found", json_output, path=log_path)
    try:
        return list(FileEventStore(log_path).entries())
    except EasyEventsError as e:
        logger.warning("Failed to read %s: %s", log_path, e)
        _fail(str(e), json_output)


@app.command()
def tail(
    log_path: str = LogOption,
    lines: Optional[int] = typer.Option(None, "--lines", "-n", min=0, help="Number of records to show"),
    json_output: bool = JsonOption,
):
    """
    Show the last records of an event log.

    Examples:
        easyevents log tail
        easyevents log tail --lines 10 --json
    """
    entries = _load_entries(log_path, json_output)
    if lines is not None:
        entries = entries[max(len(entries) - lines, 0):]

    if json_output:
        print(json.dumps({"records": entries, "count": len(entries)}, indent=2))
        return

    if not entries:
        console.print("[yellow]Event log is empty[/yellow]")
        return

    table = Table(title=f"Event Log: {log_path}")
    table.add_column("Position", style="cyan", justify="right")
    table.add_column("Type", style="green")
    table.add_column("Stream", style="yellow")
    table.add_column("Hash (prefix)", style="dim")

    for entry in entries:
        rec = entry.get("record", {})
        table.add_row(
            str(rec.get("position", "N/A")),
            rec.get("type", "N/A"),
            rec.get("stream", "N/A"),
            (entry.get("record_hash") or "N/A")[:16],
        )

    console.print(table)
    console.print(f"\n[bold]Total records:[/bold] {len(entries)}")


@app.command()
def inspect(
    log_path: str = LogOption,
    from_position: Optional[int] = typer.Option(None, "--from", help="Start from position"),
    to_position: Optional[int] = typer.Option(None, "--to", help="End at position"),
    stream: Optional[str] = typer.Option(None, "--stream", "-s", help="Filter by stream"),
    event_type: Optional[str] = typer.Option(None, "--event-type", "-t", help="Filter by event type"),
    json_output: bool = JsonOption,
):
    """
    Inspect records with filters, payloads included.

    Examples:
        easyevents log inspect --from 0 --to 10
        easyevents log inspect --stream AppEvents --json
    """
    entries = _load_entries(log_path, json_output)
    records = [entry.get("record", {}) for entry in entries]

    if from_position is not None:
        records = [r for r in records if r.get("position", 0) >= from_position]
    if to_position is not None:
        records = [r for r in records if r.get("position", 0) <= to_position]
    if stream:
        records = [r for r in records if r.get("stream") == stream]
    if event_type:
        records = [r for r in records if r.get("type") == event_type]

    if json_output:
        print(json.dumps({"records": records, "count": len(records)}, indent=2))
        return

    if not records:
        console.print("[yellow]No records match the filters[/yellow]")
        return

    for rec in records:
        console.print(f"\n[bold cyan]Record {rec.get('position', 'N/A')}[/bold cyan]")
        console.print(f"  Type: [green]{rec.get('type', 'N/A')}[/green]")
        console.print(f"  Stream: [yellow]{rec.get('stream', 'N/A')}[/yellow]")
        console.print(Syntax(json.dumps(rec.get("payload", {}), indent=2), "json", theme="monokai"))

    console.print(f"\n[bold]Total records:[/bold] {len(records)}")


@app.command()
def verify(log_path: str = LogOption, json_output: bool = JsonOption):
    """
    Verify the hash chain of an event log.

    Exit code 0 when intact, 1 when tampered, 2 when unreadable.
    """
    if not os.path.exists(log_path):
        _fail("Log file not found", json_output, path=log_path)

    try:
        count = FileEventStore(log_path).verify()
    except EasyEventsError as e:
        logger.warning("Integrity check failed for %s: %s", log_path, e)
        if json_output:
            print(json.dumps({"valid": False, "error": str(e)}))
        else:
            console.print(f"[red]✗ Integrity check failed:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps({"valid": True, "records": count}))
    else:
        console.print(f"[green]✓ Hash chain intact ({count} records)[/green]")


@app.command()
def stats(log_path: str = LogOption, json_output: bool = JsonOption):
    """Count records per stream and per event type."""
    entries = _load_entries(log_path, json_output)
    by_stream = Counter(e.get("record", {}).get("stream", "N/A") for e in entries)
    by_type = Counter(e.get("record", {}).get("type", "N/A") for e in entries)

    if json_output:
        print(
            json.dumps(
                {"count": len(entries), "streams": dict(by_stream), "types": dict(by_type)},
                indent=2,
                sort_keys=True,
            )
        )
        return

    for title, counts, label in (("Streams", by_stream, "Stream"), ("Event Types", by_type, "Event Type")):
        table = Table(title=title)
        table.add_column(label, style="green")
        table.add_column("Count", style="cyan", justify="right")
        for key in sorted(counts):
            table.add_row(key, str(counts[key]))
        console.print(table)

    console.print(f"\n[bold]Total records:[/bold] {len(entries)}")
