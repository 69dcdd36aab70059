import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode
    # Invalid values are ignored; the current mode stays in effect

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()

def print_list_result(books: List[Any]) -> None:
    """Print the book list in the current output mode.
    - plain: one 'Book [ID: ..., Available: ...]' line per book, or 'No books in library.'
    - json: JSON array of book dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", justify="right")
        table.add_column("Available")
        for b in books:
            status = "[green]yes[/]" if b.is_available else "[red]no[/]"
            table.add_row(b.id, b.title, b.author, str(b.publication_year), status)
        _console.print(table)
    else:
        for b in books:
            print(b.details())

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print library statistics in the current output mode."""
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {stats.get('total_books', 0)}\n"
            f"[bold]Available:[/] {stats.get('available_books', 0)}\n"
            f"[bold]Borrowed:[/] {stats.get('borrowed_books', 0)}\n"
            f"[bold]Unique Authors:[/] {stats.get('unique_authors', 0)}\n"
            f"[bold]Pending Log Entries:[/] {stats.get('pending_log_entries', 0)}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {stats.get('total_books', 0)}")
        print(f"Available: {stats.get('available_books', 0)}")
        print(f"Borrowed: {stats.get('borrowed_books', 0)}")
        print(f"Unique Authors: {stats.get('unique_authors', 0)}")
        print(f"Pending Log Entries: {stats.get('pending_log_entries', 0)}")
