import csv
import logging
import os
import sys
from typing import Optional, Tuple

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from book import Book
from config import settings
from errors import LibraryError
from library import Library
from utils.ui_helpers import print_list_result, print_stats_result, set_output_mode

APP_NAME = settings.app_name

console = Console()

MENU_ITEMS = [
    ("1", "Add a New Book", "➕"),
    ("2", "Show All Books", "📚"),
    ("3", "Borrow a Book", "📤"),
    ("4", "Return a Book", "📥"),
    ("5", "Remove a Book", "🗑️"),
    ("6", "Show Statistics", "📊"),
    ("0", "Exit", "🚪"),
]


# ------------------------- Menu actions ------------------------- #
def add_book(lib: Library) -> None:
    book_id = Prompt.ask("Enter Book ID").strip()
    title = Prompt.ask("Enter Title").strip()
    author = Prompt.ask("Enter Author").strip()
    year = IntPrompt.ask("Enter Publication Year")
    lib.add_item(Book(book_id, title, author, year))
    print("Book added successfully.")


def show_books(lib: Library) -> None:
    print_list_result(lib.list_all())


def borrow_book(lib: Library) -> None:
    book_id = Prompt.ask("Enter Book ID to borrow").strip()
    try:
        lib.borrow(book_id)
        print("Book borrowed successfully.")
    except LibraryError as e:
        print(f"Error: {e}")


def return_book(lib: Library) -> None:
    book_id = Prompt.ask("Enter Book ID to return").strip()
    try:
        lib.return_item(book_id)
        print("Book returned successfully.")
    except LibraryError as e:
        print(f"Error: {e}")


def remove_book(lib: Library) -> None:
    book_id = Prompt.ask("Enter Book ID to remove").strip()
    try:
        book = lib.remove_by_id(book_id)
        print(f"Book removed successfully: {book.title}")
    except LibraryError as e:
        print(f"Error: {e}")


def show_stats(lib: Library) -> None:
    print_stats_result(lib.get_statistics())


ACTIONS = {
    "1": add_book,
    "2": show_books,
    "3": borrow_book,
    "4": return_book,
    "5": remove_book,
    "6": show_stats,
}


def import_books(lib: Library, file_path: str) -> Tuple[int, int]:
    """Pre-load books from a CSV file with an id,title,author,year header."""
    if not os.path.exists(file_path):
        print(f"File not found: {file_path}")
        return 0, 0

    added_count = 0
    failed_count = 0
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, 2):
            try:
                book = Book.from_dict(row)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                print(f"[line {line_no}] ✗ Could not import row: {e}")
                failed_count += 1
                continue
            lib.add_item(book)
            added_count += 1

    print(f"Import finished: {added_count} added, {failed_count} failed")
    return added_count, failed_count


def render_menu() -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in MENU_ITEMS:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {escape(label)}")

    console.print(Panel(
        table,
        title=f"Welcome to the {APP_NAME}",
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    ))


def run_menu(lib: Library) -> None:
    """Simple interactive menu driving the Library service."""
    choices = [key for key, _, _ in MENU_ITEMS]
    while True:
        render_menu()
        try:
            choice = Prompt.ask("Please choose an option", choices=choices, default="2")
        except (EOFError, KeyboardInterrupt):
            choice = "0"

        if choice == "0":
            print("Thank you for using the Library System.")
            break
        try:
            ACTIONS[choice](lib)
        except (EOFError, KeyboardInterrupt):
            print("Thank you for using the Library System.")
            break
        print()  # blank line between actions


def run(capacity: Optional[int] = None, delay: Optional[float] = None, import_file: Optional[str] = None) -> None:
    lib = Library(capacity=capacity, delay=delay)
    try:
        if import_file:
            import_books(lib, import_file)
        run_menu(lib)
    finally:
        lib.close()


def _log_level() -> int:
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.log_level, logging.WARNING)


# --- Typer CLI ---
app = typer.Typer(help="Library System CLI")


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    capacity: Optional[int] = typer.Option(None, "--capacity", min=1, help="Transaction log capacity"),
    delay: Optional[float] = typer.Option(None, "--delay", min=0.0, help="Seconds the log consumer waits between entries"),
    import_file: Optional[str] = typer.Option(None, "--import-file", help="CSV file (id,title,author,year) to load at startup"),
):
    """Manage the library catalogue interactively."""
    logging.basicConfig(level=_log_level())
    if output:
        set_output_mode(output)
    ctx.obj = {"capacity": capacity, "delay": delay, "import_file": import_file}
    if ctx.invoked_subcommand is None:
        run(**ctx.obj)


@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu (same as running without a command)."""
    run(**(ctx.obj or {}))


if __name__ == "__main__":
    if len(sys.argv) > 1:
        app()
    else:
        logging.basicConfig(level=_log_level())
        run()
