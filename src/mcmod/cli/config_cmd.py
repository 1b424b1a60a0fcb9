"""
CLI Config Commands

Manage Global Preferences shared by every project.

Commands:
  set   - Store a value (validated per key)
  get   - Print a value, or "(not set)"
  list  - Show every known key grouped by section
"""

import typer
from rich.markup import escape
from rich.table import Table

from mcmod.cli.output import exit_on_error, get_console
from mcmod.user_config import NOT_SET, PreferencesStore

app = typer.Typer()
console = get_console()


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Key name, e.g. author, language, gamma, timeOfDay"),
    value: str = typer.Argument(..., help="Value to store"),
):
    """
    Set a global config value.
    """
    with exit_on_error():
        PreferencesStore().set(key, value)
    console.print(f"[green]Set {escape(key)} = {escape(value)}[/green]")


@app.command("get")
def get_value(
    key: str = typer.Argument(..., help="Key name"),
):
    """
    Print a global config value.
    """
    with exit_on_error():
        value = PreferencesStore().get(key)
    console.print(escape(NOT_SET if value is None else value), highlight=False)


@app.command("list")
def list_values():
    """
    List all global config values.
    """
    with exit_on_error():
        store = PreferencesStore()
        entries = store.list()

    table = Table(title="mcmod global config", show_lines=False)
    table.add_column("Section", style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    last_section = None
    for section, key, value in entries:
        table.add_row(
            section if section != last_section else "",
            key,
            f"[dim]{NOT_SET}[/dim]" if value == NOT_SET else escape(value),
        )
        last_section = section

    console.print(table)
    console.print(f"[dim]Config file: {escape(str(store.path))}[/dim]")
