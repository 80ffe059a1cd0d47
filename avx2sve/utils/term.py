from rich.console import Console
from rich.markup import escape
from rich.table import Table
import os
from typing import Sequence

console = Console(stderr=True, soft_wrap=True, emoji=False)

def _is_minimal() -> bool:
    env = os.environ.get('AVX2SVE_MINIMAL_UI')
    if env is not None:
        return env.strip().lower() in ('1', 'true', 'yes', 'on')
    return False

def print_info(message: str):
    if _is_minimal():
        return
    console.print(f"[yellow]Info:[/yellow] {escape(message)}")

def print_error(message: str):
    if _is_minimal():
        console.print(f"[ERROR] {escape(message)}")
        return
    console.print(f"[red]Error:[/red] {escape(message)}")

def print_warning(message: str):
    if _is_minimal():
        console.print(f"[WARN] {escape(message)}")
        return
    console.print(f"[#9b59b6]Warning:[/#9b59b6] {escape(message)}")

def print_success(message: str):
    if _is_minimal():
        console.print(f"[OK] {escape(message)}")
        return
    console.print(f"[green]Success:[/green] {escape(message)}")

def print_summary(errors: Sequence, total: int):
    """Report every failed line of a keep-going run"""
    if _is_minimal():
        for error in errors:
            console.print(f"[ERROR] {escape(str(error))}")
        console.print(f"{len(errors)}/{total} lines failed", markup=False)
        return
    table = Table(title=f"{len(errors)} of {total} lines not translated")
    table.add_column("Line", justify="right", style="cyan")
    table.add_column("Source")
    table.add_column("Error", style="red")
    for error in errors:
        table.add_row(str(error.line), escape(error.context), escape(error.message))
    console.print(table)
