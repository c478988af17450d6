"""Diagnostic output on stderr.

Stdout carries machine-usable results only (a picked item, a project list),
so every human-facing line goes through this console.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True, highlight=False)


def info(message: str) -> None:
    console.print(escape(message))


def header(text: str) -> None:
    console.print()
    console.print(f"[bold]=== {escape(text)} ===[/bold]")


def ok(message: str) -> None:
    console.print(f"[green]OK[/green]   {escape(message)}")


def warn(message: str) -> None:
    console.print(f"[yellow]WARN[/yellow] {escape(message)}")


def fail(message: str) -> None:
    console.print(f"[red]FAIL[/red] {escape(message)}")


def error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
