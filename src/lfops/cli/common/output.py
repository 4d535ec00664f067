"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from lfops.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from lfops.core.models import RunSummary

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be LF-OPS consistent."""
        return f"[LF-OPS] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def select_many(self, message: str, choices: list[str]) -> list[str]:
        """
        Prompt the user to select multiple items from a list.

        Uses a questionary checkbox. Returns a list of selected values, or
        an empty list if cancelled.
        """
        if not choices:
            return []

        picked = questionary.checkbox(
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓, space, a (all), i (invert), enter",
        ).ask()
        return list(picked or [])

    def databases_table(self, databases: Iterable[str], title: str = "Databases") -> None:
        """Render a table of Glue database names."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="ok")

        for d in databases:
            t.add_row(escape(str(d)))

        console.print(t)

    def tables_table(self, tables: Iterable[Any], title: str = "Tables") -> None:
        """
        Expects objects with .database and .table (like lfops.core.models.TableRef)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="meta")
        t.add_column("Table", style="ok")

        for item in tables:
            t.add_row(escape(str(item.database)), escape(str(item.table)))

        console.print(t)

    def grant_failures_table(
        self, failures: Iterable[Any], title: str = "Failed grants"
    ) -> None:
        """
        Expects objects with .table (TableRef) and .reason
        (e.g. lfops.core.models.GrantFailure)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Table", style="ok")
        t.add_column("Reason", style="err")

        for f in failures:
            t.add_row(escape(f.table.full_name), escape(str(f.reason)))

        console.print(t)

    def skipped_databases_table(
        self, skipped: Iterable[Any], title: str = "Skipped databases"
    ) -> None:
        """Render databases that discovery could not list (name + reason)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="ok")
        t.add_column("Reason", style="warn")

        for s in skipped:
            t.add_row(escape(str(s.database)), escape(str(s.reason)))

        console.print(t)

    def run_summary(self, summary: RunSummary) -> None:
        """Print the final counts of a sync run."""
        items = {
            "Tables": summary.total_items,
            "Granted": summary.succeeded,
            "Already granted": summary.already_granted,
            "Failed": summary.failed,
        }
        if summary.skipped_databases:
            items["Skipped databases"] = len(summary.skipped_databases)
        if summary.cancelled:
            items["Not attempted"] = summary.not_attempted
        self.kv(items)


out = Out()
