"""Progress formatting utilities for the CLI."""

from __future__ import annotations

import threading

from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from lfops.cli.common.output import console
from lfops.core.catalog import DiscoveryResult
from lfops.core.models import GrantOutcome, GrantStatus

_MAX_TABLE_NAME_WIDTH = 96


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def outcome_line(outcome: GrantOutcome) -> str:
    """
    Render the per-table completion line.

    - granted: `✓ db.table`
    - already granted: `✓ db.table (already granted)`
    - failed: `✗ db.table: <reason>`
    """
    name = escape(_truncate(outcome.item.table.full_name, _MAX_TABLE_NAME_WIDTH))
    if outcome.status == GrantStatus.SUCCEEDED:
        return f"  [ok]✓[/] {name}"
    if outcome.status == GrantStatus.ALREADY_GRANTED:
        return f"  [ok]✓[/] {name} [meta](already granted)[/]"
    return f"  [err]✗[/] {name}: {escape(str(outcome.reason))}"


class GrantProgress:
    """
    Live display for a sync run. Shows:
      - a discovery spinner until the work set is known
      - an overall progress bar (x/y completed + failures)
      - one completion line per table (unless quiet)

    `start_grants` and `advance` match the `on_discovered` / `on_outcome`
    callbacks of `sync_catalog_permissions`; `advance` is called from worker
    threads, which rich's Progress and Console tolerate.
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self.quiet = quiet
        self.failures = 0
        self._lock = threading.Lock()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}[/]"),
            BarColumn(),
            TaskProgressColumn(),  # e.g. 2/5
            TextColumn("failures=[bold red]{task.fields[failures]}[/]"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        self._task_id = self._progress.add_task(
            "Discovering tables", total=None, failures=0
        )

    def __enter__(self) -> GrantProgress:
        self._progress.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._progress.stop()

    def start_grants(self, discovery: DiscoveryResult) -> None:
        """Switch from discovery to granting once the work set is known."""
        self._progress.update(
            self._task_id,
            description="Granting",
            total=max(len(discovery.tables), 1),
            completed=0,
        )

    def advance(self, outcome: GrantOutcome) -> None:
        """Record one completed grant on the display."""
        if outcome.status == GrantStatus.FAILED:
            with self._lock:
                self.failures += 1
                failures = self.failures
            self._progress.update(self._task_id, failures=failures)
        if not self.quiet:
            self._progress.console.print(outcome_line(outcome))
        self._progress.advance(self._task_id, 1)
