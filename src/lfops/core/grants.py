"""Parallel table grant execution and result accounting.

This module applies one Lake Formation grant per work item on a fixed-size
thread pool. The pool size is the concurrency ceiling: a new item starts as
soon as a worker frees up, and at most `max_parallel` grant calls are ever
in flight. Each item gets a single attempt; per-item failures are turned
into FAILED outcomes at the worker boundary and never stop other items.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Protocol, Sequence

from lfops.core.errors import CatalogApiError
from lfops.core.models import (
    DEFAULT_PERMISSIONS,
    CatalogIdentifier,
    GrantFailure,
    GrantOutcome,
    GrantStatus,
    RunSummary,
    SkippedDatabase,
    WorkItem,
)

logger = logging.getLogger(__name__)

DEFAULT_PARALLEL = 50
RECOMMENDED_MAX_PARALLEL = 100

OutcomeCallback = Callable[[GrantOutcome], None]


class GrantAdapter(Protocol):
    """Interface for the table grant call used by the scheduler."""

    def grant_table_permission(
        self,
        catalog_id: CatalogIdentifier,
        database: str,
        table: str,
        principal: str,
        permissions: Sequence[str],
    ) -> GrantStatus:
        """Grant permissions on one table; return SUCCEEDED or ALREADY_GRANTED."""
        ...


class ResultAggregator:
    """Thread-safe collector of grant outcomes."""

    def __init__(self, total_items: int) -> None:
        self.total_items = total_items
        self._lock = threading.Lock()
        self._succeeded = 0
        self._already_granted = 0
        self._failures: list[GrantFailure] = []

    def record(self, outcome: GrantOutcome) -> None:
        """Count one outcome."""
        with self._lock:
            if outcome.status == GrantStatus.FAILED:
                self._failures.append(
                    GrantFailure(
                        table=outcome.item.table,
                        reason=outcome.reason or "unknown error",
                    )
                )
                return
            self._succeeded += 1
            if outcome.status == GrantStatus.ALREADY_GRANTED:
                self._already_granted += 1

    @property
    def completed(self) -> int:
        with self._lock:
            return self._succeeded + len(self._failures)

    def summary(
        self,
        *,
        skipped_databases: Iterable[SkippedDatabase] = (),
        cancelled: bool = False,
    ) -> RunSummary:
        """Return an immutable snapshot of the counters."""
        with self._lock:
            return RunSummary(
                total_items=self.total_items,
                succeeded=self._succeeded,
                already_granted=self._already_granted,
                failed=len(self._failures),
                failures=tuple(self._failures),
                skipped_databases=tuple(skipped_databases),
                cancelled=cancelled,
            )


def grant_one(
    adapter: GrantAdapter,
    item: WorkItem,
    permissions: Sequence[str] = DEFAULT_PERMISSIONS,
) -> GrantOutcome:
    """Apply a single grant and convert any failure into a FAILED outcome."""
    try:
        status = adapter.grant_table_permission(
            item.catalog,
            item.table.database,
            item.table.table,
            item.principal,
            permissions,
        )
    except CatalogApiError as exc:
        return GrantOutcome(item=item, status=GrantStatus.FAILED, reason=exc.detail)
    except Exception as e:  # noqa: BLE001  keep the run going; surface per-table errors
        logger.debug(
            "Unexpected error granting on %s", item.table.full_name, exc_info=True
        )
        return GrantOutcome(
            item=item, status=GrantStatus.FAILED, reason=str(e) or type(e).__name__
        )
    return GrantOutcome(item=item, status=status)


class GrantScheduler:
    """
    Bounded-parallel grant runner.

    Args:
        adapter: Lake Formation adapter used for each grant.
        max_parallel: Maximum number of grant calls in flight.
        permissions: Permission set granted on every table.
        on_outcome: Optional callback invoked (on a worker thread) with each
            outcome as soon as it is recorded.
    """

    def __init__(
        self,
        adapter: GrantAdapter,
        max_parallel: int = DEFAULT_PARALLEL,
        *,
        permissions: Sequence[str] = DEFAULT_PERMISSIONS,
        on_outcome: OutcomeCallback | None = None,
    ) -> None:
        if max_parallel < 1:
            raise ValueError("max_parallel must be >= 1")
        self.adapter = adapter
        self.max_parallel = max_parallel
        self.permissions = tuple(permissions)
        self.on_outcome = on_outcome
        self._stop = threading.Event()

    def cancel(self) -> None:
        """Stop admitting new items; in-flight calls are allowed to finish."""
        self._stop.set()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def _process(self, item: WorkItem, aggregator: ResultAggregator) -> None:
        if self._stop.is_set():
            return
        outcome = grant_one(self.adapter, item, self.permissions)
        aggregator.record(outcome)
        if self.on_outcome is None:
            return
        try:
            self.on_outcome(outcome)
        except Exception:  # noqa: BLE001  outcome is already counted
            logger.warning(
                "Outcome callback failed for %s",
                outcome.item.table.full_name,
                exc_info=True,
            )

    def run(
        self,
        items: Sequence[WorkItem],
        *,
        skipped_databases: Iterable[SkippedDatabase] = (),
    ) -> RunSummary:
        """
        Grant on every item and return the run summary.

        A KeyboardInterrupt while waiting cancels the run: queued items are
        dropped, in-flight calls finish, and the partial summary is returned
        with `cancelled=True`.
        """
        aggregator = ResultAggregator(total_items=len(items))
        if not items:
            return aggregator.summary(skipped_databases=skipped_databases)

        with ThreadPoolExecutor(
            max_workers=self.max_parallel, thread_name_prefix="lf-grant"
        ) as pool:
            futures = []
            try:
                for item in items:
                    futures.append(pool.submit(self._process, item, aggregator))
                for f in as_completed(futures):
                    f.result()
            except KeyboardInterrupt:
                logger.warning(
                    "Interrupted: cancelling %d pending grant(s)",
                    len(items) - aggregator.completed,
                )
                self.cancel()
                for f in futures:
                    f.cancel()

        return aggregator.summary(
            skipped_databases=skipped_databases, cancelled=self.cancelled
        )


def grant_tables_parallel(
    adapter: GrantAdapter,
    items: Sequence[WorkItem],
    max_parallel: int = DEFAULT_PARALLEL,
    *,
    permissions: Sequence[str] = DEFAULT_PERMISSIONS,
    on_outcome: OutcomeCallback | None = None,
) -> RunSummary:
    """Convenience wrapper: run a GrantScheduler once over `items`."""
    scheduler = GrantScheduler(
        adapter, max_parallel, permissions=permissions, on_outcome=on_outcome
    )
    return scheduler.run(items)
