"""Catalog-wide permission sync: discovery followed by parallel table grants.

This is the operation behind `lfops sync`. It is intentionally free of CLI
concerns (output, prompts, exit codes); callers observe progress through the
`on_discovered` / `on_outcome` callbacks and get a RunSummary back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from lfops.core.catalog import CatalogAdapter, DiscoveryResult, discover_tables
from lfops.core.grants import (
    DEFAULT_PARALLEL,
    GrantAdapter,
    GrantScheduler,
    OutcomeCallback,
)
from lfops.core.models import (
    DEFAULT_PERMISSIONS,
    IAM_ALLOWED_PRINCIPALS,
    CatalogIdentifier,
    RunSummary,
    WorkItem,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """Discovery output together with the grant summary."""

    discovery: DiscoveryResult
    work_items: list[WorkItem]
    summary: RunSummary
    dry_run: bool = False


def build_work_items(
    discovery: DiscoveryResult,
    catalog_id: CatalogIdentifier,
    principal: str,
) -> list[WorkItem]:
    """Pair every discovered table with the catalog and target principal."""
    return [
        WorkItem(catalog=catalog_id, table=table, principal=principal)
        for table in discovery.tables
    ]


def sync_catalog_permissions(
    catalog_adapter: CatalogAdapter,
    grant_adapter: GrantAdapter,
    catalog_id: CatalogIdentifier,
    *,
    principal: str = IAM_ALLOWED_PRINCIPALS,
    permissions: Sequence[str] = DEFAULT_PERMISSIONS,
    max_parallel: int = DEFAULT_PARALLEL,
    database_regex: str | None = None,
    databases: Iterable[str] | None = None,
    dry_run: bool = False,
    on_discovered: Callable[[DiscoveryResult], None] | None = None,
    on_outcome: OutcomeCallback | None = None,
    scheduler: GrantScheduler | None = None,
) -> SyncResult:
    """
    Grant `permissions` to `principal` on every table of a catalog.

    Args:
        catalog_adapter: Glue adapter used for discovery.
        grant_adapter: Lake Formation adapter used for grants.
        catalog_id: Federated catalog to sync.
        principal: DataLakePrincipalIdentifier receiving the grants.
        permissions: Lake Formation permissions to grant per table.
        max_parallel: Maximum number of grant calls in flight.
        database_regex: Optional regex restricting the scanned databases.
        databases: Optional explicit database selection.
        dry_run: If True, discover only and make no grant calls.
        on_discovered: Called once with the discovery result, before grants.
        on_outcome: Called with each grant outcome as it completes.
        scheduler: Optional pre-built scheduler (lets callers cancel it).
            When given, its own permissions, parallelism and callback are
            used instead of the arguments above.

    Returns:
        A SyncResult. Individual grant failures are reported in the summary
        and never raised.

    Raises:
        DiscoveryError: If the catalog's databases cannot be listed.
        ValueError: If `max_parallel` is not positive.
    """
    if scheduler is None:
        scheduler = GrantScheduler(
            grant_adapter,
            max_parallel,
            permissions=permissions,
            on_outcome=on_outcome,
        )

    discovery = discover_tables(
        catalog_adapter,
        catalog_id,
        database_regex=database_regex,
        databases=databases,
    )
    items = build_work_items(discovery, catalog_id, principal)
    logger.info(
        "Discovered %d table(s) across %d database(s) in '%s'",
        len(items),
        len(discovery.databases),
        catalog_id,
    )
    if on_discovered is not None:
        on_discovered(discovery)

    if dry_run:
        summary = RunSummary(
            total_items=len(items),
            skipped_databases=tuple(discovery.skipped),
        )
        return SyncResult(
            discovery=discovery, work_items=items, summary=summary, dry_run=True
        )

    summary = scheduler.run(items, skipped_databases=discovery.skipped)
    return SyncResult(discovery=discovery, work_items=items, summary=summary)
