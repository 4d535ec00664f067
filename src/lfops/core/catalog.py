"""Catalog discovery: enumerate every grantable table in a federated catalog.

Database listing failures are fatal for the run. Table listing failures for
a single database only drop that database from the work set, since grants
are independently idempotent and a rerun picks the database up again.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from lfops.core.errors import CatalogApiError
from lfops.core.models import CatalogIdentifier, SkippedDatabase, TableRef

logger = logging.getLogger(__name__)


class CatalogAdapter(Protocol):
    """Interface for catalog listing operations used by discovery."""

    def list_databases(self, catalog_id: CatalogIdentifier) -> list[str]:
        """Return database names in the catalog."""
        ...

    def list_tables(self, catalog_id: CatalogIdentifier, database: str) -> list[str]:
        """Return table names in a database."""
        ...


class DiscoveryError(RuntimeError):
    """Raised when the catalog itself cannot be enumerated."""

    def __init__(self, message: str, *, cause: CatalogApiError | None = None) -> None:
        super().__init__(message)
        self.cause = cause


@dataclass(frozen=True)
class DiscoveryResult:
    """Work set produced by discovery."""

    databases: list[str]
    tables: list[TableRef]
    skipped: list[SkippedDatabase] = field(default_factory=list)


def filter_databases(
    databases: list[str],
    *,
    name_regex: str | None = None,
    selected: Iterable[str] | None = None,
) -> list[str]:
    """Keep databases matching the regex and/or present in `selected`, in order."""
    out = databases
    if name_regex:
        rx = re.compile(name_regex)
        out = [d for d in out if rx.search(d)]
    if selected is not None:
        wanted = set(selected)
        out = [d for d in out if d in wanted]
    return out


def list_databases(adapter: CatalogAdapter, catalog_id: CatalogIdentifier) -> list[str]:
    """
    List the databases of a catalog, converting provider errors to DiscoveryError.
    """
    try:
        return adapter.list_databases(catalog_id)
    except CatalogApiError as exc:
        raise DiscoveryError(
            f"Cannot list databases in catalog '{catalog_id}': {exc.reason}",
            cause=exc,
        ) from exc


def discover_tables(
    adapter: CatalogAdapter,
    catalog_id: CatalogIdentifier,
    *,
    database_regex: str | None = None,
    databases: Iterable[str] | None = None,
) -> DiscoveryResult:
    """
    Enumerate every (database, table) pair visible in a catalog.

    Args:
        adapter: Catalog adapter used for listing.
        catalog_id: Catalog to enumerate.
        database_regex: Optional regex; only matching databases are scanned.
        databases: Optional explicit database selection.

    Returns:
        A DiscoveryResult with tables in stable order (database order, then
        table order) and the databases that had to be skipped.

    Raises:
        DiscoveryError: If the database listing itself fails.
    """
    all_databases = list_databases(adapter, catalog_id)
    scanned = filter_databases(
        all_databases, name_regex=database_regex, selected=databases
    )

    tables: list[TableRef] = []
    skipped: list[SkippedDatabase] = []
    for database in scanned:
        try:
            names = adapter.list_tables(catalog_id, database)
        except CatalogApiError as exc:
            logger.warning(
                "Skipping database '%s' in catalog '%s': cannot list tables (%s)",
                database,
                catalog_id,
                exc.reason,
            )
            skipped.append(SkippedDatabase(database=database, reason=exc.reason))
            continue
        logger.debug("Database '%s': %d table(s)", database, len(names))
        tables.extend(TableRef(database=database, table=name) for name in names)

    return DiscoveryResult(databases=scanned, tables=tables, skipped=skipped)
