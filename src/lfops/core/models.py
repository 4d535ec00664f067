"""Core domain models for Lake Formation permission sync.

These models represent catalog entities and grant results in a simple,
immutable form. They are intentionally free of boto3 types and UI/CLI
concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

IAM_ALLOWED_PRINCIPALS = "IAM_ALLOWED_PRINCIPALS"
DEFAULT_PERMISSIONS: tuple[str, ...] = ("ALL",)


@dataclass(frozen=True)
class CatalogIdentifier:
    """
    Identifies a federated Glue catalog.

    Glue addresses a federated catalog as `<account_id>:<catalog_name>`,
    which is what `str()` returns and what every discovery and grant call
    uses as its `CatalogId`.
    """

    account_id: str
    catalog_name: str

    def __str__(self) -> str:
        return f"{self.account_id}:{self.catalog_name}"


@dataclass(frozen=True)
class TableRef:
    """A grantable table within a catalog."""

    database: str
    table: str

    @property
    def full_name(self) -> str:
        return f"{self.database}.{self.table}"


@dataclass(frozen=True)
class WorkItem:
    """One table grant to apply: where, what and to whom."""

    catalog: CatalogIdentifier
    table: TableRef
    principal: str


class GrantStatus(str, Enum):
    """
    Outcome of a single grant call.

    Values:
        SUCCEEDED: The grant was applied.
        ALREADY_GRANTED: The provider already holds an identical grant.
        FAILED: The call failed; the reason is kept on the outcome.
    """

    SUCCEEDED = "SUCCEEDED"
    ALREADY_GRANTED = "ALREADY_GRANTED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class GrantOutcome:
    """Result for a single work item."""

    item: WorkItem
    status: GrantStatus
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != GrantStatus.FAILED


@dataclass(frozen=True)
class GrantFailure:
    """A failed table grant as reported in the run summary."""

    table: TableRef
    reason: str


@dataclass(frozen=True)
class SkippedDatabase:
    """A database whose tables could not be listed during discovery."""

    database: str
    reason: str


@dataclass(frozen=True)
class RunSummary:
    """
    Final counts for a sync run.

    Attributes:
        total_items: Size of the work set.
        succeeded: Items granted, including those already granted.
        already_granted: Subset of `succeeded` the provider reported as
            pre-existing.
        failed: Items whose grant call failed.
        failures: Table and reason for each failed item.
        skipped_databases: Databases left out of the work set by discovery.
        cancelled: True when the run was interrupted before every item
            was attempted.
    """

    total_items: int
    succeeded: int = 0
    already_granted: int = 0
    failed: int = 0
    failures: tuple[GrantFailure, ...] = ()
    skipped_databases: tuple[SkippedDatabase, ...] = ()
    cancelled: bool = False

    @property
    def not_attempted(self) -> int:
        return self.total_items - self.succeeded - self.failed
