"""Command for syncing Lake Formation table grants across a federated catalog."""

from __future__ import annotations

import re

import typer

from lfops.cli.common.context import LFAppContext, build_context
from lfops.cli.common.exits import EXIT_INTERRUPTED, die, exit_from_exc, warn_exit
from lfops.cli.common.logs import configure_logging
from lfops.cli.common.options import (
    CatalogOpt,
    DatabaseOpt,
    DryRunOpt,
    ParallelOpt,
    PermissionOpt,
    PrincipalOpt,
    ProfileOpt,
    QuietOpt,
    RegionOpt,
    SelectOpt,
    StrictOpt,
    TimeoutOpt,
    VerboseOpt,
)
from lfops.cli.common.output import out
from lfops.cli.common.progress import GrantProgress
from lfops.core.auth import parse_catalog_id
from lfops.core.catalog import DiscoveryError, filter_databases, list_databases
from lfops.core.grants import RECOMMENDED_MAX_PARALLEL, GrantScheduler
from lfops.core.models import CatalogIdentifier
from lfops.core.sync import sync_catalog_permissions


def compile_regex_or_exit(pattern: str | None, *, option_name: str) -> re.Pattern | None:
    """Compile a regex pattern and convert invalid syntax into CLI input errors."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        out.error(f"Invalid regex for {option_name}: {exc}")
        raise typer.Exit(2) from exc


def resolve_catalog_or_exit(appctx: LFAppContext, catalog: str) -> CatalogIdentifier:
    """Turn `name` or `account_id:name` into a CatalogIdentifier."""
    try:
        return parse_catalog_id(catalog, account_id=appctx.account_id)
    except ValueError as exc:
        out.error(str(exc))
        raise typer.Exit(2) from exc


def _select_databases_or_exit(
    appctx: LFAppContext, catalog_id: CatalogIdentifier, database: str | None
) -> list[str]:
    """Let the user pick databases interactively."""
    try:
        with out.status("Loading databases..."):
            databases = list_databases(appctx.glue, catalog_id)
    except DiscoveryError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    databases = filter_databases(databases, name_regex=database)
    if not databases:
        warn_exit("No databases found.", code=0)

    selected = out.select_many("Select databases to sync:", databases)
    if not selected:
        warn_exit("No databases selected.", code=0)
    return selected


def sync(
    catalog: str = CatalogOpt,
    region: str | None = RegionOpt,
    parallel: int = ParallelOpt,
    principal: str = PrincipalOpt,
    permission: list[str] = PermissionOpt,
    database: str | None = DatabaseOpt,
    select: bool = SelectOpt,
    timeout: float = TimeoutOpt,
    dry_run: bool = DryRunOpt,
    quiet: bool = QuietOpt,
    strict: bool = StrictOpt,
    profile: str | None = ProfileOpt,
    verbose: bool = VerboseOpt,
):
    """
    Grant Lake Formation permissions on ALL tables in a federated Glue catalog.

    Run this after new tables appear in the remote catalog. Safe to rerun:
    existing grants are left as they are.
    """
    configure_logging(verbose)
    if parallel < 1:
        die("--parallel must be >= 1", code=2)
    if parallel > RECOMMENDED_MAX_PARALLEL:
        out.warn(
            f"--parallel {parallel} is above the recommended maximum of "
            f"{RECOMMENDED_MAX_PARALLEL}; expect throttling."
        )
    compile_regex_or_exit(database, option_name="--database")
    permissions = [p.strip().upper() for p in permission if p.strip()]
    if not permissions:
        die("At least one --permission is required.", code=2)

    appctx = build_context(profile, region, max_parallel=parallel, timeout=timeout)
    catalog_id = resolve_catalog_or_exit(appctx, catalog)

    out.header("Sync Lake Formation permissions for federated catalog")
    out.kv(
        {
            "Catalog": catalog_id.catalog_name,
            "Catalog ID": catalog_id,
            "Region": appctx.region,
            "Principal": principal,
            "Permissions": ", ".join(permissions),
            "Parallel": f"{parallel} calls",
        }
    )

    selected = (
        _select_databases_or_exit(appctx, catalog_id, database) if select else None
    )

    scheduler = GrantScheduler(appctx.lakeformation, parallel, permissions=permissions)
    try:
        if dry_run:
            with out.status("Discovering tables..."):
                result = sync_catalog_permissions(
                    appctx.glue,
                    appctx.lakeformation,
                    catalog_id,
                    principal=principal,
                    database_regex=database,
                    databases=selected,
                    dry_run=True,
                    scheduler=scheduler,
                )
        else:
            with GrantProgress(quiet=quiet) as progress:
                scheduler.on_outcome = progress.advance
                result = sync_catalog_permissions(
                    appctx.glue,
                    appctx.lakeformation,
                    catalog_id,
                    principal=principal,
                    database_regex=database,
                    databases=selected,
                    on_discovered=progress.start_grants,
                    scheduler=scheduler,
                )
    except DiscoveryError as exc:
        out.error(str(exc))
        die("Make sure the catalog exists and you have access to it.", code=1)
    except KeyboardInterrupt:
        die("Interrupted before any grant was issued.", code=EXIT_INTERRUPTED)

    if not result.discovery.databases:
        if database or selected:
            warn_exit("No databases matched the given filter.", code=0)
        out.error(f"No databases found in catalog {catalog_id}")
        die("Make sure the catalog exists and you have access to it.", code=1)

    summary = result.summary
    if summary.skipped_databases:
        out.skipped_databases_table(summary.skipped_databases)

    if result.dry_run:
        out.tables_table(result.discovery.tables, title="Tables to grant")
        warn_exit(
            f"DRY RUN: {summary.total_items} table(s) would be granted; nothing changed.",
            code=0,
        )

    if summary.failures:
        out.grant_failures_table(summary.failures)

    out.header("Summary")
    out.run_summary(summary)

    if summary.cancelled:
        die(
            f"Interrupted: {summary.not_attempted} table(s) not attempted. "
            "Rerun to pick them up.",
            code=EXIT_INTERRUPTED,
        )

    if summary.total_items == 0:
        warn_exit("No tables found in the catalog.", code=0)

    if summary.failed:
        out.warn(
            f"Granted permissions on {summary.succeeded}/{summary.total_items} tables; "
            f"{summary.failed} failed. Rerun to retry them."
        )
        if strict:
            raise typer.Exit(1)
        return

    out.success(
        f"Done! Granted permissions on {summary.succeeded}/{summary.total_items} tables."
    )
