from __future__ import annotations

import typer

from lfops.cli.commands.sync import compile_regex_or_exit, resolve_catalog_or_exit
from lfops.cli.common.context import LFAppContext, build_context
from lfops.cli.common.exits import exit_from_exc
from lfops.cli.common.logs import configure_logging
from lfops.cli.common.options import (
    CatalogOpt,
    DatabaseOpt,
    ProfileOpt,
    RegionOpt,
    VerboseOpt,
)
from lfops.cli.common.output import out
from lfops.core.catalog import DiscoveryError, discover_tables, list_databases

catalog_app = typer.Typer(
    help="Inspect a federated Glue catalog.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@catalog_app.callback()
def _init(
    ctx: typer.Context,
    profile: str | None = ProfileOpt,
    region: str | None = RegionOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize AWS context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    configure_logging(verbose)
    ctx.obj = build_context(profile, region)


@catalog_app.command("databases-list")
def databases_list(
    ctx: typer.Context,
    catalog: str = CatalogOpt,
    database: str | None = DatabaseOpt,
):
    """List databases in a federated catalog."""
    appctx: LFAppContext = ctx.obj
    catalog_id = resolve_catalog_or_exit(appctx, catalog)
    name_rx = compile_regex_or_exit(database, option_name="--database")

    try:
        with out.status("Loading databases..."):
            databases = list_databases(appctx.glue, catalog_id)
    except DiscoveryError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if name_rx:
        databases = [d for d in databases if name_rx.search(d)]

    if not databases:
        out.warn("No databases found.")
        raise typer.Exit(0)

    out.header("Databases")
    out.info(f"Catalog: {catalog_id} | Databases: {len(databases)}")
    out.databases_table(databases)


@catalog_app.command("tables-list")
def tables_list(
    ctx: typer.Context,
    catalog: str = CatalogOpt,
    database: str | None = DatabaseOpt,
):
    """List every table in a federated catalog (the sync work set)."""
    appctx: LFAppContext = ctx.obj
    catalog_id = resolve_catalog_or_exit(appctx, catalog)
    compile_regex_or_exit(database, option_name="--database")

    try:
        with out.status("Loading tables..."):
            result = discover_tables(appctx.glue, catalog_id, database_regex=database)
    except DiscoveryError as exc:
        exit_from_exc(exc, message=str(exc), code=1)

    if result.skipped:
        out.skipped_databases_table(result.skipped)

    if not result.tables:
        out.warn("No tables found.")
        raise typer.Exit(0)

    out.header("Tables")
    out.info(
        f"Catalog: {catalog_id} | Databases: {len(result.databases)} "
        f"| Tables: {len(result.tables)}"
    )
    out.tables_table(result.tables)
