"""Common CLI options for the CLI."""

import typer

from lfops.core.auth import DEFAULT_TIMEOUT_SECONDS
from lfops.core.grants import DEFAULT_PARALLEL
from lfops.core.models import IAM_ALLOWED_PRINCIPALS

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    envvar="AWS_PROFILE",
    help="AWS CLI profile (from ~/.aws/config)",
)

RegionOpt = typer.Option(
    None,
    "--region",
    "-r",
    envvar="AWS_REGION",
    help="AWS region (default: profile region, then us-west-2)",
)

CatalogOpt = typer.Option(
    ...,
    "--catalog",
    "-c",
    envvar="LFOPS_CATALOG",
    help="Federated Glue catalog name, or account_id:name",
)

ParallelOpt = typer.Option(
    DEFAULT_PARALLEL,
    "--parallel",
    "-n",
    envvar="LFOPS_PARALLEL",
    help="Number of grant calls in flight (max recommended: 100)",
)

PrincipalOpt = typer.Option(
    IAM_ALLOWED_PRINCIPALS,
    "--principal",
    envvar="LFOPS_PRINCIPAL",
    help="DataLakePrincipalIdentifier receiving the grants (role ARN, ...)",
)

PermissionOpt = typer.Option(
    ["ALL"],
    "--permission",
    help="Lake Formation permission to grant. This is reusable.",
)

DatabaseOpt = typer.Option(
    None,
    "--database",
    "-d",
    help="Regex filter on database names",
)

SelectOpt = typer.Option(
    False,
    "--select",
    help="Pick databases interactively before granting",
)

TimeoutOpt = typer.Option(
    DEFAULT_TIMEOUT_SECONDS,
    "--timeout",
    help="Per-call connect/read timeout in seconds",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which tables would be granted, but grant nothing",
)

QuietOpt = typer.Option(
    False,
    "--quiet",
    "-q",
    help="Hide the per-table completion lines",
)

StrictOpt = typer.Option(
    False,
    "--strict",
    help="Exit with code 1 when any table grant fails",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable debug logging",
)
