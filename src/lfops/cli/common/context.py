"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lfops.cli.common.exits import die
from lfops.core.adapters.glue import GlueCatalogAdapter
from lfops.core.adapters.lakeformation import LakeFormationAdapter
from lfops.core.auth import (
    DEFAULT_TIMEOUT_SECONDS,
    AuthError,
    client_config,
    get_session,
    resolve_account_id,
)


@dataclass
class LFAppContext:
    """Application context holding the AWS session and Glue / Lake Formation adapters."""

    profile: str | None
    region: str
    account_id: str
    session: Any
    glue: GlueCatalogAdapter
    lakeformation: LakeFormationAdapter


def build_context(
    profile: str | None,
    region: str | None,
    *,
    max_parallel: int = 10,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> LFAppContext:
    """Build and return the application context with AWS session and adapters.

    Args:
        profile: Optional AWS profile name to use for authentication.
        region: Optional AWS region; falls back to the profile region.
        max_parallel: Worker count the HTTP connection pool must support.
        timeout: Per-call connect/read timeout in seconds.

    Returns:
        LFAppContext: Application context with configured adapters.
    """
    try:
        session = get_session(profile, region)
        account_id = resolve_account_id(session)
    except AuthError as exc:
        die(str(exc), code=1)

    config = client_config(max_pool_connections=max_parallel, timeout=timeout)
    glue = GlueCatalogAdapter(session.client("glue", config=config))
    lakeformation = LakeFormationAdapter(session.client("lakeformation", config=config))
    return LFAppContext(
        profile=profile,
        region=session.region_name,
        account_id=account_id,
        session=session,
        glue=glue,
        lakeformation=lakeformation,
    )
