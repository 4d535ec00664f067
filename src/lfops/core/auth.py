"""Authentication helpers for AWS.

This module centralizes creation of the boto3 session and clients used by
the tool and applies a few normalization rules: region fallback, HTTP pool
sizing for parallel grants and per-call timeouts. It also resolves the
`<account_id>:<catalog_name>` identifier that federated Glue catalogs use.
"""

from __future__ import annotations

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    ProfileNotFound,
)

from lfops.core.models import CatalogIdentifier

DEFAULT_REGION = "us-west-2"
DEFAULT_TIMEOUT_SECONDS = 20
_CLIENT_MAX_ATTEMPTS = 3


class AuthError(RuntimeError):
    """Raised when AWS credentials cannot be resolved or are rejected."""


def _format_auth_error(message: str, profile: str | None) -> str:
    """Return a user-friendly auth error message."""
    cmd = "aws configure"
    if profile:
        cmd = f"{cmd} --profile {profile}"
    return (
        f"AWS authentication failed: {message}\n"
        f"Check your AWS credentials with:\n  $ {cmd}"
    )


def get_session(profile: str | None = None, region: str | None = None) -> boto3.Session:
    """
    Create a boto3 session for the given profile and region.

    When no region is given, the session's configured region (profile,
    `AWS_REGION` / `AWS_DEFAULT_REGION`) is used, falling back to
    `us-west-2`.
    """
    kwargs = {"profile_name": profile} if profile else {}
    try:
        session = boto3.Session(**kwargs)
        resolved = region or session.region_name or DEFAULT_REGION
        if resolved == session.region_name:
            return session
        return boto3.Session(region_name=resolved, **kwargs)
    except ProfileNotFound as exc:
        raise AuthError(_format_auth_error(str(exc), profile)) from exc


def client_config(
    *, max_pool_connections: int = 10, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> Config:
    """
    Build the botocore client config.

    The HTTP pool must be at least as large as the number of worker threads,
    otherwise workers queue on the pool instead of the network call.
    """
    return Config(
        max_pool_connections=max(max_pool_connections, 10),
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"max_attempts": _CLIENT_MAX_ATTEMPTS, "mode": "standard"},
    )


def resolve_account_id(session: boto3.Session) -> str:
    """Return the AWS account id of the session's caller identity."""
    try:
        identity = session.client("sts").get_caller_identity()
    except NoCredentialsError as exc:
        raise AuthError(_format_auth_error("no credentials found", None)) from exc
    except (ClientError, BotoCoreError) as exc:
        raise AuthError(_format_auth_error(str(exc), None)) from exc
    account = identity.get("Account")
    if not account:
        raise AuthError("Could not determine AWS account id (Account is empty).")
    return account


def parse_catalog_id(value: str, *, account_id: str | None = None) -> CatalogIdentifier:
    """
    Parse a catalog given as `name` or `account_id:name`.

    A bare name needs `account_id`, normally resolved through STS.
    """
    raw = value.strip()
    if ":" in raw:
        account, _, name = raw.partition(":")
        if not account.isdigit() or not name or ":" in name:
            raise ValueError("Catalog must be in the form `name` or `account_id:name`.")
        return CatalogIdentifier(account_id=account, catalog_name=name)
    if not raw:
        raise ValueError("Catalog must be in the form `name` or `account_id:name`.")
    if not account_id:
        raise ValueError(f"An account id is required to resolve catalog '{raw}'.")
    return CatalogIdentifier(account_id=account_id, catalog_name=raw)
