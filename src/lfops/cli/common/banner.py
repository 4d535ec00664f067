"""Startup banner for interactive terminals."""

from __future__ import annotations

import os

from rich.panel import Panel

from lfops.cli.common.output import console

_NO_BANNER_ENV = "LFOPS_NO_BANNER"


def banner_enabled() -> bool:
    """Return True when the banner should be shown."""
    disabled = os.getenv(_NO_BANNER_ENV, "").strip().lower()
    if disabled in {"1", "true", "yes"}:
        return False
    return console.is_terminal


def opt_print_banner() -> None:
    """Print the banner unless disabled or not attached to a terminal."""
    if not banner_enabled():
        return
    console.print(
        Panel.fit(
            "[title]lfops[/] - Lake Formation permissions for federated Glue catalogs",
            border_style="blue",
        )
    )
