"""Logging setup for the CLI.

Core modules log through the standard `logging` module; the CLI routes those
records to the shared rich console so warnings interleave cleanly with
progress output.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from lfops.cli.common.output import console


def configure_logging(verbose: bool = False) -> None:
    """Install a RichHandler on the `lfops` logger (idempotent)."""
    logger = logging.getLogger("lfops")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(
        RichHandler(
            console=console,
            show_path=verbose,
            show_time=verbose,
            markup=False,
            rich_tracebacks=verbose,
        )
    )
    # botocore is very chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
