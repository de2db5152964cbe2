"""
Console logging setup for scripts.

Library modules only create loggers (`logging.getLogger(__name__)`); handlers
are installed once, here, by entry points.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route all logging through a rich console handler (DEBUG if verbose)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # keep connection-pool chatter out of verbose runs
    logging.getLogger("urllib3").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
