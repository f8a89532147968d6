"""
Logging setup

Diagnostic records go through rich's handler so they share the console
with the operator-facing output.
"""

import logging

from rich.logging import RichHandler

from .rich_console import console

LOG_FORMAT = '%(message)s'


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger; DEBUG when verbose, WARNING otherwise"""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt='[%X]',
        handlers=[RichHandler(console=console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )
