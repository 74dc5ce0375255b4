"""Logging configuration for the command line."""

import logging


def configure_logging(verbose: bool = False, quiet: bool = False, debug: bool = False):
    """Route log records to stderr at the level the flags ask for."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
    )
