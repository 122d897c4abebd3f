# ABOUTME: Logging setup shared by the CLI and long-running watch sessions.
# ABOUTME: Routes standard-library logging through a Rich handler on stderr.

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str | int = "WARNING") -> None:
    """Configure the root logger to write through Rich.

    Replaces any handlers installed by a previous call so repeated CLI
    invocations in one process (as in tests) do not stack handlers.

    Args:
        level: Logging level name or number.
    """
    if isinstance(level, str):
        level = level.upper()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if isinstance(existing, RichHandler):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
