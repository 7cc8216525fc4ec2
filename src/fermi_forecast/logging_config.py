"""Shared logging configuration for fermi-forecast scripts.

Library modules only create loggers; call ``configure_logging()`` once from a
script or application entry point to see their output. Calling it again is a
no-op when the root logger already has handlers.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str | None = None) -> None:
    """Configure the root logger with a console handler.

    Args:
        level: Logging level; defaults to ``FERMI_LOG_LEVEL`` or INFO
    """
    root = logging.getLogger()
    if root.handlers:
        return

    if level is None:
        level = os.environ.get("FERMI_LOG_LEVEL", "INFO").upper()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)
    root.setLevel(level)
