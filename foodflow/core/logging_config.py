"""
Logging setup for the API process.

``setup_logging`` attaches a console handler to the root logger.  Modules
log through ``logging.getLogger(__name__)`` and never add handlers
themselves.
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger.

    The level is always applied; the handler is only attached when the
    root logger has none yet, so repeated ``create_app`` calls do not
    duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
