"""
Logging setup shared by every module in the package.

Usage:
    from docrouter_nodes import logging
    logger = logging.getLogger(__name__)
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("docrouter_nodes")
    root.addHandler(handler)
    root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    root.propagate = False
    _configured = True


def getLogger(name: str) -> logging.Logger:
    """Return a logger under the package namespace with the shared handler attached"""
    _configure()
    if not name.startswith("docrouter_nodes"):
        name = f"docrouter_nodes.{name}"
    return logging.getLogger(name)
