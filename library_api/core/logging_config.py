"""
Process-wide logging setup.

Everything goes to stdout; gunicorn / the container runtime collects it.
"""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the ``library_api`` logger.

    Safe to call more than once (e.g. one TestClient per test); only the
    level is updated on later calls.
    """
    global _configured

    logger = logging.getLogger("library_api")
    logger.setLevel(level.upper())
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    _configured = True
