"""Logging setup shared by the CLI and the web app."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Install the root handler once and apply the level on every call."""
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logging.basicConfig(format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(numeric)
    return root
