"""
utils.py

Logging setup shared by the command-line entry points.
"""

import logging
import sys


def setup_logging(level=logging.WARNING):
    """Configures basic logging to stderr."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
    )
