"""Logging utilities.

- One handler on the package logger; module loggers propagate to it.
- The handler writes to stderr so log lines never mix into rendered responses on stdout.
- Baseline level comes from DEEPCLI_LOG_LEVEL (default WARNING); -v / -vv lower it.
"""
from __future__ import annotations

import logging
import os
import sys

PACKAGE_LOGGER = __name__.rpartition(".")[0]

_DEFAULT_LEVEL = os.environ.get("DEEPCLI_LOG_LEVEL", "WARNING").upper()

_VERBOSITY_LEVELS = {1: logging.INFO, 2: logging.DEBUG}

def _package_logger() -> logging.Logger:
    root = logging.getLogger(PACKAGE_LOGGER)

    # If already configured elsewhere, do not attach handlers again.
    if root.handlers:
        return root

    root.setLevel(_DEFAULT_LEVEL)

    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter("[%(levelname)s] %(name)s:%(lineno)d - %(message)s"))
    root.addHandler(h)
    return root

def get_logger(name: str) -> logging.Logger:
    _package_logger()
    return logging.getLogger(name)

def set_verbosity(verbose: int) -> int:
    """Apply the CLI -v count. Returns the effective package log level."""
    root = _package_logger()
    if verbose > 0:
        root.setLevel(_VERBOSITY_LEVELS.get(min(verbose, 2)))
    return root.level

def log_step(logger: logging.Logger, step: str, msg: str):
    logger.info("[STEP %s] %s", step, msg)
