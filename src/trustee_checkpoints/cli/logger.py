"""
CLI logging setup.

Routes stdlib logging to stderr with the same [LEVEL] prefix style the
command output uses. Verbose mode shows info messages; otherwise only
warnings and errors.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = 'trustee_checkpoints'


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure the package logger for command-line use.

    Idempotent: repeated calls replace the handler instead of stacking them.

    Args:
        verbose: If True, show info messages. If False, only warnings/errors.

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, '_trustee_cli', False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    handler._trustee_cli = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    logger.propagate = False
    return logger
