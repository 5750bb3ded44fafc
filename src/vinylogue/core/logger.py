"""
Logging configuration for Vinylogue.

All package modules log through ``logging.getLogger(__name__)`` under the
``vinylogue`` logger configured here. Output goes to stderr so that
``vinylogue card --output -`` can stream PNG bytes on stdout.
"""

import logging
import re
import sys
from typing import Optional
from .config import LOGGING_CONFIG

PACKAGE_LOGGER = "vinylogue"


class CredentialRedactingFilter(logging.Filter):
    """Masks Authorization header values that end up in a log message."""

    PATTERN = re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9._~+/=-]+")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.PATTERN.sub(r"\1 [REDACTED]", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: Optional[str] = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level name, case-insensitive. Unknown names fall back
            to INFO. Defaults to VINYLOGUE_LOG_LEVEL.
        enable_console: Whether to attach the stderr handler

    Returns:
        The ``vinylogue`` logger
    """
    log_level = getattr(logging, (level or LOGGING_CONFIG["LEVEL"]).upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)
    package_logger.handlers.clear()

    if enable_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(LOGGING_CONFIG["FORMAT"]))
        handler.addFilter(CredentialRedactingFilter())
        package_logger.addHandler(handler)

    package_logger.propagate = False

    return package_logger
