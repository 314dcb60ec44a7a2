"""Logging from config and env.

Levels (inclusive):
- ERROR: critical errors only
- WARNING: failed platform calls and ERROR
- INFO: mutations issued or skipped, WARNING, and ERROR
- DEBUG: payload dumps, extracted fields and all levels above

Configure via gatekeeper.yaml (logging.level, logging.format) or env
(LOGGING_LEVEL, LOGGING_FORMAT).
"""

import logging
import sys

from gatekeeper.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class GatekeeperLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig, debug: bool = False) -> None:
        """Store logging config; ``debug`` forces DEBUG (e.g. RUNNER_DEBUG=1)."""
        self._level = logging.DEBUG if debug else _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )


def report_failure(message: str, stream=None) -> None:
    """Print a GitHub Actions error annotation so the check shows the message."""
    out = stream or sys.stdout
    # Workflow commands need newlines escaped
    text = message.replace("\r", "").replace("\n", "%0A")
    out.write(f"::error::{text}\n")
    out.flush()
