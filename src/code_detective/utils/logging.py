"""Standardized logging for the CLI and library modules.

Library modules log through get_logger(__name__), which places them under
the "code_detective" logger configured here. DetectiveLogger.structured()
attaches extra fields that the JSON formatter merges into each entry.

Three output modes:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] logger: message
- CI/JSON mode: {"level":"...","ts":"...","logger":"...","msg":"..."}

Log output goes to stderr so command output on stdout stays machine-readable.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "code_detective"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    GRAY = "\033[90m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED,
}


def _is_tty(stream: TextIO | None) -> bool:
    return stream is not None and hasattr(stream, "isatty") and stream.isatty()


class ConsoleFormatter(logging.Formatter):
    """Formatter for human and verbose console output."""

    def __init__(self, verbose: bool = False, use_colors: bool = False) -> None:
        """Initialize console formatter.

        Args:
            verbose: Include a timestamp and the logger name
            use_colors: Wrap the level tag in ANSI colors
        """
        super().__init__()
        self.verbose = verbose
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        tag = f"[{record.levelname}]"
        if self.use_colors:
            color = LEVEL_COLORS.get(record.levelno, Colors.RESET)
            tag = f"{color}{tag}{Colors.RESET}"

        message = record.getMessage()
        if self.verbose:
            timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
            line = f"{tag}[{timestamp}] {record.name}: {message}"
        else:
            line = f"{tag} {message}"

        if record.exc_info and self.verbose:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable).

    Structured fields passed as ``extra={"data": {...}}`` are merged into the
    entry.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }

        data = getattr(record, "data", None)
        if isinstance(data, dict):
            entry.update(data)

        return json.dumps(entry, default=str)


class DetectiveLogger(logging.Logger):
    """Logger with structured logging support."""

    def structured(self, level: int, msg: str, **kwargs: Any) -> None:
        """Log a message with additional structured data.

        Args:
            level: Log level
            msg: Log message
            **kwargs: Additional fields included in JSON output
        """
        if not self.isEnabledFor(level):
            return
        record = self.makeRecord(self.name, level, "(unknown)", 0, msg, (), None)
        if kwargs:
            record.data = kwargs  # type: ignore[attr-defined]
        self.handle(record)


# Loggers created after this import are DetectiveLogger instances
logging.setLoggerClass(DetectiveLogger)


def get_logger(name: str = ROOT_LOGGER) -> DetectiveLogger:
    """Get a logger under the Code Detective hierarchy."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Configure the Code Detective logger.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr)
    """
    stream = stream or sys.stderr

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    if mode == LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = ConsoleFormatter(
            verbose=mode == LogMode.VERBOSE,
            use_colors=_is_tty(stream),
        )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
) -> None:
    """Configure logging based on CLI flags.

    Args:
        verbose: Enable verbose mode with timestamps
        quiet: Suppress info messages (warnings and errors only)
        ci: Enable JSON output for CI/CD
    """
    if ci:
        mode = LogMode.JSON
    elif verbose:
        mode = LogMode.VERBOSE
    else:
        mode = LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(mode=mode, level=level)
