"""Logging setup for validator-dashboard.

Everything goes to stderr: stdout is reserved for the JSON the CLI prints.
"""

import logging
import os
import sys

# Below DEBUG; also unmutes the HTTP and web3 loggers
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

NOISY_LOGGERS = ("urllib3", "web3")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Level names wrapped in ANSI colors, unless the stream is not a tty."""

    LEVEL_COLORS = {
        TRACE: "\033[90m",
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def __init__(self, *args, use_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if not self.use_color or color is None:
            return super().format(record)

        plain = record.levelname
        record.levelname = f"{color}{self.BOLD}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def resolve_level(log_level: str | None) -> int:
    """Map a level name (or LOG_LEVEL, default INFO) to a logging level."""
    name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if name == "TRACE":
        return TRACE
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str | None = None) -> None:
    """Configure the root logger.

    At DEBUG the urllib3 and web3 loggers are held at WARNING. Use TRACE
    to see everything.
    """
    level = resolve_level(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(
            fmt=LOG_FORMAT,
            datefmt=DATE_FORMAT,
            use_color=sys.stderr.isatty(),
        )
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)

    noisy_level = TRACE if level == TRACE else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Usually __name__ of the calling module

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
