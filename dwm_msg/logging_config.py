"""Logging configuration for dwm-msg.

Provides:
- Configurable log levels (WARNING, INFO, DEBUG)
- Frame-level IPC message logging
- Colored output when stderr is a terminal
"""

import logging
import sys
from typing import Optional


# Default log format
DEFAULT_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"

# Payload bytes shown in debug frame logs
PAYLOAD_PREVIEW_BYTES = 200


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Configure logging for dwm-msg.

    Args:
        verbose: Enable verbose logging (INFO level)
        debug: Enable debug logging (DEBUG level)

    Returns:
        Configured package logger

    Examples:
        >>> logger = setup_logging(debug=True)
        >>> logger.debug("Sent RUN_COMMAND frame")
        2026-10-18 10:30:45 [DEBUG] dwm_msg: Sent RUN_COMMAND frame
    """
    logger = logging.getLogger('dwm_msg')

    # Remove existing handlers
    logger.handlers.clear()

    if debug:
        logger.setLevel(logging.DEBUG)
        log_format = DEBUG_FORMAT
    elif verbose:
        logger.setLevel(logging.INFO)
        log_format = VERBOSE_FORMAT
    else:
        logger.setLevel(logging.WARNING)
        log_format = DEFAULT_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)

    # Use colored formatter if terminal supports it
    if sys.stderr.isatty():
        formatter = ColoredFormatter(log_format)
    else:
        formatter = logging.Formatter(log_format)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger below the package logger.

    Args:
        name: Child logger name, e.g. "transport" (default: package logger)
    """
    if name is None:
        return logging.getLogger('dwm_msg')
    return logging.getLogger(f'dwm_msg.{name}')


def log_ipc_message(direction: str, message_type: str, payload: bytes, logger: logging.Logger) -> None:
    """Log one IPC frame.

    Args:
        direction: "sent" or "received"
        message_type: Message type name
        payload: Raw payload bytes
        logger: Logger instance
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    preview = payload[:PAYLOAD_PREVIEW_BYTES].decode("utf-8", errors="replace")
    suffix = "..." if len(payload) > PAYLOAD_PREVIEW_BYTES else ""
    logger.debug(f"IPC {direction}: {message_type} ({len(payload)} bytes)")
    logger.debug(f"  Payload: {preview}{suffix}")
