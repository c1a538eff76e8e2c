"""Logging configuration and utilities for FatFileFinder."""

import logging
import logging.handlers
import sys
from typing import Optional
from .config import LoggingConfig, get_config


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Format log record with a colored level name."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = levelname


class LoggingManager:
    """Manages logging configuration and setup."""

    def __init__(self, config: Optional[LoggingConfig] = None):
        """
        Initialize logging manager.

        Args:
            config: Logging configuration. If None, uses global config.
        """
        self.config = config or get_config().logging
        self.handlers = {}
        self._setup_root_logger()

    def _setup_root_logger(self):
        """Set up the root logger with configured handlers."""
        root_logger = logging.getLogger()

        level = logging.getLevelName(str(self.config.level).upper())
        if isinstance(level, int):
            root_logger.setLevel(level)
        else:
            root_logger.setLevel(logging.WARNING)
            root_logger.warning(f"Invalid log level '{self.config.level}', using WARNING")

        if self.config.console_enabled:
            console_handler = self._create_console_handler()
            root_logger.addHandler(console_handler)
            self.handlers['console'] = console_handler

        if self.config.file_enabled and self.config.file_path:
            file_handler = self._create_file_handler()
            if file_handler:
                root_logger.addHandler(file_handler)
                self.handlers['file'] = file_handler

    def close(self):
        """Detach and close the handlers this manager installed."""
        root_logger = logging.getLogger()
        for handler in self.handlers.values():
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers = {}

    def _create_console_handler(self) -> logging.Handler:
        """Create and configure the stderr handler."""
        handler = logging.StreamHandler(sys.stderr)

        # Only colorize when a terminal is attached
        if getattr(sys.stderr, "isatty", lambda: False)():
            handler.setFormatter(ColoredFormatter(self.config.format))
        else:
            handler.setFormatter(logging.Formatter(self.config.format))

        return handler

    def _create_file_handler(self) -> Optional[logging.Handler]:
        """Create and configure rotating file handler."""
        try:
            # Ensure log directory exists
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)

            max_bytes = self.config.file_max_size_mb * 1024 * 1024
            handler = logging.handlers.RotatingFileHandler(
                self.config.file_path,
                maxBytes=max_bytes,
                backupCount=self.config.file_backup_count
            )
            handler.setFormatter(logging.Formatter(self.config.format))

            return handler

        except OSError as e:
            # If file handler creation fails, log to console
            logging.getLogger(__name__).error(f"Failed to create file handler: {e}")
            return None


# Global logging manager instance
_logging_manager = None


def setup_logging(config: Optional[LoggingConfig] = None) -> LoggingManager:
    """
    Set up global logging configuration.

    Args:
        config: Optional logging configuration

    Returns:
        LoggingManager instance
    """
    global _logging_manager
    if _logging_manager is not None:
        _logging_manager.close()
    _logging_manager = LoggingManager(config)
    return _logging_manager
