"""Error handling utilities for FatFileFinder."""

import errno
import logging
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import (
    FatFileFinderError, FileSystemError, AccessDeniedError, PathNotFoundError
)


class ErrorHandler:
    """Centralized error reporting for recoverable and fatal errors."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize error handler.

        Args:
            logger: Logger instance to use for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)
        self.errors: List[str] = []
        self.error_counts = {}

    def classify_os_error(self, error: OSError, file_path: Union[str, Path, None] = None) -> FileSystemError:
        """
        Map an OSError onto the FatFileFinder exception hierarchy.

        Args:
            error: The exception that occurred
            file_path: Path where the error occurred

        Returns:
            The matching FileSystemError subclass instance
        """
        location = file_path or getattr(error, "filename", None) or "unknown"
        code = getattr(error, "errno", None)

        if code in (errno.EACCES, errno.EPERM):
            return AccessDeniedError(f"Permission denied: {location}")
        elif code == errno.ENOENT:
            return PathNotFoundError(f"Path not found: {location}")
        elif code == errno.ENOSPC:
            return FileSystemError("No space left on device")
        else:
            return FileSystemError(f"File system error at {location}: {error}")

    def handle_file_system_error(self, error: Exception, file_path: Union[str, Path]) -> None:
        """
        Log a file system error and raise it as a FatFileFinder exception.

        Args:
            error: The exception that occurred
            file_path: Path where the error occurred

        Raises:
            FileSystemError: Always, as the classified exception
        """
        if isinstance(error, FatFileFinderError):
            raise error

        if isinstance(error, OSError):
            classified = self.classify_os_error(error, file_path)
        else:
            classified = FileSystemError(f"Unexpected file system error: {error}")

        self.logger.debug(f"File system error at {file_path}: {error}")
        raise classified from error

    def report(self, error: Exception, context: str) -> str:
        """
        Report a recoverable error and let the caller carry on.

        One ERROR record is logged per call. The traceback is attached only
        when DEBUG logging is enabled so the default output stays one line
        per error.

        Args:
            error: The exception that occurred
            context: What was being done, e.g. "accessing directory '/x'"

        Returns:
            The message that was logged
        """
        message = f"Error {context}: {error}"
        debug = self.logger.isEnabledFor(logging.DEBUG)
        self.logger.error(message, exc_info=error if debug else None)

        if isinstance(error, OSError):
            error_type = type(self.classify_os_error(error)).__name__
        else:
            error_type = type(error).__name__
        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1
        self.errors.append(message)
        return message

    def log_error_summary(self, operation: str = "operation"):
        """
        Log a summary of the errors reported so far.

        Args:
            operation: Description of the operation
        """
        if not self.errors:
            return

        self.logger.warning(f"{operation} completed with {len(self.errors)} error(s):")
        for error_type, count in self.error_counts.items():
            self.logger.warning(f"  {error_type}: {count} occurrences")
