"""File system scanner for FatFileFinder."""

import os
import re
import time
import logging
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Set, Tuple
from .models import MatchedFile, ScanResult, SearchCriteria, TraversalMode, file_extension
from .exceptions import FileSystemError, PathNotFoundError
from .error_handler import ErrorHandler


class FileScanner:
    """Walks a directory tree and collects the files matching the search criteria."""

    def __init__(self, progress_callback: Optional[Callable[[int, int], None]] = None,
                 config=None, error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the file scanner.

        Args:
            progress_callback: Optional callback function for progress reporting.
                               Called with (files_scanned, matches_found) parameters.
            config: Optional configuration object
            error_handler: Optional error handler collecting recoverable errors
        """
        # Import here to avoid circular imports
        from .config import get_config

        self.progress_callback = progress_callback
        self.config = config or get_config()
        self.error_handler = error_handler or ErrorHandler()
        self.logger = logging.getLogger(__name__)
        self._reset_stats()

    def _reset_stats(self):
        self.files_scanned = 0
        self.directories_scanned = 0
        self.matches_found = 0

    def find_matches(self, criteria: SearchCriteria) -> List[MatchedFile]:
        """Return every file matching the criteria, in traversal order."""
        return list(self.iter_matches(criteria))

    def find_first_match(self, criteria: SearchCriteria) -> Optional[MatchedFile]:
        """Return the first file matching the criteria, or None."""
        return next(self.iter_matches(criteria), None)

    def scan(self, criteria: SearchCriteria, mode: TraversalMode = TraversalMode.ALL) -> ScanResult:
        """
        Scan a directory tree for matching files.

        Args:
            criteria: Search criteria
            mode: ALL collects every match, FIRST stops at the first one

        Returns:
            ScanResult with the matches, recoverable errors and statistics
        """
        start_time = time.time()
        errors_before = len(self.error_handler.errors)

        if mode == TraversalMode.FIRST:
            first = self.find_first_match(criteria)
            matches = [first] if first else []
        else:
            matches = self.find_matches(criteria)

        errors = self.error_handler.errors[errors_before:]
        if errors:
            self.error_handler.log_error_summary(f"Scan of {criteria.root_path}")

        return ScanResult(
            matches=matches,
            errors=errors,
            directories_scanned=self.directories_scanned,
            files_scanned=self.files_scanned,
            duration=time.time() - start_time,
        )

    def matches(self, name: str, size: int, criteria: SearchCriteria,
                pattern: Optional[re.Pattern] = None) -> bool:
        """
        Check a file against the criteria.

        The size threshold is exclusive: a file of exactly ``min_size``
        bytes does not match. Extensions are compared case-sensitively.

        Args:
            name: Base name of the file
            size: File length in bytes
            criteria: Search criteria
            pattern: Precompiled ``criteria.pattern``; compiled on demand if omitted

        Returns:
            True if the file satisfies every active criterion
        """
        if criteria.pattern:
            if pattern is None:
                pattern = re.compile(criteria.pattern)
            if not pattern.search(name):
                return False

        if size <= criteria.min_size:
            return False

        if criteria.extensions and file_extension(name) not in criteria.extensions:
            return False

        return True

    def iter_matches(self, criteria: SearchCriteria) -> Iterator[MatchedFile]:
        """
        Generator that yields MatchedFile objects in traversal order.

        Files directly inside a directory are examined before any of its
        subdirectories are entered. Errors listing a directory or reading a
        file are reported and skipped.

        Args:
            criteria: Search criteria

        Yields:
            MatchedFile objects for each matching file found
        """
        self._reset_stats()
        root = Path(criteria.root_path)

        try:
            self._validate_root(root)
        except FileSystemError as e:
            self.error_handler.report(e, f"accessing directory '{root}'")
            return

        pattern = re.compile(criteria.pattern) if criteria.pattern else None
        visited: Set[Tuple[int, int]] = set()
        yield from self._walk(root, criteria, pattern, visited)

    def _walk(self, directory: Path, criteria: SearchCriteria, pattern: Optional[re.Pattern],
              visited: Set[Tuple[int, int]]) -> Iterator[MatchedFile]:
        try:
            stat_result = directory.stat()
            identity = (stat_result.st_dev, stat_result.st_ino)
            if identity in visited:
                self.logger.debug(f"Skipping already visited directory {directory}")
                return
            visited.add(identity)

            with os.scandir(directory) as iterator:
                entries = list(iterator)
        except OSError as e:
            self.error_handler.report(e, f"accessing directory '{directory}'")
            return

        self.directories_scanned += 1
        subdirectories = []

        for entry in entries:
            try:
                if entry.is_dir():
                    if entry.is_symlink() and not self.config.scan.follow_symlinks:
                        self.logger.debug(f"Not following directory symlink {entry.path}")
                    else:
                        subdirectories.append(Path(entry.path))
                    continue

                match = self._check_entry(entry, criteria, pattern)
            except OSError as e:
                self.error_handler.report(e, f"accessing file '{entry.path}'")
                continue

            if match:
                yield match

        for subdirectory in subdirectories:
            yield from self._walk(subdirectory, criteria, pattern, visited)

    def _check_entry(self, entry: os.DirEntry, criteria: SearchCriteria,
                     pattern: Optional[re.Pattern]) -> Optional[MatchedFile]:
        """Apply the criteria to one non-directory entry."""
        self.files_scanned += 1

        # Name first so filtered-out files are never stat'ed
        if pattern is not None and not pattern.search(entry.name):
            self._report_progress()
            return None

        size = entry.stat().st_size
        matched = self.matches(entry.name, size, criteria, pattern)
        if matched:
            self.matches_found += 1
        self._report_progress()

        return MatchedFile.create(Path(entry.path), size) if matched else None

    def _report_progress(self):
        if self.progress_callback:
            try:
                self.progress_callback(self.files_scanned, self.matches_found)
            except Exception as e:
                self.logger.warning(f"Progress callback error: {e}")

    def _validate_root(self, path: Path):
        """
        Validate that the scan root exists and is a directory.

        Args:
            path: Path to validate

        Raises:
            PathNotFoundError: If path doesn't exist
            FileSystemError: If path is not a directory or not accessible
        """
        try:
            if not path.exists():
                raise PathNotFoundError(f"Path does not exist: {path}")

            if not path.is_dir():
                raise FileSystemError(f"Path is not a directory: {path}")

        except OSError as e:
            self.error_handler.handle_file_system_error(e, path)
