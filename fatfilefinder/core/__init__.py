"""Core engine for scanning directory trees and acting on the matches."""

from .models import (
    SearchCriteria, MatchedFile, ScanResult, ArchiveResult, RelocationResult,
    SizeFormat, TraversalMode, normalize_extensions, file_extension
)
from .sizes import parse_size, format_size
from .scanner import FileScanner
from .actions import ActionExecutor

__all__ = [
    "SearchCriteria",
    "MatchedFile",
    "ScanResult",
    "ArchiveResult",
    "RelocationResult",
    "SizeFormat",
    "TraversalMode",
    "normalize_extensions",
    "file_extension",
    "parse_size",
    "format_size",
    "FileScanner",
    "ActionExecutor"
]
