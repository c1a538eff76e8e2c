"""FatFileFinder - find large files in a directory tree and archive or move them."""

__version__ = "0.1.0"
__author__ = "FatFileFinder Team"
__description__ = "Find large files in a directory tree and archive or move them"

# Import main components for programmatic access
from .core.models import MatchedFile, SearchCriteria, SizeFormat, TraversalMode
from .core.scanner import FileScanner
from .core.actions import ActionExecutor
from .cli.main import cli

__all__ = [
    "MatchedFile",
    "SearchCriteria",
    "SizeFormat",
    "TraversalMode",
    "FileScanner",
    "ActionExecutor",
    "cli"
]
