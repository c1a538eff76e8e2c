"""Core data models and enums for FatFileFinder."""

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple

from .exceptions import ValidationError


class SizeFormat(Enum):
    """Accepted notations for the minimum size threshold."""
    BYTES = "bytes"
    UNITS = "units"


class TraversalMode(Enum):
    """How much of the tree a scan collects."""
    ALL = "all"
    FIRST = "first"


def normalize_extensions(text: Optional[str]) -> FrozenSet[str]:
    """
    Turn a comma-separated extension list into a set of dotted extensions.

    Blank items are dropped and case is preserved, so ``"txt, .LOG"``
    becomes ``{".txt", ".LOG"}``.
    """
    if not text:
        return frozenset()

    extensions = set()
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        extensions.add(item if item.startswith(".") else "." + item)
    return frozenset(extensions)


def file_extension(name: str) -> str:
    """
    Return the extension of a file name, including the leading dot.

    The extension starts at the last dot, so dotfiles such as ``.bashrc``
    have one. A name without a dot or ending in a dot has none.
    """
    index = name.rfind(".")
    if index == -1 or index == len(name) - 1:
        return ""
    return name[index:]


@dataclass(frozen=True)
class SearchCriteria:
    """Immutable criteria driving one scan."""
    root_path: str
    min_size: int = 0
    extensions: FrozenSet[str] = frozenset()
    pattern: str = ""

    def __post_init__(self):
        if self.min_size < 0:
            raise ValidationError(f"Minimum size must not be negative: {self.min_size}")

        if self.pattern:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValidationError(f"Invalid filename pattern '{self.pattern}': {e}")

        # Accept any iterable of extensions but store a frozenset
        if not isinstance(self.extensions, frozenset):
            object.__setattr__(self, "extensions", frozenset(self.extensions))

    @classmethod
    def from_cli(cls, directory: str, size_text: str, extensions_text: str = "",
                 pattern: str = "", size_format: SizeFormat = SizeFormat.UNITS) -> "SearchCriteria":
        """Build criteria from raw command line values."""
        from .sizes import parse_size

        return cls(
            root_path=directory,
            min_size=parse_size(size_text, size_format),
            extensions=normalize_extensions(extensions_text),
            pattern=pattern or "",
        )


@dataclass(frozen=True)
class MatchedFile:
    """A file that satisfied the search criteria."""
    path: str
    name: str
    size: int

    @property
    def extension(self) -> str:
        return file_extension(self.name)

    @classmethod
    def create(cls, file_path: Path, size: int) -> "MatchedFile":
        """Create a MatchedFile from a path and the size read during the scan."""
        return cls(
            path=os.path.abspath(file_path),
            name=file_path.name,
            size=size,
        )


@dataclass
class ScanResult:
    """Result of a directory scan operation."""
    matches: List[MatchedFile]
    errors: List[str] = field(default_factory=list)
    directories_scanned: int = 0
    files_scanned: int = 0
    duration: float = 0.0

    @property
    def total_size(self) -> int:
        return sum(match.size for match in self.matches)


@dataclass
class ArchiveResult:
    """Result of rolling matched files into a ZIP container."""
    archive_path: str
    archived: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.errors


@dataclass
class RelocationResult:
    """Result of moving matched files into the holding directory."""
    holding_dir: str
    moved: List[Tuple[str, str]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.errors
