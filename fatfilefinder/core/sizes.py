"""Size specification parsing and formatting."""

import re

from .exceptions import SizeFormatError
from .models import SizeFormat


UNIT_MULTIPLIERS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}

_DIGITS = re.compile(r"[0-9]+")


def _parse_integer(text: str, original: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise SizeFormatError(
            f"Invalid size format '{original}'. "
            "Please provide the size in bytes, optionally followed by KB, MB or GB."
        )
    return int(text)


def parse_size(text: str, size_format: SizeFormat = SizeFormat.UNITS) -> int:
    """
    Parse a minimum size specification into a byte count.

    Args:
        text: Raw size input, e.g. ``"2048"`` or ``"10MB"``
        size_format: BYTES accepts plain integers only, UNITS also accepts
                     a trailing KB, MB or GB suffix (binary multiples)

    Returns:
        Size in bytes

    Raises:
        SizeFormatError: If the input cannot be parsed
    """
    if text is None:
        raise SizeFormatError("Size specification is required")

    normalized = text.strip()

    if size_format == SizeFormat.BYTES:
        return _parse_integer(normalized, text)

    normalized = normalized.upper()
    multiplier = 1
    for suffix, factor in UNIT_MULTIPLIERS.items():
        if normalized.endswith(suffix):
            multiplier = factor
            normalized = normalized[:-len(suffix)].strip()
            break

    return _parse_integer(normalized, text) * multiplier


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes < 1024:
        return f"{size_bytes}B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f}KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f}MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f}GB"
