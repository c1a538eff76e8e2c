"""Custom exceptions for FatFileFinder."""


class FatFileFinderError(Exception):
    """Base exception for FatFileFinder errors."""
    pass


class FileSystemError(FatFileFinderError):
    """Exception for file system related errors."""
    pass


class AccessDeniedError(FileSystemError):
    """Exception for file permission errors."""
    pass


class PathNotFoundError(FileSystemError):
    """Exception for path not found errors."""
    pass


class ValidationError(FatFileFinderError):
    """Exception for invalid search criteria."""
    pass


class SizeFormatError(ValidationError):
    """Exception for size specifications that cannot be parsed."""
    pass


class ActionError(FatFileFinderError):
    """Base exception for post-scan actions."""
    pass


class ArchiveError(ActionError):
    """Exception for archive creation errors."""
    pass


class RelocationError(ActionError):
    """Exception for file relocation errors."""
    pass
