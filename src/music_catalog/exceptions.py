"""Custom exceptions for music catalog."""

from typing import Optional


class MusicCatalogError(Exception):
    """Base exception for music catalog errors."""
    pass


class FormatError(MusicCatalogError):
    """Raised when a stored record or snapshot cannot be decoded or encoded."""

    def __init__(self, message: str, line_number: Optional[int] = None, source: Optional[str] = None):
        self.detail = message
        self.line_number = line_number
        self.source = source
        location = ""
        if source and line_number is not None:
            location = f"{source}:{line_number}: "
        elif source:
            location = f"{source}: "
        elif line_number is not None:
            location = f"line {line_number}: "
        super().__init__(f"{location}{message}")

    def at(self, line_number: int, source: Optional[str] = None) -> "FormatError":
        """Return a copy of this error located at a line of a source file."""
        return FormatError(self.detail, line_number=line_number, source=source)


class StorageError(MusicCatalogError):
    """Raised when a catalog file cannot be read or written."""
    pass


class ConfigurationError(MusicCatalogError):
    """Raised when there's an error in configuration."""
    pass
