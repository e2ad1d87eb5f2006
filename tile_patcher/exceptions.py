"""Custom exceptions for the tile patcher"""

from typing import Optional


class TilePatcherError(Exception):
    """Base exception for all tile patcher errors."""


class ScriptParseError(TilePatcherError):
    """Raised when an edit script line does not follow the grammar."""

    def __init__(self, message: str, line_number: Optional[int] = None,
                 line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)


class UnsupportedSourceError(TilePatcherError):
    """Raised for source files that are neither raw tiles nor rasters."""


class TileIOError(TilePatcherError):
    """Raised when a tile file cannot be opened, read or written."""


class ImagePreconditionError(TilePatcherError):
    """Raised when a raster cannot hold the requested tile."""
