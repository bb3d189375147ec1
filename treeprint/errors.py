"""Exception types raised by the fingerprinting engine."""

from __future__ import annotations


class TreeprintError(Exception):
    """Base class for fatal engine errors."""


class ConflictError(TreeprintError):
    """A directory occupies the path reserved for a manifest file."""

    def __init__(self, path: object):
        super().__init__(
            f"Cannot create fingerprints file `{path}`, a directory with the same path exists"
        )
        self.path = path


class NotFoundError(TreeprintError):
    """No manifest exists in the directory being verified."""

    def __init__(self, directory: object):
        super().__init__(
            f"Cannot verify files in `{directory}`, no fingerprints file found"
        )
        self.directory = directory


class ManifestFormatError(TreeprintError):
    """A manifest line cannot be parsed or a record cannot be encoded."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class ConfigError(TreeprintError):
    """Configuration file is unreadable or holds invalid values."""
