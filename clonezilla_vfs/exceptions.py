"""Custom exceptions for image cataloging operations.

Exception Hierarchy:
    CatalogError (base)
        ├── UnsupportedPlatformError
        ├── ClassificationError
        ├── ListingParseError
        └── ArchiveToolError

Usage:
    from clonezilla_vfs.exceptions import ClassificationError

    if not path.exists():
        raise ClassificationError(path)
"""

from __future__ import annotations

from os import PathLike
from typing import Sequence


class CatalogError(Exception):
    """Base exception for all cataloging operations."""



class UnsupportedPlatformError(CatalogError):
    """No 7-Zip executable is known for the running operating system."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"OS not supported yet: {platform}")


class ClassificationError(CatalogError):
    """Path is not a Clonezilla folder, a partclone file or an image file."""

    def __init__(self, path: str | PathLike):
        self.path = path
        super().__init__(
            f"Could not determine if this is a Clonezilla folder, or a partclone file: {path}"
        )


class ListingParseError(CatalogError, ValueError):
    """A recognised listing field carried a value of the wrong type."""

    def __init__(self, field: str, value: str, entry_name: str | None = None):
        self.field = field
        self.value = value
        self.entry_name = entry_name
        msg = f"Malformed {field} value {value!r}"
        if entry_name:
            msg += f" for entry {entry_name}"
        super().__init__(msg)


class ArchiveToolError(CatalogError):
    """The archive tool exited with a failure status."""

    def __init__(self, command: Sequence[str], returncode: int | None):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"Command failed ({' '.join(self.command)}): exit status {returncode}"
        )
