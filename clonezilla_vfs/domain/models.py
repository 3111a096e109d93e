"""Minimal domain model for archive listings and disk-image containers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


# ==============================================================================
# Archive Listing Domain
# ==============================================================================


@dataclass(frozen=True)
class ArchiveEntry:
    """One file or folder reported by ``7z l -slt``.

    Entries are emitted once their record is terminated and never change
    afterwards.
    """

    name: str  # Path as reported by the tool
    is_folder: bool = False
    size: int | None = None  # Never parsed once the entry is known to be a folder
    modified: datetime | None = None
    created: datetime | None = None
    accessed: datetime | None = None

    @property
    def is_file(self) -> bool:
        return not self.is_folder


# ==============================================================================
# Container Domain
# ==============================================================================


class ContainerKind(Enum):
    """Closed set of container variants a path can be classified as."""

    CLONEZILLA_FOLDER = "clonezilla"  # Directory holding a clonezilla-img marker
    PARTCLONE_FILE = "partclone"  # Single partclone image, identified by magic
    IMAGE_FILE = "image"  # Any other regular file
