"""Data models for partition containers.

A container is exactly one of ClonezillaImage, PartcloneFile or ImageFile.
Code that needs per-variant behavior dispatches on ``container.kind``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Protocol, Union

from clonezilla_vfs.domain import ContainerKind

if TYPE_CHECKING:
    from .cache import ClonezillaCacheManager


RANDOM_SEEK_BUFFER_SIZE = 64 * 1024
SEQUENTIAL_BUFFER_SIZE = 4 * 1024 * 1024


def read_buffer_size(will_perform_random_seeking: bool) -> int:
    """Small reads for random access, large ones for streaming."""
    if will_perform_random_seeking:
        return RANDOM_SEEK_BUFFER_SIZE
    return SEQUENTIAL_BUFFER_SIZE


class VirtualFileSystem(Protocol):
    """Where opened containers get exposed for browsing."""

    def add_container(self, container: Any, mount_path: str) -> None:
        ...


@dataclass(frozen=True)
class Partition:
    name: str  # e.g., "sda1"
    image_files: list[Path]
    fstype: Optional[str] = None  # e.g., "ext4"; None for raw images
    compression: Optional[str] = None  # "gzip", "zstd", ... or None

    @property
    def compressed(self) -> bool:
        return self.compression is not None


class _ContainerInfo:
    """Accessors shared by every container variant."""

    partitions: list[Partition]
    will_perform_random_seeking: bool

    @property
    def partition_names(self) -> list[str]:
        return [partition.name for partition in self.partitions]

    @property
    def read_buffer_size(self) -> int:
        return read_buffer_size(self.will_perform_random_seeking)


@dataclass(frozen=True)
class ClonezillaImage(_ContainerInfo):
    """A Clonezilla image folder (one folder per backed-up disk)."""

    path: Path
    container_name: str
    partitions: list[Partition]
    cache_manager: ClonezillaCacheManager
    will_perform_random_seeking: bool = False
    partition_table: Optional[Path] = None
    kind: ContainerKind = field(default=ContainerKind.CLONEZILLA_FOLDER, init=False)


@dataclass(frozen=True)
class PartcloneFile(_ContainerInfo):
    """A single partition stored as one partclone image file."""

    path: Path
    container_name: str
    partitions: list[Partition]
    will_perform_random_seeking: bool = False
    kind: ContainerKind = field(default=ContainerKind.PARTCLONE_FILE, init=False)


@dataclass(frozen=True)
class ImageFile(_ContainerInfo):
    """Any other image file, opened through the virtual filesystem."""

    path: Path
    container_name: str
    partitions: list[Partition]
    will_perform_random_seeking: bool = False
    vfs: Optional[VirtualFileSystem] = None
    kind: ContainerKind = field(default=ContainerKind.IMAGE_FILE, init=False)


PartitionContainer = Union[ClonezillaImage, PartcloneFile, ImageFile]
