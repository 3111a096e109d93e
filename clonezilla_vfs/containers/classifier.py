"""Container classification by marker file or magic bytes."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from clonezilla_vfs.domain import ContainerKind
from clonezilla_vfs.exceptions import ClassificationError


# File that marks a directory as a Clonezilla image folder
CLONEZILLA_MAGIC_FILENAME = "clonezilla-img"

PARTCLONE_MAGIC = "partclone-image"
MAGIC_SIZE = 16

# partclone v2 image header: magic[16], partclone version[14], image
# version[4], endianness[2], then the filesystem name[16]
PARTCLONE_IMAGE_VERSION_OFFSET = 30
PARTCLONE_IMAGE_VERSION_V2 = "0002"
PARTCLONE_FS_OFFSET = 36
PARTCLONE_FS_SIZE = 16


def _decode_ascii(raw: bytes) -> str:
    return raw.decode("ascii", errors="replace").rstrip("\0")


def read_magic(path: str | os.PathLike) -> str:
    """First 16 bytes of a file as ASCII, trailing NULs removed."""
    with open(path, "rb") as f:
        return _decode_ascii(f.read(MAGIC_SIZE))


def is_clonezilla_folder(path: str | os.PathLike) -> bool:
    path = Path(path)
    return path.is_dir() and (path / CLONEZILLA_MAGIC_FILENAME).is_file()


def is_partclone_file(path: str | os.PathLike) -> bool:
    return Path(path).is_file() and read_magic(path) == PARTCLONE_MAGIC


def read_partclone_fstype(path: str | os.PathLike) -> Optional[str]:
    """Filesystem name stored in a partclone v2 header, None for other versions."""
    with open(path, "rb") as f:
        header = f.read(PARTCLONE_FS_OFFSET + PARTCLONE_FS_SIZE)
    if len(header) < PARTCLONE_FS_OFFSET + PARTCLONE_FS_SIZE:
        return None
    version = _decode_ascii(
        header[PARTCLONE_IMAGE_VERSION_OFFSET:PARTCLONE_IMAGE_VERSION_OFFSET + 4]
    )
    if version != PARTCLONE_IMAGE_VERSION_V2:
        return None
    fstype = _decode_ascii(header[PARTCLONE_FS_OFFSET:]).split("\0", 1)[0]
    return fstype or None


def classify(path: str | os.PathLike) -> ContainerKind:
    """Decide which container variant a path is.

    Checked in order, first match wins:
    1. Directory containing ``clonezilla-img`` -> CLONEZILLA_FOLDER
    2. File starting with the ``partclone-image`` magic -> PARTCLONE_FILE
    3. Any other file -> IMAGE_FILE

    Raises:
        ClassificationError: If none of the above applies
        OSError: If a file exists but its first bytes cannot be read
    """
    if is_clonezilla_folder(path):
        return ContainerKind.CLONEZILLA_FOLDER
    if is_partclone_file(path):
        return ContainerKind.PARTCLONE_FILE
    if Path(path).is_file():
        return ContainerKind.IMAGE_FILE

    raise ClassificationError(path)
