"""Clonezilla image folder helpers: parts list, partition image volumes, compression."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional

from .models import Partition


PARTS_FILENAME = "parts"
PARTITION_TABLE_SUFFIXES = ("-pt.sf", "-pt.sgdisk", "-pt.parted")

COMPRESSION_SUFFIXES = {
    ".zst": "zstd",
    ".gz": "gzip",
    ".bz2": "bzip2",
    ".xz": "xz",
    ".lz4": "lz4",
}


def read_parts(image_dir: Path) -> list[str]:
    """Partition names listed in the ``parts`` file, in order.

    Returns an empty list when the file is missing.
    """
    parts_path = image_dir / PARTS_FILENAME
    if not parts_path.is_file():
        return []
    return [item.strip() for item in parts_path.read_text().split() if item.strip()]


def find_partition_table(image_dir: Path) -> Optional[Path]:
    """Find the partition table file in a Clonezilla image directory."""
    for suffix in PARTITION_TABLE_SUFFIXES:
        matches = sorted(image_dir.glob(f"*{suffix}"))
        if matches:
            return matches[0]
    return None


def extract_volume_suffix(path: Path) -> Optional[str]:
    """Extract the two-letter volume suffix from a file path (e.g., 'aa', 'ab')."""
    match = re.search(r"\.([a-z]{2})$", path.name)
    if not match:
        return None
    return match.group(1)


def volume_suffix_index(suffix: Optional[str]) -> int:
    if not suffix:
        return -1
    first = ord(suffix[0]) - ord("a")
    second = ord(suffix[1]) - ord("a")
    if first < 0 or first > 25 or second < 0 or second > 25:
        return -1
    return first * 26 + second


def sorted_clonezilla_volumes(paths: Iterable[Path]) -> list[Path]:
    """Sort split image volumes (.aa, .ab, ...) in restore order."""

    def sort_key(path: Path) -> tuple[str, int, str]:
        suffix = extract_volume_suffix(path)
        base = path.name
        if suffix:
            base = base[: -len(suffix) - 1]
        return (base, volume_suffix_index(suffix), path.name)

    return sorted(set(paths), key=sort_key)


def extract_partclone_fstype(part_name: str, file_name: str) -> Optional[str]:
    """Extract filesystem type from partclone image filename.

    Example: sda1.ext4-ptcl-img.gz.aa -> "ext4"
    """
    match = re.search(rf"{re.escape(part_name)}\.(.+?)-ptcl-img", file_name)
    if not match:
        return None
    return match.group(1)


def get_compression_type(image_files: Iterable[Path]) -> Optional[str]:
    """Detect compression from the file suffixes, None if uncompressed."""
    for image_file in image_files:
        for suffix in image_file.suffixes:
            if suffix in COMPRESSION_SUFFIXES:
                return COMPRESSION_SUFFIXES[suffix]
    return None


def find_partclone_files(image_dir: Path, part_name: str) -> list[Path]:
    return sorted_clonezilla_volumes(image_dir.glob(f"{part_name}.*-ptcl-img*"))


def find_dd_files(image_dir: Path, part_name: str) -> list[Path]:
    return sorted_clonezilla_volumes(image_dir.glob(f"{part_name}.dd-img*"))


def build_partition(image_dir: Path, part_name: str) -> Optional[Partition]:
    """Describe one partition of an image folder from its image volumes.

    Partclone volumes are preferred over raw dd volumes. Returns None when
    the folder holds neither.
    """
    partclone_files = find_partclone_files(image_dir, part_name)
    if partclone_files:
        return Partition(
            name=part_name,
            image_files=partclone_files,
            fstype=extract_partclone_fstype(part_name, partclone_files[0].name),
            compression=get_compression_type(partclone_files),
        )

    dd_files = find_dd_files(image_dir, part_name)
    if dd_files:
        return Partition(
            name=part_name,
            image_files=dd_files,
            fstype=None,
            compression=get_compression_type(dd_files),
        )
    return None
