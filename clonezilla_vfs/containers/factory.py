"""Build partition containers from paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from clonezilla_vfs.domain import ContainerKind
from clonezilla_vfs.logging import LoggerFactory

from .cache import ClonezillaCacheManager
from .classifier import classify, read_partclone_fstype
from .clonezilla import build_partition, find_partition_table, get_compression_type, read_parts
from .models import (
    ClonezillaImage,
    ImageFile,
    PartcloneFile,
    Partition,
    PartitionContainer,
    VirtualFileSystem,
)


def _wanted(name: str, partitions_to_load: Optional[Iterable[str]]) -> bool:
    if not partitions_to_load:
        return True
    return name in partitions_to_load


def _load_clonezilla_image(
    path: Path,
    cache_manager: ClonezillaCacheManager,
    partitions_to_load: Optional[list[str]],
    will_perform_random_seeking: bool,
) -> ClonezillaImage:
    log = LoggerFactory.for_containers()
    partitions: list[Partition] = []
    for part_name in read_parts(path):
        if not _wanted(part_name, partitions_to_load):
            log.debug(f"Skipping partition {part_name} of {path}")
            continue
        partition = build_partition(path, part_name)
        if partition is None:
            log.warning(f"No image files found for partition {part_name} in {path}")
            continue
        partitions.append(partition)

    return ClonezillaImage(
        path=path,
        container_name=path.name,
        partitions=partitions,
        cache_manager=cache_manager,
        will_perform_random_seeking=will_perform_random_seeking,
        partition_table=find_partition_table(path),
    )


def _single_partition(
    path: Path,
    fstype: Optional[str],
    partitions_to_load: Optional[list[str]],
) -> list[Partition]:
    partition = Partition(
        name=path.name.split(".", 1)[0] or path.name,
        image_files=[path],
        fstype=fstype,
        compression=get_compression_type([path]),
    )
    if not _wanted(partition.name, partitions_to_load):
        return []
    return [partition]


def build_container(
    path: str | os.PathLike,
    kind: ContainerKind,
    cache_folder: str | os.PathLike,
    partitions_to_load: Optional[list[str]] = None,
    will_perform_random_seeking: bool = False,
    vfs: Optional[VirtualFileSystem] = None,
) -> PartitionContainer:
    """Construct the container for an already classified path.

    Only Clonezilla folders get a cache manager, scoped to the folder and
    ``cache_folder``.
    """
    path = Path(path)

    if kind is ContainerKind.CLONEZILLA_FOLDER:
        cache_manager = ClonezillaCacheManager(path, cache_folder)
        return _load_clonezilla_image(
            path, cache_manager, partitions_to_load, will_perform_random_seeking
        )
    if kind is ContainerKind.PARTCLONE_FILE:
        return PartcloneFile(
            path=path,
            container_name=path.name,
            partitions=_single_partition(
                path, read_partclone_fstype(path), partitions_to_load
            ),
            will_perform_random_seeking=will_perform_random_seeking,
        )
    if kind is ContainerKind.IMAGE_FILE:
        return ImageFile(
            path=path,
            container_name=path.name,
            partitions=_single_partition(path, None, partitions_to_load),
            will_perform_random_seeking=will_perform_random_seeking,
            vfs=vfs,
        )
    raise ValueError(f"Unknown container kind: {kind!r}")


def from_path(
    path: str | os.PathLike,
    cache_folder: str | os.PathLike,
    partitions_to_load: Optional[list[str]] = None,
    will_perform_random_seeking: bool = False,
    vfs: Optional[VirtualFileSystem] = None,
) -> PartitionContainer:
    """Classify a path and construct its container.

    Raises:
        ClassificationError: If the path is not a supported container
    """
    kind = classify(path)
    LoggerFactory.for_containers().info(f"{path} classified as {kind.value}")
    return build_container(
        path, kind, cache_folder, partitions_to_load, will_perform_random_seeking, vfs
    )


def from_paths(
    paths: Iterable[str | os.PathLike],
    cache_folder: str | os.PathLike,
    partitions_to_load: Optional[list[str]] = None,
    will_perform_random_seeking: bool = False,
    vfs: Optional[VirtualFileSystem] = None,
) -> list[PartitionContainer]:
    """Construct one container per path; the first failure aborts the batch."""
    return [
        from_path(path, cache_folder, partitions_to_load, will_perform_random_seeking, vfs)
        for path in paths
    ]
