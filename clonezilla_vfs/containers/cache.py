"""Cache folder management for Clonezilla image folders."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from clonezilla_vfs.logging import LoggerFactory


log = LoggerFactory.for_cache()


class ClonezillaCacheManager:
    """Owns the cache folder of one Clonezilla image.

    Each image gets its own sub folder below ``cache_folder``, named after the
    image and a digest of its absolute path so two images with the same
    folder name never share a cache. Nothing is created until
    ``ensure_cache_folder()`` is called.
    """

    def __init__(self, source_path: str | os.PathLike, cache_folder: str | os.PathLike):
        self.source_path = Path(source_path)
        self.cache_folder = Path(cache_folder)

    @property
    def image_cache_folder(self) -> Path:
        absolute = os.path.abspath(self.source_path)
        digest = hashlib.sha256(absolute.encode("utf-8")).hexdigest()[:12]
        return self.cache_folder / f"{self.source_path.name}-{digest}"

    def partition_cache_path(self, partition_name: str) -> Path:
        return self.image_cache_folder / partition_name

    def ensure_cache_folder(self) -> Path:
        folder = self.image_cache_folder
        if not folder.is_dir():
            log.debug(f"Creating cache folder {folder} for {self.source_path}")
            folder.mkdir(parents=True, exist_ok=True)
        return folder

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(source_path={str(self.source_path)!r}, "
            f"cache_folder={str(self.cache_folder)!r})"
        )
