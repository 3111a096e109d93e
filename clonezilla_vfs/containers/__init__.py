"""Partition containers: classification and construction.

Main Functions:
    - classify(): Decide which container variant a path is
    - from_path(): Classify a path and construct its container
    - from_paths(): Construct containers for several paths, all or nothing

Data Models:
    - ClonezillaImage: Clonezilla image folder (identified by clonezilla-img)
    - PartcloneFile: Single partclone image (identified by its magic)
    - ImageFile: Any other image file
    - Partition: One partition and its image volumes
"""
from .cache import ClonezillaCacheManager
from .classifier import (
    CLONEZILLA_MAGIC_FILENAME,
    PARTCLONE_MAGIC,
    classify,
    is_clonezilla_folder,
    is_partclone_file,
    read_magic,
)
from .factory import build_container, from_path, from_paths
from .models import (
    ClonezillaImage,
    ImageFile,
    PartcloneFile,
    Partition,
    PartitionContainer,
    VirtualFileSystem,
)

__all__ = [
    # Main functions
    "classify",
    "from_path",
    "from_paths",
    "build_container",
    # Helper functions
    "is_clonezilla_folder",
    "is_partclone_file",
    "read_magic",
    "CLONEZILLA_MAGIC_FILENAME",
    "PARTCLONE_MAGIC",
    # Data models
    "ClonezillaCacheManager",
    "ClonezillaImage",
    "ImageFile",
    "PartcloneFile",
    "Partition",
    "PartitionContainer",
    "VirtualFileSystem",
]
