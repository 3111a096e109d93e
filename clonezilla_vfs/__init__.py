"""Detection and cataloging of Clonezilla, partclone and raw disk images."""

from .__version__ import __version__

__all__ = ["__version__"]
