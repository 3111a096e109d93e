"""Domain models shared by the listing parser and the container layer."""

from __future__ import annotations

from .models import ArchiveEntry, ContainerKind


__all__ = [
    "ArchiveEntry",
    "ContainerKind",
]
