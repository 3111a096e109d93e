"""Parser for the technical listing printed by ``7z l -slt``.

The listing is a sequence of records separated by blank lines, each record
starting with a ``Path = `` line followed by ``Label = value`` lines::

    Path = docs/readme.txt
    Folder = -
    Size = 1024
    Modified = 2024-01-01 00:00:00.1234567

Only blank-line terminated records are emitted. A ``Path = `` line that
arrives while another record is open discards that record.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, Optional

from clonezilla_vfs.domain import ArchiveEntry
from clonezilla_vfs.exceptions import ListingParseError


PATH_PREFIX = "Path = "
FOLDER_MARKER = "Folder = +"
SIZE_PREFIX = "Size = "
MODIFIED_PREFIX = "Modified = "
CREATED_PREFIX = "Created = "
ACCESSED_PREFIX = "Accessed = "

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# 7-Zip prints up to seven fractional digits, datetime keeps six
_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})(?:\.(?P<fraction>\d+))?$"
)
_SIZE_RE = re.compile(r"^\d+$")

_TIMESTAMP_FIELDS = (
    (MODIFIED_PREFIX, "modified"),
    (CREATED_PREFIX, "created"),
    (ACCESSED_PREFIX, "accessed"),
)


@dataclass
class _EntryDraft:
    name: str
    is_folder: bool = False
    size: Optional[int] = None
    modified: Optional[datetime] = None
    created: Optional[datetime] = None
    accessed: Optional[datetime] = None

    def freeze(self) -> ArchiveEntry:
        return ArchiveEntry(
            name=self.name,
            is_folder=self.is_folder,
            size=self.size,
            modified=self.modified,
            created=self.created,
            accessed=self.accessed,
        )


def parse_timestamp(value: str, field: str = "timestamp", entry_name: str | None = None) -> datetime:
    """Parse a 7-Zip timestamp independently of the current locale."""
    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        raise ListingParseError(field, value, entry_name)
    try:
        parsed = datetime.strptime(match.group("base"), TIMESTAMP_FORMAT)
    except ValueError as error:
        raise ListingParseError(field, value, entry_name) from error
    fraction = match.group("fraction")
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed


def parse_size(value: str, entry_name: str | None = None) -> int:
    value = value.strip()
    if not _SIZE_RE.match(value):
        raise ListingParseError("Size", value, entry_name)
    return int(value)


def parse_listing(lines: Iterable[str]) -> Iterator[ArchiveEntry]:
    """Turn ``7z l -slt`` output lines into archive entries, lazily.

    A Size or timestamp line with an empty value (``Modified = ``) leaves the
    field unset instead of raising ListingParseError.

    Raises:
        ListingParseError: If a Size or timestamp field holds an unparsable value
    """
    current: Optional[_EntryDraft] = None

    for line in lines:
        line = line.rstrip("\r\n")

        if line.startswith(PATH_PREFIX):
            current = _EntryDraft(name=line[len(PATH_PREFIX):])
            continue

        if not line:
            if current is not None:
                yield current.freeze()
                current = None
            continue

        if current is None:
            continue

        if line == FOLDER_MARKER:
            current.is_folder = True
            continue

        # Folder entries never carry a size, but a Size line seen before the
        # Folder line is kept.
        if line.startswith(SIZE_PREFIX):
            if not current.is_folder:
                value = line[len(SIZE_PREFIX):]
                if value.strip():
                    current.size = parse_size(value, current.name)
            continue

        for prefix, attribute in _TIMESTAMP_FIELDS:
            if line.startswith(prefix):
                value = line[len(prefix):]
                if value.strip():
                    setattr(
                        current,
                        attribute,
                        parse_timestamp(value, prefix.split(" ", 1)[0], current.name),
                    )
                break


__all__ = [
    "parse_listing",
    "parse_size",
    "parse_timestamp",
]
