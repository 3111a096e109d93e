"""7-Zip integration: listing parser, archive discovery and extraction.

Main Functions:
    - parse_listing(): Parse ``7z l -slt`` output lines into ArchiveEntry records
    - sevenzip_executable(): Locate the bundled 7-Zip executable for this OS
    - SevenZip.get_archive_entries(): List the entries of an archive
    - SevenZip.get_archives_in_folder(): Find existing archives below a folder
    - SevenZip.extract_file(): Extract an archive into a folder

Process Handling:
    - ToolRunner: Injectable collaborator that runs the executable
    - LineStream: Cancellable output stream with drain()/terminate()
"""
from .listing import parse_listing, parse_size, parse_timestamp
from .runner import LineStream, SubprocessRunner, ToolRunner
from .utility import (
    ArchivePathStream,
    EntryStream,
    ResultStream,
    SevenZip,
    sevenzip_executable,
)

__all__ = [
    # Main functions
    "parse_listing",
    "sevenzip_executable",
    "SevenZip",
    # Helper functions
    "parse_size",
    "parse_timestamp",
    # Streams and runners
    "ArchivePathStream",
    "EntryStream",
    "LineStream",
    "ResultStream",
    "SubprocessRunner",
    "ToolRunner",
]
