"""7-Zip front end: executable lookup, entry listing, archive discovery and extraction."""

from __future__ import annotations

import os
import sys
from pathlib import Path, PureWindowsPath
from typing import Callable, Generic, Iterator, Optional, TypeVar

from clonezilla_vfs.config import settings
from clonezilla_vfs.domain import ArchiveEntry
from clonezilla_vfs.exceptions import UnsupportedPlatformError
from clonezilla_vfs.logging import LoggerFactory

from .listing import PATH_PREFIX, parse_listing
from .runner import LineStream, SubprocessRunner, ToolRunner


log = LoggerFactory.for_sevenzip()

T = TypeVar("T")

# Relative to the tools root, which defaults to the working directory
SEVENZIP_EXECUTABLES = {
    "win32": str(PureWindowsPath("ext", "7-Zip", "win-x64", "7z.exe")),
    "linux": "ext/7-Zip/linux-x64/7zz",
}

# Keeps 7-Zip from prompting for a password on encrypted archives
DUMMY_PASSWORD = "blah"

# Listings are parsed as UTF-8 whatever the console code page is
OUTPUT_CHARSET_SWITCH = "-sccUTF-8"


def sevenzip_executable(platform: Optional[str] = None) -> str:
    """Return the 7-Zip executable to run on this (or the given) platform.

    The ``sevenzip_path`` setting wins when set. Otherwise the bundled
    executable for the platform is used, below the ``tools_root`` setting
    when one is configured.

    Raises:
        UnsupportedPlatformError: If no executable is known for the platform
    """
    configured = settings.get_setting("sevenzip_path")
    if configured:
        return str(configured)

    platform = platform or sys.platform
    key = "linux" if platform.startswith("linux") else platform
    relative = SEVENZIP_EXECUTABLES.get(key)
    if relative is None:
        raise UnsupportedPlatformError(platform)

    tools_root = settings.get_setting("tools_root")
    if tools_root:
        return os.path.join(str(tools_root), relative)
    return relative


def ensure_ends_in_path_separator(path: str) -> str:
    if path.endswith(os.sep) or (os.altsep and path.endswith(os.altsep)):
        return path
    return path + os.sep


class ResultStream(Generic[T]):
    """Iterator over results derived from a tool's output.

    Forwards ``drain()`` and ``terminate()`` to the underlying line stream
    so a consumer that stops early can decide what happens to the process.
    """

    def __init__(self, lines: LineStream, produce: Callable[[LineStream], Iterator[T]]):
        self.lines = lines
        self._results = produce(lines)

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        return next(self._results)

    @property
    def returncode(self) -> Optional[int]:
        return self.lines.returncode

    def drain(self) -> Optional[int]:
        return self.lines.drain()

    def terminate(self) -> Optional[int]:
        return self.lines.terminate()


EntryStream = ResultStream[ArchiveEntry]
ArchivePathStream = ResultStream[str]


class SevenZip:
    """Runs 7-Zip through an injectable ToolRunner.

    Args:
        runner: Runs the executable; defaults to spawning a child process
        executable: 7-Zip executable; defaults to ``sevenzip_executable()``
        verbose: Log found archives at INFO instead of DEBUG
    """

    def __init__(
        self,
        runner: Optional[ToolRunner] = None,
        executable: Optional[str] = None,
        verbose: Optional[bool] = None,
    ):
        self.runner = runner or SubprocessRunner()
        self._executable = executable
        self.verbose = settings.get_bool("verbose") if verbose is None else verbose

    @property
    def executable(self) -> str:
        if self._executable is None:
            self._executable = sevenzip_executable()
        return self._executable

    def _run(self, arguments: list[str], *, check: bool = False) -> LineStream:
        return self.runner.run(self.executable, arguments, check=check)

    def extract_file(self, input_filename: str | Path, output_folder: str | Path) -> Optional[int]:
        """Extract an archive into a folder, returning once 7-Zip has exited.

        Raises:
            ArchiveToolError: If 7-Zip exits with a failure status
        """
        log.info(f"Extracting {input_filename} to {output_folder}")
        output = self._run(
            [
                "x",
                str(input_filename),
                f"-p{DUMMY_PASSWORD}",
                "-r",
                "-y",
                f"-o{output_folder}",
            ],
            check=True,
        )
        return output.drain()

    def get_archive_entries(self, archive_filename: str | Path) -> EntryStream:
        """List the entries of an archive, lazily.

        Raises (while iterating):
            ListingParseError: If a listed field cannot be parsed
        """
        log.debug(f"Listing entries of {archive_filename}")
        output = self._run(["l", "-slt", OUTPUT_CHARSET_SWITCH, str(archive_filename)])
        return ResultStream(output, parse_listing)

    def get_archives_in_folder(self, input_folder: str | Path) -> ArchivePathStream:
        """List the archives 7-Zip reports below a folder that exist as files."""
        folder = ensure_ends_in_path_separator(str(input_folder))
        log.debug(f"Searching archives in {folder}")
        output = self._run(["l", OUTPUT_CHARSET_SWITCH, folder])
        return ResultStream(output, self._existing_archives)

    def _existing_archives(self, lines: LineStream) -> Iterator[str]:
        for line in lines:
            if not line.startswith(PATH_PREFIX):
                continue
            archive_filename = line[len(PATH_PREFIX):]
            try:
                exists = os.path.isfile(archive_filename)
            except (OSError, ValueError):
                exists = False
            if not exists:
                log.debug(f"Skipping missing archive: {archive_filename}")
                continue
            if self.verbose:
                log.info(f"Found archive: {archive_filename}")
            else:
                log.debug(f"Found archive: {archive_filename}")
            yield os.path.abspath(archive_filename)


__all__ = [
    "ArchivePathStream",
    "DUMMY_PASSWORD",
    "EntryStream",
    "OUTPUT_CHARSET_SWITCH",
    "ResultStream",
    "SEVENZIP_EXECUTABLES",
    "SevenZip",
    "ensure_ends_in_path_separator",
    "sevenzip_executable",
]
