"""
Pytest configuration and shared fixtures for clonezilla-vfs tests.

This module provides common fixtures and utilities used across all test modules.
"""

import sys
from pathlib import Path
from typing import List, Sequence, Tuple

import pytest

from clonezilla_vfs.config import settings
from clonezilla_vfs.containers.classifier import CLONEZILLA_MAGIC_FILENAME
from clonezilla_vfs.sevenzip.runner import LineStream, SubprocessRunner


# ==============================================================================
# Tool Runner Fixtures
# ==============================================================================


class FakeRunner:
    """ToolRunner returning canned output instead of spawning 7-Zip."""

    def __init__(self, output: str = "", returncode: int = 0):
        self.output = output
        self.returncode = returncode
        self.calls: List[Tuple[str, List[str], bool]] = []
        self.streams: List[LineStream] = []

    def run(self, executable: str, arguments: Sequence[str], *, check: bool = False) -> LineStream:
        self.calls.append((executable, list(arguments), check))
        stream = LineStream.from_text(
            self.output,
            command=[executable, *arguments],
            returncode=self.returncode,
            check=check,
        )
        self.streams.append(stream)
        return stream


class ScriptRunner:
    """ToolRunner spawning a Python script in place of 7-Zip.

    The 7-Zip arguments are recorded but not passed on, so the script alone
    decides what the child process prints and how long it lives.
    """

    def __init__(self, script: str):
        self.script = script
        self.calls: List[Tuple[str, List[str], bool]] = []
        self.streams: List[LineStream] = []

    def run(self, executable: str, arguments: Sequence[str], *, check: bool = False) -> LineStream:
        self.calls.append((executable, list(arguments), check))
        stream = SubprocessRunner().run(sys.executable, ["-c", self.script], check=check)
        self.streams.append(stream)
        return stream


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


# ==============================================================================
# Listing Fixtures
# ==============================================================================


@pytest.fixture
def slt_listing() -> str:
    """
    Fixture providing typical ``7z l -slt`` output.

    Contains the archive header block, one folder and two files.
    """
    return (
        "\n"
        "7-Zip (z) 23.01 (x64) : Copyright (c) 1999-2023 Igor Pavlov : 2023-06-20\n"
        "\n"
        "Scanning the drive for archives:\n"
        "1 file, 2048 bytes (2 KiB)\n"
        "\n"
        "Listing archive: backup.7z\n"
        "\n"
        "--\n"
        "Path = backup.7z\n"
        "Type = 7z\n"
        "Physical Size = 2048\n"
        "\n"
        "----------\n"
        "Path = docs\n"
        "Size = 0\n"
        "Packed Size = 0\n"
        "Modified = 2024-03-01 10:15:00.1234567\n"
        "Attributes = D\n"
        "Folder = +\n"
        "\n"
        "Path = docs/readme.txt\n"
        "Folder = -\n"
        "Size = 1024\n"
        "Packed Size = 512\n"
        "Modified = 2024-03-01 10:14:59\n"
        "Created = 2024-02-28 08:00:00\n"
        "Accessed = 2024-03-02 09:30:00\n"
        "Attributes = A\n"
        "\n"
        "Path = empty.bin\n"
        "Folder = -\n"
        "Size = 0\n"
        "Modified = \n"
        "\n"
    )


# ==============================================================================
# Filesystem Fixtures
# ==============================================================================


def write_partclone_image(path: Path, fstype: str = "EXTFS", magic: bytes = None) -> Path:
    """Write a minimal partclone v2 header followed by some payload."""
    if magic is None:
        magic = b"partclone-image\0"
    header = (
        magic
        + b"0.3.27".ljust(14, b"\0")
        + b"0002"
        + b"\xc0\xde"
        + fstype.encode("ascii").ljust(16, b"\0")
    )
    path.write_bytes(header + b"\0" * 64)
    return path


@pytest.fixture
def partclone_file(tmp_path) -> Path:
    return write_partclone_image(tmp_path / "sda1.ext4-ptcl-img")


@pytest.fixture
def clonezilla_dir(tmp_path) -> Path:
    """
    Fixture providing a Clonezilla image folder with two partitions.

    sda1 is split into two gzip partclone volumes, sda2 is a raw dd image.
    """
    image_dir = tmp_path / "2024-03-01-10-img"
    image_dir.mkdir()
    (image_dir / CLONEZILLA_MAGIC_FILENAME).write_text("This is a Clonezilla image\n")
    (image_dir / "parts").write_text("sda1 sda2\n")
    (image_dir / "disk").write_text("sda\n")
    (image_dir / "sda-pt.sf").write_text("label: dos\n")
    (image_dir / "sda1.ext4-ptcl-img.gz.ab").write_bytes(b"2")
    (image_dir / "sda1.ext4-ptcl-img.gz.aa").write_bytes(b"1")
    (image_dir / "sda2.dd-img.aa").write_bytes(b"3")
    return image_dir


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Run every test against default settings without touching the real file."""
    monkeypatch.setattr(settings.settings_store, "values", dict(settings.DEFAULT_SETTINGS))
    yield settings.settings_store.values
