"""Tests for the 7-Zip front end."""

import os
import sys

import pytest

from clonezilla_vfs.config import settings
from clonezilla_vfs.exceptions import ArchiveToolError, UnsupportedPlatformError
from clonezilla_vfs.sevenzip.utility import (
    DUMMY_PASSWORD,
    SEVENZIP_EXECUTABLES,
    SevenZip,
    ensure_ends_in_path_separator,
    sevenzip_executable,
)

from .conftest import FakeRunner, ScriptRunner


class TestSevenZipExecutable:
    def test_linux(self):
        assert sevenzip_executable("linux") == "ext/7-Zip/linux-x64/7zz"

    def test_windows(self):
        assert sevenzip_executable("win32") == SEVENZIP_EXECUTABLES["win32"]
        assert sevenzip_executable("win32").endswith("7z.exe")

    def test_unsupported_platform(self):
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            sevenzip_executable("darwin")
        assert exc_info.value.platform == "darwin"

    def test_configured_path_wins(self, default_settings):
        default_settings["sevenzip_path"] = "/usr/bin/7z"

        assert sevenzip_executable("darwin") == "/usr/bin/7z"

    def test_tools_root(self, default_settings, tmp_path):
        default_settings["tools_root"] = str(tmp_path)

        assert sevenzip_executable("linux") == os.path.join(
            str(tmp_path), "ext/7-Zip/linux-x64/7zz"
        )

    def test_executable_resolved_lazily(self, monkeypatch):
        def unsupported():
            raise UnsupportedPlatformError("darwin")

        monkeypatch.setattr(
            "clonezilla_vfs.sevenzip.utility.sevenzip_executable", unsupported
        )
        sevenzip = SevenZip(runner=FakeRunner())

        with pytest.raises(UnsupportedPlatformError):
            sevenzip.executable


def test_ensure_ends_in_path_separator():
    assert ensure_ends_in_path_separator("images") == "images" + os.sep
    assert ensure_ends_in_path_separator("images" + os.sep) == "images" + os.sep


class TestGetArchiveEntries:
    def test_runs_technical_listing(self, slt_listing):
        runner = FakeRunner(slt_listing)
        sevenzip = SevenZip(runner=runner, executable="7zz")

        entries = list(sevenzip.get_archive_entries("backup.7z"))

        assert runner.calls == [("7zz", ["l", "-slt", "-sccUTF-8", "backup.7z"], False)]
        assert [entry.name for entry in entries][1:] == ["docs", "docs/readme.txt", "empty.bin"]

    def test_stop_early_and_terminate(self, slt_listing):
        runner = FakeRunner(slt_listing)
        sevenzip = SevenZip(runner=runner, executable="7zz")

        entries = sevenzip.get_archive_entries("backup.7z")
        first = next(entries)
        entries.terminate()

        assert first.name == "backup.7z"
        assert runner.streams[0].finished is True
        assert list(entries) == []

    def test_stop_early_and_drain(self, slt_listing):
        runner = FakeRunner(slt_listing)
        sevenzip = SevenZip(runner=runner, executable="7zz")

        entries = sevenzip.get_archive_entries("backup.7z")
        next(entries)

        assert entries.drain() == 0
        assert entries.returncode == 0
        assert runner.streams[0].finished is True


class TestGetArchivesInFolder:
    def test_returns_only_existing_files(self, tmp_path):
        """Test that a reported path deleted since listing is skipped."""
        kept_a = tmp_path / "a.7z"
        kept_b = tmp_path / "b.zip"
        deleted = tmp_path / "c.rar"
        for archive in (kept_a, kept_b, deleted):
            archive.write_bytes(b"x")
        deleted.unlink()
        listing = "".join(f"Path = {p}\nType = 7z\n\n" for p in (kept_a, kept_b, deleted))
        runner = FakeRunner(listing)
        sevenzip = SevenZip(runner=runner, executable="7zz")

        found = list(sevenzip.get_archives_in_folder(tmp_path))

        assert found == [str(kept_a), str(kept_b)]

    def test_skips_directories(self, tmp_path):
        (tmp_path / "sub").mkdir()
        runner = FakeRunner(f"Path = {tmp_path / 'sub'}\n\n")
        sevenzip = SevenZip(runner=runner, executable="7zz")

        assert list(sevenzip.get_archives_in_folder(tmp_path)) == []

    def test_folder_gets_trailing_separator(self, tmp_path):
        runner = FakeRunner("")
        sevenzip = SevenZip(runner=runner, executable="7zz")

        list(sevenzip.get_archives_in_folder(tmp_path))

        assert runner.calls[0][1] == ["l", "-sccUTF-8", str(tmp_path) + os.sep]

    def test_relative_paths_become_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "disk.7z").write_bytes(b"x")
        runner = FakeRunner("Path = disk.7z\n\n")
        sevenzip = SevenZip(runner=runner, executable="7zz")

        assert list(sevenzip.get_archives_in_folder(".")) == [str(tmp_path / "disk.7z")]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs byte-oriented file names")
    def test_non_utf8_file_name_is_found(self, tmp_path):
        archive = os.path.join(os.fsencode(tmp_path), b"\xe9t\xe9.7z")
        with open(archive, "wb") as f:
            f.write(b"x")
        script = (
            "import sys\n"
            f"sys.stdout.buffer.write(b'Path = ' + {archive!r} + b'\\n\\n')\n"
        )
        sevenzip = SevenZip(runner=ScriptRunner(script), executable="7zz")

        found = list(sevenzip.get_archives_in_folder(tmp_path))

        assert found == [os.fsdecode(archive)]


class TestExtractFile:
    def test_extract_arguments(self, tmp_path):
        runner = FakeRunner("Everything is Ok\n")
        sevenzip = SevenZip(runner=runner, executable="7zz")

        sevenzip.extract_file("backup.7z", tmp_path)

        executable, arguments, check = runner.calls[0]
        assert executable == "7zz"
        assert arguments == [
            "x",
            "backup.7z",
            f"-p{DUMMY_PASSWORD}",
            "-r",
            "-y",
            f"-o{tmp_path}",
        ]
        assert check is True
        assert runner.streams[0].finished is True

    def test_extract_failure(self, tmp_path):
        runner = FakeRunner("ERROR: Wrong password\n", returncode=2)
        sevenzip = SevenZip(runner=runner, executable="7zz")

        with pytest.raises(ArchiveToolError):
            sevenzip.extract_file("backup.7z", tmp_path)


def test_verbose_defaults_to_setting(default_settings):
    default_settings["verbose"] = True

    assert SevenZip(runner=FakeRunner()).verbose is True
    assert SevenZip(runner=FakeRunner(), verbose=False).verbose is False
    assert settings.get_bool("verbose") is True
