"""Process execution for the archive tool, exposed as cancellable line streams."""

from __future__ import annotations

import subprocess
from typing import Iterable, Iterator, Optional, Protocol, Sequence

from clonezilla_vfs.exceptions import ArchiveToolError
from clonezilla_vfs.logging import LoggerFactory


log = LoggerFactory.for_sevenzip()
output_log = LoggerFactory.for_tool_output()


class LineStream:
    """Blocking iterator over the output lines of a running command.

    Lines are produced as the process writes them. A consumer that stops
    early must choose what happens to the producer by calling ``drain()``
    (read and discard the rest, then wait for exit) or ``terminate()``
    (stop the process, then wait). Neither happens implicitly.
    """

    def __init__(
        self,
        lines: Iterable[str],
        *,
        command: Sequence[str] = (),
        process: Optional[subprocess.Popen] = None,
        check: bool = False,
    ):
        self.command = list(command)
        self._lines = iter(lines)
        self._process = process
        self._check = check
        self._finished = False
        self._returncode: Optional[int] = None

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        *,
        command: Sequence[str] = (),
        returncode: int = 0,
        check: bool = False,
    ):
        """Stream over already known output, used for canned tool responses."""
        stream = cls(lines, command=command, check=check)
        stream._returncode = returncode
        return stream

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        command: Sequence[str] = (),
        returncode: int = 0,
        check: bool = False,
    ):
        return cls.from_lines(
            text.splitlines(), command=command, returncode=returncode, check=check
        )

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self._finished:
            raise StopIteration
        try:
            line = next(self._lines)
        except StopIteration:
            self._finish()
            raise
        line = line.rstrip("\r\n")
        output_log.trace(line)
        return line

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def returncode(self) -> Optional[int]:
        """Exit status of the producer, None while it is still running."""
        if self._process is not None and self._returncode is None:
            self._returncode = self._process.poll()
        return self._returncode

    def drain(self) -> Optional[int]:
        """Consume and discard the remaining output, then wait for exit."""
        for _ in self:
            pass
        return self.returncode

    def terminate(self) -> Optional[int]:
        """Stop the producer without reading the remaining output."""
        if self._finished:
            return self.returncode
        self._finished = True
        if self._process is None:
            return self._returncode
        log.debug(f"Terminating command: {' '.join(self.command)}")
        if self._process.poll() is None:
            self._process.terminate()
        self._returncode = self._process.wait()
        self._close_pipe()
        return self._returncode

    def _finish(self) -> None:
        self._finished = True
        if self._process is not None:
            self._returncode = self._process.wait()
            self._close_pipe()
        if self._returncode:
            log.debug(
                f"Command exited with code {self._returncode}: {' '.join(self.command)}"
            )
            if self._check:
                raise ArchiveToolError(self.command, self._returncode)

    def _close_pipe(self) -> None:
        if self._process is not None and self._process.stdout is not None:
            self._process.stdout.close()


class ToolRunner(Protocol):
    """Anything able to run a command and hand back its output as lines."""

    def run(self, executable: str, arguments: Sequence[str], *, check: bool = False) -> LineStream:
        ...


class SubprocessRunner:
    """Runs commands as child processes with stdout and stderr merged."""

    def run(self, executable: str, arguments: Sequence[str], *, check: bool = False) -> LineStream:
        command = [executable, *arguments]
        log.debug(f"Running command: {' '.join(command)}")
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
            )
        except OSError as error:
            raise ArchiveToolError(command, None) from error
        return LineStream(process.stdout, command=command, process=process, check=check)


__all__ = [
    "LineStream",
    "SubprocessRunner",
    "ToolRunner",
]
