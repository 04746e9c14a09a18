"""Subprocess invocation of the git executable.

This module runs git with an argument vector (never through a shell),
buffers its output, and turns the outcome into a CommandResult. Nothing in
here raises for process-level problems: a process that cannot be started
yields SpawnFailure, and a non-zero exit is left for the caller to classify.
"""

import codecs
import re
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

import anyio
from anyio.abc import ByteReceiveStream

from repohistory.config._defaults import DEFAULT_MAX_OUTPUT_BYTES
from repohistory.enums import FailureKind

from ._models import CommandOutput, CommandResult, SpawnFailure, ToolFailure

EOL_REGEX = re.compile(r"\r\n|\r|\n")

_NOT_A_REPOSITORY_REGEX = re.compile(r"not a git repository", re.IGNORECASE)


def split_lines(text: str) -> list[str]:
    """Split text on any line terminator (\\r\\n, \\r or \\n)."""
    return EOL_REGEX.split(text)


def normalize_newlines(text: str) -> str:
    return "\n".join(split_lines(text))


def resolve_encoding(encoding: str | None) -> str:
    """Return a text codec name Python recognises, falling back to UTF-8."""
    if not encoding:
        return "utf-8"
    try:
        info = codecs.lookup(encoding)
    except LookupError:
        return "utf-8"
    # bytes-to-bytes codecs such as base64 cannot decode to str
    if not info._is_text_encoding:  # noqa: SLF001  # pyright: ignore[reportPrivateUsage]
        return "utf-8"
    return info.name


class _BoundedBuffer:
    __slots__ = ("_chunks", "_limit", "_size", "truncated")

    def __init__(self, limit: int | None) -> None:
        self._chunks: list[bytes] = []
        self._limit = limit
        self._size = 0
        self.truncated = False

    def append(self, chunk: bytes) -> None:
        if self._limit is None:
            self._chunks.append(chunk)
            return
        remaining = self._limit - self._size
        if remaining <= 0:
            self.truncated = True
            return
        if len(chunk) > remaining:
            chunk = chunk[:remaining]
            self.truncated = True
        self._chunks.append(chunk)
        self._size += len(chunk)

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


class CommandRunner(Protocol):
    """Signature shared by run_command and test doubles."""

    async def __call__(
        self,
        executable: str | Path,
        args: Sequence[str],
        cwd: str | Path | None,
        *,
        encoding: str | None = None,
        env: Mapping[str, str] | None = None,
        max_output_bytes: int | None = DEFAULT_MAX_OUTPUT_BYTES,
    ) -> CommandResult: ...


async def _drain(stream: ByteReceiveStream | None, buffer: _BoundedBuffer) -> None:
    if stream is None:
        return
    # Keep reading past the bound so the child never blocks on a full pipe
    async for chunk in stream:
        buffer.append(chunk)


async def run_command(
    executable: str | Path,
    args: Sequence[str],
    cwd: str | Path | None,
    *,
    encoding: str | None = None,
    env: Mapping[str, str] | None = None,
    max_output_bytes: int | None = DEFAULT_MAX_OUTPUT_BYTES,
) -> CommandResult:
    """Run an executable with an argument vector and capture its output.

    Args:
        executable: Path to the executable.
        args: Arguments passed verbatim, never interpolated into a shell.
        cwd: Working directory of the process, or None to inherit.
        encoding: Codec used to decode stdout. Unknown codecs fall back to
            UTF-8. Stderr is always decoded as UTF-8.
        env: Complete environment for the process, or None to inherit.
        max_output_bytes: Bound on buffered stdout; None disables the bound.

    Returns:
        CommandOutput when the process ran (whatever its exit status), or
        SpawnFailure when it could not be started.
    """
    command = [str(executable), *args]
    try:
        process = await anyio.open_process(
            command,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        return SpawnFailure(message=normalize_newlines(str(e)))

    stdout = _BoundedBuffer(max_output_bytes)
    stderr = _BoundedBuffer(max_output_bytes)
    async with process:
        async with anyio.create_task_group() as tg:
            tg.start_soon(_drain, process.stdout, stdout)
            tg.start_soon(_drain, process.stderr, stderr)
        exit_code = await process.wait()

    return CommandOutput(
        stdout=stdout.getvalue().decode(resolve_encoding(encoding), errors="replace"),
        stderr=stderr.getvalue().decode("utf-8", errors="replace"),
        exit_code=exit_code,
        truncated=stdout.truncated,
    )


def remove_trailing_blank_lines(lines: list[str]) -> list[str]:
    """Drop empty strings from the end of `lines`, in place, and return it."""
    while lines and lines[-1] == "":
        _ = lines.pop()
    return lines


def error_message(result: CommandResult) -> str:
    """Build the message describing a failed invocation.

    Spawn failures report the OS error. Otherwise the message is stderr,
    falling back to stdout, falling back to an empty string.
    """
    if isinstance(result, SpawnFailure):
        return result.message
    text = result.stderr if result.stderr.strip() else result.stdout
    return "\n".join(remove_trailing_blank_lines(split_lines(text)))


def is_not_a_repository(message: str) -> bool:
    return _NOT_A_REPOSITORY_REGEX.search(message) is not None


def classify_failure(result: CommandResult) -> ToolFailure | None:
    """Classify an invocation outcome.

    Returns:
        None when the process exited with status 0, otherwise the failure.
    """
    if isinstance(result, SpawnFailure):
        return ToolFailure(kind=FailureKind.SPAWN, message=result.message)
    if result.exit_code == 0:
        return None
    message = error_message(result)
    kind = (
        FailureKind.NOT_A_REPOSITORY
        if is_not_a_repository(message)
        else FailureKind.TOOL
    )
    return ToolFailure(kind=kind, message=message)
