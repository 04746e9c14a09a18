# ruff: noqa: TC003  # Path and Mapping needed at runtime for method signatures
"""Fake command runner for testing.

This module provides a FakeRunner that satisfies the CommandRunner protocol
so GitDataSource can be exercised without a git executable.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from repohistory.config._defaults import DEFAULT_MAX_OUTPUT_BYTES
from repohistory.git._models import CommandOutput, CommandResult


@dataclass(slots=True)
class FakeRunner:
    """Canned git responses keyed by argument prefix.

    The longest registered prefix matching an invocation's arguments wins;
    among equally long prefixes the latest registration wins.
    Invocations with no matching prefix exit with status 1 and name the
    arguments on stderr, so a missing stub shows up as an error result.

    Example:
        >>> runner = FakeRunner()
        >>> runner.on("remote", stdout="origin\\n")
        >>> runner.called("remote")
        []
    """

    responses: list[tuple[tuple[str, ...], CommandResult]] = field(default_factory=list)
    calls: list[list[str]] = field(default_factory=list)
    encodings: list[str | None] = field(default_factory=list)
    cwds: list[str | Path | None] = field(default_factory=list)

    def on(
        self,
        *prefix: str,
        stdout: str = "",
        stderr: str = "",
        exit_code: int = 0,
        truncated: bool = False,
    ) -> None:
        """Answer invocations starting with `prefix` with the given output."""
        self.on_result(
            *prefix,
            result=CommandOutput(stdout=stdout, stderr=stderr, exit_code=exit_code, truncated=truncated),
        )

    def on_result(self, *prefix: str, result: CommandResult) -> None:
        self.responses.append((prefix, result))

    def called(self, *prefix: str) -> list[list[str]]:
        """Return the recorded invocations starting with `prefix`."""
        return [call for call in self.calls if tuple(call[: len(prefix)]) == prefix]

    async def __call__(
        self,
        executable: str | Path,  # noqa: ARG002
        args: Sequence[str],
        cwd: str | Path | None,
        *,
        encoding: str | None = None,
        env: Mapping[str, str] | None = None,  # noqa: ARG002
        max_output_bytes: int | None = DEFAULT_MAX_OUTPUT_BYTES,  # noqa: ARG002
    ) -> CommandResult:
        self.calls.append(list(args))
        self.encodings.append(encoding)
        self.cwds.append(cwd)
        matches = [
            (prefix, result)
            for prefix, result in self.responses
            if tuple(args[: len(prefix)]) == prefix
        ]
        if not matches:
            return CommandOutput(stdout="", stderr=f"unexpected: {' '.join(args)}", exit_code=1)
        return max(reversed(matches), key=lambda match: len(match[0]))[1]
