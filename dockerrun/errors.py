"""
errors.py

Responsibility: Fatal error taxonomy for a replay.

Every error here stops the run. Recoverable conditions (unknown instructions,
malformed argument text) never raise; the parser turns them into
`Unsupported` instructions instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dockerrun.instructions import Instruction


class ReplayError(RuntimeError):
    """Base class for errors that abort a replay."""

    def __init__(self, message: str, *, instruction: Instruction | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.instruction = instruction

    def __str__(self) -> str:
        if self.instruction is None:
            return self.message
        line = self.instruction.line
        return f"line {line.lineno}: {line.text}\n  {self.message}"


class PromptAbort(ReplayError):
    """The operator did not provide a value for an ARG."""


class ShellFailure(ReplayError):
    """A RUN command exited non-zero or could not be started."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        instruction: Instruction | None = None,
    ) -> None:
        super().__init__(message, instruction=instruction)
        self.returncode = returncode


class DownloadFailure(ReplayError):
    """An ADD URL could not be fetched or written."""


class DockerfileError(ReplayError):
    """The Dockerfile itself cannot be read."""
