"""
executor.py

Responsibility: Replay parsed instructions on the host, one at a time, in
source order.

- ARG      -> Variable Store `declare_arg` (may prompt)
- ENV      -> substitute the value, then `declare_env`
- RUN      -> substitute, then run it in the current working directory with
              every declared variable in the child environment
- ADD      -> substitute; URL sources are downloaded, anything else is
              reported and skipped
- WORKDIR  -> substitute, resolve against the current directory, create it
- anything else is dropped

The first fatal error stops the replay. Nothing already applied is undone.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from dockerrun.downloader import Downloader, is_remote, target_path
from dockerrun.errors import ReplayError
from dockerrun.instructions import Add, Arg, Env, Instruction, Run, Unsupported, Workdir
from dockerrun.prompt import Prompter
from dockerrun.shell import ShellRunner
from dockerrun.substitution import substitute
from dockerrun.variables import VariableStore

logger = logging.getLogger(__name__)


@dataclass
class BuildState:
    """Everything a replay mutates: declared variables and the working directory."""

    variables: VariableStore = field(default_factory=VariableStore)
    workdir: Path = field(default_factory=Path.cwd)


@dataclass(frozen=True)
class ReplayResult:
    dispatched: int
    skipped: int


class Replayer:
    def __init__(
        self,
        *,
        prompter: Prompter,
        state: BuildState | None = None,
        runner: ShellRunner | None = None,
        downloader: Downloader | None = None,
    ) -> None:
        self.state = state or BuildState()
        self.prompter = prompter
        self.runner = runner or ShellRunner()
        self.downloader = downloader or Downloader()

    def run(self, instructions: Iterable[Instruction]) -> ReplayResult:
        """
        Dispatch every instruction in order. Raises the first ReplayError,
        annotated with the instruction that caused it.
        """
        dispatched = 0
        skipped = 0
        for instruction in instructions:
            try:
                acted = self.dispatch(instruction)
            except ReplayError as e:
                if e.instruction is None:
                    e.instruction = instruction
                raise
            if acted:
                dispatched += 1
            else:
                skipped += 1
        return ReplayResult(dispatched=dispatched, skipped=skipped)

    def expand(self, text: str) -> str:
        return substitute(text, self.state.variables.lookup)

    def dispatch(self, instruction: Instruction) -> bool:
        """
        Apply one instruction. Returns False when it was skipped.
        """
        logger.debug("line %d: %s", instruction.lineno, instruction.line.text)

        if isinstance(instruction, Arg):
            default = None if instruction.default is None else self.expand(instruction.default)
            value = self.state.variables.declare_arg(instruction.name, default, self.prompter)
            logger.debug("ARG %s=%s", instruction.name, value)
            return True

        if isinstance(instruction, Env):
            value = self.expand(instruction.value)
            logger.debug("ENV %s=%s", instruction.name, value)
            self.state.variables.declare_env(instruction.name, value)
            return True

        if isinstance(instruction, Run):
            self._run(instruction)
            return True

        if isinstance(instruction, Add):
            return self._add(instruction)

        if isinstance(instruction, Workdir):
            self._workdir(instruction)
            return True

        if isinstance(instruction, Unsupported):
            if instruction.reason:
                logger.warning(
                    "line %d: skipping %s: %s", instruction.lineno, instruction.directive, instruction.reason
                )
            else:
                logger.debug("Ignoring unsupported instruction %s", instruction.directive)
            return False

        raise TypeError(f"unknown instruction type: {type(instruction).__name__}")

    def _run(self, instruction: Run) -> None:
        env = self.state.variables.as_environ()
        cwd = self.state.workdir
        if instruction.argv is not None:
            argv = [self.expand(arg) for arg in instruction.argv]
            logger.debug("RUN (exec) in %s: %s", cwd, argv)
            self.runner.run_exec(argv, cwd=cwd, env=env)
        else:
            command = self.expand(instruction.command)
            logger.debug("RUN in %s: %s", cwd, command)
            self.runner.run(command, cwd=cwd, env=env)

    def _add(self, instruction: Add) -> bool:
        source = self.expand(instruction.source)
        destination = self.expand(instruction.destination)
        if not is_remote(source):
            logger.warning(
                "line %d: skipping ADD %s: only http(s) URL sources are supported",
                instruction.lineno,
                source,
            )
            return False

        dest = self._resolve(destination)
        as_directory = destination.endswith("/") or destination in (".", "./")
        target = target_path(source, dest, as_directory=as_directory)
        logger.debug("ADD %s -> %s", source, target)
        self.downloader.fetch(source, target)
        return True

    def _workdir(self, instruction: Workdir) -> None:
        path = self._resolve(self.expand(instruction.path))
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ReplayError(f"Cannot create working directory {path}: {e}") from e
        logger.debug("WORKDIR %s", path)
        self.state.workdir = path

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        if not p.is_absolute():
            p = self.state.workdir / p
        return Path(os.path.normpath(p))
