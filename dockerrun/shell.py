"""
shell.py

Responsibility: Run RUN commands on the host.

Commands inherit the operator's terminal: stdin, stdout and stderr are not
redirected, so a command that prompts still works. The call blocks until the
command exits.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from dockerrun.errors import ShellFailure

DEFAULT_SHELL: tuple[str, ...] = ("bash", "-c")


class ShellRunner:
    def __init__(self, shell: Sequence[str] = DEFAULT_SHELL) -> None:
        if not shell:
            raise ValueError("shell command must not be empty")
        self.shell = tuple(shell)

    def run(self, command: str, *, cwd: Path, env: Mapping[str, str] | None = None) -> None:
        """
        Run a shell-form command, raising ShellFailure on a non-zero exit.
        """
        self._call([*self.shell, command], display=command, cwd=cwd, env=env)

    def run_exec(self, argv: Sequence[str], *, cwd: Path, env: Mapping[str, str] | None = None) -> None:
        """
        Run an exec-form command directly, without a shell.
        """
        self._call(list(argv), display=" ".join(argv), cwd=cwd, env=env)

    def _call(self, cmd: list[str], *, display: str, cwd: Path, env: Mapping[str, str] | None) -> None:
        try:
            subprocess.run(cmd, cwd=str(cwd), env=None if env is None else dict(env), check=True)
        except subprocess.CalledProcessError as e:
            raise ShellFailure(
                f"Command failed with status {e.returncode}: {display}",
                returncode=e.returncode,
            ) from e
        except OSError as e:
            raise ShellFailure(f"Failed to execute {cmd[0]!r}: {e}") from e
