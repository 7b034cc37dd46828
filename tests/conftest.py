from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import pytest

from dockerrun.errors import DownloadFailure, PromptAbort, ShellFailure
from dockerrun.executor import BuildState, Replayer
from dockerrun.instructions import Instruction, parse_lines
from dockerrun.prompt import Prompter
from dockerrun.variables import VariableStore


class ScriptedPrompter(Prompter):
    """Answers prompts from a list; an empty answer takes the default."""

    def __init__(self, answers: Sequence[str] = ()) -> None:
        self.answers = list(answers)
        self.asked: list[tuple[str, str | None]] = []

    def prompt(self, name: str, default: str | None = None) -> str:
        self.asked.append((name, default))
        if not self.answers:
            raise PromptAbort(f"No value provided for ARG {name}")
        answer = self.answers.pop(0)
        if answer:
            return answer
        if default is not None:
            return default
        raise PromptAbort(f"No value provided for ARG {name}")


class RecordingRunner:
    """Stands in for ShellRunner; fails for commands listed in `fail`."""

    def __init__(self, fail: Sequence[str] = ()) -> None:
        self.calls: list[tuple[object, Path, dict[str, str]]] = []
        self.fail = set(fail)

    def run(self, command: str, *, cwd: Path, env: Mapping[str, str] | None = None) -> None:
        self.calls.append((command, cwd, dict(env or {})))
        if command in self.fail:
            raise ShellFailure(f"Command failed with status 1: {command}", returncode=1)

    def run_exec(self, argv: Sequence[str], *, cwd: Path, env: Mapping[str, str] | None = None) -> None:
        self.calls.append((list(argv), cwd, dict(env or {})))

    @property
    def commands(self) -> list[object]:
        return [c[0] for c in self.calls]


class RecordingDownloader:
    def __init__(self, fail: str | None = None) -> None:
        self.calls: list[tuple[str, Path]] = []
        self.fail = fail

    def fetch(self, url: str, destination: Path) -> Path:
        self.calls.append((url, destination))
        if self.fail and self.fail in url:
            raise DownloadFailure(f"Failed to download {url}: HTTP 404 Not Found")
        return destination


def parse(text: str) -> list[Instruction]:
    return list(parse_lines(text.splitlines(keepends=True)))


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def downloader() -> RecordingDownloader:
    return RecordingDownloader()


@pytest.fixture
def make_replayer(tmp_path: Path, runner: RecordingRunner, downloader: RecordingDownloader):
    def _make(answers: Sequence[str] = (), environ: Mapping[str, str] | None = None, **kwargs) -> Replayer:
        store = VariableStore(environ={} if environ is None else environ, build_args=kwargs.pop("build_args", None))
        return Replayer(
            state=BuildState(variables=store, workdir=kwargs.pop("workdir", tmp_path)),
            prompter=kwargs.pop("prompter", ScriptedPrompter(answers)),
            runner=kwargs.pop("runner", runner),
            downloader=kwargs.pop("downloader", downloader),
        )

    return _make
