"""
instructions.py

Responsibility: Classify logical lines into typed instructions.

Supported vocabulary (case-insensitive): ARG, ENV, RUN, ADD, WORKDIR.
Anything else, and any supported instruction whose arguments cannot be made
sense of, becomes `Unsupported`. That is not an error: the replay drops it.

Argument text is kept raw here. Variable substitution happens at dispatch
time, when the Variable Store holds the values declared so far.
"""

from __future__ import annotations

import json
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Iterable, Iterator

from dockerrun.folder import LogicalLine, fold_lines, read_logical_lines
from dockerrun.substitution import is_valid_name


@dataclass(frozen=True)
class Instruction:
    keyword: ClassVar[str] = ""

    line: LogicalLine

    @property
    def lineno(self) -> int:
        return self.line.lineno


@dataclass(frozen=True)
class Arg(Instruction):
    keyword: ClassVar[str] = "ARG"

    name: str
    default: str | None = None


@dataclass(frozen=True)
class Env(Instruction):
    keyword: ClassVar[str] = "ENV"

    name: str
    value: str


@dataclass(frozen=True)
class Run(Instruction):
    """
    A shell-form command, or an exec-form argv when the arguments are a JSON
    array of strings (`RUN ["prog", "arg"]`).
    """

    keyword: ClassVar[str] = "RUN"

    command: str
    argv: tuple[str, ...] | None = None


@dataclass(frozen=True)
class Add(Instruction):
    keyword: ClassVar[str] = "ADD"

    source: str
    destination: str


@dataclass(frozen=True)
class Workdir(Instruction):
    keyword: ClassVar[str] = "WORKDIR"

    path: str


@dataclass(frozen=True)
class Unsupported(Instruction):
    """A line the replay skips. `reason` is empty for unknown keywords."""

    keyword: ClassVar[str] = ""

    directive: str
    reason: str = ""


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_arg(line: LogicalLine, rest: str) -> Instruction:
    if "=" in rest:
        name, default = rest.split("=", 1)
        name = name.strip()
        default = _unquote(default.strip())
    else:
        name, default = rest.strip(), None
    if not is_valid_name(name):
        return Unsupported(line, "ARG", f"invalid ARG name: {name!r}")
    return Arg(line, name, default)


_PAIR_RX = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")


def _has_extra_pairs(value: str) -> bool:
    lexer = shlex.shlex(value, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        tokens = list(lexer)
    except ValueError:
        return False
    return any(_PAIR_RX.match(token) for token in tokens[1:])


def _parse_env(line: LogicalLine, rest: str) -> Instruction:
    # NAME=value, or the legacy NAME value form
    head = rest.split(None, 1)[0]
    if "=" in head:
        name, value = rest.split("=", 1)
        if _has_extra_pairs(value):
            return Unsupported(line, "ENV", "multiple key=value pairs are not supported")
    else:
        parts = rest.split(None, 1)
        if len(parts) < 2:
            return Unsupported(line, "ENV", f"ENV {head} has no value")
        name, value = parts
    name = name.strip()
    if not is_valid_name(name):
        return Unsupported(line, "ENV", f"invalid ENV name: {name!r}")
    return Env(line, name, _unquote(value.strip()))


def _parse_run(line: LogicalLine, rest: str) -> Instruction:
    if rest.startswith("["):
        try:
            argv = json.loads(rest)
        except ValueError:
            argv = None
        if isinstance(argv, list) and argv and all(isinstance(a, str) for a in argv):
            return Run(line, rest, tuple(argv))
    return Run(line, rest)


def _parse_add(line: LogicalLine, rest: str) -> Instruction:
    tokens = rest.split()
    # --chown / --chmod / --checksum have no meaning on the host
    while tokens and tokens[0].startswith("--"):
        tokens.pop(0)
    if len(tokens) < 2:
        return Unsupported(line, "ADD", "ADD needs a source and a destination")
    if len(tokens) > 2:
        return Unsupported(line, "ADD", "ADD with more than one source is not supported")
    return Add(line, tokens[0], tokens[1])


def _parse_workdir(line: LogicalLine, rest: str) -> Instruction:
    return Workdir(line, _unquote(rest.strip()))


_PARSERS = {
    "ARG": _parse_arg,
    "ENV": _parse_env,
    "RUN": _parse_run,
    "ADD": _parse_add,
    "WORKDIR": _parse_workdir,
}


def parse_line(line: LogicalLine) -> Instruction:
    """
    Classify one logical line by its leading keyword.
    """
    parts = line.text.strip().split(None, 1)
    if not parts:
        return Unsupported(line, "", "empty line")

    keyword = parts[0].upper()
    rest = parts[1].strip() if len(parts) > 1 else ""

    parser = _PARSERS.get(keyword)
    if parser is None:
        return Unsupported(line, keyword)
    if not rest:
        return Unsupported(line, keyword, f"{keyword} has no arguments")
    return parser(line, rest)


def parse_lines(lines: Iterable[str]) -> Iterator[Instruction]:
    """Fold and parse raw lines, lazily and in source order."""
    for logical in fold_lines(lines):
        yield parse_line(logical)


def parse_dockerfile(path: str | Path) -> Iterator[Instruction]:
    for logical in read_logical_lines(path):
        yield parse_line(logical)
