"""
folder.py

Responsibility: Turn physical Dockerfile lines into logical lines.

Rules:
- A line whose last character is `\\` continues on the next line. The marker
  and the whitespace before it are dropped, the next fragment loses its
  leading whitespace, and fragments are joined with a single space.
- Blank lines and `#` comment lines inside a continuation are elided; they do
  not end it.
- Blank lines and comments between instructions are skipped.
- A file that ends mid-continuation yields what it has.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from dockerrun.errors import DockerfileError

CONTINUATION = "\\"


@dataclass(frozen=True)
class LogicalLine:
    """One instruction's full text and the physical line it started on."""

    text: str
    lineno: int


def _is_elided(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def fold_lines(lines: Iterable[str]) -> Iterator[LogicalLine]:
    """
    Lazily fold raw lines (with or without line endings) into logical lines.
    """
    fragments: list[str] = []
    start = 0

    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")

        if _is_elided(line):
            continue

        if not fragments:
            start = lineno
        line = line.lstrip()

        if line.endswith(CONTINUATION):
            fragment = line[: -len(CONTINUATION)].rstrip()
            if fragment:
                fragments.append(fragment)
            continue

        fragments.append(line.rstrip())
        yield LogicalLine(text=" ".join(fragments), lineno=start)
        fragments = []

    if fragments:
        yield LogicalLine(text=" ".join(fragments), lineno=start)


def _decode_lines(path: Path) -> Iterator[str]:
    offset = 0
    with path.open("rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                # a leading BOM is not part of the first keyword
                yield raw.decode("utf-8-sig" if lineno == 1 else "utf-8")
            except UnicodeDecodeError as e:
                raise DockerfileError(
                    f"{path}: line {lineno} is not valid UTF-8 (byte offset {offset + e.start})"
                ) from e
            offset += len(raw)


def read_logical_lines(path: str | Path) -> Iterator[LogicalLine]:
    """
    Read a Dockerfile lazily. Both `\\n` and `\\r\\n` line endings are accepted.

    Lines are decoded one at a time, so bytes that are not UTF-8 stop the
    replay at the line that holds them with a DockerfileError.
    """
    yield from fold_lines(_decode_lines(Path(path)))
