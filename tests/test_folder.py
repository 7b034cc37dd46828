from __future__ import annotations

from pathlib import Path

import pytest

from dockerrun.errors import DockerfileError
from dockerrun.folder import LogicalLine, fold_lines, read_logical_lines


def fold(text: str) -> list[str]:
    return [line.text for line in fold_lines(text.splitlines(keepends=True))]


def test_single_lines_pass_through() -> None:
    assert fold("ARG A=1\nRUN echo hi\n") == ["ARG A=1", "RUN echo hi"]


def test_continuation_joins_into_one_command() -> None:
    assert fold("RUN a && \\\n    b\n") == ["RUN a && b"]


def test_continuation_without_space_before_marker() -> None:
    assert fold("RUN echo one\\\ntwo\n") == ["RUN echo one two"]


def test_multiple_continuations() -> None:
    text = "RUN apt-get update && \\\n    apt-get install -y \\\n      curl \\\n      git\n"
    assert fold(text) == ["RUN apt-get update && apt-get install -y curl git"]


def test_comments_and_blank_lines_inside_continuation_are_elided() -> None:
    text = "RUN a \\\n\n    # explain b\n    && b\nRUN c\n"
    assert fold(text) == ["RUN a && b", "RUN c"]


def test_comments_and_blank_lines_between_instructions_are_skipped() -> None:
    text = "# header\n\nENV A=1\n   # indented comment\n\nRUN x\n"
    assert fold(text) == ["ENV A=1", "RUN x"]


def test_file_ending_mid_continuation_yields_partial_content() -> None:
    assert fold("RUN a && \\\n") == ["RUN a &&"]
    assert fold("RUN a && \\") == ["RUN a &&"]


def test_trailing_whitespace_after_marker_is_not_a_continuation() -> None:
    assert fold("RUN echo a \\ \nRUN echo b\n") == ["RUN echo a \\", "RUN echo b"]


def test_crlf_line_endings() -> None:
    assert fold("ENV A=1\r\nRUN a && \\\r\n  b\r\n") == ["ENV A=1", "RUN a && b"]


def test_line_numbers_point_at_first_physical_line() -> None:
    lines = list(fold_lines(["# c\n", "RUN a \\\n", "  b\n", "\n", "ENV X=1\n"]))
    assert lines == [LogicalLine("RUN a b", 2), LogicalLine("ENV X=1", 5)]


def test_folding_is_lazy() -> None:
    def source():
        yield "RUN first\n"
        raise AssertionError("read past the first instruction")

    it = fold_lines(source())
    assert next(it).text == "RUN first"


def test_read_logical_lines_from_file(tmp_path: Path) -> None:
    path = tmp_path / "Dockerfile"
    path.write_bytes(b"ARG V=1.0\r\nRUN echo $V \\\r\n  && true\r\n")
    assert [line.text for line in read_logical_lines(path)] == ["ARG V=1.0", "RUN echo $V && true"]


def test_read_logical_lines_reports_undecodable_line(tmp_path: Path) -> None:
    path = tmp_path / "Dockerfile"
    path.write_bytes(b"\xef\xbb\xbfRUN one\nENV A=\xc3(\n")
    lines = read_logical_lines(path)
    assert next(lines).text == "RUN one"
    with pytest.raises(DockerfileError, match=r"line 2 is not valid UTF-8 \(byte offset 17\)"):
        next(lines)
