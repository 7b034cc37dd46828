from __future__ import annotations

import pytest
from conftest import ScriptedPrompter

from dockerrun.errors import PromptAbort
from dockerrun.prompt import NonInteractivePrompter, TerminalPrompter
from dockerrun.variables import VariableStore


def test_arg_default_accepted_at_prompt() -> None:
    store = VariableStore(environ={})
    prompter = ScriptedPrompter([""])
    assert store.declare_arg("V", "1.0", prompter) == "1.0"
    assert store.lookup("V") == "1.0"
    assert prompter.asked == [("V", "1.0")]


def test_arg_from_environment_does_not_prompt() -> None:
    store = VariableStore(environ={"V": "override"})
    prompter = ScriptedPrompter()
    assert store.declare_arg("V", None, prompter) == "override"
    assert prompter.asked == []


def test_environment_beats_default() -> None:
    store = VariableStore(environ={"V": "env"})
    assert store.declare_arg("V", "1.0", ScriptedPrompter()) == "env"


def test_build_args_beat_environment() -> None:
    store = VariableStore(environ={"V": "env"}, build_args={"V": "cli"})
    assert store.declare_arg("V", "1.0", ScriptedPrompter()) == "cli"


def test_operator_answer_wins_over_default() -> None:
    store = VariableStore(environ={})
    assert store.declare_arg("V", "1.0", ScriptedPrompter(["2.0"])) == "2.0"


def test_arg_without_any_value_aborts() -> None:
    store = VariableStore(environ={})
    with pytest.raises(PromptAbort):
        store.declare_arg("V", None, ScriptedPrompter([""]))
    assert "V" not in store


def test_arg_already_set_keeps_value_without_prompting() -> None:
    store = VariableStore(environ={})
    store.declare_env("V", "from-env")
    prompter = ScriptedPrompter()
    assert store.declare_arg("V", "1.0", prompter) == "from-env"
    assert prompter.asked == []


def test_env_overwrites() -> None:
    store = VariableStore(environ={})
    store.declare_arg("V", "1", ScriptedPrompter([""]))
    store.declare_env("V", "2")
    store.declare_env("V", "3")
    assert store.lookup("V") == "3"


def test_lookup_unset_is_none() -> None:
    assert VariableStore(environ={"HOME": "/root"}).lookup("HOME") is None


def test_insertion_order_is_kept() -> None:
    store = VariableStore(environ={})
    store.declare_env("Z", "1")
    store.declare_env("A", "2")
    assert list(store) == ["Z", "A"]
    assert len(store) == 2


def test_as_environ_overlays_variables_without_touching_process_env() -> None:
    environ = {"PATH": "/bin", "V": "old"}
    store = VariableStore(environ=environ)
    store.declare_env("V", "new")
    store.declare_env("W", "w")
    assert store.as_environ() == {"PATH": "/bin", "V": "new", "W": "w"}
    assert environ == {"PATH": "/bin", "V": "old"}


def test_terminal_prompter_offers_default() -> None:
    seen: list[str] = []

    def fake_input(message: str) -> str:
        seen.append(message)
        return "\n"

    assert TerminalPrompter(fake_input).prompt("V", "1.0") == "1.0"
    assert seen == ["Enter value for ARG V (default: 1.0): "]


def test_terminal_prompter_strips_answer() -> None:
    assert TerminalPrompter(lambda _m: "  9.9  ").prompt("V") == "9.9"


def test_terminal_prompter_empty_answer_without_default_aborts() -> None:
    with pytest.raises(PromptAbort, match="No value provided for ARG V"):
        TerminalPrompter(lambda _m: "").prompt("V")


def _eof(_message: str) -> str:
    raise EOFError


def test_terminal_prompter_end_of_input_takes_the_default() -> None:
    assert TerminalPrompter(_eof).prompt("V", "1.0") == "1.0"
    assert TerminalPrompter(_eof).prompt("V", "") == ""


def test_terminal_prompter_end_of_input_without_default_aborts() -> None:
    with pytest.raises(PromptAbort, match="end of input"):
        TerminalPrompter(_eof).prompt("V")


def test_non_interactive_prompter() -> None:
    assert NonInteractivePrompter().prompt("V", "1.0") == "1.0"
    assert NonInteractivePrompter().prompt("V", "") == ""
    with pytest.raises(PromptAbort, match="--build-arg V=VALUE"):
        NonInteractivePrompter().prompt("V")
