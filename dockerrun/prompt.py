"""
prompt.py

Responsibility: Ask the operator for ARG values.

The Variable Store only ever talks to a `Prompter`; terminal I/O lives here so
tests can substitute a scripted responder.
"""

from __future__ import annotations

from typing import Callable

from dockerrun.errors import PromptAbort


class Prompter:
    """Base class for ARG value sources."""

    def prompt(self, name: str, default: str | None = None) -> str:
        raise NotImplementedError


class TerminalPrompter(Prompter):
    """
    Ask on the terminal. An empty answer or end-of-input takes the offered
    default; with nothing to offer, either one aborts the run.
    """

    def __init__(self, input_func: Callable[[str], str] = input) -> None:
        self._input = input_func

    def prompt(self, name: str, default: str | None = None) -> str:
        suffix = f" (default: {default})" if default is not None else ""
        try:
            answer = self._input(f"Enter value for ARG {name}{suffix}: ")
        except EOFError as e:
            if default is not None:
                return default
            raise PromptAbort(f"No value provided for ARG {name} (end of input)") from e

        answer = answer.strip()
        if answer:
            return answer
        if default is not None:
            return default
        raise PromptAbort(f"No value provided for ARG {name}")


class NonInteractivePrompter(Prompter):
    """Never ask: take the default or abort."""

    def prompt(self, name: str, default: str | None = None) -> str:
        if default is None:
            raise PromptAbort(
                f"ARG {name} has no default and prompting is disabled "
                f"(pass --build-arg {name}=VALUE or set {name} in the environment)"
            )
        return default
