"""
variables.py

Responsibility: The Variable Store, the runtime mapping of ARG/ENV names to
string values.

ARG names are resolved once, in this order:
1) an explicit build argument (`--build-arg`, `--args-file`)
2) a process environment variable of the same name
3) the prompter, offered the instruction's default if there is one

ENV names are set unconditionally and may be reassigned freely.
The process environment is read, never written.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator, Mapping

from dockerrun.prompt import Prompter

logger = logging.getLogger(__name__)


class VariableStore:
    def __init__(
        self,
        *,
        build_args: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._values: dict[str, str] = {}
        self._build_args = dict(build_args or {})
        self._environ = os.environ if environ is None else environ

    def declare_arg(self, name: str, default: str | None, prompter: Prompter) -> str:
        """
        Resolve and store an ARG. May block on the prompter.
        """
        if name in self._values:
            logger.debug("ARG %s already set, keeping %r", name, self._values[name])
            return self._values[name]

        if name in self._build_args:
            value = self._build_args[name]
            logger.debug("ARG %s from build arguments: %r", name, value)
        elif name in self._environ:
            value = self._environ[name]
            logger.debug("ARG %s from environment: %r", name, value)
        else:
            value = prompter.prompt(name, default)
            logger.debug("ARG %s resolved to %r", name, value)

        self._values[name] = value
        return value

    def declare_env(self, name: str, value: str) -> None:
        self._values[name] = value

    def lookup(self, name: str) -> str | None:
        """
        Current value of `name`, or None when it was never declared. Callers
        decide what an unset name means; substitution leaves it literal.
        """
        return self._values.get(name)

    def as_environ(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """The environment for a child process: `base` overlaid with every variable."""
        env = dict(self._environ if base is None else base)
        env.update(self._values)
        return env

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
