"""
config.py

Responsibility: Collect replay settings into a single typed, immutable model.

Sources, highest precedence first:
- CLI flags
- `DOCKERRUN_*` environment variables
- an optional YAML args file supplying ARG values

The CLI and executor should treat `ReplayConfig` as the single source of truth.
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from dockerrun.shell import DEFAULT_SHELL
from dockerrun.substitution import is_valid_name

DEFAULT_DOCKERFILE = "Dockerfile"
DEFAULT_TIMEOUT = 60.0

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ReplayConfig:
    """Settings for one replay run."""

    dockerfile: Path = Path(DEFAULT_DOCKERFILE)
    debug: bool = False
    interactive: bool = True
    shell: tuple[str, ...] = DEFAULT_SHELL
    timeout: float = DEFAULT_TIMEOUT
    build_args: dict[str, str] = field(default_factory=dict)
    emit_script: str | None = None


def env_flag(name: str, environ: Mapping[str, str] | None = None) -> bool:
    environ = os.environ if environ is None else environ
    return environ.get(name, "").strip().lower() in _TRUTHY


def _scalar(name: str, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"Value for ARG `{name}` must be a scalar, got {type(value).__name__}.")


def load_args_file(path: str | Path) -> dict[str, str]:
    """
    Load ARG values from a YAML mapping of NAME: value.

    An empty file yields no values. `null` values are dropped so the ARG falls
    through to the environment or a prompt.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Args file does not exist: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Args file is not valid YAML: {p}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Args file must be a mapping of ARG names to values: {p}")

    out: dict[str, str] = {}
    for key, value in data.items():
        name = str(key)
        if not is_valid_name(name):
            raise ConfigError(f"Invalid ARG name in {p}: {name!r}")
        if value is None:
            continue
        out[name] = _scalar(name, value)
    return out


def parse_build_args(items: Iterable[str], environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Parse repeated `NAME=VALUE` flags. A bare `NAME` takes its value from
    the environment, as `docker build --build-arg NAME` does.
    """
    environ = os.environ if environ is None else environ
    out: dict[str, str] = {}
    for item in items:
        if "=" in item:
            name, value = item.split("=", 1)
        else:
            name = item
            if name not in environ:
                raise ConfigError(f"--build-arg {name} has no value and {name} is not set in the environment")
            value = environ[name]
        name = name.strip()
        if not is_valid_name(name):
            raise ConfigError(f"Invalid --build-arg name: {name!r}")
        out[name] = value
    return out


def parse_shell(value: str) -> tuple[str, ...]:
    try:
        parts = tuple(shlex.split(value))
    except ValueError as e:
        raise ConfigError(f"Cannot parse --shell {value!r}: {e}") from e
    if not parts:
        raise ConfigError("--shell must not be empty")
    return parts
