"""
script.py

Responsibility: Render parsed instructions as a standalone bash script.

Nothing is executed and nothing is substituted here; the generated script
exports every ARG/ENV value and lets bash expand references when it runs.
Each RUN gets its own `bash -c`, so a `cd` inside one RUN does not leak into
the next, matching the replay.
"""

from __future__ import annotations

import posixpath
import shlex
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import unquote, urlparse

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from dockerrun import __version__
from dockerrun.downloader import is_remote
from dockerrun.instructions import Add, Arg, Env, Instruction, Run, Unsupported, Workdir

TEMPLATES_DIR = Path(__file__).parent / "templates"
SCRIPT_TEMPLATE = "replay.sh.j2"


class ScriptError(RuntimeError):
    pass


def double_quote(value: str) -> str:
    """
    Quote for bash double quotes: `$` stays live so variables expand, but
    quotes, backslashes and backticks are escaped.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("`", "\\`")
    # A backslash that escaped a dollar in the source stays an escape
    escaped = escaped.replace("\\\\$", "\\$")
    return f'"{escaped}"'


def _step(instruction: Instruction) -> dict[str, Any]:
    step: dict[str, Any] = {"lineno": instruction.lineno, "source": instruction.line.text}

    if isinstance(instruction, Arg):
        step.update(kind="arg", name=instruction.name, default=instruction.default)
    elif isinstance(instruction, Env):
        step.update(kind="env", name=instruction.name, value=instruction.value)
    elif isinstance(instruction, Run):
        step.update(kind="run", command=instruction.command, argv=instruction.argv)
    elif isinstance(instruction, Workdir):
        step.update(kind="workdir", path=instruction.path)
    elif isinstance(instruction, Add):
        dest = instruction.destination
        as_directory = dest.endswith("/") or dest in (".", "./")
        if "$" in instruction.source and not is_remote(instruction.source):
            # The URL is only known once bash expands it; the script checks it then
            step.update(
                kind="add",
                dynamic=True,
                url=instruction.source,
                destination=posixpath.join(dest, "") if as_directory else dest,
                as_directory=as_directory,
            )
            return step
        if not is_remote(instruction.source):
            step.update(kind="skip", reason="only http(s) URL sources are supported")
            return step
        if as_directory:
            name = posixpath.basename(unquote(urlparse(instruction.source).path))
            if not name:
                step.update(kind="skip", reason="cannot derive a file name from the URL")
                return step
            dest = posixpath.join(dest, name)
        step.update(kind="add", dynamic=False, url=instruction.source, destination=dest)
    elif isinstance(instruction, Unsupported):
        step.update(kind="skip", reason=instruction.reason or f"{instruction.directive} is not supported")
    else:
        raise ScriptError(f"unknown instruction type: {type(instruction).__name__}")
    return step


def render_script(instructions: Iterable[Instruction], *, source: str = "Dockerfile") -> str:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["shquote"] = shlex.quote
    env.filters["dq"] = double_quote

    steps = [_step(i) for i in instructions]
    try:
        template = env.get_template(SCRIPT_TEMPLATE)
        return template.render(steps=steps, source=source, version=__version__)
    except Exception as e:  # noqa: BLE001 - surface as ScriptError
        raise ScriptError(f"Failed rendering {SCRIPT_TEMPLATE}") from e
