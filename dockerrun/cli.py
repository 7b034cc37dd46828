"""
cli.py

Responsibility: CLI entrypoint for dockerrun.

High-level flow:
1) Build `ReplayConfig` from flags, environment and the optional args file
2) Parse the Dockerfile lazily into instructions
3) Either render them as a bash script (`--emit-script`) or replay them

Exit status is 0 after a full replay and 1 after any fatal error.

This module should orchestrate behavior but keep concerns isolated:
- Parsing: `folder.py`, `instructions.py`
- Replay: `executor.py` and its collaborators
- Script export: `script.py`
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dockerrun import __version__
from dockerrun.config import (
    DEFAULT_DOCKERFILE,
    DEFAULT_TIMEOUT,
    ConfigError,
    ReplayConfig,
    env_flag,
    load_args_file,
    parse_build_args,
    parse_shell,
)
from dockerrun.downloader import Downloader
from dockerrun.errors import ReplayError
from dockerrun.executor import BuildState, Replayer
from dockerrun.instructions import parse_dockerfile
from dockerrun.log import LOGGER_NAME, hint, setup_logging
from dockerrun.prompt import NonInteractivePrompter, TerminalPrompter
from dockerrun.script import ScriptError, render_script
from dockerrun.shell import DEFAULT_SHELL, ShellRunner
from dockerrun.variables import VariableStore

logger = logging.getLogger(LOGGER_NAME)


class CLIError(RuntimeError):
    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


def _build_config(args: argparse.Namespace) -> ReplayConfig:
    dockerfile = args.file or os.environ.get("DOCKERRUN_FILE") or DEFAULT_DOCKERFILE

    build_args: dict[str, str] = {}
    args_file = args.args_file or os.environ.get("DOCKERRUN_ARGS_FILE")
    if args_file:
        build_args.update(load_args_file(args_file))
    # --build-arg wins over the args file
    build_args.update(parse_build_args(args.build_arg or []))

    return ReplayConfig(
        dockerfile=Path(dockerfile),
        debug=bool(args.debug) or env_flag("DOCKERRUN_DEBUG"),
        interactive=not bool(args.no_input),
        shell=parse_shell(args.shell) if args.shell else DEFAULT_SHELL,
        timeout=float(args.timeout),
        build_args=build_args,
        emit_script=args.emit_script,
    )


def _emit_script(config: ReplayConfig) -> int:
    text = render_script(parse_dockerfile(config.dockerfile), source=str(config.dockerfile))
    if config.emit_script == "-":
        sys.stdout.write(text)
    else:
        out = Path(config.emit_script)
        out.write_text(text, encoding="utf-8", newline="\n")
        out.chmod(0o755)
        logger.info("Wrote %s", out)
    return 0


def replay_cmd(config: ReplayConfig) -> int:
    if not config.dockerfile.is_file():
        raise CLIError(
            f"Dockerfile not found at: {config.dockerfile}",
            hint="Make sure the Dockerfile exists in the specified path or use -f/--file to specify a different path.",
        )

    logger.debug("Reading Dockerfile from: %s", config.dockerfile)

    if config.emit_script:
        return _emit_script(config)

    replayer = Replayer(
        state=BuildState(variables=VariableStore(build_args=config.build_args), workdir=Path.cwd()),
        prompter=TerminalPrompter() if config.interactive else NonInteractivePrompter(),
        runner=ShellRunner(config.shell),
        downloader=Downloader(timeout=config.timeout),
    )
    result = replayer.run(parse_dockerfile(config.dockerfile))
    logger.debug("Replay finished: %d dispatched, %d skipped", result.dispatched, result.skipped)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dockerrun", description="Run a Dockerfile's build steps on this host")
    p.add_argument(
        "-f",
        "--file",
        default=None,
        metavar="DOCKERFILE",
        help="Path to the Dockerfile (default: Dockerfile, or env DOCKERRUN_FILE)",
    )
    p.add_argument("-d", "--debug", action="store_true", help="Trace each instruction (or set env DOCKERRUN_DEBUG=1)")
    p.add_argument(
        "--build-arg",
        action="append",
        metavar="NAME[=VALUE]",
        help="Set an ARG value without prompting (repeatable)",
    )
    p.add_argument("--args-file", default=None, help="YAML file of ARG values (or env DOCKERRUN_ARGS_FILE)")
    p.add_argument("--no-input", action="store_true", help="Never prompt; ARGs without a value are an error")
    p.add_argument("--shell", default=None, help="Shell used for RUN (default: 'bash -c')")
    p.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Download timeout in seconds for ADD (default: {DEFAULT_TIMEOUT:g})",
    )
    p.add_argument(
        "--emit-script",
        default=None,
        metavar="PATH",
        help="Write the Dockerfile as a bash script to PATH ('-' for stdout) instead of running it",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(debug=bool(args.debug) or env_flag("DOCKERRUN_DEBUG"))

    try:
        config = _build_config(args)
        return replay_cmd(config)
    except CLIError as e:
        logger.error("%s", e)
        if e.hint:
            hint(logger, "%s", e.hint)
        return 1
    except (ConfigError, ReplayError, ScriptError) as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
