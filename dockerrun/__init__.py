"""
dockerrun package

Replays a Dockerfile's build steps directly on the host, without a container
runtime.

Key responsibilities are split across modules:
- `folder.py`: join continued physical lines into logical lines
- `instructions.py`: classify logical lines into typed instructions
- `substitution.py`: `$NAME` / `${NAME}` expansion
- `variables.py`: the ARG/ENV Variable Store
- `prompt.py`: asking the operator for ARG values
- `shell.py` / `downloader.py`: host side effects for RUN and ADD
- `executor.py`: sequential dispatch of instructions
- `script.py`: render instructions as a bash script instead of running them
- `cli.py`: CLI entrypoint and orchestration (config -> parse -> replay)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
