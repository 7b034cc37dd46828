"""
substitution.py

Responsibility: Expand `$NAME` and `${NAME}` references in argument text.

- Single left-to-right pass; substituted values are never re-scanned.
- `$NAME` takes the longest run of letters, digits and underscores.
- `${NAME}` runs to the next `}`. An unterminated `${` is left alone.
- Names the lookup does not know are left exactly as written, so the shell
  that eventually runs the text can still expand its own variables.
- `\\$` is never expanded; both characters are kept.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

VAR_NAME_RX = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Lookup = Callable[[str], Optional[str]]


def is_valid_name(name: str) -> bool:
    return bool(VAR_NAME_RX.match(name))


def _is_name_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


def substitute(text: str, lookup: Lookup) -> str:
    """
    Return `text` with every known variable reference replaced by its value.
    """
    out: list[str] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch == "\\" and i + 1 < n and text[i + 1] == "$":
            out.append("\\$")
            i += 2
            continue

        if ch != "$" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue

        if text[i + 1] == "{":
            end = text.find("}", i + 2)
            if end == -1:
                out.append("$")
                i += 1
                continue
            name = text[i + 2 : end]
            value = lookup(name) if name else None
            out.append(text[i : end + 1] if value is None else value)
            i = end + 1
            continue

        j = i + 1
        while j < n and _is_name_char(text[j]):
            j += 1
        if j == i + 1:
            # Not a reference ($$, $(, trailing $ ...)
            out.append("$")
            i += 1
            continue

        value = lookup(text[i + 1 : j])
        out.append(text[i:j] if value is None else value)
        i = j

    return "".join(out)
