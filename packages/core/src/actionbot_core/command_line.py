from __future__ import annotations

import os
import re
from typing import Mapping, Sequence

_INTERPRETER_RE = re.compile(r"^(node|python(\d+(\.\d+)?)?)(\.exe)?$")


def _is_interpreter(token: str) -> bool:
    return bool(_INTERPRETER_RE.match(os.path.basename(token)))


def format_command(raw_args: Sequence[str]) -> str:
    """Rebuild a display-friendly command line from an argument vector.

    Tokens containing whitespace are double-quoted and a leading interpreter
    token (``node``, ``python3``, ...) is dropped, along with the ``-m`` switch
    of ``python -m pkg``. The program itself is shown by its basename:

        ["node", "tool", "run", "--name", "my value"] -> 'tool run --name "my value"'
    """
    tokens = list(raw_args)
    if tokens and _is_interpreter(tokens[0]):
        tokens = tokens[1:]
        if tokens and tokens[0] == "-m":
            tokens = tokens[1:]
    if not tokens:
        return "???"
    # Entry-point scripts arrive as absolute paths.
    tokens[0] = os.path.basename(tokens[0]) or tokens[0]
    return " ".join(f'"{t}"' if any(ch.isspace() for ch in t) else t for t in tokens)


def merge_options(parent: Mapping | None, child: Mapping | None) -> dict:
    """Merge top-level and subcommand options; subcommand values win.

    A subcommand option left unset (None) does not shadow a value given at
    the top level.
    """
    merged = dict(parent or {})
    for key, value in (child or {}).items():
        if value is not None or key not in merged:
            merged[key] = value
    return merged
