"""Colored ``[fullsend]`` status lines on stderr."""

from __future__ import annotations

import os
import sys
from typing import Optional, TextIO

from colorama import Fore, Style, init as colorama_init

colorama_init()

DEBUG: bool = bool(os.environ.get("FULLSEND_DEBUG"))

_LEVEL_COLORS = {
    "debug": Style.DIM,
    "info": Style.DIM,
    "warn": Fore.YELLOW,
    "error": Fore.RED,
    "ok": Fore.GREEN,
}


def log(msg: str, level: str = "info", stream: Optional[TextIO] = None) -> None:
    """Print a ``[fullsend]``-prefixed, colored status line."""
    if level == "debug" and not DEBUG:
        return
    stream = stream or sys.stderr
    color = _LEVEL_COLORS.get(level, "")
    print(f"{color}[fullsend] {msg}{Style.RESET_ALL}", file=stream)
