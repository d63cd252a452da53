"""Project-wide logging helper: labelled print lines with colored severity."""

from __future__ import annotations

import builtins
import re

COLOR_RESET = "\033[0m"
COLOR_MAP = {
    "OK": "\033[32m",
    "INFO": "\033[34m",
    "WARN": "\033[33m",
    "ERROR": "\033[31m",
    "SKIP": "\033[96m",
    "EARTH": "\033[35m",
}

_LABEL_PATTERN = re.compile(r"^\[(" + "|".join(COLOR_MAP) + r")\]")
_original_print = builtins.print
_installed = False


def log(label: str, message: str, name: str | None = None) -> None:
    """Print `[LABEL] [name] message`, the line format every module uses."""
    prefix = f"[{label}] "
    if name:
        prefix += f"[{name}] "
    print(f"{prefix}{message}")


def _colorize_text(value: str) -> str:
    def repl(match: re.Match[str]) -> str:
        label = match.group(1)
        return f"[{COLOR_MAP[label]}{label}{COLOR_RESET}]"

    return _LABEL_PATTERN.sub(repl, value, count=1)


def _colored_print(*args, **kwargs):
    if args and isinstance(args[0], str):
        args = (_colorize_text(args[0]),) + args[1:]
    _original_print(*args, **kwargs)


def enable_colored_logging() -> None:
    """Install a print wrapper that colorizes leading severity labels."""
    global _installed
    if _installed:
        return
    builtins.print = _colored_print  # type: ignore[assignment]
    _installed = True

