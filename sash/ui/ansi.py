#!/usr/bin/env python3
# sash/ui/ansi.py
from __future__ import annotations

"""
ANSI styling for prompts and log lines.

Style names map to SGR escape sequences:
    reset, bold, dim, underline, reverse
    black red green yellow blue magenta cyan white
    bright_<colour> for the high-intensity variants
"""

import ctypes
import os
import re
from typing import Iterable, Optional, Union

_ESC = "\x1b["
_COLOURS = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")
_ATTRIBUTES = {"reset": 0, "bold": 1, "dim": 2, "underline": 4, "reverse": 7}


def _sgr(code: int) -> str:
    return f"{_ESC}{code}m"


ANSI: dict[str, str] = {name: _sgr(code) for name, code in _ATTRIBUTES.items()}
ANSI.update({name: _sgr(30 + offset) for offset, name in enumerate(_COLOURS)})
ANSI.update({f"bright_{name}": _sgr(90 + offset) for offset, name in enumerate(_COLOURS)})

# One style name ("red") or several ("bold", "red").
ColorSpec = Union[str, Iterable[str], None]

# CSI sequences: ESC [ params final-byte
ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_vt_state: Optional[bool] = None


def strip_ansi(text: str) -> str:
    return ANSI_REGEX.sub("", text)


def enable_windows_vt() -> bool:
    """
    Report whether escape sequences will be honoured by the console.

    On Windows this switches the console into virtual-terminal mode first
    (once per process). Everywhere else it is always True.
    """
    global _vt_state
    if _vt_state is None:
        _vt_state = _switch_console_to_vt()
    return _vt_state


def _switch_console_to_vt() -> bool:
    if os.name != "nt":
        return True
    # Windows Terminal and xterm-likes already speak VT
    if os.environ.get("WT_SESSION") or os.environ.get("TERM", "").startswith(("xterm", "vt100")):
        return True
    try:
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        console = kernel32.GetStdHandle(-11)  # STD_OUTPUT_HANDLE
        flags = ctypes.c_uint()
        if not kernel32.GetConsoleMode(console, ctypes.byref(flags)):
            return False
        # ENABLE_VIRTUAL_TERMINAL_PROCESSING
        return bool(kernel32.SetConsoleMode(console, flags.value | 0x0004))
    except (AttributeError, OSError):
        return False


def style_names(color: ColorSpec) -> tuple[str, ...]:
    """Turn a ColorSpec into a tuple of style names."""
    if color is None:
        return ()
    if isinstance(color, str):
        return (color,)
    return tuple(color)


def validate_styles(color: ColorSpec) -> tuple[str, ...]:
    """Like style_names(), but raise ValueError for names missing from ANSI."""
    names = style_names(color)
    unknown = [name for name in names if name not in ANSI]
    if unknown:
        raise ValueError(
            f"Unknown style(s) {unknown}; expected names from {sorted(ANSI)}")
    return names


def colorize(text: str, *styles: str) -> str:
    """Wrap `text` in the given styles followed by a reset; unknown names are skipped."""
    prefix = "".join(ANSI[name] for name in styles if name in ANSI)
    if not prefix:
        return text
    return prefix + text + ANSI["reset"]
