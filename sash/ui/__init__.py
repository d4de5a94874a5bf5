#!/usr/bin/env python3
# sash/ui/__init__.py
from __future__ import annotations
# Re-export convenient top-level API
from .ansi import (
    ANSI,
    ANSI_REGEX,
    ColorSpec,
    colorize,
    enable_windows_vt,
    strip_ansi,
    style_names,
    validate_styles,
)
from .logging import (
    ColorizingStreamHandler,
    PlainFormatter,
    init_logger,
)

__all__ = [
    "ANSI",
    "ANSI_REGEX",
    "ColorSpec",
    "colorize",
    "enable_windows_vt",
    "strip_ansi",
    "style_names",
    "validate_styles",
    "ColorizingStreamHandler",
    "PlainFormatter",
    "init_logger",
]
