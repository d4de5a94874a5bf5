#!/usr/bin/env python3
# sash/interface/__init__.py
from __future__ import annotations

"""
Package for the interactive side of the shell.

Provides:
- Completion registry consulted by the line editors.
- Line-editing backends (prompt_toolkit / readline / plain streams).
- Modes bundling a command tree, completions and a backend.
- The Shell: mode registry, mode stack and line dispatch.
"""


# Completion FIRST (cli depends on it)
from .completion import (
    CompletionCallback,
    CompletionRegistry,
    CompletionStatus,
    complete_common_prefix,
)

# Backends
from .cli import (
    BACKENDS,
    DEFAULT_HISTORY_SIZE,
    LineBackend,
    PlainBackend,
    PromptToolkitBackend,
    ReadlineBackend,
    cbreak_mode,
    make_backend,
)

# Modes and dispatch
from .mode import Mode
from .shell import Shell

__all__ = [
    # completion
    "CompletionCallback",
    "CompletionRegistry",
    "CompletionStatus",
    "complete_common_prefix",
    # cli
    "BACKENDS",
    "DEFAULT_HISTORY_SIZE",
    "LineBackend",
    "PlainBackend",
    "PromptToolkitBackend",
    "ReadlineBackend",
    "cbreak_mode",
    "make_backend",
    # modes / shell
    "Mode",
    "Shell",
]
