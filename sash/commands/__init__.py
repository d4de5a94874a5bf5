#!/usr/bin/env python3
# sash/commands/__init__.py
from __future__ import annotations

"""
Package for the command tree.

Provides:
- Result types and protocols (`CommandStatus`, `CommandResult`, `CommandCallback`, `CommandClause`).
- The hierarchical command node (`CommandNode`).

This package re-exports public APIs from:
- command_types.py
- commands.py
"""


# Re-export from submodules
from .command_types import (
    CommandCallback,
    CommandClause,
    CommandResult,
    CommandStatus,
    normalize_result,
)
from .commands import CommandNode

__all__ = [
    "CommandCallback",
    "CommandClause",
    "CommandResult",
    "CommandStatus",
    "normalize_result",
    "CommandNode",
]
