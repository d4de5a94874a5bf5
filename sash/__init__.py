#!/usr/bin/env python3
# sash/__init__.py
from __future__ import annotations
"""
sash: a mode-based command shell toolkit.

Minimal example:

    from sash import Shell, CommandStatus, VariableSubstitutionEngine

    shell = Shell()
    main = shell.add_mode("main", "> ")
    shell.push_mode("main")
    shell.add_preprocessor(VariableSubstitutionEngine.create({"user": "me"}))

    @main.command("echo", "prints its arguments")
    def echo(arguments):
        print(arguments)

    while (line := shell.read_line()) is not None:
        if shell.process(line) is CommandStatus.NO_COMMAND:
            print(shell.last_error)
"""


from sash.commands import (
    CommandCallback,
    CommandClause,
    CommandNode,
    CommandResult,
    CommandStatus,
)
from sash.config import ShellConfig, configure_logging, load_config
from sash.interface import (
    CompletionRegistry,
    CompletionStatus,
    LineBackend,
    Mode,
    PlainBackend,
    Shell,
    complete_common_prefix,
    make_backend,
)
from sash.preprocess import (
    Preprocessor,
    PreprocessError,
    VariableSubstitutionEngine,
    VariableSyntaxError,
)

__all__ = [
    "CommandCallback",
    "CommandClause",
    "CommandNode",
    "CommandResult",
    "CommandStatus",
    "ShellConfig",
    "configure_logging",
    "load_config",
    "CompletionRegistry",
    "CompletionStatus",
    "LineBackend",
    "Mode",
    "PlainBackend",
    "Shell",
    "complete_common_prefix",
    "make_backend",
    "Preprocessor",
    "PreprocessError",
    "VariableSubstitutionEngine",
    "VariableSyntaxError",
]
