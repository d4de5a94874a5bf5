#!/usr/bin/env python3
# sash/interface/mode.py
from __future__ import annotations

"""
Modes: independent command namespaces.

A mode bundles one command tree, one completion registry and one
line-editing backend, so each mode has its own commands, prompt, history and
completions. The root node of the tree carries the mode's name and is
created together with the mode.
"""

from os import PathLike
from typing import Callable, Iterable, Optional, Union

from sash.commands import (
    CommandCallback,
    CommandClause,
    CommandNode,
    CommandResult,
)
from sash.interface.cli import DEFAULT_HISTORY_SIZE, LineBackend, make_backend
from sash.interface.completion import CompletionCallback, CompletionRegistry
from sash.ui import ColorSpec

BackendFactory = Callable[..., LineBackend]


class Mode:
    """A command-line context with its own commands, history, and prompt."""

    def __init__(
        self,
        name: str,
        *,
        prompt: str = ">",
        prompt_color: ColorSpec = None,
        history_file: Optional[Union[str, PathLike]] = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
        unique_history: bool = True,
        backend_factory: BackendFactory = make_backend,
    ) -> None:
        self._completer = CompletionRegistry()
        self._backend = backend_factory(
            completer=self._completer,
            history_file=history_file,
            history_size=history_size,
            unique_history=unique_history,
        )
        self._backend.set_prompt(prompt, prompt_color)
        self._root = CommandNode(name, completer=self._completer)

    def __repr__(self) -> str:
        return f"Mode({self.name!r}, commands={len(self._root.children)})"

    # ---------------- Accessors ----------------

    @property
    def name(self) -> str:
        return self._root.name

    @property
    def root(self) -> CommandNode:
        return self._root

    @property
    def completer(self) -> CompletionRegistry:
        return self._completer

    @property
    def backend(self) -> LineBackend:
        return self._backend

    @property
    def prompt(self) -> str:
        return self._backend.prompt

    @property
    def history_file(self):
        return self._backend.history_file

    def set_prompt(self, text: str, color: ColorSpec = None) -> None:
        self._backend.set_prompt(text, color)

    # ---------------- Commands ----------------

    def add(
        self,
        name: str,
        description: str = "",
        handler: Optional[CommandCallback] = None,
    ) -> Optional[CommandNode]:
        """Add a top-level command (optionally with handler); None if the name is taken."""
        node = self._root.add(name, description)
        if node is not None and handler is not None:
            node.set_handler(handler)
        return node

    def add_all(
        self,
        clauses: Iterable[Union[CommandClause, tuple]],
    ) -> list[Optional[CommandNode]]:
        """Add several top-level commands from (name, description, handler) clauses."""
        return [self.add(*CommandClause(*clause)) for clause in clauses]

    def command(self, name: str, description: str = ""):
        """Decorator form of add(); see CommandNode.command."""
        return self._root.command(name, description)

    def on_unknown_command(self, handler: Optional[CommandCallback]) -> None:
        """Handle lines whose first token matches no top-level command."""
        self._root.set_handler(handler)

    def help(self, indent: int = 0) -> str:
        return self._root.help(indent)

    def execute(self, line: str) -> CommandResult:
        return self._root.execute(line)

    # ---------------- Completion ----------------

    def on_complete(self, callback: Optional[CompletionCallback]) -> None:
        self._completer.on_completion(callback)

    def add_completion(self, text: str) -> bool:
        return self._completer.add_completion(text)

    def replace_completions(self, completions: Iterable[str]) -> None:
        self._completer.replace_completions(completions)
