#!/usr/bin/env python3
# sash/commands/commands.py
from __future__ import annotations

"""
Hierarchical command tree.

A CommandNode is one word of a command line. Children are matched against
the first space-delimited token of the remaining input; the first node that
has no matching child handles the rest of the line with its handler.

    root
     ├── show
     │    ├── modes
     │    └── vars      <- "show vars x" calls vars' handler with "x"
     └── quit
"""

import logging
import weakref
from typing import TYPE_CHECKING, Callable, Optional

from sash.commands.command_types import (
    CommandCallback,
    CommandResult,
    CommandStatus,
    normalize_result,
)

if TYPE_CHECKING:
    from sash.interface.completion import CompletionRegistry

log = logging.getLogger(__name__)


class CommandNode:
    """A named, described command with optional handler and sub-commands."""

    def __init__(
        self,
        name: str,
        description: str = "",
        *,
        completer: Optional["CompletionRegistry"] = None,
        parent: Optional["CommandNode"] = None,
    ) -> None:
        self._name = name
        self._description = description
        self._completer = completer
        # Parent owns us; keep only a weak back-reference.
        self._parent = weakref.ref(parent) if parent is not None else None
        self._children: list[CommandNode] = []
        self._handler: Optional[CommandCallback] = None

        if not self.is_root and completer is not None:
            completer.add_completion(self.absolute_name() + " ")

    def __repr__(self) -> str:
        return f"CommandNode({self.absolute_name() or '<root>'!r}, children={len(self._children)})"

    # ---------------- Tree building ----------------

    def add(self, name: str, description: str = "") -> Optional["CommandNode"]:
        """Add a sub-command; returns None if the name is empty or taken."""
        if not name or any(child.name == name for child in self._children):
            return None
        child = CommandNode(name, description,
                            completer=self._completer, parent=self)
        self._children.append(child)
        return child

    def add_copy(self, other: "CommandNode") -> Optional["CommandNode"]:
        """Add a sub-command with the name, description and handler of `other`."""
        copy = self.add(other.name, other.description)
        if copy is not None:
            copy.set_handler(other.handler)
        return copy

    def set_handler(self, handler: Optional[CommandCallback]) -> None:
        self._handler = handler

    def command(
        self, name: str, description: str = ""
    ) -> Callable[[CommandCallback], CommandCallback]:
        """
        Decorator registering a function as the handler of a new sub-command.

            @root.command("quit", "terminates the shell")
            def quit_(arguments):
                ...
        """

        def wrapper(func: CommandCallback) -> CommandCallback:
            child = self.add(name, description or (func.__doc__ or "").strip())
            if child is None:
                raise ValueError(
                    f"Command '{name}' already registered under '{self.absolute_name() or '<root>'}'.")
            child.set_handler(func)
            return func

        return wrapper

    # ---------------- Accessors ----------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def handler(self) -> Optional[CommandCallback]:
        return self._handler

    @property
    def parent(self) -> Optional["CommandNode"]:
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> tuple["CommandNode", ...]:
        return tuple(self._children)

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def is_leaf(self) -> bool:
        return not self._children

    def child(self, name: str) -> Optional["CommandNode"]:
        """Return the direct sub-command called `name`, or None."""
        for child in self._children:
            if child.name == name:
                return child
        return None

    def absolute_name(self) -> str:
        """Space-separated path from the root to this node (root excluded)."""
        names: list[str] = []
        node: Optional[CommandNode] = self
        while node is not None and not node.is_root:
            names.append(node.name)
            node = node.parent
        return " ".join(reversed(names))

    def help(self, indent: int = 0) -> str:
        """One line per direct sub-command: padded name, two spaces, description."""
        if not self._children:
            return ""
        width = max(len(child.name) for child in self._children)
        padding = " " * indent
        return "".join(
            f"{padding}{child.name.ljust(width)}  {child.description}\n"
            for child in self._children
        )

    # ---------------- Execution ----------------

    def execute(self, line: str) -> CommandResult:
        """
        Dispatch `line` through this subtree.

        Matching is exact per token: "foo bar" reaches foo's child bar, never a
        child whose name merely starts with "ba".
        """
        if self.is_root and not line:
            return CommandResult(CommandStatus.NOP)

        token, separator, rest = line.partition(" ")
        child = self.child(token)
        if child is not None:
            return child.execute(rest if separator else "")

        if self._handler is not None:
            return normalize_result(self._handler(line))

        log.debug("no command for token %r below %r",
                  token, self.absolute_name() or "<root>")
        return CommandResult(CommandStatus.NO_COMMAND, f"{token}: command not found")
