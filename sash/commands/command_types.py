#!/usr/bin/env python3
# sash/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- CommandStatus: the three outcomes of dispatching a line.
- CommandResult: a status plus the diagnostic text produced while dispatching.
- CommandCallback: the callable protocol for command handlers.
- CommandClause: a (name, description, handler) triple for bulk registration.
"""

import enum
from dataclasses import dataclass
from typing import NamedTuple, Optional, Protocol, Union


class CommandStatus(enum.Enum):
    """Outcome of executing a command line."""

    EXECUTED = "executed"
    NOP = "nop"
    NO_COMMAND = "no_command"


@dataclass(slots=True)
class CommandResult:
    """
    Normalized result of a dispatch.

    Attributes:
        status: What happened to the line.
        error: Diagnostic text; empty unless a handler or the lookup reported one.
    """
    status: CommandStatus = CommandStatus.EXECUTED
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not CommandStatus.NO_COMMAND

    def __str__(self) -> str:
        return self.error if self.error else self.status.value


HandlerReturn = Union[CommandResult, CommandStatus, None]


class CommandCallback(Protocol):
    """Protocol for command handlers: receives the unconsumed rest of the line."""

    def __call__(self, arguments: str) -> HandlerReturn:  # pragma: no cover - signature only
        ...


class CommandClause(NamedTuple):
    """One entry for Mode.add_all()."""
    name: str
    description: str
    handler: Optional[CommandCallback] = None


def normalize_result(value: HandlerReturn) -> CommandResult:
    """Coerce whatever a handler returned into a CommandResult."""
    if isinstance(value, CommandResult):
        return value
    if isinstance(value, CommandStatus):
        return CommandResult(value)
    if value is None:
        return CommandResult(CommandStatus.EXECUTED)
    raise TypeError(
        f"command handler returned {type(value).__name__}, "
        "expected CommandResult, CommandStatus or None")
