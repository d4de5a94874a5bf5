#!/usr/bin/env python3
# sash/interface/shell.py
from __future__ import annotations

"""
Mode-based command line: mode registry, mode stack and line dispatch.

At any time one mode is active: the top of the mode stack. Entering a
sub-context pushes its mode, leaving it pops back to the previous one.
Input lines pass through the preprocessors in registration order before
they reach the active mode's command tree:

    line -> preprocessor 1 -> ... -> preprocessor N -> active mode -> handler

Dispatch never raises for bad input; process() returns a CommandStatus and
keeps the diagnostic in last_error.
"""

import functools
import logging
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

from sash.commands import CommandStatus
from sash.config import ShellConfig
from sash.interface.cli import make_backend
from sash.interface.mode import BackendFactory, Mode
from sash.preprocess import Preprocessor, PreprocessError
from sash.ui import ColorSpec

log = logging.getLogger(__name__)

EMPTY_STACK_ERROR = "command_line: mode stack is empty"


class Shell:
    """Owns all modes, the stack of active modes, and the preprocessor chain."""

    def __init__(
        self,
        config: Optional[ShellConfig] = None,
        *,
        backend_factory: Optional[BackendFactory] = None,
    ) -> None:
        self._config = config if config is not None else ShellConfig()
        self._backend_factory = backend_factory or functools.partial(
            make_backend, self._config.backend)
        self._modes: dict[str, Mode] = {}
        self._mode_stack: list[Mode] = []
        self._preprocessors: list[Preprocessor] = []
        self._last_error = ""

    # ---------------- Accessors ----------------

    @property
    def config(self) -> ShellConfig:
        return self._config

    @property
    def modes(self) -> Mapping[str, Mode]:
        return MappingProxyType(self._modes)

    @property
    def mode_stack(self) -> tuple[Mode, ...]:
        return tuple(self._mode_stack)

    @property
    def preprocessors(self) -> tuple[Preprocessor, ...]:
        return tuple(self._preprocessors)

    @property
    def last_error(self) -> str:
        return self._last_error

    def has_active_mode(self) -> bool:
        return bool(self._mode_stack)

    def current_mode(self) -> Mode:
        """The active mode. Precondition: has_active_mode()."""
        if not self._mode_stack:
            raise RuntimeError(EMPTY_STACK_ERROR)
        return self._mode_stack[-1]

    def mode(self, name: str) -> Optional[Mode]:
        return self._modes.get(name)

    # ---------------- Modes ----------------

    def add_mode(
        self,
        name: str,
        prompt: Optional[str] = None,
        prompt_color: ColorSpec = None,
        history_file: Optional[Union[str, PathLike]] = None,
    ) -> Optional[Mode]:
        """
        Create and register a mode; None if the name is already in use.

        Without an explicit history file, modes get `<history_dir>/<name>.history`
        when the configuration names a history directory.
        """
        if name in self._modes:
            return None
        if history_file is None and self._config.history_dir is not None:
            history_file = Path(self._config.history_dir) / f"{name}.history"
        mode = Mode(
            name,
            prompt=prompt if prompt is not None else self._config.prompt,
            prompt_color=prompt_color if prompt_color is not None else self._config.prompt_color,
            history_file=history_file,
            history_size=self._config.history_size,
            unique_history=self._config.unique_history,
            backend_factory=self._backend_factory,
        )
        self._modes[name] = mode
        log.debug("added mode %r", name)
        return mode

    def remove_mode(self, name: str) -> bool:
        """
        Unregister a mode; True if it existed.

        A removed mode that is still on the stack stays usable until popped.
        """
        removed = self._modes.pop(name, None)
        if removed is not None:
            log.debug("removed mode %r", name)
        return removed is not None

    def push_mode(self, name: str) -> bool:
        """Make the mode called `name` the active one; False if unknown."""
        mode = self._modes.get(name)
        if mode is None:
            return False
        self._mode_stack.append(mode)
        log.debug("entered mode %r (depth %d)", name, len(self._mode_stack))
        return True

    def pop_mode(self) -> bool:
        """Leave the active mode; False if the stack was already empty."""
        if not self._mode_stack:
            return False
        mode = self._mode_stack.pop()
        log.debug("left mode %r (depth %d)", mode.name, len(self._mode_stack))
        return True

    # ---------------- Dispatch ----------------

    def add_preprocessor(self, preprocessor: Preprocessor) -> None:
        """
        Append a preprocessor to the chain.

        Preprocessors see every line before the active mode does and may
        rewrite it, consume it (return ""), or reject it (raise PreprocessError).
        """
        self._preprocessors.append(preprocessor)

    def process(self, line: str) -> CommandStatus:
        """Run `line` through the preprocessors and the active mode."""
        if not line:
            return CommandStatus.NOP
        self._last_error = ""
        if not self._mode_stack:
            self._last_error = EMPTY_STACK_ERROR
            return CommandStatus.NO_COMMAND

        current = line
        for preprocessor in self._preprocessors:
            try:
                current = preprocessor(current)
            except PreprocessError as exc:
                self._last_error = str(exc)
                log.debug("preprocessor rejected %r: %s", line, exc)
                return CommandStatus.NO_COMMAND
            if not current:
                # consumed by the preprocessor, e.g. a variable assignment
                return CommandStatus.EXECUTED

        result = self._mode_stack[-1].execute(current)
        self._last_error = result.error
        return result.status

    # ---------------- Backend access ----------------

    def append_to_history(self, entry: str) -> bool:
        """Add `entry` to the active mode's history and persist it."""
        if not self._mode_stack:
            return False
        self._mode_stack[-1].backend.history_commit(entry)
        return True

    def read_line(self) -> Optional[str]:
        """
        Read a line with the active mode's backend, stripped of surrounding
        whitespace. None at end of input or when no mode is active.
        """
        if not self._mode_stack:
            return None
        backend = self._mode_stack[-1].backend
        # mode switches may leave shared editor state behind
        backend.reset()
        line = backend.read_line()
        return None if line is None else line.strip()

    def read_char(self) -> Optional[str]:
        """Read one character with the active mode's backend."""
        if not self._mode_stack:
            return None
        return self._mode_stack[-1].backend.read_char()
