#!/usr/bin/env python3
# sash/preprocess/variables.py
from __future__ import annotations

"""
Shell-style variables as a line preprocessor.

Supported syntax:
    name=value     assignment; value is expanded first, the line produces no output
    $name          replaced by the bound value ("" when unbound)
    ${name}        same, with explicit delimiters
    \\$            escapes the dollar sign (both characters are kept verbatim)

Names consist of ASCII letters, digits and underscores. Values are resolved
when assigned, so `a=$b` captures the value b has at that moment.

Examples:
    >>> engine = VariableSubstitutionEngine({"user": "alice"})
    >>> engine.parse("greet ${user}!")
    'greet alice!'
    >>> engine.parse("home=/home/$user")
    ''
    >>> engine.get("home")
    '/home/alice'
"""

import enum
import logging
import string
from types import MappingProxyType
from typing import Mapping, Optional

from sash.preprocess.base import Preprocessor, PreprocessError

log = logging.getLogger(__name__)

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def _is_name_char(char: str) -> bool:
    return char in _NAME_CHARS


class VariableSyntaxError(PreprocessError):
    """
    Malformed variable reference.

    `position` is the UTF-8 byte offset into the parsed line; it equals the
    character index for ASCII input.
    """

    def __init__(self, position: int, detail: str) -> None:
        super().__init__(f"syntax error at position {position}: {detail}")
        self.position = position
        self.detail = detail

    @classmethod
    def at(cls, line: str, index: int, detail: str) -> "VariableSyntaxError":
        """Error for character `index` of `line`, reported as a byte offset."""
        return cls(len(line[:index].encode("utf-8")), detail)


class _State(enum.Enum):
    # copying input verbatim
    TRAVERSE = enum.auto()
    # just read a '$'
    AFTER_DOLLAR = enum.auto()
    # reading $name
    READ_VARIABLE = enum.auto()
    # reading ${name}
    READ_BRACED_VARIABLE = enum.auto()


class VariableSubstitutionEngine:
    """Expands $name / ${name} references and records name=value assignments."""

    def __init__(self, bindings: Optional[Mapping[str, str]] = None) -> None:
        self._bindings: dict[str, str] = dict(bindings or {})

    def __repr__(self) -> str:
        return f"VariableSubstitutionEngine({self._bindings!r})"

    # ---------------- Bindings ----------------

    @property
    def bindings(self) -> Mapping[str, str]:
        """Read-only view of the current bindings."""
        return MappingProxyType(self._bindings)

    def get(self, name: str, default: str = "") -> str:
        return self._bindings.get(name, default)

    def set(self, name: str, value: str) -> None:
        self._bindings[name] = value

    def unset(self, name: str) -> None:
        self._bindings.pop(name, None)

    # ---------------- Parsing ----------------

    def parse(self, line: str, *, sub_parse: bool = False) -> str:
        """
        Expand `line`, or store it as a binding when it is an assignment.

        Assignments are only recognized on top-level parses (sub_parse=False).
        Raises VariableSyntaxError on malformed references; in that case no
        binding is changed.
        """
        if not sub_parse:
            assignment = self._split_assignment(line)
            if assignment is not None:
                name, value_start = assignment
                value = self._expand(line, value_start)
                self._bindings[name] = value
                log.debug("bound %s=%r", name, value)
                return ""
        return self._expand(line, 0)

    def __call__(self, line: str) -> str:
        return self.parse(line)

    @classmethod
    def create(cls, predefined: Optional[Mapping[str, str]] = None) -> Preprocessor:
        """
        Build a preprocessor backed by a private engine.

        The engine starts from a copy of `predefined`; later changes to the
        mapping passed in do not leak into the preprocessor and vice versa.
        """
        engine = cls(predefined)

        def preprocess(line: str) -> str:
            return engine.parse(line)

        preprocess.engine = engine  # type: ignore[attr-defined]
        return preprocess

    @staticmethod
    def _split_assignment(line: str) -> Optional[tuple[str, int]]:
        """Return (name, value offset) if `line` reads `name=...`, else None."""
        equals = line.find("=")
        if equals <= 0:
            return None
        name = line[:equals]
        if not all(_is_name_char(char) for char in name):
            return None
        return name, equals + 1

    def _expand(self, line: str, start: int) -> str:
        """Substitute every reference in line[start:]; positions stay relative to `line`."""
        output: list[str] = []
        state = _State.TRAVERSE
        # first character of pending verbatim text, or of the variable name
        mark = start
        index = start
        end = len(line)

        while index < end:
            char = line[index]

            if state is _State.TRAVERSE:
                if char == "$" and not (index > start and line[index - 1] == "\\"):
                    output.append(line[mark:index])
                    state = _State.AFTER_DOLLAR

            elif state is _State.AFTER_DOLLAR:
                if char == "{":
                    state = _State.READ_BRACED_VARIABLE
                    mark = index + 1
                elif _is_name_char(char):
                    state = _State.READ_VARIABLE
                    mark = index
                elif char == "$":
                    raise VariableSyntaxError.at(line, index, "$$ is not a valid expression")
                else:
                    raise VariableSyntaxError.at(line, index, f"unexpected character '{char}' after $")

            elif state is _State.READ_VARIABLE:
                if not _is_name_char(char):
                    output.append(self.get(line[mark:index]))
                    state = _State.TRAVERSE
                    mark = index
                    # the terminator belongs to the verbatim text; rescan it
                    continue

            elif state is _State.READ_BRACED_VARIABLE:
                if char == "}":
                    output.append(self.get(line[mark:index]))
                    state = _State.TRAVERSE
                    mark = index + 1
                elif not _is_name_char(char):
                    raise VariableSyntaxError.at(
                        line, index, f"'{char}' is an invalid character inside ${{...}}")

            index += 1

        if state is _State.AFTER_DOLLAR:
            raise VariableSyntaxError.at(line, end, "$ at end of line")
        if state is _State.READ_BRACED_VARIABLE:
            raise VariableSyntaxError.at(line, end, "missing '}' at end of line")
        if state is _State.READ_VARIABLE:
            output.append(self.get(line[mark:]))
        else:
            output.append(line[mark:])
        return "".join(output)
