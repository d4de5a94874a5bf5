#!/usr/bin/env python3
# sash/interface/completion.py
from __future__ import annotations

"""
Completion registry.

Each mode owns one registry holding a flat list of candidate strings (every
command registers its absolute name followed by a space) and a single
callback that turns a prefix and its matches into text to insert at the
cursor. Backends query the registry; they never inspect the command tree.
"""

import enum
import os
from typing import Callable, Iterable, Optional

CompletionCallback = Callable[[str, list[str]], str]


class CompletionStatus(enum.Enum):
    COMPLETED = "completed"
    NOT_FOUND = "not_found"
    NO_COMPLETION = "no_completion"


def complete_common_prefix(prefix: str, matches: list[str]) -> str:
    """
    Stock completion callback.

    Returns the not-yet-typed part of the longest common prefix of `matches`,
    e.g. prefix "sh" with matches ["show modes ", "show vars "] -> "ow ".
    """
    if not matches:
        return ""
    return os.path.commonprefix(matches)[len(prefix):]


class CompletionRegistry:
    """Holds completion candidates and the callback applied to matches."""

    def __init__(self, callback: Optional[CompletionCallback] = None) -> None:
        self._candidates: list[str] = []
        self._callback = callback

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, text: object) -> bool:
        return text in self._candidates

    @property
    def candidates(self) -> tuple[str, ...]:
        return tuple(self._candidates)

    @property
    def callback(self) -> Optional[CompletionCallback]:
        return self._callback

    # ---------------- Registration ----------------

    def add_completion(self, text: str) -> bool:
        """Register `text`; returns False if it was already present."""
        if text in self._candidates:
            return False
        self._candidates.append(text)
        return True

    def remove_completion(self, text: str) -> bool:
        """Unregister `text`; returns False if it was not present."""
        try:
            self._candidates.remove(text)
        except ValueError:
            return False
        return True

    def replace_completions(self, completions: Iterable[str]) -> None:
        self._candidates = list(completions)

    def on_completion(self, callback: Optional[CompletionCallback]) -> None:
        self._callback = callback

    # ---------------- Lookup ----------------

    def matches(self, prefix: str) -> list[str]:
        """Registered candidates starting with `prefix`, in registration order."""
        return [text for text in self._candidates if text.startswith(prefix)]

    def complete(self, prefix: str) -> tuple[CompletionStatus, str]:
        """
        Run the callback over the candidates matching `prefix`.

        Returns (status, text) where text is what the backend should insert at
        the cursor; it is empty unless status is COMPLETED.
        """
        if self._callback is None:
            return CompletionStatus.NO_COMPLETION, ""
        if not self._candidates:
            return CompletionStatus.NOT_FOUND, ""
        return CompletionStatus.COMPLETED, self._callback(prefix, self.matches(prefix))
