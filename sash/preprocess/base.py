#!/usr/bin/env python3
# sash/preprocess/base.py
from __future__ import annotations

from typing import Protocol


class PreprocessError(ValueError):
    """Raised by a preprocessor to reject a line; str(exc) is shown to the user."""


class Preprocessor(Protocol):
    """Protocol for line preprocessors."""

    def __call__(self, line: str) -> str:  # pragma: no cover - signature only
        ...
