#!/usr/bin/env python3
# sash/preprocess/__init__.py
from __future__ import annotations

"""
Line preprocessors.

A preprocessor is any callable taking the current line and returning the
rewritten line. Returning an empty string means the preprocessor consumed
the line itself (e.g. a variable assignment) and nothing is dispatched.
Raising PreprocessError rejects the line; the shell reports the message.
"""


from .base import Preprocessor, PreprocessError
from .variables import VariableSubstitutionEngine, VariableSyntaxError

__all__ = [
    "Preprocessor",
    "PreprocessError",
    "VariableSubstitutionEngine",
    "VariableSyntaxError",
]
