#!/usr/bin/env python3
# sash/interface/cli.py
from __future__ import annotations

"""
Line-editing backends.

Every mode owns one backend. A backend reads lines and single characters,
renders the mode's prompt, keeps the mode's history and asks the mode's
completion registry for suggestions.

Selection order for make_backend("auto"):
    1) prompt_toolkit (rich completion + history)
    2) readline / pyreadline3 (basic completion + history)
    3) plain stream input (last resort, no completion)
"""

import contextlib
import logging
import os
import sys
from os import PathLike
from pathlib import Path
from typing import IO, Iterator, Optional, Union

from sash.interface.completion import CompletionRegistry, CompletionStatus
from sash.ui import ANSI_REGEX, ColorSpec, colorize, validate_styles

log = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 1000

# Ctrl-D on an empty line
_EOT = "\x04"

# history files hold one entry per line
_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}


def _escape_entry(entry: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in entry)


def _unescape_entry(line: str) -> str:
    """Reverse _escape_entry(); an unknown or trailing escape is kept as written."""
    chars: list[str] = []
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\" and index + 1 < len(line) and line[index + 1] in _UNESCAPES:
            chars.append(_UNESCAPES[line[index + 1]])
            index += 2
            continue
        chars.append(char)
        index += 1
    return "".join(chars)


def _terminal_fd(stream: IO[str]) -> Optional[int]:
    """Return the POSIX terminal descriptor behind `stream`, if there is one."""
    if os.name == "nt":
        return None
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None
    return fd if os.isatty(fd) else None


@contextlib.contextmanager
def cbreak_mode(stream: IO[str]) -> Iterator[None]:
    """
    Put the terminal behind `stream` into cbreak mode for the duration of the block.
    The previous settings are restored on every exit path.
    Streams that are not terminals are left alone.
    """
    fd = _terminal_fd(stream)
    if fd is None:
        yield
        return

    import termios
    import tty

    saved = termios.tcgetattr(fd)
    tty.setcbreak(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class LineBackend:
    """
    Base class for line editors.

    Implements prompt and history bookkeeping. Subclasses provide read_line()
    and may override reset() to re-sync process-global editor state.

    History policy:
        - at most `history_size` entries, oldest dropped first
        - with `unique_history`, an entry equal to the previous one is skipped
        - persisted one entry per line (UTF-8) when `history_file` is set;
          backslashes, CR and LF inside entries are backslash-escaped

    Also a context manager: leaving the block saves the history.
    """

    def __init__(
        self,
        completer: Optional[CompletionRegistry] = None,
        *,
        history_file: Optional[Union[str, PathLike]] = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
        unique_history: bool = True,
        stdin: Optional[IO[str]] = None,
        stdout: Optional[IO[str]] = None,
    ) -> None:
        if history_size < 1:
            raise ValueError("history_size must be >= 1")
        self._completer = completer if completer is not None else CompletionRegistry()
        self._history_file = Path(history_file) if history_file else None
        self._history_size = history_size
        self._unique_history = unique_history
        self._stdin = stdin
        self._stdout = stdout
        self._entries: list[str] = []
        self._prompt = ""
        self._eof = False
        self.history_load()

    # Context manager helpers
    def __enter__(self) -> "LineBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.history_save()

    # ---------------- Reading ----------------

    @property
    def stdin(self) -> IO[str]:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> IO[str]:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def eof(self) -> bool:
        """True once end of input has been seen; later reads return None."""
        return self._eof

    def reset(self) -> None:
        """Re-sync editor state before a read (called on every Shell.read_line)."""

    def read_line(self) -> Optional[str]:  # pragma: no cover - interface
        """Block for one line (without the line terminator); None at end of input."""
        raise NotImplementedError

    def read_char(self) -> Optional[str]:
        """Block for one character; None at end of input."""
        if self._eof:
            return None
        stream = self.stdin
        with cbreak_mode(stream):
            char = stream.read(1)
        if char in ("", _EOT):
            self._eof = True
            return None
        return char

    # ---------------- Prompt ----------------

    @property
    def prompt(self) -> str:
        return self._prompt

    def set_prompt(self, text: str, color: ColorSpec = None) -> None:
        """Replace the prompt; `color` names styles from sash.ui.ANSI."""
        validate_styles(color)
        self._prompt = ""
        self.add_to_prompt(text, color)

    def add_to_prompt(self, text: str, color: ColorSpec = None) -> None:
        """Append a (coloured) piece to the prompt."""
        styles = validate_styles(color)
        if not text:
            return
        self._prompt += colorize(text, *styles)

    # ---------------- Completion ----------------

    @property
    def completer(self) -> CompletionRegistry:
        return self._completer

    def completion_options(self, prefix: str) -> list[str]:
        """
        Full-line completions for `prefix`.

        With a completion callback installed, the single option is the prefix
        followed by the callback's text. Without one, every registered
        candidate matching the prefix is offered.
        """
        status, insert = self._completer.complete(prefix)
        if status is CompletionStatus.COMPLETED and insert:
            return [prefix + insert]
        return self._completer.matches(prefix)

    # ---------------- History ----------------

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def history_file(self) -> Optional[Path]:
        return self._history_file

    def history_enter(self, entry: str) -> None:
        """Append `entry` as a new history element (size/uniqueness policy applies)."""
        if self._unique_history and self._entries and self._entries[-1] == entry:
            return
        self._entries.append(entry)
        if len(self._entries) > self._history_size:
            del self._entries[: len(self._entries) - self._history_size]

    def history_append(self, text: str) -> None:
        """Extend the newest history entry with `text` (enters it if history is empty)."""
        if not self._entries:
            self.history_enter(text)
            return
        self._entries[-1] += text

    def history_commit(self, entry: str) -> None:
        """history_enter() followed by history_save()."""
        self.history_enter(entry)
        self.history_save()

    def history_save(self) -> None:
        if self._history_file is None:
            return
        try:
            self._history_file.parent.mkdir(parents=True, exist_ok=True)
            self._history_file.write_text(
                "".join(f"{_escape_entry(entry)}\n" for entry in self._entries),
                encoding="utf-8")
        except OSError as exc:
            log.warning("could not save history to %s: %s",
                        self._history_file, exc)

    def history_load(self) -> None:
        if self._history_file is None:
            return
        try:
            text = self._history_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        except OSError as exc:
            log.warning("could not load history from %s: %s",
                        self._history_file, exc)
            return
        self._entries = []
        for line in text.split("\n"):
            if line:
                self.history_enter(_unescape_entry(line))


# ===== Preferred: prompt_toolkit =====
class PromptToolkitBackend(LineBackend):
    """Rich line editor with history and completion."""

    def __init__(self, completer: Optional[CompletionRegistry] = None, **options) -> None:
        from prompt_toolkit import prompt
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.formatted_text import ANSI as ANSIText
        from prompt_toolkit.history import History

        super().__init__(completer, **options)
        self._prompt_fn = prompt
        self._formatted = ANSIText
        backend = self

        class _Completer(Completer):
            def get_completions(self, document, complete_event):
                prefix = document.text_before_cursor
                for option in backend.completion_options(prefix):
                    words = option.split()
                    # replace the whole typed line, show only the last word
                    yield Completion(
                        option,
                        start_position=-len(prefix),
                        display=words[-1] if words else option,
                    )

        class _Snapshot(History):
            """Read-only view of the backend history for a single prompt."""

            def __init__(self, entries: tuple[str, ...]) -> None:
                super().__init__()
                self._snapshot = entries

            def load_history_strings(self):
                return reversed(self._snapshot)

            def store_string(self, string: str) -> None:
                # history only grows through history_enter()
                pass

        self._pt_completer = _Completer()
        self._snapshot_type = _Snapshot

    def read_line(self) -> Optional[str]:
        if self._eof:
            return None
        try:
            return self._prompt_fn(
                self._formatted(self.prompt),
                history=self._snapshot_type(self.history),
                completer=self._pt_completer,
                complete_while_typing=False,
            )
        except EOFError:
            self._eof = True
            return None
        except KeyboardInterrupt:
            # Ctrl-C discards the current line
            return ""


# ===== Fallback: readline / pyreadline3 =====
class ReadlineBackend(LineBackend):
    """Fallback editor with basic completion and history."""

    def __init__(self, completer: Optional[CompletionRegistry] = None, **options) -> None:
        import readline  # type: ignore[attr-defined]

        self.readline = readline
        super().__init__(completer, **options)

    def reset(self) -> None:
        # readline state is process-wide; install this backend's view of it
        rl = self.readline
        rl.clear_history()
        for entry in self._entries:
            rl.add_history(entry)
        # complete against the whole line, not the last word
        rl.set_completer_delims("")
        rl.set_completer(self._complete)
        if "libedit" in (rl.__doc__ or ""):
            rl.parse_and_bind("bind ^I rl_complete")
        else:
            rl.parse_and_bind("tab: complete")

    def _complete(self, text_fragment: str, state_index: int) -> Optional[str]:
        options = self.completion_options(text_fragment)
        return options[state_index] if state_index < len(options) else None

    def read_line(self) -> Optional[str]:
        if self._eof:
            return None
        # mark escape sequences as zero-width so readline measures the prompt right
        prompt = ANSI_REGEX.sub(lambda m: f"\001{m.group(0)}\002", self.prompt)
        try:
            return input(prompt)
        except EOFError:
            self._eof = True
            return None
        except KeyboardInterrupt:
            self.stdout.write("\n")
            return ""


# ===== Last resort: plain streams =====
class PlainBackend(LineBackend):
    """Reads lines from a text stream; no editing, no completion UI."""

    def read_line(self) -> Optional[str]:
        if self._eof:
            return None
        if self.prompt:
            self.stdout.write(self.prompt)
            self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            self._eof = True
            return None
        return line.rstrip("\r\n")


BACKENDS: dict[str, type[LineBackend]] = {
    "prompt_toolkit": PromptToolkitBackend,
    "readline": ReadlineBackend,
    "plain": PlainBackend,
}


def make_backend(name: str = "auto", **options) -> LineBackend:
    """
    Factory to select a line-editing backend.

    `name` is one of BACKENDS or "auto" (best available at runtime).
    Remaining keyword arguments go to the backend constructor.
    """
    if name != "auto":
        try:
            backend_type = BACKENDS[name]
        except KeyError:
            raise ValueError(
                f"Unknown backend {name!r}; expected 'auto' or one of {sorted(BACKENDS)}") from None
        return backend_type(**options)

    # Try prompt_toolkit first
    try:
        return PromptToolkitBackend(**options)
    except ImportError:
        # Try readline/pyreadline3
        try:
            return ReadlineBackend(**options)
        except ImportError:
            # Last resort: plain input with no completion
            return PlainBackend(**options)
