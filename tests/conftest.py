import io
from functools import partial

import pytest

from sash import PlainBackend, Shell, ShellConfig


class ScriptedInput(io.StringIO):
    """stdin stand-in whose content tests can append to."""

    def feed(self, text: str) -> None:
        position = self.tell()
        self.seek(0, io.SEEK_END)
        self.write(text)
        self.seek(position)


@pytest.fixture
def stdin() -> ScriptedInput:
    return ScriptedInput()


@pytest.fixture
def stdout() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def plain_factory(stdin, stdout):
    return partial(PlainBackend, stdin=stdin, stdout=stdout)


@pytest.fixture
def shell(plain_factory) -> Shell:
    return Shell(ShellConfig(backend="plain"), backend_factory=plain_factory)
