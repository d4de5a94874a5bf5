"""
Tests for the logging helpers.
"""

import io
import logging

import pytest

from sash.ui import ANSI, ColorizingStreamHandler, PlainFormatter, init_logger


@pytest.fixture
def logger_name(request):
    name = f"sash-test-{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_init_logger_does_not_stack_handlers(logger_name):
    init_logger(logger_name)
    logger = init_logger(logger_name)

    console = [h for h in logger.handlers if isinstance(h, ColorizingStreamHandler)]
    assert len(console) == 1
    assert logger.propagate is False


def test_file_handler_writes_plain_text(logger_name, tmp_path):
    logfile = tmp_path / "out.log"
    logger = init_logger(logger_name, level=logging.DEBUG, logfile=logfile)

    logger.warning("%sred%s alert", ANSI["red"], ANSI["reset"])
    for handler in logger.handlers:
        handler.flush()

    text = logfile.read_text(encoding="utf-8")
    assert "red alert" in text
    assert "\x1b[" not in text


def test_stream_handler_strips_ansi_when_not_a_terminal():
    stream = io.StringIO()
    handler = ColorizingStreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    record = logging.LogRecord(
        "sash", logging.ERROR, __file__, 1, f"{ANSI['bold']}boom{ANSI['reset']}", None, None)

    handler.emit(record)

    assert stream.getvalue() == "boom\n"


def test_plain_formatter():
    formatter = PlainFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord(
        "sash", logging.INFO, __file__, 1, f"{ANSI['green']}ok{ANSI['reset']}", None, None)

    assert formatter.format(record) == "INFO ok"
