"""Tests for console logging helpers."""

import io

import pytest
from chipvm import create_state
from chipvm.logging import ConsoleLogger, format_registers, format_state
from conftest import run


def make_logger(level):
    stream = io.StringIO()
    return ConsoleLogger(name="vm", log_level=level, use_colors=False, show_timestamps=False, stream=stream), stream


def test_level_filtering():
    logger, stream = make_logger("WARNING")
    logger.info("hidden")
    logger.warning("shown")
    logger.error("also shown")

    lines = stream.getvalue().splitlines()
    assert lines == ["[ WARNING][vm] shown", "[   ERROR][vm] also shown"]


def test_unknown_level():
    with pytest.raises(ValueError):
        ConsoleLogger(log_level="LOUD")


def test_format_registers():
    state = run(create_state(), 0x6A2B)
    lines = format_registers(state)

    assert len(lines) == 4
    assert lines[0] == "V0:00 V1:00 V2:00 V3:00"
    assert "VA:2B" in lines[2]


def test_format_state_shows_stack():
    state = run(create_state(), 0x2300)
    lines = format_state(state)

    assert lines[0] == "PC: 0x300  I: 0x000"
    assert lines[2] == "Stack: 0x200"


def test_format_state_empty_stack():
    assert "Stack: empty" in format_state(create_state())
