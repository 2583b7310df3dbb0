"""Test configuration and fixtures for CHIP-8 core tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, execute, apply_directive, Interpreter
from chipvm.logging import ConsoleLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def quiet_logger():
    """Logger that only reports critical messages."""
    return ConsoleLogger(log_level="CRITICAL", show_timestamps=False)


@pytest.fixture
def interpreter(quiet_logger):
    """Provide a fresh interpreter with no image loaded."""
    return Interpreter(logger=quiet_logger)


def run(state, instruction):
    """Helper to execute one instruction and apply its directive."""
    state, directive = execute(state, instruction)
    return apply_directive(state, directive)


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=0x42)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )
