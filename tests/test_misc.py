"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
import jax.numpy as jnp
from chipvm import execute, DirectiveKind, FONT_START, MemoryAccessError, UnknownOpcode
from conftest import run, set_registers


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = run(fresh_state, 0x6030)  # V0 = 48
        state = run(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = run(state, 0x6120)  # V1 = 32
        state = run(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = run(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        """Test BCD conversion with 156."""
        state = run(fresh_state, 0x609C)  # V0 = 156
        state = run(state, 0xA300)  # I = 0x300
        state = run(state, 0xF033)

        assert state.memory[0x300] == 1  # Hundreds
        assert state.memory[0x301] == 5  # Tens
        assert state.memory[0x302] == 6  # Ones
        assert state.I == 0x300

    @pytest.mark.parametrize("value,digits", [(0, (0, 0, 0)), (7, (0, 0, 7)), (255, (2, 5, 5))])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        """Test BCD with edge cases."""
        state = set_registers(fresh_state, V0=value)
        state = run(state, 0xA400)
        state = run(state, 0xF033)

        assert tuple(int(d) for d in state.memory[0x400:0x403]) == digits

    def test_bcd_past_end_of_memory(self, fresh_state):
        """FX33 - Writing beyond memory is a fault."""
        state = run(fresh_state, 0xAFFE)

        with pytest.raises(MemoryAccessError):
            execute(state, 0xF033)


class TestFont:
    """Test font character lookup."""

    def test_misc_font_character(self, fresh_state):
        """FX29 - I points at the glyph for VX."""
        state = set_registers(fresh_state, V3=0xA)
        state = run(state, 0xF329)
        assert state.I == FONT_START + 0xA * 5

    def test_font_all_characters(self, fresh_state):
        """FX29 - Every hex digit maps to FONT_START + 5 * digit."""
        for digit in range(16):
            state = set_registers(fresh_state, V0=digit)
            state = run(state, 0xF029)
            assert state.I == 0x050 + digit * 5

    def test_font_uses_low_nibble(self, fresh_state):
        """FX29 - Only the low nibble of VX selects the glyph."""
        state = set_registers(fresh_state, V0=0x3B)
        state = run(state, 0xF029)
        assert state.I == 0x050 + 0xB * 5


class TestMemoryOperations:
    """Test FX55 and FX65."""

    def test_store_registers(self, fresh_state):
        """FX55 - Store V0..VX, leave I and later memory untouched."""
        state = set_registers(fresh_state, V0=0x11, V1=0x22, V2=0x33, V3=0x44)
        state = run(state, 0xA300)
        state = run(state, 0xF255)

        assert [int(b) for b in state.memory[0x300:0x304]] == [0x11, 0x22, 0x33, 0x00]
        assert state.I == 0x300

    def test_load_registers(self, fresh_state):
        """FX65 - Load V0..VX, leave later registers untouched."""
        state = fresh_state.replace(
            memory=fresh_state.memory.at[0x300:0x303].set(jnp.array([7, 8, 9], dtype=jnp.uint8))
        )
        state = set_registers(state, V2=0xEE)
        state = run(state, 0xA300)
        state = run(state, 0xF165)

        assert state.V[0] == 7
        assert state.V[1] == 8
        assert state.V[2] == 0xEE
        assert state.I == 0x300

    def test_store_load_round_trip(self, fresh_state):
        """FX55 then FX65 with the same I restores the registers."""
        values = {f"V{i:X}": 0x10 * i + 3 for i in range(16)}
        state = set_registers(fresh_state, **values)
        state = run(state, 0xA400)
        state = run(state, 0xFF55)
        original = state.V

        state = state.replace(V=jnp.zeros_like(state.V))
        state = run(state, 0xFF65)

        assert (state.V == original).all()

    def test_store_past_end_of_memory(self, fresh_state):
        """FX55 - Storing beyond memory is a fault."""
        state = run(fresh_state, 0xAFFF)

        with pytest.raises(MemoryAccessError):
            execute(state, 0xF155)

        state, _ = execute(state, 0xF055)  # A single byte still fits
        assert state.memory[0xFFF] == 0


class TestKeypad:
    """Test the blocking key wait."""

    def test_wait_for_key_blocking(self, fresh_state):
        """FX0A - Block while no key is pressed."""
        state, directive = execute(fresh_state, 0xF00A)

        assert directive.kind == DirectiveKind.BLOCK
        assert state.pc == 0x200

    def test_wait_for_key_press(self, fresh_state):
        """FX0A - Store the pressed key and continue."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[7].set(True))

        state = run(state, 0xF30A)

        assert state.V[3] == 7
        assert state.pc == 0x202

    def test_wait_for_key_picks_lowest(self, fresh_state):
        """FX0A - The lowest-numbered pressed key wins."""
        keypad = fresh_state.keypad.at[0xC].set(True).at[4].set(True).at[9].set(True)
        state = fresh_state.replace(keypad=keypad)

        state = run(state, 0xF00A)

        assert state.V[0] == 4


class TestMiscInstructionDispatch:
    """Test misc instruction dispatch logic."""

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = run(fresh_state, 0x6010)  # V0 = 0x10
        state = run(state, 0xA300)  # I = 0x300
        state = run(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_beyond_12_bits(self, fresh_state):
        """FX1E - I is a 16-bit register and no flag is set."""
        state = set_registers(fresh_state, V0=0xFF, VF=0x00)
        state = run(state, 0xAF80)
        state = run(state, 0xF01E)

        assert state.I == 0x107F
        assert state.V[15] == 0

    def test_add_to_index_wraps_16_bits(self, fresh_state):
        """FX1E - The sum wraps at 16 bits."""
        state = set_registers(fresh_state, V0=0x02)
        state = state.replace(I=jnp.asarray(0xFFFF, dtype=jnp.uint16))
        state = run(state, 0xF01E)

        assert state.I == 0x0001

    @pytest.mark.parametrize("instruction", [0xF000, 0xF001, 0xF0FF, 0xE000, 0xE09F])
    def test_unknown_sub_opcodes(self, fresh_state, instruction):
        """Unknown EXNN and FXNN values are decode errors."""
        with pytest.raises(UnknownOpcode):
            execute(fresh_state, instruction)
