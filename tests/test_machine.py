# tests/test_machine.py
"""
retro_chip8.machine.Machine の結合テスト。
プログラムのロードからサイクル実行、停止、リセットまでの一連の流れを検証します。
"""
import random
import unittest

import pytest

from retro_chip8.common.errors import (
    InvalidOpcodeError,
    InvalidProgramCounterError,
    MachineHaltedError,
    ProgramTooLargeError,
    StackOverflowError,
)
from retro_chip8.machine import Machine

NO_KEYS = [False] * 16


def run(machine: Machine, cycles: int, keypad=NO_KEYS):
    for _ in range(cycles):
        machine.run_cycle(keypad)


class TestMachineScenarios(unittest.TestCase):
    def setUp(self):
        self.machine = Machine(rng=random.Random(0))

    def test_add_with_carry(self):
        self.machine.load_program(bytes([0x60, 0xFF, 0x61, 0x01, 0x80, 0x14]))
        run(self.machine, 3)
        self.assertEqual(self.machine.state.v[0], 0x00)
        self.assertEqual(self.machine.state.v[0xF], 1)
        self.assertEqual(self.machine.state.pc, 0x206)

    def test_call_and_return(self):
        # 0x200: CALL 0x206 / 0x202: LD V1, 0x02 / 0x206: LD V0, 0x01 / RET
        self.machine.load_program(bytes([0x22, 0x06, 0x61, 0x02, 0x00, 0x00, 0x60, 0x01, 0x00, 0xEE]))
        run(self.machine, 4)
        self.assertEqual(self.machine.state.v[0], 0x01)
        self.assertEqual(self.machine.state.v[1], 0x02)
        self.assertEqual(self.machine.state.pc, 0x204)
        self.assertEqual(self.machine.memory.stack_depth, 0)

    def test_bcd_conversion(self):
        self.machine.load_program(bytes([0x60, 0xFE, 0xA3, 0x00, 0xF0, 0x33]))
        run(self.machine, 3)
        memory = self.machine.memory
        self.assertEqual([memory.peek_byte(0x300 + k) for k in range(3)], [2, 5, 4])

    def test_wait_for_key(self):
        self.machine.load_program(bytes([0xF3, 0x0A]))
        run(self.machine, 5)
        self.assertEqual(self.machine.state.pc, 0x200)
        keypad = [False] * 16
        keypad[0x7] = True
        self.machine.run_cycle(keypad)
        self.assertEqual(self.machine.state.v[3], 0x7)
        self.assertEqual(self.machine.state.pc, 0x202)

    def test_draw_glyph_to_framebuffer(self):
        # LD V0, 0x00 / LD F, V0 / DRW V0, V0, 5
        self.machine.load_program(bytes([0x60, 0x00, 0xF0, 0x29, 0xD0, 0x05]))
        run(self.machine, 3)
        pixels = self.machine.framebuffer()
        lit = sum(1 for p in pixels if p & 0x01)
        # "0" のグリフ: F0 90 90 90 F0 -> 4 + 2 + 2 + 2 + 4
        self.assertEqual(lit, 14)
        self.assertEqual(self.machine.state.v[0xF], 0)


class TestMachineLifecycle:
    def test_load_too_large_program_leaves_machine_untouched(self):
        machine = Machine()
        with pytest.raises(ProgramTooLargeError):
            machine.load_program(bytes(0xE01))
        assert machine.memory.peek_byte(0x200) == 0
        machine.load_program(bytes(0xE00))

    def test_invalid_opcode_halts_machine(self, caplog):
        machine = Machine()
        machine.load_program(bytes([0x00, 0x00]))
        with caplog.at_level("ERROR", logger="retro_chip8.machine"):
            with pytest.raises(InvalidOpcodeError):
                machine.run_cycle(NO_KEYS)
        assert machine.halted
        assert isinstance(machine.fault, InvalidOpcodeError)
        assert "Machine halted" in caplog.text

        with pytest.raises(MachineHaltedError):
            machine.run_cycle(NO_KEYS)

    def test_reset_reloads_program_and_clears_halt(self):
        machine = Machine()
        machine.load_program(bytes([0x60, 0x05, 0x00, 0x00]))
        machine.run_cycle(NO_KEYS)
        with pytest.raises(InvalidOpcodeError):
            machine.run_cycle(NO_KEYS)

        machine.reset()
        assert not machine.halted
        assert machine.fault is None
        assert machine.state.pc == 0x200
        assert machine.state.v[0] == 0
        assert machine.memory.peek_byte(0x200) == 0x60
        machine.run_cycle(NO_KEYS)
        assert machine.state.v[0] == 0x05

    def test_stack_overflow_halts(self):
        machine = Machine()
        # 0x200: CALL 0x200 を繰り返す
        machine.load_program(bytes([0x22, 0x00]))
        run(machine, 16)
        assert machine.memory.stack_depth == 16
        with pytest.raises(StackOverflowError):
            machine.run_cycle(NO_KEYS)
        assert machine.halted

    # @intent:test_case グリフ領域や奇数アドレスへのジャンプは、次のサイクルのフェッチでマシンを停止させます。
    @pytest.mark.parametrize("program, bad_pc", [
        (bytes([0x10, 0x51]), 0x051),         # JP 0x051
        (bytes([0x22, 0x03]), 0x203),         # CALL 0x203
        (bytes([0x60, 0x01, 0xB2, 0x04]), 0x205),  # LD V0, 1 / JP V0, 0x204
    ])
    def test_jump_outside_program_area_halts(self, program, bad_pc):
        machine = Machine()
        machine.load_program(program)
        cycles = len(program) // 2
        run(machine, cycles)
        assert machine.state.pc == bad_pc
        with pytest.raises(InvalidProgramCounterError):
            machine.run_cycle(NO_KEYS)
        assert machine.halted
        assert machine.state.pc == bad_pc

    def test_glyph_index_through_machine(self):
        machine = Machine()
        # LD V0, 0x00 / LD F, V0
        machine.load_program(bytes([0x60, 0x00, 0xF0, 0x29]))
        run(machine, 2)
        assert machine.state.i == 0x1AF

    def test_keypad_length_checked(self):
        machine = Machine()
        machine.load_program(bytes([0x60, 0x01]))
        with pytest.raises(ValueError):
            machine.run_cycle([False] * 15)
        assert not machine.halted

    def test_tick_timers(self):
        machine = Machine()
        # LD V0, 0x02 / LD DT, V0
        machine.load_program(bytes([0x60, 0x02, 0xF0, 0x15]))
        run(machine, 2)
        assert machine.state.delay_timer == 2
        machine.tick_timers()
        machine.tick_timers()
        machine.tick_timers()
        assert machine.state.delay_timer == 0

    def test_delay_timer_is_not_decremented_by_cycles(self):
        machine = Machine()
        machine.load_program(bytes([0x60, 0x09, 0xF0, 0x15, 0x12, 0x04]))
        run(machine, 10)
        assert machine.state.delay_timer == 9
