import random
import unittest

from retro_chip8.core.instructions import CycleContext, decode_opcode, execute_instruction
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import Memory

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.memory = Memory()
        self.state = Chip8State()
        self.ctx = CycleContext(keypad=[False] * 16, rng=random.Random(1234))

    def _execute(self, opcode):
        op = decode_opcode(opcode)
        execute_instruction(op, self.state, self.memory, self.ctx)

    def test_ld_imm(self):
        self._execute(0x6A42)
        self.assertEqual(self.state.v[0xA], 0x42)
        self.assertEqual(self.state.pc, 0x202)

    def test_add_imm_wraps_without_flag(self):
        self.state.v[1] = 0xFF
        self.state.v[0xF] = 0x07
        self._execute(0x7102)
        self.assertEqual(self.state.v[1], 0x01)
        self.assertEqual(self.state.v[0xF], 0x07)  # VF は変更されない

    def test_ld_or_and_xor(self):
        self.state.v[1] = 0b1100
        self.state.v[2] = 0b1010
        self._execute(0x8121)
        self.assertEqual(self.state.v[1], 0b1110)
        self.state.v[1] = 0b1100
        self._execute(0x8122)
        self.assertEqual(self.state.v[1], 0b1000)
        self.state.v[1] = 0b1100
        self._execute(0x8123)
        self.assertEqual(self.state.v[1], 0b0110)
        self._execute(0x8120)
        self.assertEqual(self.state.v[1], 0b1010)
        self.assertEqual(self.state.pc, 0x208)

    def test_add_reg_with_carry(self):
        # (1,0xFF) + (2,0xFF) -> 0xFE, VF=1
        self.state.v[1] = 0xFF
        self.state.v[2] = 0xFF
        self._execute(0x8124)
        self.assertEqual(self.state.v[1], 0xFE)
        self.assertEqual(self.state.v[0xF], 1)

    def test_add_reg_without_carry(self):
        self.state.v[1] = 0x10
        self.state.v[2] = 0x20
        self.state.v[0xF] = 1
        self._execute(0x8124)
        self.assertEqual(self.state.v[1], 0x30)
        self.assertEqual(self.state.v[0xF], 0)

    def test_sub_sets_flag_on_borrow(self):
        # 0x00 - 0xFF -> 0x01, ボローありで VF=1
        self.state.v[1] = 0x00
        self.state.v[2] = 0xFF
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 0x01)
        self.assertEqual(self.state.v[0xF], 1)

    def test_sub_clears_flag_without_borrow(self):
        self.state.v[1] = 0x30
        self.state.v[2] = 0x10
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 0x20)
        self.assertEqual(self.state.v[0xF], 0)

    def test_subn(self):
        self.state.v[1] = 0x05
        self.state.v[2] = 0x03
        self._execute(0x8127)  # V1 = V2 - V1 = -2
        self.assertEqual(self.state.v[1], 0xFE)
        self.assertEqual(self.state.v[0xF], 1)

        self.state.v[1] = 0x03
        self.state.v[2] = 0x05
        self._execute(0x8127)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.v[0xF], 0)

    def test_shr_captures_lsb(self):
        self.state.v[1] = 0xF1
        self._execute(0x8106)
        self.assertEqual(self.state.v[1], 0x78)
        self.assertEqual(self.state.v[0xF], 1)

    def test_shl_captures_msb(self):
        self.state.v[1] = 0x81
        self._execute(0x810E)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.v[0xF], 1)

        self.state.v[1] = 0x40
        self._execute(0x810E)
        self.assertEqual(self.state.v[1], 0x80)
        self.assertEqual(self.state.v[0xF], 0)

    def test_flag_register_as_destination_keeps_flag(self):
        self.state.v[0xF] = 0x10
        self.state.v[1] = 0x01
        self._execute(0x8F14)
        self.assertEqual(self.state.v[0xF], 0)

    def test_rnd_is_masked_and_reproducible(self):
        expected = random.Random(1234).randrange(0x100) & 0x0F
        self._execute(0xC30F)
        self.assertEqual(self.state.v[3], expected)
        self.assertLessEqual(self.state.v[3], 0x0F)
        self.assertEqual(self.state.pc, 0x202)

if __name__ == '__main__':
    unittest.main()
