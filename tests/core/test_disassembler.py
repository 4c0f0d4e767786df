from retro_chip8.core.disassembler import disassemble
from retro_chip8.memory.memory import Memory

class TestDisassembler:
    def test_disassemble_program(self):
        memory = Memory()
        memory.load_program(bytes([0x60, 0x0A, 0xA2, 0x2A, 0x00, 0x00, 0xD0, 0x15]))
        listing = disassemble(memory, 0x200, 8)
        assert listing == [
            (0x200, "60 0A", "LD V0, 0x0A"),
            (0x202, "A2 2A", "LD I, 0x22A"),
            (0x204, "00 00", "DW 0x0000"),
            (0x206, "D0 15", "DRW V0, V1, 5"),
        ]

    def test_disassemble_does_not_log_access(self):
        memory = Memory()
        memory.load_program(bytes([0x00, 0xE0]))
        disassemble(memory, 0x200, 2)
        assert memory.get_and_clear_activity_log() == []

    def test_disassemble_stops_at_end_of_memory(self):
        memory = Memory()
        listing = disassemble(memory, 0xFFC, 16)
        assert [addr for addr, _, _ in listing] == [0xFFC, 0xFFE]
