# tests/memory/test_memory.py
"""
retro_chip8.memory.memoryモジュールの単体テスト。
バイトストア、グリフテーブル、フレームバッファ、コールスタックを検証します。
"""
import pytest

from retro_chip8.common.errors import (
    FramebufferBoundsError,
    InvalidKeyError,
    MemoryAccessError,
    MemoryProtectionError,
    ProgramTooLargeError,
    StackOverflowError,
    StackUnderflowError,
)
from retro_chip8.memory.glyphs import GLYPH_TABLE, GLYPH_TABLE_BASE
from retro_chip8.memory.memory import (
    AccessType,
    Memory,
    MEMORY_SIZE,
    PIXEL_OFF,
    PIXEL_ON,
    PROGRAM_START,
    STACK_SIZE,
)

# @intent:test_suite Memoryの各領域の契約を検証します。

class TestProgramLoad:
    def test_load_program(self):
        mem = Memory()
        mem.load_program(bytes([1, 2, 3, 4]))
        assert [mem.peek_byte(PROGRAM_START + i) for i in range(4)] == [1, 2, 3, 4]

    def test_load_program_exactly_fills_memory(self):
        mem = Memory()
        mem.load_program(bytes([0xAB]) * (MEMORY_SIZE - PROGRAM_START))
        assert mem.peek_byte(MEMORY_SIZE - 1) == 0xAB

    def test_load_program_too_large(self):
        mem = Memory()
        with pytest.raises(ProgramTooLargeError):
            mem.load_program(bytes(MEMORY_SIZE - PROGRAM_START + 1))
        # 失敗時は何も書き込まれない
        assert mem.peek_byte(PROGRAM_START) == 0


class TestByteStore:
    def test_fetch_opcode_is_big_endian(self):
        mem = Memory()
        mem.load_program(bytes([0xA2, 0xF0]))
        assert mem.fetch_opcode(PROGRAM_START) == 0xA2F0

    def test_store_and_fetch_byte(self):
        mem = Memory()
        mem.store_byte(0x300, 0x42)
        assert mem.fetch_byte(0x300) == 0x42

    def test_store_below_program_start_is_rejected(self):
        mem = Memory()
        with pytest.raises(MemoryProtectionError):
            mem.store_byte(0x1FF, 0x01)
        with pytest.raises(MemoryProtectionError):
            mem.store_byte(GLYPH_TABLE_BASE, 0x00)
        assert mem.peek_byte(GLYPH_TABLE_BASE) == GLYPH_TABLE[0]

    def test_out_of_bounds_access(self):
        mem = Memory()
        with pytest.raises(MemoryAccessError):
            mem.fetch_byte(MEMORY_SIZE)
        with pytest.raises(MemoryAccessError):
            mem.store_byte(MEMORY_SIZE, 0)
        with pytest.raises(MemoryAccessError):
            mem.fetch_opcode(MEMORY_SIZE - 1)

    def test_store_rejects_non_byte_value(self):
        mem = Memory()
        with pytest.raises(ValueError):
            mem.store_byte(0x300, 0x100)

    def test_activity_log_records_and_clears(self):
        mem = Memory()
        mem.store_byte(0x300, 0x11)
        mem.store_byte(0x300, 0x22)
        mem.fetch_byte(0x300)
        mem.peek_byte(0x300)  # peek は記録されない

        log = mem.get_and_clear_activity_log()
        assert [a.access_type for a in log] == [AccessType.WRITE, AccessType.WRITE, AccessType.READ]
        assert log[1].previous_data == 0x11
        assert mem.get_and_clear_activity_log() == []


class TestGlyphs:
    def test_glyph_table_is_installed(self):
        mem = Memory()
        for offset, value in enumerate(GLYPH_TABLE):
            assert mem.peek_byte(GLYPH_TABLE_BASE + offset) == value

    def test_glyph_address(self):
        mem = Memory()
        assert mem.glyph_address(0x0) == 0x1AF
        assert mem.glyph_address(0xA) == 0x1AF + 50
        assert mem.glyph_address(0xF) == 0x1FA

    def test_glyph_table_ends_below_program_area(self):
        assert GLYPH_TABLE_BASE + len(GLYPH_TABLE) == 0x1FF
        assert GLYPH_TABLE_BASE + len(GLYPH_TABLE) <= PROGRAM_START

    def test_glyph_address_rejects_non_digit(self):
        with pytest.raises(InvalidKeyError):
            Memory().glyph_address(0x10)


class TestFramebuffer:
    def test_set_get_and_packed_value(self):
        mem = Memory()
        mem.set_pixel(3, 2, 1)
        assert mem.get_pixel(3, 2) == 1
        assert mem.pixels()[3 + 64 * 2] == PIXEL_ON
        assert mem.pixels()[0] == PIXEL_OFF

    def test_clear(self):
        mem = Memory()
        mem.set_pixel(63, 63, 1)
        mem.clear_framebuffer()
        assert all(p == PIXEL_OFF for p in mem.pixels())

    def test_out_of_range_coordinates(self):
        mem = Memory()
        with pytest.raises(FramebufferBoundsError):
            mem.get_pixel(64, 0)
        with pytest.raises(FramebufferBoundsError):
            mem.set_pixel(0, 64, 1)

    def test_pixels_returns_copy(self):
        mem = Memory()
        pixels = mem.pixels()
        pixels[0] = PIXEL_ON
        assert mem.get_pixel(0, 0) == 0


class TestStack:
    def test_push_peek_pop(self):
        mem = Memory()
        mem.push(0x0234)
        mem.push(0x0456)
        assert mem.peek() == 0x0456
        assert mem.stack_depth == 2
        assert mem.pop() == 0x0456
        assert mem.pop() == 0x0234
        assert mem.stack_depth == 0

    def test_full_depth_then_overflow(self):
        mem = Memory()
        for depth in range(STACK_SIZE):
            mem.push(0x200 + depth * 2)
        with pytest.raises(StackOverflowError):
            mem.push(0x300)
        assert mem.stack_depth == STACK_SIZE

    def test_underflow(self):
        mem = Memory()
        with pytest.raises(StackUnderflowError):
            mem.pop()
        with pytest.raises(StackUnderflowError):
            mem.peek()
