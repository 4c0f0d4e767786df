# retro_chip8/core/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ表現に変換します。
Instruction Layerのデコードロジックを再利用しますが、アクセスログを汚さないように
peek_byte で読み出します。
"""
from typing import List, Tuple

from retro_chip8.common.errors import Chip8Error
from retro_chip8.core.instructions import decode_opcode
from retro_chip8.memory.memory import MEMORY_SIZE, Memory

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。
    デコードできないワードは "DW" として出力します。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, MEMORY_SIZE - 1)

    while current_addr < end_addr:
        high = memory.peek_byte(current_addr)
        low = memory.peek_byte(current_addr + 1)
        opcode = (high << 8) | low
        hex_bytes = f"{high:02X} {low:02X}"

        try:
            mnemonic_str = decode_opcode(opcode).text()
        except Chip8Error:
            mnemonic_str = f"DW 0x{opcode:04X}"

        result.append((current_addr, hex_bytes, mnemonic_str))
        current_addr += 2

    return result
