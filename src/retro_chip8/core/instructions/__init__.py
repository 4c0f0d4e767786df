"""
CHIP-8命令セット実装パッケージ。

デコード（オペコード -> Instruction）は副作用のない純粋な処理であり、
実行（Instruction -> 状態遷移）とは分離されています。
"""
from retro_chip8.common.errors import InvalidOpcodeError
from retro_chip8.core.snapshot import Instruction
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import Memory
from .base import CycleContext, Quirks
from .maps import (
    ALU_DECODE_MAP,
    EXECUTE_MAP,
    FAMILY_DECODE_MAP,
    KEY_DECODE_MAP,
    MISC_DECODE_MAP,
    SYSTEM_DECODE_MAP,
)

# @intent:map サブディスパッチを持つファミリーと、その (サブマップ, キー抽出マスク)。
_SUB_DISPATCH = {
    0x0: (SYSTEM_DECODE_MAP, 0x0FFF),
    0x8: (ALU_DECODE_MAP, 0x000F),
    0xE: (KEY_DECODE_MAP, 0x00FF),
    0xF: (MISC_DECODE_MAP, 0x00FF),
}

# @intent:responsibility CHIP-8の16bitオペコードをデコードします。
def decode_opcode(opcode: int) -> Instruction:
    """
    オペコードをデコードし、Instructionを返します。
    どのレベルでも認識できない組み合わせは InvalidOpcodeError を送出します。
    """
    if not 0 <= opcode <= 0xFFFF:
        raise InvalidOpcodeError(f"Opcode {opcode:#x} is not a 16-bit value.")

    family = (opcode >> 12) & 0xF
    if family in _SUB_DISPATCH:
        sub_map, mask = _SUB_DISPATCH[family]
        decoder = sub_map.get(opcode & mask)
    else:
        decoder = FAMILY_DECODE_MAP.get(family)

    if decoder is None:
        raise InvalidOpcodeError(f"Unrecognized opcode {opcode:04X}.")
    return decoder(opcode)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Instruction, state: Chip8State, memory: Memory, ctx: CycleContext) -> None:
    """
    デコードされた命令を実行し、CPUの状態とメモリを変更します。
    PCの更新は各命令の実行関数が行います。
    """
    executor = EXECUTE_MAP.get(operation.kind)
    if executor is None:
        raise InvalidOpcodeError(f"No executor for {operation.kind.name} ({operation.opcode_hex}).")
    executor(state, memory, operation, ctx)

__all__ = ["decode_opcode", "execute_instruction", "CycleContext", "Quirks"]
