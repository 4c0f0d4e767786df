# retro_chip8/core/instructions/keypad.py
"""
キーパッド命令（キー押下スキップ、キー待ち）の実装。

キーパッドの状態はホストから毎サイクル渡されるスナップショットのみを参照し、
サイクルをまたいで保持しません。
"""
from retro_chip8.common.errors import InvalidKeyError
from retro_chip8.common.types import KEY_COUNT
from retro_chip8.core.snapshot import Instruction, InstructionKind
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import Memory
from .base import INSTRUCTION_LENGTH, CycleContext, advance, reg, split_opcode


def _key_pressed(ctx: CycleContext, key: int) -> bool:
    if not 0 <= key < KEY_COUNT:
        raise InvalidKeyError(f"Key index {key:#04x} is outside 0x0-0xF.")
    return bool(ctx.keypad[key])


def _key_skip(state: Chip8State, ctx: CycleContext, condition: bool) -> None:
    if condition:
        advance(state, 2 * INSTRUCTION_LENGTH)
    elif not ctx.quirks.key_skip_freezes_pc:
        advance(state)


# --- SKP Vx ---
def decode_skp(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.SKP, "SKP", [reg(f.x)], x=f.x)

# @intent:responsibility Vx のキーが押されていれば次の命令をスキップします。
def execute_skp(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    _key_skip(state, ctx, _key_pressed(ctx, state.v[op.x]))

# --- SKNP Vx ---
def decode_sknp(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.SKNP, "SKNP", [reg(f.x)], x=f.x)

# @intent:responsibility Vx のキーが押されていなければ次の命令をスキップします。
def execute_sknp(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    _key_skip(state, ctx, not _key_pressed(ctx, state.v[op.x]))

# --- LD Vx, K ---
def decode_ld_vx_k(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.LD_VX_K, "LD", [reg(f.x), "K"], x=f.x)

# @intent:responsibility 押されているキーのうち最小の番号を Vx に格納します。
# @intent:rationale 待機状態は持たない。キーが押されていなければPCを含め何も変更せず、
#                   ホストが次のフレームで再度サイクルを呼ぶことで待機を実現する。
def execute_ld_vx_k(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    for key, pressed in enumerate(ctx.keypad):
        if pressed:
            state.v[op.x] = key
            advance(state)
            return
