# retro_chip8/core/instructions/load.py
"""
インデックスレジスタ、メモリ転送、ディレイタイマー関連命令の実装。
"""
from retro_chip8.core.snapshot import Instruction, InstructionKind
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import Memory
from .base import CycleContext, addr_literal, advance, reg, split_opcode


def _decode_x(opcode: int, kind: InstructionKind, mnemonic: str, operands_fmt: str) -> Instruction:
    f = split_opcode(opcode)
    operands = [part.strip() for part in operands_fmt.format(vx=reg(f.x)).split(",")]
    return Instruction(opcode, kind, mnemonic, operands, x=f.x)


# --- LD I, addr ---
def decode_ld_i(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.LD_I, "LD", ["I", addr_literal(f.nnn)], nnn=f.nnn)

def execute_ld_i(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.i = op.nnn
    advance(state)

# --- LD Vx, DT ---
def decode_ld_vx_dt(opcode: int) -> Instruction:
    return _decode_x(opcode, InstructionKind.LD_VX_DT, "LD", "{vx}, DT")

def execute_ld_vx_dt(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] = state.delay_timer
    advance(state)

# --- LD DT, Vx ---
def decode_ld_dt_vx(opcode: int) -> Instruction:
    return _decode_x(opcode, InstructionKind.LD_DT_VX, "LD", "DT, {vx}")

def execute_ld_dt_vx(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.delay_timer = state.v[op.x]
    advance(state)

# --- ADD I, Vx ---
def decode_add_i(opcode: int) -> Instruction:
    return _decode_x(opcode, InstructionKind.ADD_I, "ADD", "I, {vx}")

# @intent:responsibility I += Vx（16bitで折り返し、フラグは変更しない）。
def execute_add_i(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF
    advance(state)

# --- LD F, Vx ---
def decode_ld_f(opcode: int) -> Instruction:
    return _decode_x(opcode, InstructionKind.LD_F, "LD", "F, {vx}")

# @intent:responsibility I を Vx が示す16進数字グリフのアドレスに設定します。Vx は 0-15 である必要があります。
def execute_ld_f(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.i = memory.glyph_address(state.v[op.x])
    advance(state)

# --- LD B, Vx ---
def decode_ld_b(opcode: int) -> Instruction:
    return _decode_x(opcode, InstructionKind.LD_B, "LD", "B, {vx}")

# @intent:responsibility Vx を百・十・一の位に分解し、I, I+1, I+2 に格納します。
def execute_ld_b(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    value = state.v[op.x]
    memory.store_byte(state.i, value // 100)
    memory.store_byte(state.i + 1, (value // 10) % 10)
    memory.store_byte(state.i + 2, value % 10)
    advance(state)

# --- LD [I], Vx ---
def decode_ld_mem_vx(opcode: int) -> Instruction:
    return _decode_x(opcode, InstructionKind.LD_MEM_VX, "LD", "[I], {vx}")

# @intent:responsibility V0..Vx を I から始まるメモリへ格納し、I を x+1 進めます。
def execute_ld_mem_vx(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    for offset in range(op.x + 1):
        memory.store_byte(state.i + offset, state.v[offset])
    state.i = (state.i + op.x + 1) & 0xFFFF
    advance(state)

# --- LD Vx, [I] ---
def decode_ld_vx_mem(opcode: int) -> Instruction:
    return _decode_x(opcode, InstructionKind.LD_VX_MEM, "LD", "{vx}, [I]")

# @intent:responsibility I から始まるメモリを V0..Vx へ読み込み、I を x+1 進めます。
def execute_ld_vx_mem(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    for offset in range(op.x + 1):
        state.v[offset] = memory.fetch_byte(state.i + offset)
    state.i = (state.i + op.x + 1) & 0xFFFF
    advance(state)
