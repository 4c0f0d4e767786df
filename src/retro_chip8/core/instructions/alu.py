# retro_chip8/core/instructions/alu.py
"""
算術・論理演算命令の実装。

全ての結果は8bitで折り返されます。ADD/SUB/SUBN/SHR/SHL はフラグレジスタ VF に
キャリー/ボロー/シフトアウトしたビットを書き込みます。フラグは結果の後に書き込むため、
Vx が VF の場合は最終的にフラグ値が残ります。
"""
from retro_chip8.core.snapshot import Instruction, InstructionKind
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import Memory
from .base import CycleContext, advance, byte_literal, reg, split_opcode


def _decode_xkk(opcode: int, kind: InstructionKind, mnemonic: str) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, kind, mnemonic, [reg(f.x), byte_literal(f.kk)], x=f.x, kk=f.kk)


def _decode_xy(opcode: int, kind: InstructionKind, mnemonic: str) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, kind, mnemonic, [reg(f.x), reg(f.y)], x=f.x, y=f.y)


# --- LD Vx, byte ---
def decode_ld_imm(opcode: int) -> Instruction:
    return _decode_xkk(opcode, InstructionKind.LD_IMM, "LD")

def execute_ld_imm(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] = op.kk
    advance(state)

# --- ADD Vx, byte ---
def decode_add_imm(opcode: int) -> Instruction:
    return _decode_xkk(opcode, InstructionKind.ADD_IMM, "ADD")

# @intent:responsibility Vx += kk。キャリーフラグは変更しません。
def execute_add_imm(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] = (state.v[op.x] + op.kk) & 0xFF
    advance(state)

# --- LD Vx, Vy ---
def decode_ld_reg(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.LD_REG, "LD")

def execute_ld_reg(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] = state.v[op.y]
    advance(state)

# --- OR / AND / XOR ---
def decode_or(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.OR, "OR")

def execute_or(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] |= state.v[op.y]
    advance(state)

def decode_and(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.AND, "AND")

def execute_and(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] &= state.v[op.y]
    advance(state)

def decode_xor(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.XOR, "XOR")

def execute_xor(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] ^= state.v[op.y]
    advance(state)

# --- ADD Vx, Vy ---
def decode_add_reg(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.ADD_REG, "ADD")

# @intent:responsibility Vx += Vy。9bitの和が 255 を超えた場合 VF = 1。
def execute_add_reg(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    result = state.v[op.x] + state.v[op.y]
    state.v[op.x] = result & 0xFF
    state.flag = result > 0xFF
    advance(state)

# --- SUB Vx, Vy ---
def decode_sub(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.SUB, "SUB")

# @intent:responsibility Vx -= Vy。結果が負（ボローあり）の場合 VF = 1。
def execute_sub(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    result = state.v[op.x] - state.v[op.y]
    state.v[op.x] = result & 0xFF
    state.flag = result < 0
    advance(state)

# --- SUBN Vx, Vy ---
def decode_subn(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.SUBN, "SUBN")

# @intent:responsibility Vx = Vy - Vx。結果が負（ボローあり）の場合 VF = 1。
def execute_subn(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    result = state.v[op.y] - state.v[op.x]
    state.v[op.x] = result & 0xFF
    state.flag = result < 0
    advance(state)

# --- SHR Vx ---
def decode_shr(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.SHR, "SHR")

# @intent:responsibility Vx を1bit右シフトし、押し出された最下位ビットを VF に格納します。
def execute_shr(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    value = state.v[op.x]
    state.v[op.x] = value >> 1
    state.flag = value & 0x01
    advance(state)

# --- SHL Vx ---
def decode_shl(opcode: int) -> Instruction:
    return _decode_xy(opcode, InstructionKind.SHL, "SHL")

# @intent:responsibility Vx を1bit左シフトし、押し出された最上位ビット（bit 7）を VF に格納します。
def execute_shl(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    value = state.v[op.x]
    state.v[op.x] = (value << 1) & 0xFF
    state.flag = (value & 0x80) >> 7
    advance(state)

# --- RND Vx, byte ---
def decode_rnd(opcode: int) -> Instruction:
    return _decode_xkk(opcode, InstructionKind.RND, "RND")

# @intent:responsibility Vx = 乱数バイト AND kk。
def execute_rnd(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.v[op.x] = ctx.rng.randrange(0x100) & op.kk
    advance(state)
