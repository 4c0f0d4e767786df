# retro_chip8/core/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from retro_chip8.core.snapshot import Instruction, InstructionKind
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import Memory
from .base import CycleContext, addr_literal, advance, byte_literal, reg, skip_if, split_opcode

# --- RET ---
# @intent:responsibility RET (00EE) 命令をデコードします。
def decode_ret(opcode: int) -> Instruction:
    return Instruction(opcode, InstructionKind.RET, "RET")

# @intent:responsibility スタックから戻りアドレスを取り出し、CALL命令の次へ戻ります。
def execute_ret(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    # スタックにはCALL命令自身のアドレスが積まれている
    state.pc = memory.pop()
    advance(state)

# --- JP addr ---
# @intent:responsibility JP (1nnn) 命令をデコードします。
def decode_jp(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.JP, "JP", [addr_literal(f.nnn)], nnn=f.nnn)

def execute_jp(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.pc = op.nnn

# --- CALL addr ---
# @intent:responsibility CALL (2nnn) 命令をデコードします。
def decode_call(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.CALL, "CALL", [addr_literal(f.nnn)], nnn=f.nnn)

# @intent:responsibility 現在のPCをスタックに積んでからサブルーチンへジャンプします。
def execute_call(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    memory.push(state.pc)
    state.pc = op.nnn

# --- SE Vx, byte ---
def decode_se_imm(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.SE_IMM, "SE", [reg(f.x), byte_literal(f.kk)], x=f.x, kk=f.kk)

# @intent:responsibility Vx == kk なら次の命令をスキップします。
def execute_se_imm(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    skip_if(state, state.v[op.x] == op.kk)

# --- SNE Vx, byte ---
def decode_sne_imm(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.SNE_IMM, "SNE", [reg(f.x), byte_literal(f.kk)], x=f.x, kk=f.kk)

# @intent:responsibility Vx != kk なら次の命令をスキップします。
def execute_sne_imm(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    skip_if(state, state.v[op.x] != op.kk)

# --- SE Vx, Vy ---
def decode_se_reg(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.SE_REG, "SE", [reg(f.x), reg(f.y)], x=f.x, y=f.y)

def execute_se_reg(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    skip_if(state, state.v[op.x] == state.v[op.y])

# --- SNE Vx, Vy ---
def decode_sne_reg(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.SNE_REG, "SNE", [reg(f.x), reg(f.y)], x=f.x, y=f.y)

def execute_sne_reg(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    skip_if(state, state.v[op.x] != state.v[op.y])

# --- JP V0, addr ---
# @intent:responsibility JP V0 (Bnnn) 命令をデコードします。
def decode_jp_v0(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.JP_V0, "JP", ["V0", addr_literal(f.nnn)], nnn=f.nnn)

# @intent:responsibility nnn + V0 へジャンプします。
def execute_jp_v0(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    state.pc = (op.nnn + state.v[0]) & 0xFFFF
