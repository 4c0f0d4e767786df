# retro_chip8/core/instructions/display.py
"""
画面命令（クリア、スプライト描画）の実装。
"""
from retro_chip8.core.snapshot import Instruction, InstructionKind
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import FRAMEBUFFER_HEIGHT, FRAMEBUFFER_WIDTH, Memory
from .base import CycleContext, advance, reg, split_opcode

SPRITE_WIDTH = 8

# --- CLS ---
def decode_cls(opcode: int) -> Instruction:
    return Instruction(opcode, InstructionKind.CLS, "CLS")

def execute_cls(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    memory.clear_framebuffer()
    advance(state)

# --- DRW Vx, Vy, nibble ---
# @intent:responsibility DRW (Dxyn) 命令をデコードします。
def decode_drw(opcode: int) -> Instruction:
    f = split_opcode(opcode)
    return Instruction(opcode, InstructionKind.DRW, "DRW", [reg(f.x), reg(f.y), str(f.n)], x=f.x, y=f.y, n=f.n)

# @intent:responsibility I から n バイトのスプライトを (Vx, Vy) に XOR 描画し、衝突を VF に記録します。
# @intent:rationale 各バイトが8ピクセル幅の1行で、最上位ビットが左端。
#                   点灯中のピクセルを消した時点で VF = 1 となり、以降の描画で衝突がなくても 1 のまま。
def execute_drw(state: Chip8State, memory: Memory, op: Instruction, ctx: CycleContext) -> None:
    origin_x = state.v[op.x]
    origin_y = state.v[op.y]
    state.flag = 0

    for row in range(op.n):
        sprite_byte = memory.fetch_byte((state.i + row) & 0xFFFF)
        for column in range(SPRITE_WIDTH):
            if not sprite_byte & (0x80 >> column):
                continue
            px = origin_x + column
            py = origin_y + row
            if ctx.quirks.sprite_wrap:
                px %= FRAMEBUFFER_WIDTH
                py %= FRAMEBUFFER_HEIGHT
            # quirks.sprite_wrap が False の場合、範囲外は Memory 側で FramebufferBoundsError
            current = memory.get_pixel(px, py)
            if current:
                state.flag = 1
            memory.set_pixel(px, py, current ^ 0x01)

    advance(state)
