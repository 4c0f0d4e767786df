# retro_chip8/core/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field
from typing import NamedTuple

from retro_chip8.common.types import Keypad
from retro_chip8.core.state import Chip8State

INSTRUCTION_LENGTH = 2


# @intent:responsibility 実装ごとに挙動が分かれる命令の動作を選択します。
@dataclass
class Quirks:
    """
    key_skip_freezes_pc: True の場合、SKP/SKNP で条件が成立しないとPCを進めない（旧来の挙動）。
    sprite_wrap: True の場合、DRW で画面外のピクセルを 64 で折り返す。False の場合は範囲外エラー。
    """
    key_skip_freezes_pc: bool = False
    sprite_wrap: bool = True


# @intent:responsibility 1サイクルの実行に必要な外部入力をまとめます。
@dataclass
class CycleContext:
    keypad: Keypad
    quirks: Quirks = field(default_factory=Quirks)
    rng: random.Random = field(default_factory=random.Random)


# @intent:data_structure オペコードから切り出したニブル/バイト単位のフィールド。
class OpcodeFields(NamedTuple):
    x: int
    y: int
    n: int
    kk: int
    nnn: int


# @intent:utility_function 16bitオペコードを各オペランドフィールドに分解します。
def split_opcode(opcode: int) -> OpcodeFields:
    return OpcodeFields(
        x=(opcode >> 8) & 0x0F,
        y=(opcode >> 4) & 0x0F,
        n=opcode & 0x000F,
        kk=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


# @intent:utility_function PCを指定バイト数だけ進めます（16bitで折り返し）。
def advance(state: Chip8State, count: int = INSTRUCTION_LENGTH) -> None:
    state.pc = (state.pc + count) & 0xFFFF


# @intent:utility_function スキップ命令の共通処理。条件成立なら次の命令を飛ばします。
def skip_if(state: Chip8State, condition: bool) -> None:
    advance(state, 2 * INSTRUCTION_LENGTH if condition else INSTRUCTION_LENGTH)


def reg(index: int) -> str:
    return f"V{index:X}"


def byte_literal(value: int) -> str:
    return f"0x{value:02X}"


def addr_literal(value: int) -> str:
    return f"0x{value:03X}"
