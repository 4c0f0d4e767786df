# retro_chip8/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CHIP-8 CPUの状態（レジスタファイル、インデックス、PC、
ディレイタイマー）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass, field, replace
from typing import List

from retro_chip8.common.errors import InvalidRegisterError

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
PROGRAM_COUNTER_START = 0x200


# @intent:responsibility レジスタインデックスが 0-15 の範囲内であることを検証します。
# @intent:rationale 範囲外のインデックスは配列アクセスの失敗に任せず、明示的に型付きエラーとして扱う。
def validate_register_index(index: int) -> int:
    if not 0 <= index <= REGISTER_COUNT - 1:
        raise InvalidRegisterError(f"Register index {index} is outside V0-VF.")
    return index


# @intent:responsibility CHIP-8 CPUの全てのレジスタ状態を保持します。
@dataclass
class Chip8State:
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    V0-VF の汎用レジスタ（VFはフラグレジスタ）、16bitのインデックス I、
    16bitのプログラムカウンタ、8bitのディレイタイマーから成ります。
    """
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000
    pc: int = PROGRAM_COUNTER_START
    delay_timer: int = 0x00

    @property
    def flag(self) -> int:
        return self.v[FLAG_REGISTER]

    @flag.setter
    def flag(self, value: int) -> None:
        self.v[FLAG_REGISTER] = 1 if value else 0

    # @intent:responsibility スナップショット用の独立したコピーを返します。
    # @intent:rationale レジスタリストは可変のため、浅いコピーでは後続サイクルの変更が漏れる。
    def copy(self) -> "Chip8State":
        return replace(self, v=list(self.v))
