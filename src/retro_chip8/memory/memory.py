# retro_chip8/memory/memory.py
"""
Memory Layer (メモリ・スタック・フレームバッファ)

このモジュールは、CHIP-8 マシンの記憶領域全体を保持します。
4KBのバイトストア、16段のコールスタック、64x64のフレームバッファ、
および16進数字のグリフテーブルを所有し、命令については何も知りません。

    Memory map:
    0x000 - 0x1FF  インタプリタ予約領域（0x1AF - 0x1FE はグリフテーブル）
    0x200 - 0xFFF  プログラム ROM / RAM
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from retro_chip8.common.errors import (
    FramebufferBoundsError,
    InvalidKeyError,
    MemoryAccessError,
    MemoryProtectionError,
    ProgramTooLargeError,
    StackOverflowError,
    StackUnderflowError,
)
from retro_chip8.memory.glyphs import GLYPH_HEIGHT, GLYPH_TABLE, GLYPH_TABLE_BASE

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
STACK_SIZE = 16
FRAMEBUFFER_WIDTH = 64
FRAMEBUFFER_HEIGHT = 64

# 不透明アルファバイト + 輝度ビット。そのまま表示サーフェスへ渡せる形式。
PIXEL_OFF = 0xFF000000
PIXEL_ON = 0xFF000001


# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class AccessType(Enum):
    FETCH = "FETCH"
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 個々のメモリアクセス操作を記録します。
@dataclass(frozen=True)
class MemoryAccess:
    """
    バイトストアに対して行われた単一のアクセスを記録するデータクラス。
    FETCH の場合 data は16bitのオペコードです。
    """
    address: int
    data: int
    access_type: AccessType
    previous_data: Optional[int] = None  # WRITE の場合の書き込み前の値


# @intent:responsibility CHIP-8の全記憶領域（バイトストア、スタック、フレームバッファ）を保持します。
class Memory:
    """
    4KBのバイトストア、コールスタック、フレームバッファを所有するクラス。
    実行中のプログラムからの書き込みは `store_byte` を経由し、予約領域は保護されます。
    システム自身による初期化（グリフのコピー、プログラムのロード）は保護の対象外です。
    """
    # @intent:responsibility 全領域をゼロで確保し、グリフテーブルを予約領域にコピーします。
    def __init__(self):
        self._memory = bytearray(MEMORY_SIZE)
        self._stack: List[int] = [0] * STACK_SIZE
        # @intent:rationale スタックポインタはプッシュ済みの要素数を表す。16段全てを使用可能にするため。
        self._stack_pointer = 0
        self._framebuffer: List[int] = [PIXEL_OFF] * (FRAMEBUFFER_WIDTH * FRAMEBUFFER_HEIGHT)
        self._activity_log: List[MemoryAccess] = []
        self._memory[GLYPH_TABLE_BASE:GLYPH_TABLE_BASE + len(GLYPH_TABLE)] = GLYPH_TABLE

    # --- プログラムのロード ---

    # @intent:responsibility プログラムのバイト列を 0x200 から配置します。
    # @intent:pre-condition 0x200 + len(program) が 4096 以下である必要があります。
    def load_program(self, program: bytes) -> None:
        """
        プログラムを 0x200 から書き込みます。命令としての妥当性は検査しません。
        収まらない場合は ProgramTooLargeError を送出します（呼び出し元で回復可能）。
        """
        end = PROGRAM_START + len(program)
        if end > MEMORY_SIZE:
            raise ProgramTooLargeError(
                f"Program of {len(program)} bytes does not fit in memory "
                f"({MEMORY_SIZE - PROGRAM_START} bytes available).",
                address=PROGRAM_START,
            )
        self._memory[PROGRAM_START:end] = program

    # --- バイトストア ---

    def _check_address(self, address: int) -> None:
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(f"Address {address:#06x} out of bounds for memory of size {MEMORY_SIZE:#06x}.", address=address)

    # @intent:responsibility 2バイトをビッグエンディアンの16bitオペコードとして読み出します。
    def fetch_opcode(self, address: int) -> int:
        self._check_address(address)
        self._check_address(address + 1)
        opcode = (self._memory[address] << 8) | self._memory[address + 1]
        self._activity_log.append(MemoryAccess(address, opcode, AccessType.FETCH))
        return opcode

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    def fetch_byte(self, address: int) -> int:
        self._check_address(address)
        data = self._memory[address]
        self._activity_log.append(MemoryAccess(address, data, AccessType.READ))
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek_byte(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します（ログ記録なし）。
        逆アセンブラやUIなどのインスペクタ用。
        """
        self._check_address(address)
        return self._memory[address]

    # @intent:responsibility 実行中のプログラムからの8bit書き込みを行います。
    # @intent:pre-condition アドレスは 0x200 以上 0x1000 未満、データは8bit値である必要があります。
    def store_byte(self, address: int, value: int) -> None:
        self._check_address(address)
        if address < PROGRAM_START:
            raise MemoryProtectionError(
                f"Write to reserved address {address:#06x} (below {PROGRAM_START:#06x}).",
                address=address,
            )
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Data {value} is not an 8-bit value.")
        previous = self._memory[address]
        self._memory[address] = value
        self._activity_log.append(MemoryAccess(address, value, AccessType.WRITE, previous))

    # @intent:responsibility 記録されたアクセスログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[MemoryAccess]:
        log = self._activity_log
        self._activity_log = []
        return log

    # --- グリフ ---

    # @intent:responsibility 16進数字のスプライトの先頭アドレスを返します。
    def glyph_address(self, digit: int) -> int:
        if not 0 <= digit <= 0xF:
            raise InvalidKeyError(f"Glyph digit {digit} is not a hexadecimal digit.")
        return GLYPH_TABLE_BASE + GLYPH_HEIGHT * digit

    # --- フレームバッファ ---

    def _pixel_index(self, x: int, y: int) -> int:
        # ラップアラウンドもクリッピングも行わない。座標の管理は呼び出し側の責務。
        if not (0 <= x < FRAMEBUFFER_WIDTH and 0 <= y < FRAMEBUFFER_HEIGHT):
            raise FramebufferBoundsError(f"Pixel ({x}, {y}) is outside the {FRAMEBUFFER_WIDTH}x{FRAMEBUFFER_HEIGHT} framebuffer.")
        return x + FRAMEBUFFER_WIDTH * y

    # @intent:responsibility 指定座標のピクセルのオン/オフ（1/0）を返します。
    def get_pixel(self, x: int, y: int) -> int:
        return self._framebuffer[self._pixel_index(x, y)] & 0x01

    # @intent:responsibility 指定座標のピクセルをオン/オフ（1/0）に設定します。
    def set_pixel(self, x: int, y: int, value: int) -> None:
        self._framebuffer[self._pixel_index(x, y)] = PIXEL_ON if value else PIXEL_OFF

    # @intent:responsibility フレームバッファ全体をオフにします。
    def clear_framebuffer(self) -> None:
        self._framebuffer = [PIXEL_OFF] * (FRAMEBUFFER_WIDTH * FRAMEBUFFER_HEIGHT)

    # @intent:responsibility 表示用にパック済みピクセル値のコピーを返します。
    def pixels(self) -> List[int]:
        """
        行優先（x + 64*y）のパック済みピクセル値のリストを返します。
        ホストはサイクル間にこれを読み出して表示します。
        """
        return list(self._framebuffer)

    # --- コールスタック ---

    @property
    def stack_depth(self) -> int:
        return self._stack_pointer

    # @intent:responsibility 戻りアドレスをスタックに積みます。
    def push(self, address: int) -> None:
        if self._stack_pointer >= STACK_SIZE:
            raise StackOverflowError(f"Call stack overflow (depth {STACK_SIZE}).", address=address)
        self._stack_pointer += 1
        self._stack[self._stack_pointer - 1] = address & 0xFFFF

    # @intent:responsibility スタックの先頭を読み出し、取り除きます。
    def pop(self) -> int:
        if self._stack_pointer == 0:
            raise StackUnderflowError("Return without a matching call (stack is empty).")
        address = self._stack[self._stack_pointer - 1]
        self._stack_pointer -= 1
        return address

    # @intent:responsibility スタックの先頭を取り除かずに返します。
    def peek(self) -> int:
        if self._stack_pointer == 0:
            raise StackUnderflowError("Cannot peek an empty stack.")
        return self._stack[self._stack_pointer - 1]
