# retro_chip8/common/errors.py
"""
例外定義モジュール。

CHIP-8 マシンで発生しうる全ての失敗を型付きの例外として定義します。
ロード時の失敗は呼び出し元で回復可能であり、実行時の失敗は致命的
（マシンを停止させる）として扱われます。
"""
from typing import Optional


# @intent:responsibility 全てのCHIP-8関連エラーの基底クラスです。
class Chip8Error(Exception):
    """
    CHIP-8 エミュレーションで発生するエラーの基底クラス。
    `address` には失敗に関係するアドレス（PCまたはメモリアドレス）を保持します。
    """
    def __init__(self, message: str, address: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.address = address


# --- ロード時（回復可能） ---

class ProgramTooLargeError(Chip8Error):
    """プログラムがプログラム領域に収まらない。"""
    pass


class RomLoadError(Chip8Error):
    """ROMファイルを読み込めない、または空である。"""
    pass


class ConfigError(Chip8Error):
    """設定ファイルの値が不正である。"""
    pass


# --- デコード時（致命的） ---

class InvalidOpcodeError(Chip8Error):
    """認識できないオペコード、またはサブオペコード。"""
    pass


class InvalidRegisterError(Chip8Error):
    """レジスタインデックスが 0-15 の範囲外。"""
    pass


# --- 実行時（致命的） ---

class MemoryAccessError(Chip8Error):
    """4KBのアドレス空間外へのアクセス。"""
    pass


class MemoryProtectionError(Chip8Error):
    """実行中のプログラムによる予約領域（0x200未満）への書き込み。"""
    pass


class StackOverflowError(Chip8Error):
    """呼び出しの深さがスタック容量を超えた。"""
    pass


class StackUnderflowError(Chip8Error):
    """対応するCALLのないRET。"""
    pass


class FramebufferBoundsError(Chip8Error):
    """フレームバッファ外の座標へのアクセス。"""
    pass


class MachineHaltedError(Chip8Error):
    """致命的エラーで停止したマシンに対してサイクルが要求された。"""
    pass


class InvalidProgramCounterError(Chip8Error):
    """PCが奇数、またはプログラム領域（0x200 - 0xFFF）の外を指している。"""
    pass


class InvalidKeyError(Chip8Error):
    """キー番号または16進数字として使うレジスタ値が 0-15 の範囲外。"""
    pass
