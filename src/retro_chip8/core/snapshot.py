# retro_chip8/core/snapshot.py
"""
デコード済み命令と実行状態の不変スナップショット

このモジュールは、16bitオペコードをデコードした結果である `Instruction`
（命令種別ごとのタグ付きバリアント）と、1サイクル実行後のCPUとメモリの
状態を記録した不変のデータ構造を定義します。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from retro_chip8.core.state import Chip8State, validate_register_index
from retro_chip8.memory.memory import AccessType, MemoryAccess


# @intent:responsibility 35種の命令を識別するタグを定義します。
class InstructionKind(Enum):
    CLS = "CLS"                  # 00E0
    RET = "RET"                  # 00EE
    JP = "JP"                    # 1nnn
    CALL = "CALL"                # 2nnn
    SE_IMM = "SE_IMM"            # 3xkk
    SNE_IMM = "SNE_IMM"          # 4xkk
    SE_REG = "SE_REG"            # 5xy0
    LD_IMM = "LD_IMM"            # 6xkk
    ADD_IMM = "ADD_IMM"          # 7xkk
    LD_REG = "LD_REG"            # 8xy0
    OR = "OR"                    # 8xy1
    AND = "AND"                  # 8xy2
    XOR = "XOR"                  # 8xy3
    ADD_REG = "ADD_REG"          # 8xy4
    SUB = "SUB"                  # 8xy5
    SHR = "SHR"                  # 8xy6
    SUBN = "SUBN"                # 8xy7
    SHL = "SHL"                  # 8xyE
    SNE_REG = "SNE_REG"          # 9xy0
    LD_I = "LD_I"                # Annn
    JP_V0 = "JP_V0"              # Bnnn
    RND = "RND"                  # Cxkk
    DRW = "DRW"                  # Dxyn
    SKP = "SKP"                  # Ex9E
    SKNP = "SKNP"                # ExA1
    LD_VX_DT = "LD_VX_DT"        # Fx07
    LD_VX_K = "LD_VX_K"          # Fx0A
    LD_DT_VX = "LD_DT_VX"        # Fx15
    ADD_I = "ADD_I"              # Fx1E
    LD_F = "LD_F"                # Fx29
    LD_B = "LD_B"                # Fx33
    LD_MEM_VX = "LD_MEM_VX"      # Fx55
    LD_VX_MEM = "LD_VX_MEM"      # Fx65


# @intent:responsibility デコードされた1命令（オペコードとオペランド）を記録します。
@dataclass(frozen=True)
class Instruction:
    """
    16bitオペコードをデコードした結果。副作用を持たない純粋な値です。
    x, y はレジスタインデックスで、生成時に 0-15 の範囲が検証されます。
    """
    opcode: int
    kind: InstructionKind
    mnemonic: str  # 例: "ADD"
    operands: List[str] = field(default_factory=list)  # 例: ["V1", "V2"]
    x: int = 0
    y: int = 0
    n: int = 0     # 4bit即値（スプライトの高さ）
    kk: int = 0    # 8bit即値
    nnn: int = 0   # 12bitアドレス
    length: int = 2

    def __post_init__(self):
        validate_register_index(self.x)
        validate_register_index(self.y)

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    # @intent:responsibility 表示用のアセンブリ表現（例: "ADD V1, V2"）を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、命令の表示文字列など）を記録するデータクラス。
    """
    cycle_count: int
    pc_before: int
    symbol_info: Optional[str] = None  # 例: "0x0200: LD V0, #0x0A"


# @intent:responsibility 1サイクル実行後のCPUとメモリアクセスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    ある一時点における、CPUの状態とそのサイクルのメモリアクティビティを記録した不変のデータ構造。
    state は実行後の状態の独立したコピーです。
    """
    state: Chip8State
    instruction: Instruction
    metadata: Metadata
    memory_activity: List[MemoryAccess] = field(default_factory=list)

    # @intent:responsibility このサイクルで書き込まれたアドレスの一覧を返します。
    def written_addresses(self) -> List[int]:
        return [a.address for a in self.memory_activity if a.access_type == AccessType.WRITE]
