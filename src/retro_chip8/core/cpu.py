# retro_chip8/core/cpu.py
"""
Core Layer (CHIP-8 CPU)

このモジュールは、CHIP-8 CPUの状態管理と命令サイクルの駆動を提供します。
CPUは自身のメモリを持たず、サイクルごとに Memory を借りてフェッチ・格納・描画を行います。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from retro_chip8.common.errors import InvalidProgramCounterError
from retro_chip8.common.types import Keypad, RegisterInfo, RegisterLayoutInfo
from retro_chip8.core import disassembler
from retro_chip8.core.instructions import CycleContext, Quirks, decode_opcode, execute_instruction
from retro_chip8.core.snapshot import Instruction, Metadata, Snapshot
from retro_chip8.core.state import REGISTER_COUNT, Chip8State
from retro_chip8.memory.memory import PROGRAM_START, Memory

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8 CPUのフェッチ・デコード・実行サイクルを提供します。
class Chip8Cpu:
    """
    CHIP-8 CPUをエミュレートするクラス。
    レジスタファイル、インデックス、PC、ディレイタイマー以外の状態を持たず、
    キー待ちのような複数サイクルにわたる動作も専用のモードなしに実現します。
    """
    # @intent:responsibility CPUの状態を初期化します。
    # @intent:pre-condition `rng` を渡すと RND 命令の乱数列を再現可能にできます。
    def __init__(self, quirks: Optional[Quirks] = None, rng: Optional[random.Random] = None):
        self._quirks = quirks or Quirks()
        self._rng = rng or random.Random()
        self._state: Chip8State = self._create_initial_state()
        self._cycle_count: int = 0

    # @intent:responsibility 初期状態のChip8Stateオブジェクトを生成します。
    def _create_initial_state(self) -> Chip8State:
        return Chip8State()

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:responsibility 現在のCPUの状態を返します。
    def get_state(self) -> Chip8State:
        return self._state

    @property
    def quirks(self) -> Quirks:
        return self._quirks

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 現在のPCから16bitオペコードをフェッチします。
    # @intent:pre-condition PCは 0x200 以上の偶数アドレスである必要があります。
    def _fetch(self, memory: Memory) -> int:
        pc = self._state.pc
        if pc < PROGRAM_START or pc & 0x1:
            raise InvalidProgramCounterError(
                f"Program counter {pc:#06x} is not an even address in the program area.",
                address=pc,
            )
        return memory.fetch_opcode(pc)

    # @intent:responsibility フェッチしたオペコードを解析し、Instructionに変換します。
    def _decode(self, opcode: int) -> Instruction:
        return decode_opcode(opcode)

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    def _execute(self, instruction: Instruction, memory: Memory, keypad: Keypad) -> None:
        ctx = CycleContext(keypad=keypad, quirks=self._quirks, rng=self._rng)
        execute_instruction(instruction, self._state, memory, ctx)

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:flow ログクリア -> フェッチ -> デコード -> 実行 -> スナップショット生成 の順序で処理を行います。
    #              PCの更新は命令ごとに規則が異なるため、実行関数に任せます。
    def step(self, memory: Memory, keypad: Keypad) -> Snapshot:
        """
        1命令を完了まで実行し、その時点でのCPU状態とメモリアクティビティを含むSnapshotを返します。
        デコードや実行の失敗は Chip8Error として呼び出し元へ伝播します。
        """
        memory.get_and_clear_activity_log()
        initial_pc = self._state.pc

        opcode = self._fetch(memory)
        instruction = self._decode(opcode)
        logger.debug("%04X: %s %s", initial_pc, instruction.opcode_hex, instruction.text())

        self._execute(instruction, memory, keypad)

        return self._create_snapshot(initial_pc, instruction, memory)

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, instruction: Instruction, memory: Memory) -> Snapshot:
        memory_activity = memory.get_and_clear_activity_log()
        self._cycle_count += 1

        return Snapshot(
            state=self._state.copy(),
            instruction=instruction,
            metadata=Metadata(
                cycle_count=self._cycle_count,
                pc_before=initial_pc,
                symbol_info=f"0x{initial_pc:04X}: {instruction.text()}",
            ),
            memory_activity=memory_activity,
        )

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({"I": s.i, "PC": s.pc, "DT": s.delay_timer})
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers/Timer", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("DT", 8)
            ]),
        ]

    # @intent:responsibility UI表示用に、フラグレジスタ VF の状態を提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.flag != 0}

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(memory, start_addr, length)
