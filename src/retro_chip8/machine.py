# retro_chip8/machine.py
"""
Machine (ファサード)

1つの Memory と 1つの Chip8Cpu を所有し、ホストに「プログラムのロード」と
「1サイクルの実行」を提供します。ホストは起動時に一度プログラムをロードし、
以降はフレームごとにキーパッドのスナップショットを渡して run_cycle を呼び、
サイクル間にフレームバッファを読み出して表示します。
"""
import logging
import random
from typing import List, Optional

from retro_chip8.common.errors import Chip8Error, MachineHaltedError
from retro_chip8.common.types import KEY_COUNT, Keypad
from retro_chip8.core.cpu import Chip8Cpu
from retro_chip8.core.instructions import Quirks
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.core.state import Chip8State
from retro_chip8.memory.memory import Memory

logger = logging.getLogger(__name__)

# @intent:responsibility MemoryとCPUを束ね、ホスト向けの操作を提供します。
class Machine:
    """
    CHIP-8 マシン全体。Memory と CPU はこのインスタンスが排他的に所有します。
    実行中に致命的エラーが発生するとマシンは停止状態になり、reset() まで再開できません。
    """
    def __init__(self, quirks: Optional[Quirks] = None, rng: Optional[random.Random] = None):
        self._memory = Memory()
        self._cpu = Chip8Cpu(quirks=quirks, rng=rng)
        self._program: bytes = b""
        self._halted = False
        self._fault: Optional[Chip8Error] = None

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def state(self) -> Chip8State:
        return self._cpu.get_state()

    @property
    def halted(self) -> bool:
        return self._halted

    @property
    def fault(self) -> Optional[Chip8Error]:
        return self._fault

    # @intent:responsibility プログラムを 0x200 からロードします。
    # @intent:post-condition 収まらない場合は ProgramTooLargeError を送出し、マシンの状態は変更されません。
    def load_program(self, program: bytes) -> None:
        self._memory.load_program(bytes(program))
        self._program = bytes(program)
        logger.info("Loaded program of %d bytes", len(program))

    # @intent:responsibility 1命令を実行し、そのスナップショットを返します。
    def run_cycle(self, keypad: Keypad) -> Snapshot:
        """
        キーパッドのスナップショット（16個の真偽値）を渡して1命令を実行します。
        致命的エラーはログに記録され、マシンを停止させた上で再送出されます。
        """
        if self._halted:
            raise MachineHaltedError(
                f"Machine is halted: {self._fault.message if self._fault else 'unknown fault'}",
                address=self.state.pc,
            )
        if len(keypad) != KEY_COUNT:
            raise ValueError(f"Keypad snapshot must have {KEY_COUNT} entries, got {len(keypad)}.")

        try:
            return self._cpu.step(self._memory, keypad)
        except Chip8Error as e:
            self._halted = True
            self._fault = e
            logger.error("Machine halted at PC %#06x: %s", self.state.pc, e.message)
            raise

    # @intent:responsibility ディレイタイマーを1減らします（0で停止）。
    # @intent:rationale コア自身は時間経過でタイマーを減算しない。60Hzで呼ぶかどうかはホストが決める。
    def tick_timers(self) -> None:
        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1

    # @intent:responsibility マシンを初期状態に戻し、最後にロードしたプログラムを再ロードします。
    def reset(self) -> None:
        self._memory = Memory()
        self._cpu.reset()
        self._halted = False
        self._fault = None
        if self._program:
            self._memory.load_program(self._program)
        logger.info("Machine reset")

    # @intent:responsibility 表示用のパック済みピクセル値（64x64）を返します。
    def framebuffer(self) -> List[int]:
        return self._memory.pixels()
