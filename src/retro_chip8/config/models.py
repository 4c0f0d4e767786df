from dataclasses import dataclass, field
from typing import Dict, Optional

from retro_chip8.core.instructions import Quirks

# 一般的な 1234/QWER/ASDF/ZXCV 配置。W=5, A=7, S=8, D=9 を含む。
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class TimersConfig:
    decrement_delay_timer: bool = False  # True の場合ホストが60Hzでタイマーを減算する

@dataclass
class DisplayConfig:
    scale: int = 8
    fps: int = 60
    cycles_per_frame: int = 1
    foreground: str = "#FFFFFF"
    background: str = "#000000"

@dataclass
class MachineConfig:
    quirks: Quirks = field(default_factory=Quirks)
    timers: TimersConfig = field(default_factory=TimersConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
    log_level: str = "WARNING"
    rng_seed: Optional[int] = None
