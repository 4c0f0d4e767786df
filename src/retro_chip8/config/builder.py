import random
from typing import Optional

from retro_chip8.machine import Machine
from .models import MachineConfig

# @intent:responsibility 設定（Config）に基づいて Machine を生成します。
class MachineBuilder:
    def build_machine(self, config: Optional[MachineConfig] = None) -> Machine:
        config = config or MachineConfig()
        # シードが指定されている場合は RND 命令の乱数列を再現可能にする
        rng = random.Random(config.rng_seed) if config.rng_seed is not None else random.Random()
        return Machine(quirks=config.quirks, rng=rng)
