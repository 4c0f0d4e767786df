# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
ヘッダやメタデータを持たない生バイナリ（.ch8）をそのままマシンへロードします。
"""
import logging
from pathlib import Path
from typing import Union

from retro_chip8.common.errors import RomLoadError
from retro_chip8.machine import Machine

logger = logging.getLogger(__name__)

class RomLoader:
    """
    CHIP-8 ROMファイルを読み込み、Machineにロードするローダー。
    """
    def read_rom(self, file_path: Union[str, Path]) -> bytes:
        path = Path(file_path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise RomLoadError(f"Could not read ROM file {path}: {e}")
        if not data:
            raise RomLoadError(f"ROM file {path} is empty.")
        logger.info("Read ROM %s (%d bytes)", path, len(data))
        return data

    # @intent:responsibility ROMを読み込み、0x200 からロードします。
    # @intent:post-condition 大きすぎるROMは ProgramTooLargeError として呼び出し元へ伝播します。
    def load_file(self, file_path: Union[str, Path], machine: Machine) -> bytes:
        data = self.read_rom(file_path)
        machine.load_program(data)
        return data
