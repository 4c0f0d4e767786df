# retro_chip8/ui/keymap.py
"""
ホストのキーボードとCHIP-8の16キーパッドの対応付け。

キー名（例: "W", "1"）からキーパッド番号 0x0-0xF への対応表を持ち、
押下状態を保持して、毎サイクルCPUへ渡すスナップショットを生成します。
"""
from typing import Dict, List, Optional

from retro_chip8.common.types import KEY_COUNT

# @intent:responsibility ホストのキー押下状態をキーパッドのスナップショットに変換します。
class KeypadState:
    def __init__(self, keymap: Dict[str, int]):
        self._keymap = {name.upper(): index for name, index in keymap.items()}
        self._pressed = [False] * KEY_COUNT

    # @intent:responsibility キー名に対応するキーパッド番号を返します。対応がなければ None。
    def key_index(self, key_name: str) -> Optional[int]:
        return self._keymap.get(key_name.upper())

    # @intent:responsibility キーが押されたことを記録します。対応するキーがあれば True を返します。
    def press(self, key_name: str) -> bool:
        return self._set(key_name, True)

    def release(self, key_name: str) -> bool:
        return self._set(key_name, False)

    def _set(self, key_name: str, pressed: bool) -> bool:
        index = self.key_index(key_name)
        if index is None:
            return False
        self._pressed[index] = pressed
        return True

    # @intent:responsibility フォーカス喪失時などに全キーを離した状態に戻します。
    def release_all(self) -> None:
        self._pressed = [False] * KEY_COUNT

    # @intent:responsibility CPUへ渡す独立したスナップショットを返します。
    def snapshot(self) -> List[bool]:
        return list(self._pressed)
