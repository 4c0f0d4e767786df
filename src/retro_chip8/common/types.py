"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import List, NamedTuple, Sequence

# @intent:data_structure ホストから毎サイクル渡されるキーパッドのスナップショット（16個の真偽値）。
Keypad = Sequence[bool]

KEY_COUNT = 16

# @intent:data_structure 単一のレジスタの表示定義。UIが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Pointers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
