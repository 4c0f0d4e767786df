# retro_chip8/ui/register_view.py
"""
CPUのレジスタを表示するウィジェット。
Chip8Cpu のレイアウト情報を利用して動的にUIを構築します。
"""
from typing import Dict, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QFontDatabase
from PySide6.QtWidgets import QFormLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from retro_chip8.core.cpu import Chip8Cpu

# @intent:responsibility CPUのレジスタ値とスタックの深さを表示するUIウィジェットを提供します。
class RegisterView(QWidget):
    """
    CPUのレジスタ状態を表示するウィジェット。
    Chip8Cpuから取得したレイアウト情報に基づいて動的にフィールドを生成します。
    """
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
        self._register_labels: Dict[str, QLabel] = {}
        self._register_widths: Dict[str, int] = {}
        self._flag_label: Optional[QLabel] = None
        self._cpu: Optional[Chip8Cpu] = None

    # @intent:responsibility 表示対象のCPUを設定し、UIレイアウトを構築します。
    def set_cpu(self, cpu: Chip8Cpu) -> None:
        self._cpu = cpu
        self._setup_ui()

    def _setup_ui(self):
        while self.layout.count():
            item = self.layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._register_labels.clear()
        self._register_widths.clear()

        for group in self._cpu.get_register_layout():
            group_box = QGroupBox(group.group_name)
            group_box.setStyleSheet("QGroupBox { font-weight: bold; border: 1px solid #222; margin-top: 20px; color: #00AAAA; }")
            group_layout = QFormLayout(group_box)
            group_layout.setLabelAlignment(Qt.AlignLeft)

            for reg in group.registers:
                hex_width = (reg.width + 3) // 4  # 16bit -> 4chars, 8bit -> 2chars
                self._register_widths[reg.name] = hex_width

                label_value = QLabel(f"0x{'0' * hex_width}")
                label_value.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;")
                label_value.setAlignment(Qt.AlignRight)

                group_layout.addRow(QLabel(f"{reg.name}:"), label_value)
                self._register_labels[reg.name] = label_value

            self.layout.addWidget(group_box)

        self._flag_label = QLabel()
        self.layout.addWidget(self._flag_label)
        self.layout.addStretch()

    # @intent:responsibility 現在のCPU状態とスタックの深さで表示を更新します。
    def update_registers(self, stack_depth: int = 0):
        if not self._cpu:
            return

        for name, value in self._cpu.get_register_map().items():
            if name in self._register_labels:
                width = self._register_widths[name]
                self._register_labels[name].setText(f"0x{value:0{width}X}")

        flags = " ".join(f"{name}={int(value)}" for name, value in self._cpu.get_flag_state().items())
        self._flag_label.setText(f"{flags}  SP={stack_depth}")
