# retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
フレームバッファ表示とレジスタ表示を保持し、QTimer によるフレームループで
マシンを駆動します。キー入力はキーパッドのスナップショットとしてサイクルごとに渡されます。
"""
import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer, Slot
from PySide6.QtGui import QAction, QKeyEvent, QKeySequence
from PySide6.QtWidgets import QDockWidget, QFileDialog, QLabel, QMainWindow, QMessageBox, QToolBar

from retro_chip8.common.errors import Chip8Error
from retro_chip8.config.builder import MachineBuilder
from retro_chip8.config.models import MachineConfig
from retro_chip8.loader.loader import RomLoader
from .display_view import DisplayView
from .keymap import KeypadState
from .register_view import RegisterView

logger = logging.getLogger(__name__)

# 60Hz のディレイタイマー減算間隔（ミリ秒）
TIMER_INTERVAL_MS = 1000 // 60

# @intent:responsibility アプリケーションのメインウィンドウを定義し、ホスト側のフレームループを担います。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。
    フレームごとに cycles_per_frame 回 run_cycle を呼び、フレームバッファを再描画します。
    """
    def __init__(self, config: Optional[MachineConfig] = None, parent=None):
        super().__init__(parent)
        self._config = config or MachineConfig()
        self.setWindowTitle("Retro CHIP-8")

        self.machine = MachineBuilder().build_machine(self._config)
        self.keypad = KeypadState(self._config.keymap)
        self._rom_name: Optional[str] = None

        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.setCentralWidget(self.display_view)

        self._create_actions()
        self._create_status_inspector()
        self.status_label = QLabel("Open a ROM to start")
        self.statusBar().addWidget(self.status_label)

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(max(1, 1000 // display.fps))
        self._frame_timer.timeout.connect(self._run_frame)

        self._delay_timer = QTimer(self)
        self._delay_timer.setInterval(TIMER_INTERVAL_MS)
        self._delay_timer.timeout.connect(self.machine.tick_timers)

        self._update_ui_state(False)
        self._refresh()

    # @intent:responsibility メニューバーとツールバーのアクションを作成します。
    def _create_actions(self):
        file_menu = self.menuBar().addMenu("File")
        self.open_action = QAction("Open ROM...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_rom_dialog)
        file_menu.addAction(self.open_action)

        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(self.pause)
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset)
        toolbar.addAction(self.reset_action)

    # @intent:responsibility 右側のレジスタ表示ドックを作成します。
    def _create_status_inspector(self):
        status_dock = QDockWidget("Registers", self)
        status_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.machine.cpu)
        status_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, status_dock)

    def _update_ui_state(self, is_running: bool):
        loaded = self._rom_name is not None
        self.run_action.setEnabled(loaded and not is_running)
        self.step_action.setEnabled(loaded and not is_running)
        self.pause_action.setEnabled(is_running)
        self.reset_action.setEnabled(loaded)

    # @intent:responsibility ROMファイルを読み込み、マシンをリセットしてから実行を開始します。
    def load_rom(self, file_name: str) -> bool:
        self.pause()
        try:
            program = RomLoader().read_rom(file_name)
            self.machine.load_program(program)
        except Chip8Error as e:
            logger.error("Failed to load ROM %s: %s", file_name, e.message)
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e.message}")
            return False
        self.machine.reset()
        self._rom_name = file_name
        self.status_label.setText(f"Loaded {file_name}")
        self._refresh()
        self.start()
        return True

    @Slot()
    def _open_rom_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            self.load_rom(file_name)

    @Slot()
    def start(self):
        if self._rom_name is None or self.machine.halted:
            return
        self._frame_timer.start()
        if self._config.timers.decrement_delay_timer:
            self._delay_timer.start()
        self._update_ui_state(True)

    @Slot()
    def pause(self):
        self._frame_timer.stop()
        self._delay_timer.stop()
        self._update_ui_state(False)

    @Slot()
    def _reset(self):
        self.pause()
        self.machine.reset()
        self.keypad.release_all()
        self._refresh()
        self.start()

    @Slot()
    def _step(self):
        self._run_cycles(1)
        self._refresh()

    # @intent:responsibility 1フレーム分のサイクルを実行し、画面を更新します。
    @Slot()
    def _run_frame(self):
        self._run_cycles(self._config.display.cycles_per_frame)
        self._refresh()

    def _run_cycles(self, count: int) -> None:
        try:
            for _ in range(count):
                snapshot = self.machine.run_cycle(self.keypad.snapshot())
                self.status_label.setText(snapshot.metadata.symbol_info)
        except Chip8Error as e:
            self.pause()
            self.run_action.setEnabled(False)
            self.step_action.setEnabled(False)
            self.status_label.setText(f"Halted: {e.message}")

    def _refresh(self):
        self.display_view.update_frame(self.machine.framebuffer())
        self.register_view.update_registers(self.machine.memory.stack_depth)

    # --- キー入力 ---

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.keypad.press(QKeySequence(event.key()).toString()):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.keypad.release(QKeySequence(event.key()).toString()):
            super().keyReleaseEvent(event)

    def focusOutEvent(self, event):
        self.keypad.release_all()
        super().focusOutEvent(event)
