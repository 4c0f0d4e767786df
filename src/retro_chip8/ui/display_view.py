# retro_chip8/ui/display_view.py
"""
フレームバッファを表示するウィジェット。
Memory のパック済みピクセル値（アルファ + 輝度ビット）を QImage に変換し、拡大して描画します。
"""
from typing import Optional, Sequence

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QWidget

from retro_chip8.memory.memory import FRAMEBUFFER_HEIGHT, FRAMEBUFFER_WIDTH

# @intent:utility_function パック済みピクセル値のリストを表示用の QImage に変換します。
def framebuffer_to_image(pixels: Sequence[int], foreground: QColor, background: QColor,
                         width: int = FRAMEBUFFER_WIDTH, height: int = FRAMEBUFFER_HEIGHT) -> QImage:
    image = QImage(width, height, QImage.Format_RGB32)
    on_rgb = foreground.rgb()
    off_rgb = background.rgb()
    for y in range(height):
        row = y * width
        for x in range(width):
            # 下位ビットが輝度（0/1）
            image.setPixel(x, y, on_rgb if pixels[row + x] & 0x01 else off_rgb)
    return image

# @intent:responsibility CHIP-8 の画面を整数倍に拡大して表示します。
class DisplayView(QWidget):
    def __init__(self, scale: int = 8, foreground: str = "#FFFFFF", background: str = "#000000", parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._image: Optional[QImage] = None
        self.setFixedSize(self.sizeHint())
        # キー入力はメインウィンドウで処理する
        self.setFocusPolicy(Qt.NoFocus)

    def sizeHint(self) -> QSize:
        return QSize(FRAMEBUFFER_WIDTH * self._scale, FRAMEBUFFER_HEIGHT * self._scale)

    # @intent:responsibility 新しいフレームを受け取り、再描画を要求します。
    def update_frame(self, pixels: Sequence[int]) -> None:
        self._image = framebuffer_to_image(pixels, self._foreground, self._background)
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        if self._image is None:
            painter.fillRect(self.rect(), self._background)
        else:
            painter.drawImage(self.rect(), self._image)
        painter.end()
