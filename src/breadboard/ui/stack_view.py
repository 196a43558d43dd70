# src/breadboard/ui/stack_view.py
"""
SRAM（スタック領域）の内容を表示するウィジェット。
"""
from typing import List, Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QPlainTextEdit
from PySide6.QtGui import QTextOption

from breadboard.ui.hex_view import format_memory_rows, highlight_row
from breadboard.ui.theme import get_monospace_font, get_theme_colors, editor_style

# @intent:responsibility スタックポインタ周辺のSRAMを可視化するUIウィジェットを提供します。
class StackView(QWidget):
    """
    SP周辺のSRAMをHEXダンプ形式で表示し、SPを含む行をハイライトします。
    """
    def __init__(self, bytes_per_row: int = 8, display_rows: int = 16, theme: str = "Dark", parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.editor = QPlainTextEdit(self)
        self.editor.setFont(get_monospace_font(10))
        self.editor.setReadOnly(True)
        self.editor.setWordWrapMode(QTextOption.NoWrap)
        self.layout.addWidget(self.editor)

        self.bytes_per_row = bytes_per_row
        self.display_rows = display_rows
        self.rows: List[str] = []
        self.start_address = 0
        self.apply_theme(theme)

    def apply_theme(self, mode: str):
        self._theme = mode
        self.editor.setStyleSheet(editor_style(mode))

    # @intent:responsibility SPを中心にSRAMの表示範囲を計算し、表示を更新します。
    def update_stack(self, sram: bytes, sp: int):
        """
        SPが表示範囲のおおよそ中央に来るように、行境界に揃えた範囲を表示します。
        スタックはSRAMの末尾から下に伸びるため、末尾付近ではSRAMの終端で範囲を打ち切ります。
        """
        display_bytes = self.bytes_per_row * self.display_rows
        start = sp - self.bytes_per_row * (self.display_rows // 2)
        start = max(0, min(start, len(sram) - display_bytes))
        start -= start % self.bytes_per_row
        self.start_address = start

        self.rows = format_memory_rows(sram[start:start + display_bytes], start, self.bytes_per_row)
        self.editor.setPlainText("\n".join(self.rows))

        line = (sp - start) // self.bytes_per_row
        if 0 <= line < len(self.rows):
            highlight_row(self.editor, line, get_theme_colors(self._theme).highlight)

    def sp_row(self, sp: int) -> Optional[int]:
        line = (sp - self.start_address) // self.bytes_per_row
        return line if 0 <= line < len(self.rows) else None
