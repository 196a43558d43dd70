# src/breadboard/ui/hex_view.py
"""
メモリの内容を16進数とASCIIで表示するウィジェット。
フラッシュとSRAMの両方のダンプ表示に使用します。
"""
from typing import List, Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QPlainTextEdit
from PySide6.QtGui import QTextCharFormat, QTextCursor, QColor, QTextOption

from breadboard.ui.theme import get_monospace_font, get_theme_colors, editor_style

# @intent:utility_function バイト列を「アドレス: HEX ASCII」形式の行リストに整形します。
def format_memory_rows(data: bytes, base_address: int, bytes_per_row: int) -> List[str]:
    """
    dataの先頭がbase_addressに対応するものとして、bytes_per_rowバイトずつ1行に整形します。
    """
    rows = []
    for offset in range(0, len(data), bytes_per_row):
        chunk = data[offset:offset + bytes_per_row]
        hex_part = " ".join(f"{b:02X}" for b in chunk)
        ascii_part = "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
        rows.append(f"{base_address + offset:04X}: {hex_part.ljust(bytes_per_row * 3 - 1)} {ascii_part}")
    return rows

# @intent:utility_function 指定アドレスを含むページの先頭アドレスを求めます。
def page_start(address: int, page_size: int) -> int:
    return address - (address % page_size)

# @intent:utility_function エディタの指定行に背景色を付け、その行が見えるようにスクロールします。
def highlight_row(editor: QPlainTextEdit, row: int, color: str) -> None:
    cursor = editor.textCursor()
    cursor.movePosition(QTextCursor.Start)
    cursor.movePosition(QTextCursor.Down, QTextCursor.MoveAnchor, row)
    cursor.select(QTextCursor.LineUnderCursor)

    fmt = QTextCharFormat()
    fmt.setBackground(QColor(color))
    cursor.mergeCharFormat(fmt)

    editor.setTextCursor(cursor)
    editor.ensureCursorVisible()

# @intent:responsibility メモリの内容を16進数とASCII形式で表示するUIウィジェットを提供します。
class HexView(QWidget):
    """
    メモリダンプを表示するウィジェット。
    1ページ（bytes_per_row × rows_per_page バイト）単位で表示し、ハイライト対象のアドレスを含むページを選びます。
    """
    def __init__(self, bytes_per_row: int = 8, rows_per_page: int = 128, theme: str = "Dark", parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.editor = QPlainTextEdit(self)
        self.editor.setFont(get_monospace_font(10))
        self.editor.setReadOnly(True)
        self.editor.setWordWrapMode(QTextOption.NoWrap)
        self.layout.addWidget(self.editor)

        self.bytes_per_row = bytes_per_row
        self.rows_per_page = rows_per_page
        self.rows: List[str] = []
        self.highlighted_row: Optional[int] = None
        self.apply_theme(theme)

    def apply_theme(self, mode: str):
        self._theme = mode
        self.editor.setStyleSheet(editor_style(mode))

    # @intent:responsibility 表示レイアウト（1行のバイト数、1ページの行数）を変更します。
    def set_layout(self, bytes_per_row: int, rows_per_page: int):
        self.bytes_per_row = bytes_per_row
        self.rows_per_page = rows_per_page

    # @intent:responsibility メモリのダンプを受け取り、表示を更新します。特定のアドレスの行をハイライトします。
    def update_memory(self, data: bytes, highlight_address: Optional[int] = None):
        page_size = self.bytes_per_row * self.rows_per_page
        start = page_start(highlight_address or 0, page_size)
        self.rows = format_memory_rows(data[start:start + page_size], start, self.bytes_per_row)
        self.editor.setPlainText("\n".join(self.rows))

        self.highlighted_row = None
        if highlight_address is not None and self.rows:
            self.highlighted_row = (highlight_address - start) // self.bytes_per_row
            highlight_row(self.editor, self.highlighted_row, get_theme_colors(self._theme).highlight)
