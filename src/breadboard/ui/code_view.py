"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import List, Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor

from breadboard.common.types import DisassemblyRow
from breadboard.core.cpu import AbstractCpu
from breadboard.ui.theme import get_monospace_font, get_theme_colors

# @intent:responsibility 逆アセンブルされたコードを表形式で表示し、現在のPCをハイライトするUIウィジェットを提供します。
class CodeView(QWidget):
    """
    PCを含む一定範囲のプログラムメモリを逆アセンブルして表示します。
    PCが表示中の範囲にあれば、再逆アセンブルせずにハイライトだけを移動します。
    """
    def __init__(self, window_bytes: int = 512, theme: str = "Dark", parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Bytes", "Mnemonic"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.layout.addWidget(self.table)

        self.window_bytes = window_bytes
        self.disassembled_data: List[DisassemblyRow] = []
        self.current_row: Optional[int] = None
        self._cpu: Optional[AbstractCpu] = None
        self.apply_theme(theme)

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self.reset_cache()

    def apply_theme(self, mode: str):
        self._colors = get_theme_colors(mode)
        self.table.setStyleSheet(
            f"background-color: {self._colors.base}; color: {self._colors.text}; gridline-color: {self._colors.border};"
        )
        if self.current_row is not None:
            self._highlight(self.current_row)

    # @intent:responsibility 指定されたPC周辺のプログラムメモリを逆アセンブルして表示を更新します。
    def update_code(self, pc: int):
        if not self._cpu:
            return

        row_index = self._row_of(pc)
        if row_index is None:
            start_addr = pc - (pc % self.window_bytes)
            self.disassembled_data = self._cpu.disassemble(start_addr, self.window_bytes)
            self.table.setRowCount(len(self.disassembled_data))
            for row, (addr, hex_dump, mnemonic) in enumerate(self.disassembled_data):
                self.table.setItem(row, 0, QTableWidgetItem(f"{addr:04X}"))
                self.table.setItem(row, 1, QTableWidgetItem(hex_dump))
                self.table.setItem(row, 2, QTableWidgetItem(mnemonic))
            row_index = self._row_of(pc)

        self._highlight(row_index)

    def _row_of(self, pc: int) -> Optional[int]:
        for i, row in enumerate(self.disassembled_data):
            if row.address == pc:
                return i
        return None

    def _highlight(self, row_index: Optional[int]):
        self.current_row = row_index
        highlight = QColor(self._colors.highlight)
        normal = QColor(self._colors.base)
        for row in range(self.table.rowCount()):
            color = highlight if row == row_index else normal
            for col in range(3):
                item = self.table.item(row, col)
                if item:
                    item.setBackground(color)

        if row_index is not None:
            self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)

    # @intent:responsibility 内部キャッシュをクリアします。プログラムメモリが書き換えられた時に呼び出します。
    def reset_cache(self):
        self.disassembled_data = []
        self.current_row = None
        self.table.setRowCount(0)
