# src/breadboard/ui/flag_view.py
"""
ステータスレジスタ(SREG)をビット単位で表示するウィジェット。
"""
from typing import Dict, List, Optional
from PySide6.QtWidgets import QWidget, QGridLayout, QLabel
from PySide6.QtCore import Qt

from breadboard.core.cpu import AbstractCpu
from breadboard.ui.theme import get_monospace_font_family, get_theme_colors

# @intent:responsibility SREGの各ビットを、上段にフラグ名、下段に0/1として表示します。
class FlagView(QWidget):
    """
    get_flag_state()の順序（I T H S V N Z C、上位ビットから）で列を並べ、
    右端にSREG全体の値を16進数で表示します。セットされているビットは強調色になります。
    """
    def __init__(self, theme: str = "Dark", parent=None):
        super().__init__(parent)
        self.grid = QGridLayout(self)
        self.grid.setContentsMargins(10, 10, 10, 10)
        self.grid.setHorizontalSpacing(12)

        self._font_family = get_monospace_font_family()
        self._cells: Dict[str, QLabel] = {}
        self._headers: List[QLabel] = []
        self._sreg_label = QLabel("SREG = 0x00")
        self._cpu: Optional[AbstractCpu] = None
        self._colors = get_theme_colors(theme)

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._build_cells()
        self.update_flags()

    def apply_theme(self, mode: str):
        self._colors = get_theme_colors(mode)
        if self._cpu:
            self._build_cells()
            self.update_flags()

    def _build_cells(self):
        for label in list(self._cells.values()) + self._headers:
            self.grid.removeWidget(label)
            label.deleteLater()
        self._cells.clear()
        self._headers.clear()
        self.grid.removeWidget(self._sreg_label)

        self.setStyleSheet(f"background-color: {self._colors.base}; color: {self._colors.text};")

        for col, name in enumerate(self._cpu.get_flag_state()):
            header = QLabel(name)
            header.setAlignment(Qt.AlignCenter)
            header.setStyleSheet(f"font-weight: bold; color: {self._colors.label};")
            self.grid.addWidget(header, 0, col)

            cell = QLabel("0")
            cell.setAlignment(Qt.AlignCenter)
            cell.setMinimumWidth(18)
            self.grid.addWidget(cell, 1, col)
            self._cells[name] = cell
            self._headers.append(header)

        self._sreg_label.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: {self._colors.accent};")
        self.grid.addWidget(self._sreg_label, 0, len(self._cpu.get_flag_state()) + 1, 2, 1)
        self.grid.setColumnStretch(len(self._cpu.get_flag_state()) + 2, 1)

    # @intent:responsibility 現在のCPU状態を取得し、各ビットとSREGの値を更新します。
    def update_flags(self):
        if not self._cpu:
            return

        sreg = 0
        for bit_pos, (name, is_set) in enumerate(reversed(list(self._cpu.get_flag_state().items()))):
            cell = self._cells.get(name)
            if cell is None:
                continue
            cell.setText("1" if is_set else "0")
            color = self._colors.value if is_set else self._colors.text
            cell.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: {color};")
            sreg |= int(is_set) << bit_pos
        self._sreg_label.setText(f"SREG = 0x{sreg:02X}")

    def flag_text(self, name: str) -> str:
        return self._cells[name].text()

    def sreg_text(self) -> str:
        return self._sreg_label.text()
