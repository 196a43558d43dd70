# src/breadboard/ui/register_view.py
"""
CPUのレジスタを表示するウィジェット。
AbstractCpuのレイアウト情報を利用して動的にUIを構築します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from breadboard.core.cpu import AbstractCpu
from breadboard.ui.theme import get_monospace_font_family, get_theme_colors

# 1グループ内で横に並べるレジスタ数（R0-R15が4行に収まる）
COLUMNS_PER_GROUP = 4

# @intent:responsibility CPUのレジスタ値を表示するUIウィジェットを提供します。
class RegisterView(QWidget):
    """
    CPUのレジスタ状態を表示するウィジェット。
    AbstractCpuから取得したレイアウト情報に基づいてフィールドを生成します。
    """
    def __init__(self, theme: str = "Dark", parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = get_monospace_font_family()
        self._register_labels: Dict[str, QLabel] = {}
        self._register_widths: Dict[str, int] = {}
        self._cpu: Optional[AbstractCpu] = None
        self._theme = theme

    # @intent:responsibility 表示対象のCPUを設定し、UIレイアウトを構築します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._setup_ui()

    def apply_theme(self, mode: str):
        self._theme = mode
        if self._cpu:
            self._setup_ui()
            self.update_registers()

    def _setup_ui(self):
        while self.layout.count():
            item = self.layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._register_labels.clear()
        self._register_widths.clear()

        colors = get_theme_colors(self._theme)
        self.setStyleSheet(f"background-color: {colors.base}; color: {colors.text};")

        for group in self._cpu.get_register_layout():
            group_box = QGroupBox(group.group_name)
            group_box.setStyleSheet(f"""
                QGroupBox {{
                    font-weight: bold;
                    border: 1px solid {colors.border};
                    border-radius: 4px;
                    margin-top: 20px;
                }}
                QGroupBox::title {{
                    subcontrol-origin: margin;
                    subcontrol-position: top left;
                    padding: 0 5px;
                    left: 10px;
                    color: {colors.accent};
                }}
            """)
            grid = QGridLayout(group_box)
            grid.setContentsMargins(10, 15, 10, 10)
            grid.setSpacing(5)

            for index, reg in enumerate(group.registers):
                hex_width = (reg.width + 3) // 4
                self._register_widths[reg.name] = hex_width

                label_name = QLabel(f"{reg.name}:")
                label_name.setStyleSheet(f"font-weight: bold; color: {colors.label};")

                label_value = QLabel(f"0x{'0' * hex_width}")
                label_value.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: {colors.value};")
                label_value.setAlignment(Qt.AlignRight)

                row, col = divmod(index, COLUMNS_PER_GROUP)
                grid.addWidget(label_name, row, col * 2)
                grid.addWidget(label_value, row, col * 2 + 1)
                self._register_labels[reg.name] = label_value

            self.layout.addWidget(group_box)

        self.layout.addStretch()

    # @intent:responsibility 現在のCPU状態を取得し、レジスタの表示値を更新します。
    def update_registers(self):
        if not self._cpu:
            return

        for name, value in self._cpu.get_register_map().items():
            if name in self._register_labels:
                width = self._register_widths[name]
                self._register_labels[name].setText(f"0x{value:0{width}X}")

    def register_text(self, name: str) -> str:
        return self._register_labels[name].text()
