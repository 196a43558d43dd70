# src/breadboard/ui/settings_dialog.py
"""
表示設定（メモリビューのレイアウト、テーマ）を編集するダイアログ。
"""
from dataclasses import replace

from PySide6.QtWidgets import QDialog, QFormLayout, QSpinBox, QComboBox, QDialogButtonBox

from breadboard.config.models import SystemConfig, DisplayConfig, ThemeConfig, THEME_MODES

# @intent:responsibility 設定値を編集するためのフォームを提供し、編集結果を新しいSystemConfigとして返します。
class SettingsDialog(QDialog):
    def __init__(self, config: SystemConfig, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self._config = config

        layout = QFormLayout(self)

        self.bytes_per_row = QSpinBox()
        self.bytes_per_row.setRange(1, 64)
        self.bytes_per_row.setValue(config.display.memory_bytes_per_row)
        layout.addRow("Memory bytes per row:", self.bytes_per_row)

        self.bytes_per_column = QSpinBox()
        self.bytes_per_column.setRange(1, 4096)
        self.bytes_per_column.setValue(config.display.memory_bytes_per_column)
        layout.addRow("Memory rows per page:", self.bytes_per_column)

        self.theme_mode = QComboBox()
        self.theme_mode.addItems(list(THEME_MODES))
        self.theme_mode.setCurrentText(config.theme.mode)
        layout.addRow("Theme:", self.theme_mode)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    # @intent:responsibility フォームの値を反映した設定を返します。元の設定オブジェクトは変更しません。
    def get_config(self) -> SystemConfig:
        return replace(
            self._config,
            display=DisplayConfig(
                memory_bytes_per_row=self.bytes_per_row.value(),
                memory_bytes_per_column=self.bytes_per_column.value(),
            ),
            theme=ThemeConfig(mode=self.theme_mode.currentText()),
        )
