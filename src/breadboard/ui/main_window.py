# src/breadboard/ui/main_window.py
"""
メインウィンドウの実装。
シミュレータのコア（AvrCpu）を保持し、各ビューのレイアウトとユーザー操作を管理します。
"""
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from PySide6.QtWidgets import (
    QMainWindow, QApplication, QDockWidget, QTabWidget, QToolBar, QLabel, QFileDialog, QMessageBox,
)
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt, Slot

from breadboard.core.errors import BreadboardError
from breadboard.config.models import SystemConfig
from breadboard.config.loader import ConfigLoader
from breadboard.config.builder import SystemBuilder
from breadboard.loader.loader import ProgramLoader
from .register_view import RegisterView
from .flag_view import FlagView
from .hex_view import HexView
from .stack_view import StackView
from .code_view import CodeView
from .settings_dialog import SettingsDialog
from .theme import build_palette, get_monospace_font_family, get_theme_colors

logger = logging.getLogger(__name__)

# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    """
    ツールバー（Load BIN / Load HEX / Erase / Reset / Step / Settings）と、
    フラッシュ・逆アセンブル・レジスタ・フラグ・スタックの各ビューを持つウィンドウ。
    各操作の後、コアの状態を読み取って全ビューを更新します。
    """
    def __init__(self, config: Optional[SystemConfig] = None,
                 config_path: Optional[Union[str, Path]] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Breadboard")
        self.setGeometry(100, 100, 1200, 800)
        self.setDockNestingEnabled(True)

        self.config = config if config is not None else SystemConfig()
        self._config_path = config_path
        self.loaded_file: Optional[Path] = None

        self.cpu = SystemBuilder().build_system(self.config)
        self.loader = ProgramLoader(self.cpu)

        self._create_toolbar()
        self._create_program_pane()
        self._create_status_inspector()
        self._create_status_bar()
        self._apply_theme(self.config.theme.mode)
        self.refresh_views()

    # @intent:responsibility ユーザー操作用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.load_bin_action = self._add_action(toolbar, "Load BIN", self._open_bin_file, "Ctrl+B")
        self.load_hex_action = self._add_action(toolbar, "Load HEX", self._open_hex_file, "Ctrl+O")
        toolbar.addSeparator()
        self.erase_action = self._add_action(toolbar, "Erase", self.erase)
        self.reset_action = self._add_action(toolbar, "Reset", self.reset)
        self.step_action = self._add_action(toolbar, "Step", self.step, "F10")
        toolbar.addSeparator()
        self.settings_action = self._add_action(toolbar, "Settings", self._open_settings)

    def _add_action(self, toolbar: QToolBar, text: str, slot: Callable, shortcut: Optional[str] = None) -> QAction:
        action = QAction(text, self)
        if shortcut:
            action.setShortcut(shortcut)
        action.triggered.connect(slot)
        toolbar.addAction(action)
        return action

    # @intent:responsibility 左側にプログラムメモリ関連のビュー（逆アセンブル、フラッシュHEX）を配置します。
    def _create_program_pane(self):
        display = self.config.display
        dock = QDockWidget("Program Memory", self)
        dock.setAllowedAreas(Qt.LeftDockWidgetArea)
        tab_widget = QTabWidget()
        self.code_view = CodeView()
        self.code_view.set_cpu(self.cpu)
        tab_widget.addTab(self.code_view, "Disassembly")
        self.hex_view = HexView(display.memory_bytes_per_row, display.memory_bytes_per_column)
        tab_widget.addTab(self.hex_view, "Flash")
        dock.setWidget(tab_widget)
        self.addDockWidget(Qt.LeftDockWidgetArea, dock)

    # @intent:responsibility 右側にCPU状態のビュー（レジスタ、フラグ、スタック）を配置します。
    def _create_status_inspector(self):
        dock = QDockWidget("Status Inspector", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea)
        tab_widget = QTabWidget()
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.cpu)
        tab_widget.addTab(self.register_view, "Registers")
        self.flag_view = FlagView()
        self.flag_view.set_cpu(self.cpu)
        tab_widget.addTab(self.flag_view, "SREG")
        self.stack_view = StackView(self.config.display.memory_bytes_per_row)
        tab_widget.addTab(self.stack_view, "Stack")
        dock.setWidget(tab_widget)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    # @intent:responsibility ステータスバーに、ロード中のファイル、次の命令、実行済みステップ数を表示します。
    def _create_status_bar(self):
        self.file_label = QLabel()
        self.statusBar().addWidget(self.file_label, 1)
        self.instruction_label = QLabel()
        self.statusBar().addWidget(self.instruction_label)
        self.step_label = QLabel()
        self.statusBar().addPermanentWidget(self.step_label)

    # --- Actions ---

    # @intent:responsibility コア操作を実行し、BreadboardErrorはメッセージボックスで通知します。
    # @intent:post-condition 成功・失敗に関わらず、ビューは現在のコア状態を反映します。
    def _run_guarded(self, title: str, action: Callable[[], None]) -> bool:
        try:
            action()
        except (BreadboardError, OSError) as e:
            logger.warning("%s failed: %s", title, e)
            QMessageBox.critical(self, title, str(e))
            return False
        finally:
            self.refresh_views()
        return True

    # @intent:responsibility フラッシュを消去してバイナリをロードし、CPUをリセットします。
    # @intent:post-condition 成功した場合だけ、ロードしたファイルのパスを保持します。
    def load_binary(self, file_path: Union[str, Path]) -> bool:
        def action():
            self.loaded_file = None
            self.loader.load_from_vector(Path(file_path).read_bytes())
            self.cpu.reset()
            self.loaded_file = Path(file_path)
        self.code_view.reset_cache()
        return self._run_guarded("Load BIN", action)

    # @intent:responsibility フラッシュを消去してIntel HEXをロードし、CPUをリセットします。
    def load_hex(self, file_path: Union[str, Path]) -> bool:
        def action():
            self.loaded_file = None
            self.cpu.erase()
            self.loader.load_hex_file(file_path)
            self.cpu.reset()
            self.loaded_file = Path(file_path)
        self.code_view.reset_cache()
        return self._run_guarded("Load HEX", action)

    @Slot()
    def erase(self) -> bool:
        def action():
            self.cpu.erase()
            self.loaded_file = None
        self.code_view.reset_cache()
        return self._run_guarded("Erase", action)

    @Slot()
    def reset(self) -> bool:
        return self._run_guarded("Reset", self.cpu.reset)

    @Slot()
    def step(self) -> bool:
        return self._run_guarded("Step", self.cpu.step)

    @Slot()
    def _open_bin_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Binary", "", "Binary Files (*.bin);;All Files (*)")
        if file_name:
            self.load_binary(file_name)

    @Slot()
    def _open_hex_file(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Intel HEX File", "", "Intel HEX Files (*.hex);;All Files (*)")
        if file_name:
            self.load_hex(file_name)

    @Slot()
    def _open_settings(self):
        dialog = SettingsDialog(self.config, self)
        if dialog.exec() == SettingsDialog.Accepted:
            self.apply_settings(dialog.get_config())
            self._run_guarded("Save Settings",
                              lambda: ConfigLoader().save_to_file(self.config, self._config_path))

    # @intent:responsibility 表示設定とテーマを各ビューに反映します。コア（メモリ構成）は作り直しません。
    def apply_settings(self, config: SystemConfig):
        self.config = config
        display = config.display
        self.hex_view.set_layout(display.memory_bytes_per_row, display.memory_bytes_per_column)
        self.stack_view.bytes_per_row = display.memory_bytes_per_row
        self._apply_theme(config.theme.mode)
        self.refresh_views()

    # @intent:responsibility コアの公開APIから状態を読み取り、全ビューを更新します。
    def refresh_views(self):
        self.register_view.update_registers()
        self.flag_view.update_flags()
        self.hex_view.update_memory(self.cpu.flash, highlight_address=self.cpu.pc)
        self.stack_view.update_stack(self.cpu.sram, self.cpu.sp)
        self.code_view.update_code(self.cpu.pc)
        self.instruction_label.setText(f"Current instruction: {self.cpu.get_instruction_mnemonic()}")
        self.file_label.setText(str(self.loaded_file) if self.loaded_file is not None else "")
        self.step_label.setText(f"Step Counter | {self.cpu.step_count:06}")

    def _apply_theme(self, mode: str):
        QApplication.setPalette(build_palette(mode))
        for view in (self.hex_view, self.stack_view, self.code_view, self.register_view, self.flag_view):
            view.apply_theme(mode)

        colors = get_theme_colors(mode)
        font_family = get_monospace_font_family()
        self.setStyleSheet(f"""
            QWidget {{ font-family: '{font_family}', monospace; font-size: 10pt; }}
            QMainWindow, QToolBar {{ background-color: {colors.window}; border: none; }}
            QDockWidget::title {{ text-align: left; background: {colors.base}; padding: 4px; font-weight: bold; }}
            QTabWidget::pane {{ border-top: 2px solid #2A82DA; }}
            QTabBar::tab {{
                background: {colors.window};
                border: 1px solid {colors.window};
                border-bottom-color: #2A82DA;
                padding: 8px 12px;
                min-width: 80px;
            }}
            QTabBar::tab:selected {{ background: {colors.base}; border: 1px solid #2A82DA; border-bottom-color: {colors.base}; }}
            QTabBar::tab:!selected {{ margin-top: 2px; }}
        """)
