"""
UIテーマ管理モジュール。

等幅フォントの選択と、Dark/Lightの配色をまとめて提供します。
各ビューはここから色を取得し、テーマ切り替え時に再適用します。
"""
from dataclasses import dataclass
from typing import Dict

from PySide6.QtGui import QColor, QFont, QFontDatabase, QPalette

PREFERRED_MONOSPACE = ("Consolas", "Menlo", "Monaco", "DejaVu Sans Mono", "Courier New")

# @intent:data_structure ビューが共通で使う配色セット。
@dataclass(frozen=True)
class ThemeColors:
    window: str
    base: str
    text: str
    label: str
    value: str
    accent: str
    highlight: str
    border: str

THEMES: Dict[str, ThemeColors] = {
    "Dark": ThemeColors(
        window="#1D1D1D", base="#101010", text="#BBBBBB", label="#BBBBBB",
        value="#FFD700", accent="#00AAAA", highlight="#404000", border="#222222",
    ),
    "Light": ThemeColors(
        window="#F0F0F0", base="#FFFFFF", text="#202020", label="#303030",
        value="#8B5A00", accent="#006F8F", highlight="#FFF3A0", border="#C8C8C8",
    ),
}

def get_theme_colors(mode: str) -> ThemeColors:
    return THEMES.get(mode, THEMES["Dark"])

# @intent:responsibility 現在のシステムで利用可能な最適な等幅フォントファミリー名を返します。
def get_monospace_font_family() -> str:
    available_families = QFontDatabase.families()
    for font in PREFERRED_MONOSPACE:
        if font in available_families:
            return font
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

def get_monospace_font(size: int = 10) -> QFont:
    return QFont(get_monospace_font_family(), size)

# @intent:responsibility 配色セットからアプリケーション全体のQPaletteを組み立てます。
def build_palette(mode: str) -> QPalette:
    colors = get_theme_colors(mode)
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor(colors.window))
    palette.setColor(QPalette.WindowText, QColor(colors.text))
    palette.setColor(QPalette.Base, QColor(colors.base))
    palette.setColor(QPalette.AlternateBase, QColor(colors.window))
    palette.setColor(QPalette.ToolTipBase, QColor(colors.window))
    palette.setColor(QPalette.ToolTipText, QColor(colors.text))
    palette.setColor(QPalette.Text, QColor(colors.text))
    palette.setColor(QPalette.Button, QColor(colors.window))
    palette.setColor(QPalette.ButtonText, QColor(colors.text))
    palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
    return palette

def editor_style(mode: str) -> str:
    colors = get_theme_colors(mode)
    return f"background-color: {colors.base}; color: {colors.text};"
