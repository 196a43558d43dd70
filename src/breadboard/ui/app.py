# src/breadboard/ui/app.py
"""
Qtアプリケーションのエントリポイント。
設定ファイルを読み込み、メインウィンドウを起動します。
"""
import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from breadboard.core.errors import ConfigError
from breadboard.config.loader import ConfigLoader
from .main_window import MainWindow

def main():
    parser = argparse.ArgumentParser(description="AVR instruction-subset simulator")
    parser.add_argument("--config", help="path to config.yaml (default: ~/.config/breadboard/config.yaml)")
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConfigLoader().load_or_default(args.config)
    except ConfigError as e:
        parser.error(str(e))

    app = QApplication([sys.argv[0]] + qt_args)
    main_win = MainWindow(config, config_path=args.config)
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
