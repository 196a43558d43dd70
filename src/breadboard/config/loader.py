import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

from breadboard.core.errors import ConfigError
from .models import SystemConfig, MemoryLayout, StackLayout, DisplayConfig, ThemeConfig, THEME_MODES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "breadboard" / "config.yaml"

class ConfigLoader:
    # @intent:post-condition YAMLとして解釈できない内容は ConfigError になります。
    def load_from_file(self, path: Union[str, Path]) -> SystemConfig:
        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse config {path}: {e}") from e
        return self._parse_config(data or {})

    # @intent:responsibility 設定ファイルが無ければデフォルト設定を返します。
    def load_or_default(self, path: Optional[Union[str, Path]] = None) -> SystemConfig:
        path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        if not path.exists():
            logger.debug("No config at %s, using defaults", path)
            return SystemConfig()
        return self.load_from_file(path)

    # @intent:responsibility 設定を検証してからYAMLとして保存します。親ディレクトリは必要に応じて作成します。
    def save_to_file(self, config: SystemConfig, path: Optional[Union[str, Path]] = None) -> None:
        self._validate(config)
        path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(asdict(config), f, sort_keys=False)
        logger.debug("Saved config to %s", path)

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        memory_data = self._section(data, "memory")
        defaults = MemoryLayout()
        memory = MemoryLayout(
            flash_size=self._parse_int(memory_data.get("flash_size", defaults.flash_size)),
            sram_size=self._parse_int(memory_data.get("sram_size", defaults.sram_size)),
        )

        stack_data = self._section(data, "stack")
        defaults = StackLayout()
        stack = StackLayout(
            top=self._parse_int(stack_data.get("top", defaults.top)),
            low_reset=self._parse_int(stack_data.get("low_reset", defaults.low_reset)),
            high_reset=self._parse_int(stack_data.get("high_reset", defaults.high_reset)),
        )

        display_data = self._section(data, "display")
        defaults = DisplayConfig()
        display = DisplayConfig(
            memory_bytes_per_row=self._parse_int(
                display_data.get("memory_bytes_per_row", defaults.memory_bytes_per_row)),
            memory_bytes_per_column=self._parse_int(
                display_data.get("memory_bytes_per_column", defaults.memory_bytes_per_column)),
        )

        theme_data = self._section(data, "theme")
        theme = ThemeConfig(mode=theme_data.get("mode", ThemeConfig().mode))

        config = SystemConfig(memory=memory, stack=stack, display=display, theme=theme)
        self._validate(config)
        return config

    def _section(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")
        return section

    def _validate(self, config: SystemConfig) -> None:
        memory = config.memory
        if memory.flash_size <= 0 or memory.flash_size % 2 != 0:
            raise ConfigError(f"flash_size must be a positive even number: {memory.flash_size}")
        if memory.sram_size <= 0:
            raise ConfigError(f"sram_size must be positive: {memory.sram_size}")

        for name in ("top", "low_reset", "high_reset"):
            value = getattr(config.stack, name)
            if not 0 <= value < memory.sram_size:
                raise ConfigError(f"stack.{name} {value:#06X} is outside SRAM (size {memory.sram_size})")

        if config.display.memory_bytes_per_row <= 0 or config.display.memory_bytes_per_column <= 0:
            raise ConfigError("Display sizes must be positive.")
        if config.theme.mode not in THEME_MODES:
            raise ConfigError(f"Unknown theme mode: {config.theme.mode}")

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                raise ConfigError(f"Invalid integer format: {value}") from None
        raise ConfigError(f"Invalid integer format: {value}")
