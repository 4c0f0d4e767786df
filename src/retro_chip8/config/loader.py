import logging
from typing import Any, Dict

import yaml

from retro_chip8.common.errors import ConfigError
from retro_chip8.common.types import KEY_COUNT
from retro_chip8.core.instructions import Quirks
from .models import DEFAULT_KEYMAP, DisplayConfig, MachineConfig, TimersConfig

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, "r") as f:
            data = self._safe_load(f)
        logger.info("Loaded config from %s", path)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> MachineConfig:
        return self._parse_config(self._safe_load(text) or {})

    # @intent:responsibility YAMLの構文エラーを ConfigError として報告します。
    def _safe_load(self, stream: Any) -> Any:
        try:
            return yaml.safe_load(stream)
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML configuration: {e}")

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping.")

        quirks_data = data.get("quirks", {}) or {}
        quirks = Quirks(
            key_skip_freezes_pc=bool(quirks_data.get("key_skip_freezes_pc", False)),
            sprite_wrap=bool(quirks_data.get("sprite_wrap", True)),
        )

        timers_data = data.get("timers", {}) or {}
        timers = TimersConfig(
            decrement_delay_timer=bool(timers_data.get("decrement_delay_timer", False)),
        )

        display_data = data.get("display", {}) or {}
        display = DisplayConfig(
            scale=self._parse_positive(display_data.get("scale", 8), "display.scale"),
            fps=self._parse_positive(display_data.get("fps", 60), "display.fps"),
            cycles_per_frame=self._parse_positive(display_data.get("cycles_per_frame", 1), "display.cycles_per_frame"),
            foreground=str(display_data.get("foreground", "#FFFFFF")),
            background=str(display_data.get("background", "#000000")),
        )

        keymap = dict(DEFAULT_KEYMAP)
        if "keymap" in data:
            keymap = {}
            for key_name, index in (data["keymap"] or {}).items():
                key_index = self._parse_int(index)
                if not 0 <= key_index < KEY_COUNT:
                    raise ConfigError(f"Keymap entry '{key_name}' maps to {key_index}, outside 0x0-0xF.")
                keymap[str(key_name).upper()] = key_index

        log_level = str(data.get("log_level", "WARNING")).upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {log_level}")

        rng_seed = data.get("rng_seed")
        if rng_seed is not None:
            rng_seed = self._parse_int(rng_seed)

        return MachineConfig(
            quirks=quirks,
            timers=timers,
            display=display,
            keymap=keymap,
            log_level=log_level,
            rng_seed=rng_seed,
        )

    def _parse_positive(self, value: Any, name: str) -> int:
        parsed = self._parse_int(value)
        if parsed <= 0:
            raise ConfigError(f"{name} must be positive, got {parsed}")
        return parsed

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
                raise ConfigError(f"Invalid integer format: {value}")
        raise ConfigError(f"Invalid integer format: {value}")
