# tests/config/test_config.py
import pytest

from retro_chip8.common.errors import ConfigError
from retro_chip8.config.builder import MachineBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import DEFAULT_KEYMAP, MachineConfig

YAML_CONFIG = """
log_level: debug
quirks:
  key_skip_freezes_pc: true
  sprite_wrap: false
timers:
  decrement_delay_timer: true
display:
  scale: 4
  cycles_per_frame: "0x0A"
keymap:
  "1": 0x1
  q: "0xC"
rng_seed: 42
"""

class TestConfigLoader:
    def test_defaults_from_empty_document(self):
        config = ConfigLoader().load_from_string("")
        assert config == MachineConfig()
        assert config.keymap == DEFAULT_KEYMAP
        assert config.quirks.sprite_wrap is True
        assert config.quirks.key_skip_freezes_pc is False

    def test_load_from_string(self):
        config = ConfigLoader().load_from_string(YAML_CONFIG)
        assert config.log_level == "DEBUG"
        assert config.quirks.key_skip_freezes_pc is True
        assert config.quirks.sprite_wrap is False
        assert config.timers.decrement_delay_timer is True
        assert config.display.scale == 4
        assert config.display.fps == 60
        assert config.display.cycles_per_frame == 10
        assert config.keymap == {"1": 0x1, "Q": 0xC}
        assert config.rng_seed == 42

    def test_load_default_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("display:\n  scale: 2\n")
        config = ConfigLoader().load_from_file(str(path))
        assert config.display.scale == 2

    @pytest.mark.parametrize("text", [
        "keymap:\n  Q: 16\n",
        "keymap:\n  Q: -1\n",
        "keymap:\n  Q: banana\n",
        "display:\n  scale: 0\n",
        "display:\n  fps: true\n",
        "log_level: LOUD\n",
        "- just\n- a list\n",
        "display: [unclosed\n",
    ])
    def test_invalid_values(self, text):
        with pytest.raises(ConfigError):
            ConfigLoader().load_from_string(text)


class TestMachineBuilder:
    def test_builds_with_quirks(self):
        config = ConfigLoader().load_from_string("quirks:\n  sprite_wrap: false\n")
        machine = MachineBuilder().build_machine(config)
        assert machine.cpu.quirks.sprite_wrap is False

    def test_seeded_rng_is_reproducible(self):
        config = MachineConfig(rng_seed=1234)
        program = bytes([0xC0, 0xFF, 0xC1, 0xFF, 0xC2, 0xFF])
        results = []
        for _ in range(2):
            machine = MachineBuilder().build_machine(config)
            machine.load_program(program)
            for _ in range(3):
                machine.run_cycle([False] * 16)
            results.append(machine.state.v[:3])
        assert results[0] == results[1]

    def test_default_machine(self):
        machine = MachineBuilder().build_machine()
        assert machine.state.pc == 0x200
