import json

import pytest

from chip8vm.config import InterpreterConfig, Quirks
from chip8vm.errors import ConfigurationError
from chip8vm.interpreter import Chip8Interpreter


class TestValidation:
    def test_defaults_are_valid(self):
        config = InterpreterConfig().validate()
        assert config.memory_size == 4096
        assert config.font_base == 0x50
        assert config.stack_capacity == 12
        assert config.on_unknown == "halt"
        assert config.quirks == Quirks()

    @pytest.mark.parametrize("overrides", [
        {"memory_size": 2048},
        {"memory_size": 0x10001},
        {"font_base": 0x1B1},
        {"font_base": -1},
        {"stack_capacity": 11},
        {"instructions_per_second": 0},
        {"timer_hz": 0},
        {"on_unknown": "ignore"},
    ])
    def test_rejected(self, overrides):
        with pytest.raises(ConfigurationError):
            InterpreterConfig(**overrides).validate()

    def test_font_right_below_program_area(self):
        InterpreterConfig(font_base=0x1B0).validate()

    def test_interpreter_validates(self):
        with pytest.raises(ValueError):
            Chip8Interpreter(InterpreterConfig(stack_capacity=4))

    @pytest.mark.parametrize("ips, per_frame", [(600, 10), (700, 12), (30, 1)])
    def test_instructions_per_frame(self, ips, per_frame):
        assert InterpreterConfig(instructions_per_second=ips).instructions_per_frame == per_frame


class TestLoading:
    def test_from_dict_with_quirks(self):
        config = InterpreterConfig.from_dict({
            "instructions_per_second": 1000,
            "quirks": {"logic_resets_vf": True},
        })
        assert config.instructions_per_second == 1000
        assert config.quirks.logic_resets_vf
        assert not config.quirks.shift_uses_vy

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigurationError):
            InterpreterConfig.from_dict({"turbo": True})
        with pytest.raises(ConfigurationError):
            InterpreterConfig.from_dict({"quirks": {"vblank": True}})

    def test_dict_roundtrip(self):
        config = InterpreterConfig(seed=3, quirks=Quirks(jump_uses_vx=True))
        assert InterpreterConfig.from_dict(config.to_dict()) == config

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "chip8.json"
        path.write_text(json.dumps({"on_unknown": "skip", "stack_capacity": 12}))
        config = InterpreterConfig.from_json_file(path)
        assert config.on_unknown == "skip"
        assert config.stack_capacity == 12

    def test_bad_json(self, tmp_path):
        path = tmp_path / "chip8.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            InterpreterConfig.from_json_file(path)

    def test_json_must_be_object(self, tmp_path):
        path = tmp_path / "chip8.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            InterpreterConfig.from_json_file(path)
