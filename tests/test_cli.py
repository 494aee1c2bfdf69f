"""
Command-line runner, end to end on hand-assembled ROM files
"""

import json
import struct

import pytest

from chip8vm.cli import main


def assemble(*words):
    return struct.pack(f">{len(words)}H", *words)


# Draw the glyph for whatever key is pressed, then loop forever
KEY_ECHO_ROM = assemble(
    0x00E0,  # CLS
    0xF00A,  # LD V0, K
    0xF029,  # LD F, V0
    0x6100,  # LD V1, 0
    0x6200,  # LD V2, 0
    0xD125,  # DRW V1, V2, 5
    0x120C,  # JP 0x20C
)


@pytest.fixture
def rom_file(tmp_path):
    def _write(data, name="test.ch8"):
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    return _write


def test_runs_and_prints_json(rom_file, capsys):
    path = rom_file(assemble(0xA050, 0xD015, 0x1204))
    assert main([path, "--frames", "5", "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report['stop_reason'] == "frame_limit"
    assert report['frames'] == 5
    assert report['stats']['display_writes'] == 1
    assert report['state']['pc'] == 0x204


def test_held_key_is_echoed(rom_file, capsys):
    # Key 'w' maps to keypad 5; glyph "5" top row is 0xF0
    path = rom_file(KEY_ECHO_ROM)
    assert main([path, "--frames", "3", "--press", "w", "--show", "--json"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0].startswith('████████  ')


def test_waits_without_key(rom_file, capsys):
    path = rom_file(KEY_ECHO_ROM)
    assert main([path, "--frames", "3", "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report['state']['state'] == "awaiting_key"


def test_error_exit_code(rom_file, capsys):
    path = rom_file(assemble(0x00EE))
    assert main([path, "--frames", "2"]) == 1
    assert "error" in capsys.readouterr().out


def test_skip_unknown(rom_file, capsys):
    path = rom_file(assemble(0x8AB9, 0x1202))
    assert main([path, "--frames", "2", "--on-unknown", "skip", "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report['stats']['unknown_instructions'] == 1


def test_rom_too_large(rom_file):
    path = rom_file(bytes(4096))
    assert main([path]) == 2


def test_missing_rom(tmp_path):
    assert main([str(tmp_path / "nope.ch8")]) == 2


def test_press_at_later_frame(rom_file, capsys):
    path = rom_file(KEY_ECHO_ROM)
    assert main([path, "--frames", "4", "--press", "x@3", "--json"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report['state']['registers'][0] == 0x0
    assert report['stats']['display_writes'] == 1


@pytest.mark.parametrize("spec", ["p", "w@x", "w@-1"])
def test_bad_key_press(rom_file, spec):
    path = rom_file(KEY_ECHO_ROM)
    assert main([path, "--press", spec]) == 2


def test_config_file_and_png(rom_file, tmp_path, capsys):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"instructions_per_second": 120, "quirks": {"logic_resets_vf": True}}))
    png = tmp_path / "out.png"
    path = rom_file(assemble(0xA050, 0xD015, 0x1204))
    assert main([path, "--config", str(config), "--frames", "2", "--png", str(png), "--json"]) == 0
    assert png.exists()
    report = json.loads(capsys.readouterr().out)
    assert report['stats']['instructions_executed'] == 4


def test_bad_config_file(rom_file, tmp_path):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"stack_capacity": 2}))
    path = rom_file(KEY_ECHO_ROM)
    assert main([path, "--config", str(config)]) == 2


def test_debug_file(rom_file, tmp_path):
    log = tmp_path / "debug.log"
    path = rom_file(assemble(0x6001, 0x1202))
    assert main([path, "--frames", "1", "--trace", "--debug-file", str(log)]) == 0
    assert "LD V0, #01" in log.read_text(encoding="utf-8")
