#!/usr/bin/env python3
"""
Headless CHIP-8 runner

Loads a ROM, runs it for a number of 60 Hz frames and reports the final
display and statistics.

Usage: chip8vm <rom.ch8> [--frames N] [--press KEY ...] [--png out.png]
"""

import argparse
import json
import logging
import signal
import sys
import threading
from dataclasses import fields
from typing import Dict, List, Optional

from .clock import Runner, StopReason
from .config import InterpreterConfig, Quirks
from .errors import Chip8Error, ConfigurationError
from .interpreter import Chip8Interpreter
from .keypad import translate_key
from .loader import load_rom_file
from .render import display_to_text, save_display_png

logger = logging.getLogger("chip8vm")

QUIRK_NAMES = [f.name for f in fields(Quirks)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8vm", description="Headless CHIP-8 interpreter")
    parser.add_argument("rom", help="ROM file to run")
    parser.add_argument("--config", type=str, help="JSON interpreter configuration file")
    parser.add_argument("--frames", type=int, default=600,
                        help="60 Hz frames to run (default: 600, i.e. 10 seconds)")
    parser.add_argument("--ips", type=int, help="Instructions per second")
    parser.add_argument("--seed", type=int, help="Seed for the RND instruction")
    parser.add_argument("--on-unknown", choices=["halt", "skip"],
                        help="What to do on an unknown instruction")
    parser.add_argument("--quirk", action="append", default=[], choices=QUIRK_NAMES,
                        help="Enable a compatibility quirk (repeatable)")
    parser.add_argument("--press", action="append", default=[], metavar="KEY",
                        help="Press and hold a keyboard key (1234/QWER/ASDF/ZXCV), "
                             "optionally at a given frame: KEY[@FRAME] (repeatable)")
    parser.add_argument("--realtime", action="store_true",
                        help="Pace frames against the wall clock (Ctrl-C stops)")
    parser.add_argument("--show", action="store_true", help="Print the final display")
    parser.add_argument("--png", type=str, help="Save the final display as a PNG")
    parser.add_argument("--scale", type=int, default=8, help="PNG scale factor")
    parser.add_argument("--json", action="store_true", help="Print final state and stats as JSON")
    parser.add_argument("--trace", action="store_true", help="Log every executed instruction")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--debug-file", type=str, help="Also write the log to this file")
    return parser


def configure_logging(debug: bool, debug_file: Optional[str] = None):
    level = logging.DEBUG if debug else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if debug_file:
        handlers.append(logging.FileHandler(debug_file, mode="w", encoding="utf-8"))
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s",
                        handlers=handlers, force=True)


def build_config(args) -> InterpreterConfig:
    config = InterpreterConfig.from_json_file(args.config) if args.config else InterpreterConfig()
    if args.ips is not None:
        config.instructions_per_second = args.ips
    if args.seed is not None:
        config.seed = args.seed
    if args.on_unknown is not None:
        config.on_unknown = args.on_unknown
    if args.trace:
        config.trace = True
    for name in args.quirk:
        setattr(config.quirks, name, True)
    return config.validate()


def parse_key_presses(specs: List[str]) -> Dict[int, List[int]]:
    """
    Turn --press values ("w", "w@30") into {frame: [keypad codes]}.
    A bare key is pressed before frame 1, after the ROM's first frame.
    """
    schedule: Dict[int, List[int]] = {}
    for spec in specs:
        name, _, frame_text = spec.partition("@")
        code = translate_key(name)
        if code is None:
            raise ConfigurationError(f"Key {name!r} is not on the keypad mapping")
        try:
            frame = int(frame_text) if frame_text else 1
        except ValueError:
            raise ConfigurationError(f"Bad frame number in --press {spec!r}") from None
        if frame < 0:
            raise ConfigurationError(f"Frame number in --press {spec!r} must not be negative")
        schedule.setdefault(frame, []).append(code)
    return schedule


def key_presser(interpreter: Chip8Interpreter, schedule: Dict[int, List[int]]):
    """Frame hook that presses (and keeps holding) scheduled keys"""
    def press(frame: int):
        for code in schedule.get(frame, []):
            logger.info("Frame %d: pressing CHIP-8 key 0x%X", frame, code)
            interpreter.keypad.set_key(code, True)
    return press


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug or args.trace, args.debug_file)

    try:
        config = build_config(args)
        rom = load_rom_file(args.rom)
        interpreter = Chip8Interpreter(config)
        interpreter.load_program(rom)
        schedule = parse_key_presses(args.press)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 2
    except (OSError, Chip8Error) as e:
        logger.error("Error loading ROM: %s", e)
        return 2

    runner = Runner(interpreter, before_frame=key_presser(interpreter, schedule))
    if args.realtime:
        stop_event = threading.Event()
        previous = signal.signal(signal.SIGINT, lambda signum, frame: stop_event.set())
        try:
            result = runner.run(stop_event, max_frames=args.frames)
        finally:
            signal.signal(signal.SIGINT, previous)
    else:
        result = runner.run_frames(args.frames)

    frame = interpreter.display.snapshot()
    if args.show:
        print(display_to_text(frame))
    if args.png:
        path = save_display_png(frame, args.png, scale=args.scale)
        logger.info("Display saved to %s", path)
    if args.json:
        report = {
            'stop_reason': result.reason.value,
            'frames': result.frames,
            'state': interpreter.state_summary(),
            'stats': interpreter.get_stats(),
        }
        print(json.dumps(report, indent=2))
    else:
        print(f"Stopped: {result.reason.value} after {result.frames} frames")
        for key, value in interpreter.get_stats().items():
            print(f"{key:25s}: {value}")

    if result.reason is StopReason.ERROR:
        logger.error("Run ended with error: %s", result.error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
