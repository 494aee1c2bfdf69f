"""
Instruction clock / timer clock reconciliation

The interpreter retires instructions at a configurable rate (hundreds to
low thousands of Hz) while the delay and sound timers tick at a fixed 60 Hz.
Runner is a single cooperative loop with a fixed-timestep accumulator: for
every 1/60 s of elapsed wall time it runs one frame, i.e. a batch of
instructions followed by exactly one timer tick.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np

from .errors import Chip8Error
from .interpreter import Chip8Interpreter

logger = logging.getLogger(__name__)

FrameCallback = Callable[[np.ndarray], None]
FrameHook = Callable[[int], None]
SoundCallback = Callable[[bool], None]

# Upper bound on frames caught up in one pass after a stall
MAX_CATCHUP_FRAMES = 10


class StopReason(Enum):
    CANCELLED = "cancelled"
    FRAME_LIMIT = "frame_limit"
    ERROR = "error"


@dataclass
class RunResult:
    reason: StopReason
    frames: int
    error: Optional[Chip8Error] = None


class Runner:
    def __init__(self, interpreter: Chip8Interpreter,
                 on_frame: Optional[FrameCallback] = None,
                 on_sound: Optional[SoundCallback] = None,
                 before_frame: Optional[FrameHook] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.interpreter = interpreter
        self.on_frame = on_frame
        self.on_sound = on_sound
        self.before_frame = before_frame
        self.clock = clock
        self.sleep = sleep
        self.frame_period = 1.0 / interpreter.config.timer_hz
        self.instructions_per_frame = interpreter.config.instructions_per_frame
        self._presented_version = interpreter.display.version
        self._sound_on = False

    def run_frame(self):
        """Run one batch of instructions, then tick the timers once"""
        interp = self.interpreter
        if self.before_frame is not None:
            self.before_frame(interp.stats['frames'])
        for _ in range(self.instructions_per_frame):
            # A pending key wait stalls the batch but never the timers
            if interp.step() is None:
                break

        interp.timers.tick()
        interp.stats['frames'] += 1
        self._present()

    def _present(self):
        display = self.interpreter.display
        if self.on_frame is not None and display.version != self._presented_version:
            self._presented_version = display.version
            self.on_frame(display.snapshot())

        sound_on = self.interpreter.timers.sound_active
        if self.on_sound is not None and sound_on != self._sound_on:
            self.on_sound(sound_on)
        self._sound_on = sound_on

    def run_frames(self, frames: int) -> RunResult:
        """Run a fixed number of frames without consulting the wall clock"""
        done = 0
        try:
            for _ in range(frames):
                self.run_frame()
                done += 1
        except Chip8Error as e:
            return RunResult(StopReason.ERROR, done, e)
        return RunResult(StopReason.FRAME_LIMIT, done)

    def run(self, stop_event: Optional[threading.Event] = None,
            max_frames: Optional[int] = None) -> RunResult:
        """
        Real-time loop. Returns when stop_event is set (this also ends a
        pending key wait), when max_frames frames have run, or when the
        interpreter raises.
        """
        stop_event = stop_event or threading.Event()
        frames = 0
        accumulator = 0.0
        last = self.clock()

        logger.info("Running at %d instructions/frame, %.1f Hz timer",
                    self.instructions_per_frame, 1.0 / self.frame_period)

        while not stop_event.is_set():
            now = self.clock()
            accumulator += now - last
            last = now
            accumulator = min(accumulator, self.frame_period * MAX_CATCHUP_FRAMES)

            while accumulator >= self.frame_period:
                if max_frames is not None and frames >= max_frames:
                    return RunResult(StopReason.FRAME_LIMIT, frames)
                try:
                    self.run_frame()
                except Chip8Error as e:
                    return RunResult(StopReason.ERROR, frames, e)
                frames += 1
                accumulator -= self.frame_period
                if stop_event.is_set():
                    break

            if max_frames is not None and frames >= max_frames:
                return RunResult(StopReason.FRAME_LIMIT, frames)
            self.sleep(max(0.0, self.frame_period - accumulator))

        logger.info("Run cancelled after %d frames", frames)
        return RunResult(StopReason.CANCELLED, frames)
