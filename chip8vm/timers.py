"""
Delay and sound timers

Both count down at a fixed 60 Hz, independent of the instruction rate.
The lock makes a set atomic relative to a tick, so the unit can also be
ticked from a separate timer thread.
"""

import threading


class TimerUnit:
    def __init__(self):
        self._lock = threading.Lock()
        self._delay = 0
        self._sound = 0
        self.ticks = 0

    @property
    def delay(self) -> int:
        return self._delay

    @property
    def sound(self) -> int:
        return self._sound

    @property
    def sound_active(self) -> bool:
        """True while the audio collaborator should produce a tone"""
        return self._sound > 0

    def set_delay(self, value: int):
        with self._lock:
            self._delay = value & 0xFF

    def set_sound(self, value: int):
        with self._lock:
            self._sound = value & 0xFF

    def tick(self):
        """One 1/60 s step: decrement each nonzero timer"""
        with self._lock:
            if self._delay > 0:
                self._delay -= 1
            if self._sound > 0:
                self._sound -= 1
            self.ticks += 1
