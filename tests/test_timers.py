import threading

from chip8vm.timers import TimerUnit


class TestTimerUnit:
    def test_delay_counts_down_to_zero(self):
        timers = TimerUnit()
        timers.set_delay(5)
        for _ in range(5):
            timers.tick()
        assert timers.delay == 0
        timers.tick()
        assert timers.delay == 0

    def test_timers_are_independent(self):
        timers = TimerUnit()
        timers.set_delay(3)
        timers.set_sound(1)
        timers.tick()
        assert (timers.delay, timers.sound) == (2, 0)
        assert not timers.sound_active

    def test_sound_value_one_is_accepted(self):
        timers = TimerUnit()
        timers.set_sound(1)
        assert timers.sound == 1
        assert timers.sound_active

    def test_values_masked_to_byte(self):
        timers = TimerUnit()
        timers.set_delay(0x1FF)
        assert timers.delay == 0xFF

    def test_tick_from_another_thread(self):
        timers = TimerUnit()
        timers.set_delay(200)
        worker = threading.Thread(target=lambda: [timers.tick() for _ in range(100)])
        worker.start()
        worker.join()
        assert timers.delay == 100
        assert timers.ticks == 100
