"""
Tests for the background clock ticker.
"""
import threading
import time
import unittest

from matchday.services.match_clock import ClockTicker


class ClockTickerTests(unittest.TestCase):

    def test_ticks_until_cancelled(self):
        done = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) >= 3:
                done.set()

        ticker = ClockTicker(callback, interval=0.01)
        ticker.start()
        try:
            self.assertTrue(done.wait(2.0))
        finally:
            ticker.cancel()
        self.assertFalse(ticker.is_active)
        self.assertGreaterEqual(len(calls), 3)

    def test_start_twice_keeps_one_timer(self):
        ticker = ClockTicker(lambda: None, interval=10)
        ticker.start()
        first = ticker._timer
        ticker.start()
        self.assertIs(ticker._timer, first)
        ticker.cancel()
        self.assertIsNone(ticker._timer)

    def test_stalled_tick_does_not_survive_pause_and_resume(self):
        entered = threading.Event()
        release = threading.Event()
        stalled = []

        def callback():
            if not stalled:
                stalled.append(threading.current_thread())
                entered.set()
                release.wait(2.0)

        ticker = ClockTicker(callback, interval=0.01)
        ticker.start()
        try:
            self.assertTrue(entered.wait(2.0))
            ticker.cancel()
            ticker.interval = 10
            ticker.start()
            resumed_timer = ticker._timer

            release.set()
            stalled[0].join(2.0)

            self.assertFalse(stalled[0].is_alive())
            self.assertIs(ticker._timer, resumed_timer)
            self.assertTrue(ticker.is_active)
        finally:
            ticker.cancel()

    def test_failing_callback_stops_ticker(self):
        failed = threading.Event()

        def callback():
            failed.set()
            raise RuntimeError("boom")

        ticker = ClockTicker(callback, interval=0.01)
        with self.assertLogs("matchday.services.match_clock", level="ERROR"):
            ticker.start()
            self.assertTrue(failed.wait(2.0))
            for _ in range(100):
                if not ticker.is_active:
                    break
                time.sleep(0.01)
        self.assertFalse(ticker.is_active)


if __name__ == "__main__":
    unittest.main()
