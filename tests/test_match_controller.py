"""
Unit tests for MatchController: lifecycle, persistence and the player
selection modes of the live match screen.
"""
import unittest

from matchday.models import AwaitingSubstituteTarget, AwaitingSwapTarget, Idle
from matchday.services.match_controller import MatchController, NoActiveMatchError
from matchday.services.persistence_service import InMemoryStore
from matchday.services.rotation_engine import IllegalOperationError

from match_builders import build_standard_match


class FakeTicker:
    """Ticker stand-in; tests call controller.tick() themselves."""

    def __init__(self, callback, interval):
        self.callback = callback
        self.interval = interval
        self.active = False
        self.starts = 0

    def start(self):
        self.active = True
        self.starts += 1

    def cancel(self):
        self.active = False


class MatchControllerTestCase(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryStore()
        self.tickers = []
        self.controller = MatchController(self.store, tick_interval=0.5, ticker_factory=self._ticker)
        self.controller.start_match(build_standard_match())

    def _ticker(self, callback, interval):
        ticker = FakeTicker(callback, interval)
        self.tickers.append(ticker)
        return ticker

    @property
    def ticker(self):
        return self.tickers[0]

    @property
    def state(self):
        return self.controller.snapshot()["match"]

    def group_ids(self, group):
        return [p["id"] for p in self.state[f"group{group}"]]


class LifecycleTests(MatchControllerTestCase):

    def test_no_match_raises(self):
        controller = MatchController(InMemoryStore(), ticker_factory=self._ticker)
        self.assertFalse(controller.has_match)
        with self.assertRaises(NoActiveMatchError):
            controller.snapshot()
        with self.assertRaises(NoActiveMatchError):
            controller.toggle_running()
        with self.assertRaises(NoActiveMatchError):
            controller.on_player_selected("anna")

    def test_start_match_saves(self):
        self.assertTrue(self.controller.has_match)
        self.assertEqual(self.store.load()["group2_positions"], ["midden", "linksvoor", "rechtsvoor"])
        self.assertEqual(self.ticker.interval, 0.5)

    def test_toggle_drives_ticker(self):
        self.assertTrue(self.controller.toggle_running())
        self.assertTrue(self.ticker.active)
        self.controller.tick()
        self.controller.tick()
        self.assertEqual(self.store.load()["match_time_seconds"], 2)

        self.assertFalse(self.controller.toggle_running())
        self.assertFalse(self.ticker.active)
        self.controller.tick()
        self.assertEqual(self.store.load()["match_time_seconds"], 2)

    def test_resumed_match_starts_paused(self):
        self.controller.toggle_running()
        self.controller.tick()

        resumed = MatchController(self.store, ticker_factory=self._ticker)

        snapshot = resumed.snapshot()
        self.assertFalse(snapshot["clock"]["is_running"])
        self.assertEqual(snapshot["clock"]["match_time_seconds"], 1)
        self.assertEqual(snapshot["match"]["playing_time_seconds"]["anna"], 1)

    def test_reset_match(self):
        self.controller.toggle_running()
        self.controller.reset_match()
        self.assertFalse(self.controller.has_match)
        self.assertFalse(self.ticker.active)
        self.assertIsNone(self.store.load())

    def test_shutdown_pauses_running_match(self):
        self.controller.toggle_running()
        self.controller.shutdown()
        self.assertFalse(self.ticker.active)
        self.assertFalse(self.store.load()["is_running"])

    def test_adjust_time(self):
        self.assertEqual(self.controller.adjust_time(60), 60)
        self.assertEqual(self.controller.adjust_time(-90), 0)
        self.assertEqual(self.store.load()["playing_time_seconds"]["kim"], 0)

    def test_change_keeper(self):
        self.assertEqual(self.controller.change_keeper(), "Lex")
        snapshot = self.controller.snapshot()
        self.assertEqual(snapshot["keeper"]["id"], "lex")
        self.assertEqual(snapshot["clock"]["half"], 2)
        self.assertFalse(snapshot["keeper_change_available"])
        with self.assertRaises(IllegalOperationError):
            self.controller.change_keeper()

    def test_execute_suggestion(self):
        suggestion = self.controller.execute_suggestion(2)
        self.assertEqual(suggestion.in_player_id, "finn")
        self.assertIn("finn", self.controller.snapshot()["groups"][1]["field"])

    def test_snapshot_shape(self):
        snapshot = self.controller.snapshot()
        self.assertEqual(
            set(snapshot),
            {"match", "clock", "keeper", "reserve_keeper", "keeper_change_available",
             "groups", "playing_time", "suggestions", "selection"},
        )
        self.assertEqual(snapshot["clock"]["match_time"], "00:00")
        self.assertEqual(snapshot["groups"][0]["positions"][0],
                         {"position": "keeper", "label": "Keeper", "player_id": "kim", "name": "Kim"})
        self.assertEqual(snapshot["groups"][1]["bench"], ["finn"])
        self.assertEqual(snapshot["selection"], {"mode": "idle"})


class SelectionTests(MatchControllerTestCase):

    def test_field_player_awaits_swap(self):
        selection = self.controller.on_player_selected("anna")
        self.assertEqual(selection, AwaitingSwapTarget("anna", "linksachter", 1))

    def test_bench_player_and_keeper_await_substitute(self):
        self.assertEqual(self.controller.on_player_selected("finn"), AwaitingSubstituteTarget("finn", 2))
        self.controller.cancel_selection()
        self.assertEqual(self.controller.on_player_selected("kim"), AwaitingSubstituteTarget("kim", 1))

    def test_same_player_twice_cancels(self):
        before = self.state
        self.controller.on_player_selected("anna")
        self.assertEqual(self.controller.on_player_selected("anna"), Idle())
        self.assertEqual(self.state, before)

    def test_two_field_players_swap(self):
        self.controller.on_player_selected("cas")
        self.assertEqual(self.controller.on_player_selected("eva"), Idle())
        self.assertEqual(self.state["group2_positions"], ["rechtsvoor", "linksvoor", "midden"])
        self.assertEqual(self.group_ids(2), ["cas", "daan", "eva", "finn"])

    def test_bench_then_field_substitutes(self):
        self.controller.on_player_selected("finn")
        self.controller.on_player_selected("eva")
        self.assertEqual(self.group_ids(2), ["cas", "daan", "finn", "eva"])

    def test_field_then_bench_substitutes(self):
        self.controller.on_player_selected("eva")
        self.controller.on_player_selected("finn")
        self.assertEqual(self.group_ids(2), ["cas", "daan", "finn", "eva"])
        self.assertEqual(self.store.load()["group2"][2]["id"], "finn")

    def test_keeper_then_reserve_switches_keeper(self):
        self.controller.on_player_selected("kim")
        self.controller.on_player_selected("lex")
        self.assertEqual(self.state["current_keeper"], 2)
        self.assertEqual(self.state["half"], 1)

    def test_cross_group_click_is_rejected(self):
        before = self.state
        self.controller.on_player_selected("anna")
        with self.assertRaises(IllegalOperationError):
            self.controller.on_player_selected("cas")
        self.assertEqual(self.controller.selection, Idle())
        self.assertEqual(self.state, before)

    def test_keeper_with_field_player_is_rejected(self):
        self.controller.on_player_selected("kim")
        with self.assertRaises(IllegalOperationError):
            self.controller.on_player_selected("anna")
        self.assertEqual(self.controller.selection, Idle())

    def test_unknown_player_is_rejected(self):
        with self.assertRaises(IllegalOperationError):
            self.controller.on_player_selected("ghost")

    def test_direct_operations_clear_selection(self):
        self.controller.on_player_selected("finn")
        self.controller.swap("cas", "daan")
        self.assertEqual(self.controller.selection, Idle())
        self.assertEqual(self.state["group2_positions"], ["linksvoor", "midden", "rechtsvoor"])


if __name__ == "__main__":
    unittest.main()
