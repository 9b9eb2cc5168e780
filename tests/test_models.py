"""
Tests for the data models and their JSON forms.
"""
import unittest

from matchday.models import MatchState, Player, SetupStep

from match_builders import build_standard_match


class PlayerTests(unittest.TestCase):

    def test_generated_ids_are_unique(self):
        self.assertNotEqual(Player("A").id, Player("A").id)

    def test_display_name(self):
        self.assertEqual(Player("Alice", 7).display_name(), "7 Alice")
        self.assertEqual(Player("Alice").display_name(), "Alice")

    def test_from_dict_defaults(self):
        player = Player.from_dict({"name": "Bob", "number": "9"})
        self.assertEqual(player.number, 9)
        self.assertTrue(player.active)
        self.assertTrue(player.id)

    def test_from_dict_requires_name(self):
        with self.assertRaises(KeyError):
            Player.from_dict({"id": "x"})


class MatchStateTests(unittest.TestCase):

    def test_json_round_trip(self):
        state = build_standard_match({"anna": 30})
        restored = MatchState.from_json(state.to_json())
        self.assertEqual(restored.to_json(), state.to_json())

    def test_from_json_clamps_bad_values(self):
        data = build_standard_match().to_json()
        data.update({"match_time_seconds": -4, "half": 7, "current_keeper": 0,
                     "playing_time_seconds": {"anna": -10, "bram": 12}})

        state = MatchState.from_json(data)

        self.assertEqual(state.match_time_seconds, 0)
        self.assertEqual(state.half, 1)
        self.assertEqual(state.current_keeper, 1)
        self.assertEqual(state.playing_time("anna"), 0)
        self.assertEqual(state.playing_time("bram"), 12)

    def test_group_lookup(self):
        state = build_standard_match()
        self.assertIs(state.group(2), state.group2)
        with self.assertRaises(ValueError):
            state.positions(3)
        self.assertEqual(state.find_player("finn").name, "Finn")
        self.assertEqual(state.keeper_ids(), ["kim", "lex"])


class SetupStepTests(unittest.TestCase):

    def test_previous(self):
        self.assertEqual(SetupStep.FORMATION.previous(), SetupStep.ASSIGN_POSITIONS)
        self.assertEqual(SetupStep.SELECT_PLAYERS.previous(), SetupStep.SELECT_PLAYERS)


if __name__ == "__main__":
    unittest.main()
