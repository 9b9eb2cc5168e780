"""Shared builders for match-related tests."""
from typing import Dict, Optional

from matchday.models import MatchState, Player


def make_player(name: str, number: Optional[int] = None) -> Player:
    """Player with a readable, stable id."""
    return Player(name=name, number=number, id=name.lower().replace(" ", "-"))


def build_standard_match(times: Optional[Dict[str, int]] = None) -> MatchState:
    """
    Canonical 8-player match.

    Group 1: keepers Kim and Lex plus Anna and Bram (2 field slots, no bench).
    Group 2: Cas, Daan, Eva on the field and Finn on the bench.
    """
    kim, lex = make_player("Kim", 1), make_player("Lex", 12)
    anna, bram = make_player("Anna", 2), make_player("Bram", 3)
    cas, daan, eva, finn = (make_player(n, i) for i, n in enumerate(["Cas", "Daan", "Eva", "Finn"], start=4))
    players = [kim, lex, anna, bram, cas, daan, eva, finn]
    playing = {p.id: 0 for p in players}
    playing.update(times or {})
    return MatchState(
        selected_players=players,
        keeper1=kim,
        keeper2=lex,
        group1=[kim, lex, anna, bram],
        group2=[cas, daan, eva, finn],
        group1_positions=["keeper", "linksachter", "rechtsachter"],
        group2_positions=["midden", "linksvoor", "rechtsvoor"],
        playing_time_seconds=playing,
    )


def build_two_slot_match(times: Optional[Dict[str, int]] = None) -> MatchState:
    """
    Group 1 = Alice, Bob on the field and Carol, Dan on the bench, no keepers.

    Group 2 = Erik on the field and Fay on the bench.
    """
    alice, bob, carol, dan = (make_player(n) for n in ["Alice", "Bob", "Carol", "Dan"])
    erik, fay = make_player("Erik"), make_player("Fay")
    players = [alice, bob, carol, dan, erik, fay]
    playing = {p.id: 0 for p in players}
    playing.update(times or {})
    return MatchState(
        selected_players=players,
        group1=[alice, bob, carol, dan],
        group2=[erik, fay],
        group1_positions=["linksachter", "rechtsachter"],
        group2_positions=["midden"],
        playing_time_seconds=playing,
    )
