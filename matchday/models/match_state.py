"""
MatchState model for the Matchday rotation manager.

This module contains the MatchState dataclass which represents a live match:
the selected players, the two rotation groups with their position labels,
the keepers, the match clock and the accumulated playing time per player.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .player import Player
from ..utils import now_ts


@dataclass
class MatchState:
    """
    Represents the complete state of a live match.

    Attributes:
        selected_players: Players taking part in the match
        keeper1: Keeper for the first half
        keeper2: Keeper for the second half
        group1: Ordered players of group 1 (both keepers plus field players)
        group2: Ordered players of group 2 (field players only)
        group1_positions: Position labels covered by group 1 (keeper first)
        group2_positions: Position labels covered by group 2
        current_keeper: Which keeper (1 or 2) is currently in goal
        match_time_seconds: Match clock in seconds
        is_running: Whether the match clock is running
        half: Current half (1 or 2)
        playing_time_seconds: Accumulated on-field seconds keyed by player id
        created_ts: When the match was created (epoch seconds)
    """
    selected_players: List[Player] = field(default_factory=list)
    keeper1: Optional[Player] = None
    keeper2: Optional[Player] = None
    group1: List[Player] = field(default_factory=list)
    group2: List[Player] = field(default_factory=list)
    group1_positions: List[str] = field(default_factory=list)
    group2_positions: List[str] = field(default_factory=list)
    current_keeper: int = 1
    match_time_seconds: int = 0
    is_running: bool = False
    half: int = 1
    playing_time_seconds: Dict[str, int] = field(default_factory=dict)
    created_ts: float = field(default_factory=now_ts)

    def group(self, number: int) -> List[Player]:
        """Return the player list of group 1 or 2."""
        if number == 1:
            return self.group1
        if number == 2:
            return self.group2
        raise ValueError(f"Unknown group: {number}")

    def positions(self, number: int) -> List[str]:
        """Return the position labels of group 1 or 2."""
        if number == 1:
            return self.group1_positions
        if number == 2:
            return self.group2_positions
        raise ValueError(f"Unknown group: {number}")

    def keeper_ids(self) -> List[str]:
        """Ids of the designated keepers."""
        return [k.id for k in (self.keeper1, self.keeper2) if k is not None]

    def find_player(self, player_id: str) -> Optional[Player]:
        """Look up a selected or grouped player by id."""
        for player in self.selected_players + self.group1 + self.group2:
            if player.id == player_id:
                return player
        return None

    def playing_time(self, player_id: str) -> int:
        """Accumulated playing seconds for a player (0 when unknown)."""
        return self.playing_time_seconds.get(player_id, 0)

    def to_json(self) -> dict:
        """
        Convert MatchState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "selected_players": [p.to_dict() for p in self.selected_players],
            "keeper1": self.keeper1.to_dict() if self.keeper1 else None,
            "keeper2": self.keeper2.to_dict() if self.keeper2 else None,
            "group1": [p.to_dict() for p in self.group1],
            "group2": [p.to_dict() for p in self.group2],
            "group1_positions": list(self.group1_positions),
            "group2_positions": list(self.group2_positions),
            "current_keeper": self.current_keeper,
            "match_time_seconds": self.match_time_seconds,
            "is_running": self.is_running,
            "half": self.half,
            "playing_time_seconds": dict(self.playing_time_seconds),
            "created_ts": self.created_ts,
        }

    @staticmethod
    def from_json(data: dict) -> "MatchState":
        """
        Create MatchState from JSON dictionary.

        Args:
            data: Dictionary with match state data

        Returns:
            New MatchState instance
        """
        def _player(raw: Optional[dict]) -> Optional[Player]:
            return Player.from_dict(raw) if raw else None

        state = MatchState()
        state.selected_players = [Player.from_dict(p) for p in data.get("selected_players", [])]
        state.keeper1 = _player(data.get("keeper1"))
        state.keeper2 = _player(data.get("keeper2"))
        state.group1 = [Player.from_dict(p) for p in data.get("group1", [])]
        state.group2 = [Player.from_dict(p) for p in data.get("group2", [])]
        state.group1_positions = list(data.get("group1_positions", []))
        state.group2_positions = list(data.get("group2_positions", []))
        state.current_keeper = 2 if int(data.get("current_keeper", 1)) == 2 else 1
        state.match_time_seconds = max(0, int(data.get("match_time_seconds", 0)))
        state.is_running = bool(data.get("is_running", False))
        state.half = 2 if int(data.get("half", 1)) == 2 else 1
        state.playing_time_seconds = {
            pid: max(0, int(seconds))
            for pid, seconds in (data.get("playing_time_seconds") or {}).items()
        }
        state.created_ts = data.get("created_ts") or now_ts()
        return state
