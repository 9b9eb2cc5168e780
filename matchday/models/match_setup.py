"""Setup wizard state for a new match."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .player import Player


class SetupStep(Enum):
    """Steps of the match setup wizard, in order."""
    SELECT_PLAYERS = "select-players"
    SELECT_KEEPERS = "select-keepers"
    CREATE_GROUPS = "create-groups"
    ASSIGN_POSITIONS = "assign-positions"
    FORMATION = "formation"

    def previous(self) -> "SetupStep":
        """Step before this one (the first step is its own predecessor)."""
        steps = list(SetupStep)
        index = steps.index(self)
        return steps[max(0, index - 1)]


@dataclass
class MatchSetup:
    """In-progress match setup collected by the wizard."""

    selected_players: List[Player] = field(default_factory=list)
    keeper1: Optional[Player] = None
    keeper2: Optional[Player] = None
    group1: List[Player] = field(default_factory=list)
    group2: List[Player] = field(default_factory=list)
    group1_positions: List[str] = field(default_factory=list)
    group2_positions: List[str] = field(default_factory=list)
    step: SetupStep = SetupStep.SELECT_PLAYERS

    def is_selected(self, player_id: str) -> bool:
        return any(p.id == player_id for p in self.selected_players)

    def is_keeper(self, player_id: str) -> bool:
        return any(k is not None and k.id == player_id for k in (self.keeper1, self.keeper2))

    def to_json(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "selected_players": [p.to_dict() for p in self.selected_players],
            "keeper1": self.keeper1.to_dict() if self.keeper1 else None,
            "keeper2": self.keeper2.to_dict() if self.keeper2 else None,
            "group1": [p.to_dict() for p in self.group1],
            "group2": [p.to_dict() for p in self.group2],
            "group1_positions": list(self.group1_positions),
            "group2_positions": list(self.group2_positions),
            "step": self.step.value,
        }

    @staticmethod
    def from_json(data: dict) -> "MatchSetup":
        """Create from dictionary for JSON deserialization."""
        def _player(raw: Optional[dict]) -> Optional[Player]:
            return Player.from_dict(raw) if raw else None

        try:
            step = SetupStep(data.get("step", SetupStep.SELECT_PLAYERS.value))
        except ValueError:
            step = SetupStep.SELECT_PLAYERS

        return MatchSetup(
            selected_players=[Player.from_dict(p) for p in data.get("selected_players", [])],
            keeper1=_player(data.get("keeper1")),
            keeper2=_player(data.get("keeper2")),
            group1=[Player.from_dict(p) for p in data.get("group1", [])],
            group2=[Player.from_dict(p) for p in data.get("group2", [])],
            group1_positions=list(data.get("group1_positions", [])),
            group2_positions=list(data.get("group2_positions", [])),
            step=step,
        )
