"""Dataclasses describing suggestions and playing time views of a live match."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class SubstitutionSuggestion:
    """Suggested bench/field exchange for one group."""

    group: int
    out_player_id: str
    out_player_name: str
    out_seconds: int
    in_player_id: str
    in_player_name: str
    in_seconds: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "out_player": {
                "id": self.out_player_id,
                "name": self.out_player_name,
                "playing_seconds": self.out_seconds,
            },
            "in_player": {
                "id": self.in_player_id,
                "name": self.in_player_name,
                "playing_seconds": self.in_seconds,
            },
        }


@dataclass
class PlayingTimeEntry:
    """Playing time line for a single player."""

    player_id: str
    name: str
    number: Optional[int]
    group: Optional[int]
    on_field: bool
    position: Optional[str]
    playing_seconds: int
    playing_time: str  # MM:SS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "number": self.number,
            "group": self.group,
            "on_field": self.on_field,
            "position": self.position,
            "playing_seconds": self.playing_seconds,
            "playing_time": self.playing_time,
        }
