"""
Selection modes for the live match screen.

Clicking players on the live screen is modelled as a small state machine:
the first click puts the controller in one of the awaiting states and the
second click completes a swap or substitution. See
:meth:`matchday.services.match_controller.MatchController.on_player_selected`.
"""
from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Idle:
    """No player selected."""

    def to_dict(self) -> Dict[str, Any]:
        return {"mode": "idle"}


@dataclass(frozen=True)
class AwaitingSwapTarget:
    """An on-field player was selected; waiting for a second player."""
    player_id: str
    position: str
    group: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": "awaiting-swap-target",
            "player_id": self.player_id,
            "position": self.position,
            "group": self.group,
        }


@dataclass(frozen=True)
class AwaitingSubstituteTarget:
    """A bench player or keeper was selected; waiting for the exchange partner."""
    player_id: str
    group: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": "awaiting-substitute-target",
            "player_id": self.player_id,
            "group": self.group,
        }


SelectionState = Union[Idle, AwaitingSwapTarget, AwaitingSubstituteTarget]
