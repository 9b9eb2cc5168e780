"""
Player model for the Matchday rotation manager.

This module contains the Player dataclass which represents a roster entry:
identity, display name, optional shirt number and whether the player is
currently active in the squad.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from uuid import uuid4

from ..utils import now_ts


def new_player_id() -> str:
    """Return a fresh opaque player identifier."""
    return uuid4().hex


@dataclass
class Player:
    """
    Represents a youth football player on the roster.

    Attributes:
        name: Player's display name
        number: Shirt number (optional, unique among active players)
        active: Whether the player is available for selection
        id: Unique identifier, generated when omitted
        created_ts: Creation time in epoch seconds
    """
    name: str
    number: Optional[int] = None
    active: bool = True
    id: str = field(default_factory=new_player_id)
    created_ts: float = field(default_factory=now_ts)

    def display_name(self) -> str:
        """
        Name prefixed with the shirt number when one is set.

        Returns:
            e.g. "7 Alice" or "Alice"
        """
        if self.number is None:
            return self.name
        return f"{self.number} {self.name}"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert player to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "active": self.active,
            "created_ts": self.created_ts,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create player from dictionary for JSON deserialization.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance

        Raises:
            KeyError: If the dictionary has no name
        """
        number = data.get("number")
        return cls(
            id=data.get("id") or new_player_id(),
            name=data["name"],
            number=int(number) if number is not None else None,
            active=bool(data.get("active", True)),
            created_ts=data.get("created_ts") or now_ts(),
        )
