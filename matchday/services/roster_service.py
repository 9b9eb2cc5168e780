"""
Roster service for the Matchday rotation manager.

This module provides business logic for managing the player roster: listing,
creating, updating and deleting players with name and shirt number
validation. The roster is persisted through a :class:`StateStore` slot.
"""
import logging
import threading
from typing import Any, Dict, List, Optional, Set

from ..models.player import Player
from ..utils.constants import MAX_SHIRT_NUMBER, MIN_SHIRT_NUMBER
from .persistence_service import InMemoryStore, StateStore

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class PlayerValidationError(Exception):
    """Raised when player data is invalid (blank name, bad or duplicate number)."""
    pass


class PlayerNotFoundError(Exception):
    """Raised when a player id is not on the roster."""
    pass


class PlayerConflictError(Exception):
    """Raised when a player cannot be removed because of recorded match history."""
    pass


class PlayerValidator:
    """Validates player fields against the roster."""

    def validate_name(self, name: Optional[str]) -> List[str]:
        """
        Validate a player name.

        Args:
            name: Raw name value

        Returns:
            List of validation error messages (empty if valid)
        """
        if name is None or not str(name).strip():
            return ["Name is required"]
        return []

    def validate_number(
        self,
        number: Any,
        players: List[Player],
        exclude_id: Optional[str] = None,
    ) -> List[str]:
        """
        Validate a shirt number and its uniqueness among active players.

        Args:
            number: Raw number value (None means no number)
            players: Current roster
            exclude_id: Player id to ignore in the uniqueness check

        Returns:
            List of validation error messages (empty if valid)
        """
        if number is None:
            return []
        if isinstance(number, bool) or not isinstance(number, int):
            return ["Shirt number must be a whole number"]
        if not MIN_SHIRT_NUMBER <= number <= MAX_SHIRT_NUMBER:
            return [f"Shirt number must be between {MIN_SHIRT_NUMBER} and {MAX_SHIRT_NUMBER}"]

        for player in players:
            if player.id != exclude_id and player.active and player.number == number:
                return [f"Shirt number {number} is already in use"]
        return []


def coerce_number(raw: Any) -> Any:
    """
    Turn request input into a shirt number.

    Empty strings become None and numeric strings become ints; anything else
    is returned unchanged for the validator to reject.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        if raw.isdigit():
            return int(raw)
    return raw


class RosterService:
    """
    Service class for the player roster.

    Players are kept in memory and written to the store after every change.
    Changes are serialised with a lock since the web server handles
    requests on several threads.
    The stored document looks like ``{"players": [...], "participations": [...]}``.
    """

    def __init__(
        self,
        store: Optional[StateStore] = None,
        validator: Optional[PlayerValidator] = None,
    ):
        """
        Initialize RosterService.

        Args:
            store: Slot store for the roster document (in-memory when omitted)
            validator: Optional custom validator
        """
        self.store = store or InMemoryStore()
        self.validator = validator or PlayerValidator()
        self._lock = threading.RLock()
        self._players: Dict[str, Player] = {}
        # Player ids with recorded match participation. Nothing records new
        # participation yet; the set only comes from previously stored data.
        self._participations: Set[str] = set()
        self._load()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list(self) -> List[Player]:
        """
        List all players, active first, then by name.

        Returns:
            Ordered list of players
        """
        with self._lock:
            return sorted(
                self._players.values(),
                key=lambda p: (not p.active, p.name.casefold(), p.id),
            )

    def list_active(self) -> List[Player]:
        """List only active players, ordered by name."""
        return [p for p in self.list() if p.active]

    def get(self, player_id: str) -> Player:
        """
        Get a player by id.

        Raises:
            PlayerNotFoundError: If no such player exists
        """
        try:
            return self._players[player_id]
        except KeyError:
            raise PlayerNotFoundError(f"Player not found: {player_id}") from None

    def has_match_history(self, player_id: str) -> bool:
        """Whether match participation has been recorded for the player."""
        return player_id in self._participations

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, name: Optional[str], number: Any = None) -> Player:
        """
        Create a new player.

        Args:
            name: Player name (required)
            number: Optional shirt number

        Returns:
            The created Player

        Raises:
            PlayerValidationError: If name is blank or number is invalid or taken
        """
        number = coerce_number(number)
        with self._lock:
            errors = self.validator.validate_name(name)
            errors += self.validator.validate_number(number, list(self._players.values()))
            if errors:
                raise PlayerValidationError("; ".join(errors))

            player = Player(name=str(name).strip(), number=number)
            self._players[player.id] = player
            self._save()
        logger.info("Created player %s (%s)", player.name, player.id)
        return player

    def update(
        self,
        player_id: str,
        active: Any = _UNSET,
        name: Any = _UNSET,
        number: Any = _UNSET,
    ) -> Player:
        """
        Update fields of an existing player.

        Only the fields passed are changed. Passing ``number=None`` clears the
        shirt number.

        Returns:
            The updated Player

        Raises:
            PlayerNotFoundError: If the player does not exist
            PlayerValidationError: If the new values are invalid
        """
        with self._lock:
            current = self.get(player_id)

            new_name = current.name if name is _UNSET else name
            new_number = current.number if number is _UNSET else coerce_number(number)
            new_active = current.active if active is _UNSET else bool(active)

            errors: List[str] = []
            if name is not _UNSET:
                errors += self.validator.validate_name(new_name)
            if new_active and (number is not _UNSET or active is not _UNSET):
                errors += self.validator.validate_number(
                    new_number, list(self._players.values()), exclude_id=player_id
                )
            if errors:
                raise PlayerValidationError("; ".join(errors))

            current.name = str(new_name).strip()
            current.number = new_number
            current.active = new_active
            self._save()
        logger.info("Updated player %s (%s)", current.name, current.id)
        return current

    def delete(self, player_id: str) -> None:
        """
        Delete a player from the roster.

        Raises:
            PlayerNotFoundError: If the player does not exist
            PlayerConflictError: If the player has recorded match history
        """
        with self._lock:
            player = self.get(player_id)
            if self.has_match_history(player_id):
                raise PlayerConflictError(
                    f"Cannot delete {player.name}: player has played in recorded matches"
                )
            del self._players[player_id]
            self._save()
        logger.info("Deleted player %s (%s)", player.name, player_id)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> None:
        data = self.store.load()
        if not data:
            return

        for raw in data.get("players", []):
            try:
                player = Player.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid roster entry %r: %s", raw, e)
                continue
            self._players[player.id] = player

        self._participations = set(data.get("participations", []))

    def _save(self) -> None:
        self.store.save({
            "players": [p.to_dict() for p in self.list()],
            "participations": sorted(self._participations),
        })
