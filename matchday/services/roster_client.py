"""
HTTP client for a remote roster server.

Lets the setup wizard read players from another Matchday instance (or any
server exposing the same ``/api/players`` endpoints) instead of the local
roster file.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from ..models.player import Player
from .roster_service import PlayerConflictError, PlayerNotFoundError, PlayerValidationError

logger = logging.getLogger(__name__)


class RosterClientError(Exception):
    """Raised when the remote roster cannot be reached or answers unexpectedly."""
    pass


class RosterClient:
    """
    Client for the roster endpoints of a remote server.

    Args:
        base_url: Server root, e.g. "http://127.0.0.1:7122"
        session: Optional requests session (a new one is created when omitted)
        timeout: Request timeout in seconds
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def list(self) -> List[Player]:
        """Fetch all players."""
        data = self._request("GET", "/api/players")
        return [Player.from_dict(p) for p in data.get("players", [])]

    def list_active(self) -> List[Player]:
        """Fetch only active players."""
        return [p for p in self.list() if p.active]

    def get(self, player_id: str) -> Player:
        """
        Find a player by id in the remote roster.

        Raises:
            PlayerNotFoundError: If the id is unknown
        """
        for player in self.list():
            if player.id == player_id:
                return player
        raise PlayerNotFoundError(f"Player not found: {player_id}")

    def create(self, name: str, number: Optional[int] = None) -> Player:
        """Create a player on the remote roster."""
        data = self._request("POST", "/api/players", json={"name": name, "number": number})
        return Player.from_dict(data["player"])

    def update(self, player_id: str, **fields: Any) -> Player:
        """Update fields (active, name, number) of a remote player."""
        data = self._request("PATCH", f"/api/players/{player_id}", json=fields)
        return Player.from_dict(data["player"])

    def delete(self, player_id: str) -> None:
        """Delete a remote player."""
        self._request("DELETE", f"/api/players/{player_id}", conflict_on_400=True)

    def _request(self, method: str, path: str, conflict_on_400: bool = False, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("Roster request %s %s failed: %s", method, url, e)
            raise RosterClientError("Roster server is not reachable") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code == 400:
            message = data.get("error", "Invalid request")
            if conflict_on_400:
                raise PlayerConflictError(message)
            raise PlayerValidationError(message)
        if response.status_code == 404:
            raise PlayerNotFoundError(data.get("error", "Player not found"))
        if not response.ok:
            logger.warning("Roster request %s %s returned %s", method, url, response.status_code)
            raise RosterClientError(f"Roster request failed ({response.status_code})")
        return data
