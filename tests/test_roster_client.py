"""
Unit tests for RosterClient using a mocked requests session.
"""
import unittest
from unittest.mock import MagicMock

import requests

from matchday.services.roster_client import RosterClient, RosterClientError
from matchday.services.roster_service import (
    PlayerConflictError, PlayerNotFoundError, PlayerValidationError
)


def _response(status_code, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


PLAYERS = {
    "success": True,
    "players": [
        {"id": "p1", "name": "Alice", "number": 7, "active": True},
        {"id": "p2", "name": "Bob", "number": None, "active": False},
    ],
}


class RosterClientTests(unittest.TestCase):

    def setUp(self):
        self.session = MagicMock()
        self.client = RosterClient("http://roster.local:7122/", session=self.session, timeout=2.0)

    def test_list_players(self):
        self.session.request.return_value = _response(200, PLAYERS)

        players = self.client.list()

        self.assertEqual([p.id for p in players], ["p1", "p2"])
        self.session.request.assert_called_once_with(
            "GET", "http://roster.local:7122/api/players", timeout=2.0
        )

    def test_list_active_and_get(self):
        self.session.request.return_value = _response(200, PLAYERS)

        self.assertEqual([p.name for p in self.client.list_active()], ["Alice"])
        self.assertEqual(self.client.get("p2").name, "Bob")
        with self.assertRaises(PlayerNotFoundError):
            self.client.get("p3")

    def test_create_sends_json(self):
        self.session.request.return_value = _response(
            201, {"success": True, "player": {"id": "p9", "name": "Cas", "number": 9}}
        )

        player = self.client.create("Cas", 9)

        self.assertEqual(player.id, "p9")
        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs["json"], {"name": "Cas", "number": 9})

    def test_validation_error(self):
        self.session.request.return_value = _response(400, {"success": False, "error": "Name is required"})
        with self.assertRaises(PlayerValidationError) as ctx:
            self.client.create("")
        self.assertEqual(str(ctx.exception), "Name is required")

    def test_delete_conflict(self):
        self.session.request.return_value = _response(400, {"success": False, "error": "has history"})
        with self.assertRaises(PlayerConflictError):
            self.client.delete("p1")

    def test_update_not_found(self):
        self.session.request.return_value = _response(404, {"success": False, "error": "Player not found: p5"})
        with self.assertRaises(PlayerNotFoundError):
            self.client.update("p5", active=False)

    def test_server_error(self):
        self.session.request.return_value = _response(500)
        with self.assertRaises(RosterClientError):
            self.client.list()

    def test_unreachable_server(self):
        self.session.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(RosterClientError) as ctx:
            self.client.list()
        self.assertEqual(str(ctx.exception), "Roster server is not reachable")


if __name__ == "__main__":
    unittest.main()
