"""
Web application module for the Matchday rotation manager.

This module contains the Flask web server and its JSON API for the roster,
the match setup wizard and the live match.
"""
import atexit
import logging
import random
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

from ..services import (
    IllegalOperationError, NoActiveMatchError, PlayerConflictError, PlayerNotFoundError,
    PlayerValidationError, RosterClientError, ServiceFactory, SetupError
)
from ..utils import APP_TITLE, AppConfig
from ..utils.constants import TIME_ADJUSTMENT_SECONDS

logger = logging.getLogger(__name__)

ROSTER_FIELDS = ("active", "name", "number")


class WebAppState:
    """
    State holder for the web application.

    Services come from the factory so the web layer stays free of storage details.
    """

    def __init__(self, factory: Optional[ServiceFactory] = None):
        self.factory = factory or ServiceFactory()
        self.roster = self.factory.player_source()
        self.wizard = self.factory.setup_wizard()
        self.controller = self.factory.match_controller()


def _status_for(error: Exception) -> int:
    """HTTP status for a domain error."""
    if isinstance(error, (PlayerValidationError, SetupError, IllegalOperationError, PlayerConflictError)):
        return 400
    if isinstance(error, (PlayerNotFoundError, NoActiveMatchError)):
        return 404
    if isinstance(error, RosterClientError):
        return 502
    return 500


def _fail(error: Exception) -> Tuple[Any, int]:
    status = _status_for(error)
    if status == 500:
        logger.exception("Unexpected error handling %s %s", request.method, request.path)
    elif isinstance(error, IllegalOperationError):
        logger.warning("Rejected %s: %s", request.path, error)
    return jsonify({"success": False, "error": str(error)}), status


def _body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(factory: Optional[ServiceFactory] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        factory: Service factory (built from the environment when omitted)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = WebAppState(factory)
    app.config["APP_STATE"] = app_state

    @app.route("/api", methods=["GET"])
    def index():
        """Describe the running application."""
        return jsonify({
            "success": True,
            "title": APP_TITLE,
            "has_match": app_state.controller.has_match,
            "setup_step": app_state.wizard.setup.step.value,
        })

    # ==================== Roster Endpoints ==================== #

    @app.route("/api/players", methods=["GET"])
    def list_players():
        """List all players, active first."""
        try:
            players = [p.to_dict() for p in app_state.roster.list()]
            return jsonify({"success": True, "players": players, "count": len(players)})
        except Exception as e:
            return _fail(e)

    @app.route("/api/players", methods=["POST"])
    def create_player():
        """Create a new player."""
        try:
            data = _body()
            player = app_state.roster.create(data.get("name"), data.get("number"))
            return jsonify({
                "success": True,
                "message": f"Player '{player.name}' created successfully",
                "player": player.to_dict(),
            }), 201
        except Exception as e:
            return _fail(e)

    @app.route("/api/players/<player_id>", methods=["PATCH"])
    def update_player(player_id: str):
        """Update active flag, name or number of a player."""
        try:
            data = _body()
            fields = {key: data[key] for key in ROSTER_FIELDS if key in data}
            player = app_state.roster.update(player_id, **fields)
            return jsonify({"success": True, "player": player.to_dict()})
        except Exception as e:
            return _fail(e)

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        """Delete a player from the roster."""
        try:
            app_state.roster.delete(player_id)
            return jsonify({"success": True, "message": "Player deleted successfully"})
        except Exception as e:
            return _fail(e)

    # ==================== Setup Wizard Endpoints ==================== #

    def _setup_response(message: Optional[str] = None):
        payload: Dict[str, Any] = {"success": True, "setup": app_state.wizard.setup.to_json()}
        if message:
            payload["message"] = message
        return jsonify(payload)

    @app.route("/api/setup", methods=["GET"])
    def get_setup():
        return _setup_response()

    @app.route("/api/setup", methods=["DELETE"])
    def reset_setup():
        app_state.wizard.reset()
        return _setup_response("Setup cleared")

    @app.route("/api/setup/players/<player_id>", methods=["POST"])
    def toggle_setup_player(player_id: str):
        """Select or deselect a player for the match."""
        try:
            selected = app_state.wizard.toggle_player(player_id)
            return _setup_response("Player selected" if selected else "Player deselected")
        except Exception as e:
            return _fail(e)

    @app.route("/api/setup/keepers", methods=["POST"])
    def select_setup_keeper():
        try:
            data = _body()
            app_state.wizard.select_keeper(data.get("player_id"), int(data.get("half", 1)))
            return _setup_response()
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "half must be 1 or 2"}), 400
        except Exception as e:
            return _fail(e)

    @app.route("/api/setup/next", methods=["POST"])
    def next_setup_step():
        try:
            step = app_state.wizard.proceed()
            return _setup_response(f"Now at step '{step.value}'")
        except Exception as e:
            return _fail(e)

    @app.route("/api/setup/back", methods=["POST"])
    def previous_setup_step():
        step = app_state.wizard.back()
        return _setup_response(f"Now at step '{step.value}'")

    @app.route("/api/setup/groups/random", methods=["POST"])
    def random_setup_groups():
        """Split players into groups at random (optional "seed" for repeatable draws)."""
        try:
            seed = _body().get("seed")
            rng = random.Random(seed) if seed is not None else None
            app_state.wizard.create_random_groups(rng)
            return _setup_response()
        except Exception as e:
            return _fail(e)

    @app.route("/api/setup/groups/move", methods=["POST"])
    def move_setup_player():
        try:
            data = _body()
            app_state.wizard.move_player_to_group(data.get("player_id"), int(data.get("group", 0)))
            return _setup_response()
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "group must be 1 or 2"}), 400
        except Exception as e:
            return _fail(e)

    @app.route("/api/setup/positions", methods=["POST"])
    def assign_setup_position():
        try:
            data = _body()
            app_state.wizard.assign_position(data.get("position"), int(data.get("group", 0)))
            return _setup_response()
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "group must be 1 or 2"}), 400
        except Exception as e:
            return _fail(e)

    @app.route("/api/setup/positions/<position>", methods=["DELETE"])
    def unassign_setup_position(position: str):
        try:
            app_state.wizard.unassign_position(position)
            return _setup_response()
        except Exception as e:
            return _fail(e)

    @app.route("/api/setup/start", methods=["POST"])
    def start_match_from_setup():
        """Turn the completed setup into a live match."""
        try:
            state = app_state.wizard.build_match_state()
            app_state.controller.start_match(state)
            app_state.wizard.reset()
            return jsonify({
                "success": True,
                "message": "Match created",
                "state": app_state.controller.snapshot(),
            })
        except Exception as e:
            return _fail(e)

    # ==================== Live Match Endpoints ==================== #

    def _match_response(message: Optional[str] = None, **extra: Any):
        payload: Dict[str, Any] = {"success": True, "state": app_state.controller.snapshot()}
        if message:
            payload["message"] = message
        payload.update(extra)
        return jsonify(payload)

    @app.route("/api/match", methods=["GET"])
    def get_match():
        """Current match state, playing time and suggestions."""
        try:
            return _match_response()
        except Exception as e:
            return _fail(e)

    @app.route("/api/match", methods=["DELETE"])
    def reset_match():
        app_state.controller.reset_match()
        return jsonify({"success": True, "message": "Match reset"})

    @app.route("/api/match/toggle", methods=["POST"])
    def toggle_match_clock():
        try:
            running = app_state.controller.toggle_running()
            return _match_response("Clock started" if running else "Clock paused")
        except Exception as e:
            return _fail(e)

    @app.route("/api/match/adjust", methods=["POST"])
    def adjust_match_clock():
        """Shift the clock and on-field playing times (default +1 minute)."""
        try:
            seconds = int(_body().get("seconds", TIME_ADJUSTMENT_SECONDS))
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "seconds must be a whole number"}), 400
        try:
            app_state.controller.adjust_time(seconds)
            return _match_response(f"Adjusted clock by {seconds:+d}s")
        except Exception as e:
            return _fail(e)

    @app.route("/api/match/select", methods=["POST"])
    def select_match_player():
        """Click on a player: start or complete a swap/substitution."""
        try:
            app_state.controller.on_player_selected(_body().get("player_id"))
            return _match_response()
        except Exception as e:
            return _fail(e)

    @app.route("/api/match/select/cancel", methods=["POST"])
    def cancel_match_selection():
        try:
            app_state.controller.cancel_selection()
            return _match_response()
        except Exception as e:
            return _fail(e)

    @app.route("/api/match/swap", methods=["POST"])
    def swap_match_positions():
        try:
            data = _body()
            app_state.controller.swap(data.get("player_a"), data.get("player_b"))
            return _match_response("Positions swapped")
        except Exception as e:
            return _fail(e)

    @app.route("/api/match/substitute", methods=["POST"])
    def substitute_match_player():
        try:
            data = _body()
            app_state.controller.substitute(data.get("out_player"), data.get("in_player"))
            return _match_response("Substitution made")
        except Exception as e:
            return _fail(e)

    @app.route("/api/match/keeper-change", methods=["POST"])
    def change_match_keeper():
        try:
            keeper = app_state.controller.change_keeper()
            return _match_response(f"Second half: {keeper} in goal")
        except Exception as e:
            return _fail(e)

    @app.route("/api/match/suggestions/<int:group>/execute", methods=["POST"])
    def execute_match_suggestion(group: int):
        try:
            suggestion = app_state.controller.execute_suggestion(group)
            return _match_response(
                f"{suggestion.in_player_name} in for {suggestion.out_player_name}",
                executed=suggestion.to_dict(),
            )
        except Exception as e:
            return _fail(e)

    return app


def run_web_app(config: Optional[AppConfig] = None) -> None:
    """
    Run the web application.

    Args:
        config: Application configuration (read from the environment when omitted)
    """
    config = config or AppConfig.from_env()
    app = create_app(ServiceFactory(config))
    atexit.register(app.config["APP_STATE"].controller.shutdown)
    logger.info("Starting %s on %s:%d (data in %s)", APP_TITLE, config.host, config.port, config.data_dir)
    app.run(host=config.host, port=config.port, debug=False)
