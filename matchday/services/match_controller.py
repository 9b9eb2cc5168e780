"""
Match controller for the Matchday rotation manager.

The controller owns the single live :class:`MatchState`. It wires the
rotation engine, the player selection modes, the clock ticker and the
persistence port together, and serialises every mutation with one lock
because clock ticks arrive on a timer thread while requests arrive on
the web server's threads.
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional

from ..models import (
    AwaitingSubstituteTarget, AwaitingSwapTarget, Idle, MatchState, SelectionState,
    SubstitutionSuggestion
)
from ..utils import POSITION_LABELS, fmt_mmss
from ..utils.constants import TICK_INTERVAL_SECONDS
from .match_clock import ClockTicker
from .persistence_service import InMemoryStore, StateStore
from .rotation_engine import GROUPS, IllegalOperationError, RotationEngine

logger = logging.getLogger(__name__)


class NoActiveMatchError(Exception):
    """Raised when a match operation is requested while no match is loaded."""
    pass


class MatchController:
    """Single owner of the live match state."""

    def __init__(
        self,
        store: Optional[StateStore] = None,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        ticker_factory: Optional[Callable[[Callable[[], None], float], Any]] = None,
    ):
        """
        Initialize the controller and resume a stored match if there is one.

        A resumed match always starts paused.

        Args:
            store: Slot store for the match document (in-memory when omitted)
            tick_interval: Seconds between clock ticks
            ticker_factory: Builds the ticker from (callback, interval); defaults to ClockTicker
        """
        self.store = store or InMemoryStore()
        self._lock = threading.RLock()
        self._selection: SelectionState = Idle()
        factory = ticker_factory or ClockTicker
        self._ticker = factory(self.tick, tick_interval)
        self._state: Optional[MatchState] = None
        self._engine: Optional[RotationEngine] = None

        data = self.store.load()
        if data:
            state = MatchState.from_json(data)
            state.is_running = False
            self._attach(state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def has_match(self) -> bool:
        return self._state is not None

    @property
    def selection(self) -> SelectionState:
        return self._selection

    def _attach(self, state: Optional[MatchState]) -> None:
        self._state = state
        self._engine = RotationEngine(state) if state is not None else None
        self._selection = Idle()

    def _require_engine(self) -> RotationEngine:
        if self._engine is None:
            raise NoActiveMatchError("No match loaded")
        return self._engine

    def _save(self) -> None:
        if self._state is not None:
            self.store.save(self._state.to_json())

    def start_match(self, state: MatchState) -> None:
        """Replace any current match with a new one (clock stopped)."""
        with self._lock:
            self._ticker.cancel()
            state.is_running = False
            self._attach(state)
            self._save()
            logger.info("Match created with %d players", len(state.selected_players))

    def reset_match(self) -> None:
        """Drop the current match and its stored copy."""
        with self._lock:
            self._ticker.cancel()
            self._attach(None)
            self.store.clear()
            logger.info("Match reset")

    def shutdown(self) -> None:
        """Stop the clock ticker; call when the application stops."""
        with self._lock:
            self._ticker.cancel()
            if self._state is not None and self._state.is_running:
                self._state.is_running = False
                self._save()

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def tick(self) -> None:
        """Apply one clock tick (called by the ticker)."""
        with self._lock:
            if self._engine is None:
                self._ticker.cancel()
                return
            if self._engine.tick():
                logger.debug("Tick at %s", fmt_mmss(self._engine.state.match_time_seconds))
                self._save()

    def toggle_running(self) -> bool:
        """Start or stop the match clock and its ticker."""
        with self._lock:
            engine = self._require_engine()
            running = engine.toggle_running()
            if running:
                self._ticker.start()
            else:
                self._ticker.cancel()
            self._save()
            return running

    def adjust_time(self, delta_seconds: int) -> int:
        """
        Correct the match clock and on-field playing times.

        Returns:
            The new match time in seconds
        """
        with self._lock:
            engine = self._require_engine()
            engine.adjust_time(delta_seconds)
            self._save()
            return engine.state.match_time_seconds

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------
    def swap(self, player_a_id: str, player_b_id: str) -> bool:
        with self._lock:
            engine = self._require_engine()
            self._selection = Idle()
            changed = engine.swap_positions(player_a_id, player_b_id)
            if changed:
                self._save()
            return changed

    def substitute(self, out_player_id: str, in_player_id: str) -> bool:
        with self._lock:
            engine = self._require_engine()
            self._selection = Idle()
            changed = engine.substitute(out_player_id, in_player_id)
            if changed:
                self._save()
            return changed

    def change_keeper(self) -> str:
        """
        Make the half-time keeper change.

        Returns:
            Name of the keeper now in goal
        """
        with self._lock:
            engine = self._require_engine()
            keeper = engine.change_keeper_for_second_half()
            self._selection = Idle()
            self._save()
            return keeper.name

    def execute_suggestion(self, group: int) -> SubstitutionSuggestion:
        with self._lock:
            engine = self._require_engine()
            self._selection = Idle()
            suggestion = engine.execute_suggestion(group)
            self._save()
            return suggestion

    # ------------------------------------------------------------------
    # Selection state machine
    # ------------------------------------------------------------------
    def cancel_selection(self) -> None:
        with self._lock:
            self._selection = Idle()

    def on_player_selected(self, player_id: str) -> SelectionState:
        """
        Handle a click on a player of the live match.

        The first click picks a player; the second completes a position swap
        (two field players) or a substitution (anything else). Clicking the
        same player again cancels. Illegal combinations clear the selection
        and raise.

        Returns:
            The selection state after handling the click

        Raises:
            IllegalOperationError: Cross-group or otherwise illegal exchange
        """
        with self._lock:
            engine = self._require_engine()
            group = engine.group_of(player_id)
            if group is None:
                self._selection = Idle()
                raise IllegalOperationError(f"Player {player_id} is not part of this match")

            current = self._selection
            if isinstance(current, Idle):
                self._selection = self._first_selection(engine, player_id, group)
                return self._selection

            first_id = current.player_id
            self._selection = Idle()
            if first_id == player_id:
                return self._selection

            if current.group != group:
                logger.warning("Rejected exchange between groups %d and %d", current.group, group)
                raise IllegalOperationError("Players can only be exchanged within the same group")

            if isinstance(current, AwaitingSwapTarget) and self._is_field_player(engine, player_id):
                engine.swap_positions(first_id, player_id)
            elif engine.is_on_field(player_id) and not engine.is_on_field(first_id):
                engine.substitute(player_id, first_id)
            else:
                engine.substitute(first_id, player_id)
            self._save()
            return self._selection

    @staticmethod
    def _is_field_player(engine: RotationEngine, player_id: str) -> bool:
        return not engine.is_keeper(player_id) and engine.is_on_field(player_id)

    def _first_selection(self, engine: RotationEngine, player_id: str, group: int) -> SelectionState:
        if self._is_field_player(engine, player_id):
            return AwaitingSwapTarget(player_id, engine.position_of(player_id), group)
        return AwaitingSubstituteTarget(player_id, group)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        """
        Build the JSON view of the live match.

        Raises:
            NoActiveMatchError: If no match is loaded
        """
        with self._lock:
            engine = self._require_engine()
            state = engine.state
            keeper = engine.current_keeper_player()
            reserve = engine.reserve_keeper_player()

            groups = []
            for group in GROUPS:
                groups.append({
                    "group": group,
                    "positions": [
                        {"position": label, "label": POSITION_LABELS.get(label, label),
                         "player_id": player.id if player else None,
                         "name": player.name if player else None}
                        for label, player in engine.position_map(group).items()
                    ],
                    "field": [p.id for p in engine.field_players(group)],
                    "bench": [p.id for p in engine.bench_players(group)],
                })

            return {
                "match": state.to_json(),
                "clock": {
                    "match_time_seconds": state.match_time_seconds,
                    "match_time": fmt_mmss(state.match_time_seconds),
                    "is_running": state.is_running,
                    "half": state.half,
                },
                "keeper": keeper.to_dict() if keeper else None,
                "reserve_keeper": reserve.to_dict() if reserve else None,
                "keeper_change_available": state.half == 1 and reserve is not None,
                "groups": groups,
                "playing_time": [e.to_dict() for e in engine.playing_time_report()],
                "suggestions": [s.to_dict() for s in engine.suggestions()],
                "selection": self._selection.to_dict(),
            }
