"""
Match setup wizard for the Matchday rotation manager.

The wizard walks through five steps: select the players, pick the keepers
for each half, split the players into two rotation groups, give each group
its positions and finally produce the initial :class:`MatchState`. The
in-progress setup is saved to its own slot after every change so a reload
continues where the coach left off.

Going back a step keeps the later steps' data. Changes that make that data
stale (deselecting a player, choosing another keeper) clear it, and every
confirmation re-checks the groups against the current keepers.
"""
import logging
import random
import threading
from typing import List, Optional, Protocol

from ..models import MatchSetup, MatchState, Player, SetupStep
from ..utils import now_ts
from ..utils.constants import (
    FIELD_POSITIONS, GROUP_SIZE, KEEPER, MATCH_PLAYER_COUNT, MAX_GROUP_POSITIONS,
    MIN_GROUP1_POSITIONS, MIN_GROUP2_POSITIONS
)
from .persistence_service import InMemoryStore, StateStore

logger = logging.getLogger(__name__)


class SetupError(Exception):
    """Raised when a wizard action is not allowed in the current setup."""
    pass


class PlayerSource(Protocol):
    """Anything that can look up roster players (local roster or remote client)."""

    def get(self, player_id: str) -> Player:
        ...

    def list_active(self) -> List[Player]:
        ...


class SetupWizard:
    """Drives a :class:`MatchSetup` through the wizard steps."""

    def __init__(self, players: PlayerSource, store: Optional[StateStore] = None):
        """
        Initialize the wizard, resuming a stored setup if there is one.

        Args:
            players: Source of roster players
            store: Slot store for the setup document (in-memory when omitted)
        """
        self.players = players
        self.store = store or InMemoryStore()
        self._lock = threading.RLock()
        data = self.store.load()
        self.setup = MatchSetup.from_json(data) if data else MatchSetup()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_step(self, step: SetupStep) -> None:
        if self.setup.step != step:
            raise SetupError(
                f"Not allowed during step '{self.setup.step.value}' (expected '{step.value}')"
            )

    def _selected(self, player_id: str) -> Player:
        for player in self.setup.selected_players:
            if player.id == player_id:
                return player
        raise SetupError("Player is not selected for this match")

    def _save(self) -> None:
        self.store.save(self.setup.to_json())

    def _clear_groups(self) -> None:
        self.setup.group1 = []
        self.setup.group2 = []
        self.setup.group1_positions = []
        self.setup.group2_positions = []

    def _check_keepers(self) -> None:
        setup = self.setup
        if setup.keeper1 is None or setup.keeper2 is None:
            raise SetupError("Choose a keeper for both halves")
        if setup.keeper1.id == setup.keeper2.id:
            raise SetupError("Choose a different keeper for each half")
        for keeper in (setup.keeper1, setup.keeper2):
            if not setup.is_selected(keeper.id):
                raise SetupError(f"Keeper {keeper.name} is not selected for this match")

    def _check_groups(self) -> None:
        setup = self.setup
        if len(setup.group1) != GROUP_SIZE or len(setup.group2) != GROUP_SIZE:
            raise SetupError(f"Both groups need exactly {GROUP_SIZE} players")

        group1_ids = [p.id for p in setup.group1]
        group2_ids = [p.id for p in setup.group2]
        if sorted(group1_ids + group2_ids) != sorted(p.id for p in setup.selected_players):
            raise SetupError("Groups must contain exactly the selected players")
        if setup.keeper1.id not in group1_ids or setup.keeper2.id not in group1_ids:
            raise SetupError("Both keepers must be in group 1")
        if any(setup.is_keeper(pid) for pid in group2_ids):
            raise SetupError("Group 2 cannot contain a keeper")

    def reset(self) -> None:
        """Throw away the setup and start over."""
        with self._lock:
            self.setup = MatchSetup()
            self.store.clear()

    def back(self) -> SetupStep:
        """Return to the previous step."""
        with self._lock:
            self.setup.step = self.setup.step.previous()
            self._save()
            return self.setup.step

    def proceed(self) -> SetupStep:
        """Advance from the current step when its requirements are met."""
        handlers = {
            SetupStep.SELECT_PLAYERS: self.proceed_to_keepers,
            SetupStep.SELECT_KEEPERS: self.proceed_to_groups,
            SetupStep.CREATE_GROUPS: self.confirm_groups,
            SetupStep.ASSIGN_POSITIONS: self.confirm_positions,
        }
        with self._lock:
            handler = handlers.get(self.setup.step)
            if handler is None:
                raise SetupError("Setup is complete; start the match")
            handler()
            return self.setup.step

    # ------------------------------------------------------------------
    # Step 1: players
    # ------------------------------------------------------------------
    def toggle_player(self, player_id: str) -> bool:
        """
        Select or deselect a roster player.

        Deselecting also drops the player from the keepers and the groups.

        Returns:
            True if the player is now selected

        Raises:
            SetupError: Inactive player or the selection is full
        """
        with self._lock:
            self._require_step(SetupStep.SELECT_PLAYERS)
            setup = self.setup

            if setup.is_selected(player_id):
                setup.selected_players = [p for p in setup.selected_players if p.id != player_id]
                if setup.keeper1 is not None and setup.keeper1.id == player_id:
                    setup.keeper1 = None
                if setup.keeper2 is not None and setup.keeper2.id == player_id:
                    setup.keeper2 = None
                setup.group1 = [p for p in setup.group1 if p.id != player_id]
                setup.group2 = [p for p in setup.group2 if p.id != player_id]
                self._save()
                return False

            player = self.players.get(player_id)
            if not player.active:
                raise SetupError(f"{player.name} is not an active player")
            if len(setup.selected_players) >= MATCH_PLAYER_COUNT:
                raise SetupError(f"At most {MATCH_PLAYER_COUNT} players can be selected")

            setup.selected_players.append(player)
            self._save()
            return True

    def proceed_to_keepers(self) -> None:
        with self._lock:
            self._require_step(SetupStep.SELECT_PLAYERS)
            if len(self.setup.selected_players) != MATCH_PLAYER_COUNT:
                raise SetupError(f"Select exactly {MATCH_PLAYER_COUNT} players")
            self.setup.step = SetupStep.SELECT_KEEPERS
            self._save()

    # ------------------------------------------------------------------
    # Step 2: keepers
    # ------------------------------------------------------------------
    def select_keeper(self, player_id: str, half: int) -> None:
        """
        Choose the keeper for the first (1) or second (2) half.

        Choosing a different keeper clears the groups and positions.

        Raises:
            SetupError: Unknown half, unselected player or same keeper twice
        """
        with self._lock:
            self._require_step(SetupStep.SELECT_KEEPERS)
            if half not in (1, 2):
                raise SetupError("Half must be 1 or 2")

            player = self._selected(player_id)
            current = self.setup.keeper1 if half == 1 else self.setup.keeper2
            other = self.setup.keeper2 if half == 1 else self.setup.keeper1
            if other is not None and other.id == player.id:
                raise SetupError("Choose a different keeper for each half")
            if current is not None and current.id == player.id:
                return

            if half == 1:
                self.setup.keeper1 = player
            else:
                self.setup.keeper2 = player
            if self.setup.group1 or self.setup.group2:
                logger.info("Keeper changed, clearing groups and positions")
                self._clear_groups()
            self._save()

    def proceed_to_groups(self) -> None:
        with self._lock:
            self._require_step(SetupStep.SELECT_KEEPERS)
            self._check_keepers()
            self.setup.step = SetupStep.CREATE_GROUPS
            self._save()

    # ------------------------------------------------------------------
    # Step 3: groups
    # ------------------------------------------------------------------
    def create_random_groups(self, rng: Optional[random.Random] = None) -> None:
        """
        Split the players into two groups at random.

        Group 1 gets both keepers plus two field players, group 2 the rest.
        """
        with self._lock:
            self._require_step(SetupStep.CREATE_GROUPS)
            self._check_keepers()
            rng = rng or random.Random()

            field_players = [p for p in self.setup.selected_players if not self.setup.is_keeper(p.id)]
            rng.shuffle(field_players)

            keepers = [self.setup.keeper1, self.setup.keeper2]
            outfield_in_group1 = GROUP_SIZE - len(keepers)
            self.setup.group1 = keepers + field_players[:outfield_in_group1]
            self.setup.group2 = field_players[outfield_in_group1:]
            self._save()

    def move_player_to_group(self, player_id: str, group: int) -> None:
        """
        Move a field player to the other group.

        Raises:
            SetupError: Keeper moved, unknown group or target group full
        """
        with self._lock:
            self._require_step(SetupStep.CREATE_GROUPS)
            if group not in (1, 2):
                raise SetupError("Group must be 1 or 2")

            player = self._selected(player_id)
            if self.setup.is_keeper(player_id):
                raise SetupError("Keepers always stay in group 1")

            target = self.setup.group1 if group == 1 else self.setup.group2
            source = self.setup.group2 if group == 1 else self.setup.group1
            if any(p.id == player_id for p in target):
                return
            if len(target) >= GROUP_SIZE:
                raise SetupError(f"Group {group} already has {GROUP_SIZE} players")

            source[:] = [p for p in source if p.id != player_id]
            target.append(player)
            self._save()

    def confirm_groups(self) -> None:
        with self._lock:
            self._require_step(SetupStep.CREATE_GROUPS)
            self._check_keepers()
            self._check_groups()
            self.setup.step = SetupStep.ASSIGN_POSITIONS
            self._save()

    # ------------------------------------------------------------------
    # Step 4: positions
    # ------------------------------------------------------------------
    def assign_position(self, position: str, group: int) -> None:
        """
        Give a field position to a group.

        Raises:
            SetupError: Keeper or unknown position, already assigned, or group full
        """
        with self._lock:
            self._require_step(SetupStep.ASSIGN_POSITIONS)
            if group not in (1, 2):
                raise SetupError("Group must be 1 or 2")
            if position == KEEPER:
                raise SetupError("The keeper position always belongs to group 1")
            if position not in FIELD_POSITIONS:
                raise SetupError(f"Unknown position: {position}")
            if position in self.setup.group1_positions or position in self.setup.group2_positions:
                raise SetupError(f"Position {position} is already assigned")

            labels = self.setup.group1_positions if group == 1 else self.setup.group2_positions
            if len([p for p in labels if p != KEEPER]) >= MAX_GROUP_POSITIONS:
                raise SetupError(f"Group {group} already covers {MAX_GROUP_POSITIONS} positions")

            labels.append(position)
            self._save()

    def unassign_position(self, position: str) -> None:
        with self._lock:
            self._require_step(SetupStep.ASSIGN_POSITIONS)
            if position == KEEPER:
                raise SetupError("The keeper position always belongs to group 1")
            self.setup.group1_positions = [p for p in self.setup.group1_positions if p != position]
            self.setup.group2_positions = [p for p in self.setup.group2_positions if p != position]
            self._save()

    def confirm_positions(self) -> None:
        with self._lock:
            self._require_step(SetupStep.ASSIGN_POSITIONS)
            group1_fields = [p for p in self.setup.group1_positions if p != KEEPER]
            group2_fields = list(self.setup.group2_positions)
            if len(group1_fields) < MIN_GROUP1_POSITIONS or len(group2_fields) < MIN_GROUP2_POSITIONS:
                raise SetupError(
                    f"Group 1 needs at least {MIN_GROUP1_POSITIONS} positions "
                    f"and group 2 at least {MIN_GROUP2_POSITIONS}"
                )
            self.setup.group1_positions = [KEEPER] + group1_fields
            self.setup.step = SetupStep.FORMATION
            self._save()

    # ------------------------------------------------------------------
    # Step 5: formation
    # ------------------------------------------------------------------
    def build_match_state(self) -> MatchState:
        """
        Produce the initial match state from the completed setup.

        Raises:
            SetupError: If the wizard has not reached the formation step or
                the groups no longer match the keepers
        """
        with self._lock:
            self._require_step(SetupStep.FORMATION)
            self._check_keepers()
            self._check_groups()
            setup = self.setup
            logger.info("Setup complete: %d players, group 1 %s, group 2 %s",
                        len(setup.selected_players), setup.group1_positions, setup.group2_positions)
            return MatchState(
                selected_players=list(setup.selected_players),
                keeper1=setup.keeper1,
                keeper2=setup.keeper2,
                group1=list(setup.group1),
                group2=list(setup.group2),
                group1_positions=list(setup.group1_positions),
                group2_positions=list(setup.group2_positions),
                playing_time_seconds={p.id: 0 for p in setup.selected_players},
                created_ts=now_ts(),
            )
