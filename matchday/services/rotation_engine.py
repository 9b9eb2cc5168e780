"""
Rotation engine for the Matchday rotation manager.

The engine works on a :class:`MatchState` and implements the live match rules:

* the match clock and per-player playing time accounting,
* position swaps between on-field players of one group,
* substitutions (bench/field exchanges) inside one group,
* the keeper change at half time,
* the suggested next substitution per group.

Field and bench are derived from array order. For each group the number of
field slots equals the number of non-keeper position labels the group covers;
the group's non-keeper players fill those slots in order and the rest sit on
the bench. The keeper label always belongs to group 1 and is filled by the
current keeper.
"""
import logging
from typing import Dict, List, Optional

from ..models import MatchState, Player, PlayingTimeEntry, SubstitutionSuggestion
from ..utils import KEEPER, fmt_mmss
from ..utils.constants import SUGGESTION_TIE_SECONDS

logger = logging.getLogger(__name__)

GROUPS = (1, 2)


class IllegalOperationError(Exception):
    """Raised when a swap, substitution or keeper change breaks the match rules."""
    pass


class RotationEngine:
    """Applies clock ticks, swaps and substitutions to a match state."""

    def __init__(self, state: MatchState):
        self.state = state

    # ------------------------------------------------------------------
    # Field / bench views
    # ------------------------------------------------------------------
    def is_keeper(self, player_id: str) -> bool:
        return player_id in self.state.keeper_ids()

    def current_keeper_player(self) -> Optional[Player]:
        """Keeper currently in goal."""
        return self.state.keeper1 if self.state.current_keeper == 1 else self.state.keeper2

    def reserve_keeper_player(self) -> Optional[Player]:
        """Keeper currently waiting on the side."""
        return self.state.keeper2 if self.state.current_keeper == 1 else self.state.keeper1

    def field_slot_count(self, group: int) -> int:
        return len([label for label in self.state.positions(group) if label != KEEPER])

    def _outfield_members(self, group: int) -> List[Player]:
        keeper_ids = self.state.keeper_ids()
        return [p for p in self.state.group(group) if p.id not in keeper_ids]

    def field_players(self, group: int) -> List[Player]:
        """Non-keeper players of a group currently occupying a field slot."""
        return self._outfield_members(group)[: self.field_slot_count(group)]

    def bench_players(self, group: int) -> List[Player]:
        """Non-keeper players of a group currently on the bench."""
        return self._outfield_members(group)[self.field_slot_count(group):]

    def on_field_players(self) -> List[Player]:
        """Everyone who accrues playing time right now."""
        players: List[Player] = []
        keeper = self.current_keeper_player()
        if keeper is not None:
            players.append(keeper)
        for group in GROUPS:
            players.extend(self.field_players(group))
        return players

    def is_on_field(self, player_id: str) -> bool:
        return any(p.id == player_id for p in self.on_field_players())

    def group_of(self, player_id: str) -> Optional[int]:
        """
        Group a player belongs to.

        Keepers count as group 1 even if the group list does not name them.

        Returns:
            1, 2 or None if the player is not part of the match
        """
        if self.is_keeper(player_id):
            return 1
        for group in GROUPS:
            if any(p.id == player_id for p in self.state.group(group)):
                return group
        return None

    def position_map(self, group: int) -> Dict[str, Optional[Player]]:
        """
        Map each position label of a group to the player filling it.

        Returns:
            Ordered mapping label -> player (None for an unfilled slot)
        """
        field = self.field_players(group)
        mapping: Dict[str, Optional[Player]] = {}
        index = 0
        for label in self.state.positions(group):
            if label == KEEPER:
                mapping[label] = self.current_keeper_player()
                continue
            mapping[label] = field[index] if index < len(field) else None
            index += 1
        return mapping

    def position_of(self, player_id: str) -> Optional[str]:
        """Position label a player currently holds, or None when off the field."""
        for group in GROUPS:
            for label, player in self.position_map(group).items():
                if player is not None and player.id == player_id:
                    return label
        return None

    # ------------------------------------------------------------------
    # Clock and playing time
    # ------------------------------------------------------------------
    def toggle_running(self) -> bool:
        """
        Start or stop the match clock.

        Returns:
            The new running state
        """
        self.state.is_running = not self.state.is_running
        logger.info("Match clock %s at %s", "started" if self.state.is_running else "stopped",
                    fmt_mmss(self.state.match_time_seconds))
        return self.state.is_running

    def tick(self) -> bool:
        """
        Advance the clock by one second and credit every on-field player.

        Returns:
            False when the clock is stopped and nothing changed
        """
        if not self.state.is_running:
            return False

        self.state.match_time_seconds += 1
        times = self.state.playing_time_seconds
        for player in self.on_field_players():
            times[player.id] = times.get(player.id, 0) + 1
        return True

    def adjust_time(self, delta_seconds: int) -> None:
        """
        Shift the match clock and the on-field players' playing time.

        Used for retroactive corrections such as a clock started late. All
        values are clamped at zero.

        Args:
            delta_seconds: Signed correction, typically +60 or -60
        """
        delta = int(delta_seconds)
        if delta == 0:
            return

        self.state.match_time_seconds = max(0, self.state.match_time_seconds + delta)
        times = self.state.playing_time_seconds
        for player in self.on_field_players():
            times[player.id] = max(0, times.get(player.id, 0) + delta)
        logger.info("Match clock adjusted by %+ds to %s", delta, fmt_mmss(self.state.match_time_seconds))

    # ------------------------------------------------------------------
    # Swaps and substitutions
    # ------------------------------------------------------------------
    def _require_group(self, player_id: str) -> int:
        group = self.group_of(player_id)
        if group is None:
            raise IllegalOperationError(f"Player {player_id} is not part of this match")
        return group

    def _require_same_group(self, first_id: str, second_id: str) -> int:
        first_group = self._require_group(first_id)
        second_group = self._require_group(second_id)
        if first_group != second_group:
            raise IllegalOperationError("Players can only be exchanged within the same group")
        return first_group

    def swap_positions(self, player_a_id: str, player_b_id: str) -> bool:
        """
        Exchange the position labels of two on-field players of one group.

        The group's player order is left alone; only the labels move.

        Returns:
            False when both ids are the same player (nothing to do)

        Raises:
            IllegalOperationError: Cross-group, bench player or keeper involved
        """
        if player_a_id == player_b_id:
            return False

        group = self._require_same_group(player_a_id, player_b_id)
        if self.is_keeper(player_a_id) or self.is_keeper(player_b_id):
            raise IllegalOperationError("The keeper position cannot be swapped")

        field_ids = [p.id for p in self.field_players(group)]
        if player_a_id not in field_ids or player_b_id not in field_ids:
            raise IllegalOperationError("Position swaps are only possible between players on the field")

        labels = self.state.positions(group)
        outfield_labels = [label for label in labels if label != KEEPER]
        label_a = outfield_labels[field_ids.index(player_a_id)]
        label_b = outfield_labels[field_ids.index(player_b_id)]
        index_a, index_b = labels.index(label_a), labels.index(label_b)
        labels[index_a], labels[index_b] = labels[index_b], labels[index_a]

        logger.info("Group %d swapped positions %s <-> %s", group, label_a, label_b)
        return True

    def substitute(self, out_player_id: str, in_player_id: str) -> bool:
        """
        Exchange two players of one group in the group order.

        The incoming player takes over the array slot, and with it the
        field/bench status, of the outgoing player. Two field players trade
        slots and so their positions; two bench players only change the
        bench order. A keeper can only be exchanged with the other keeper,
        which switches the keeper in goal.

        Returns:
            False when both ids are the same player (nothing to do)

        Raises:
            IllegalOperationError: Cross-group, or a keeper paired with a field player
        """
        if out_player_id == in_player_id:
            return False

        group = self._require_same_group(out_player_id, in_player_id)

        out_is_keeper = self.is_keeper(out_player_id)
        in_is_keeper = self.is_keeper(in_player_id)
        if out_is_keeper or in_is_keeper:
            if not (out_is_keeper and in_is_keeper):
                raise IllegalOperationError("A keeper can only be exchanged with the reserve keeper")
            self.state.current_keeper = 2 if self.state.current_keeper == 1 else 1
            logger.info("Keeper exchanged, %s now in goal", self.current_keeper_player().name)
            return True

        players = self.state.group(group)
        out_index = next(i for i, p in enumerate(players) if p.id == out_player_id)
        in_index = next(i for i, p in enumerate(players) if p.id == in_player_id)
        players[out_index], players[in_index] = players[in_index], players[out_index]

        logger.info("Group %d substitution: %s out, %s in",
                    group, players[in_index].name, players[out_index].name)
        return True

    def change_keeper_for_second_half(self) -> Player:
        """
        Switch to the other keeper and start the second half.

        Returns:
            The keeper now in goal

        Raises:
            IllegalOperationError: If the second half has already started or keepers are missing
        """
        if self.state.half != 1:
            raise IllegalOperationError("The keeper change has already been made")
        if self.state.keeper1 is None or self.state.keeper2 is None:
            raise IllegalOperationError("Two keepers are required for the keeper change")

        self.state.current_keeper = 2 if self.state.current_keeper == 1 else 1
        self.state.half = 2
        keeper = self.current_keeper_player()
        logger.info("Second half started with keeper %s", keeper.name)
        return keeper

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------
    def _pick(self, players: List[Player], highest: bool) -> Player:
        times = [self.state.playing_time(p.id) for p in players]
        target = max(times) if highest else min(times)
        candidates = [
            p for p, t in zip(players, times)
            if abs(t - target) <= SUGGESTION_TIE_SECONDS
        ]
        candidates.sort(key=lambda p: (p.name.casefold(), p.id))
        return candidates[0]

    def suggest_substitution(self, group: int) -> Optional[SubstitutionSuggestion]:
        """
        Suggest the next substitution for a group.

        The field player with the most playing time goes out and the bench
        player with the least comes in. Times within one second of the
        extreme count as a tie, broken alphabetically by name.

        Returns:
            Suggestion, or None when the group has no field or no bench players
        """
        field = self.field_players(group)
        bench = self.bench_players(group)
        if not field or not bench:
            return None

        out_player = self._pick(field, highest=True)
        in_player = self._pick(bench, highest=False)
        return SubstitutionSuggestion(
            group=group,
            out_player_id=out_player.id,
            out_player_name=out_player.name,
            out_seconds=self.state.playing_time(out_player.id),
            in_player_id=in_player.id,
            in_player_name=in_player.name,
            in_seconds=self.state.playing_time(in_player.id),
        )

    def suggestions(self) -> List[SubstitutionSuggestion]:
        """Suggestions for every group that has one."""
        return [s for s in (self.suggest_substitution(g) for g in GROUPS) if s is not None]

    def execute_suggestion(self, group: int) -> SubstitutionSuggestion:
        """
        Carry out the current suggestion for a group.

        Raises:
            IllegalOperationError: If the group has no suggestion
        """
        suggestion = self.suggest_substitution(group)
        if suggestion is None:
            raise IllegalOperationError(f"No substitution to suggest for group {group}")
        self.substitute(suggestion.out_player_id, suggestion.in_player_id)
        return suggestion

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def playing_time_report(self) -> List[PlayingTimeEntry]:
        """
        Playing time for every selected player, most minutes first.

        Returns:
            List of PlayingTimeEntry sorted by playing time desc, then name
        """
        on_field_ids = {p.id for p in self.on_field_players()}
        entries = []
        for player in self.state.selected_players:
            seconds = self.state.playing_time(player.id)
            entries.append(PlayingTimeEntry(
                player_id=player.id,
                name=player.name,
                number=player.number,
                group=self.group_of(player.id),
                on_field=player.id in on_field_ids,
                position=self.position_of(player.id),
                playing_seconds=seconds,
                playing_time=fmt_mmss(seconds),
            ))
        entries.sort(key=lambda e: (-e.playing_seconds, e.name.casefold()))
        return entries
