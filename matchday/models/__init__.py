"""
Models package for the Matchday rotation manager.

This package contains the core data models used throughout the application.
"""
from .player import Player
from .match_state import MatchState
from .match_setup import MatchSetup, SetupStep
from .match_report import SubstitutionSuggestion, PlayingTimeEntry
from .selection import Idle, AwaitingSwapTarget, AwaitingSubstituteTarget, SelectionState

__all__ = [
    "Player", "MatchState", "MatchSetup", "SetupStep",
    "SubstitutionSuggestion", "PlayingTimeEntry",
    "Idle", "AwaitingSwapTarget", "AwaitingSubstituteTarget", "SelectionState"
]
