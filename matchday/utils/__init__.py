"""
Utilities package for the Matchday rotation manager.

This package contains utility functions, constants and configuration used throughout the application.
"""
from .time_utils import fmt_mmss, now_ts
from .constants import (
    APP_TITLE, MATCH_PLAYER_COUNT, GROUP_SIZE, MAX_GROUP_POSITIONS,
    KEEPER, POSITIONS, FIELD_POSITIONS, POSITION_LABELS
)
from .config import AppConfig

__all__ = [
    "fmt_mmss", "now_ts", "APP_TITLE", "MATCH_PLAYER_COUNT", "GROUP_SIZE",
    "MAX_GROUP_POSITIONS", "KEEPER", "POSITIONS", "FIELD_POSITIONS",
    "POSITION_LABELS", "AppConfig"
]
