"""
Matchday Rotation Manager

A small web application for managing substitution rotations in 6-a-side
youth football: a player roster, a match setup wizard that forms two
rotation groups, and a live match controller that tracks the clock,
per-player playing time, position swaps and substitutions.
"""
from .models import Player, MatchState, MatchSetup
from .services import RotationEngine, MatchController, RosterService, SetupWizard
from .ui import create_app, run_web_app
from .utils import fmt_mmss, now_ts, APP_TITLE, AppConfig

__version__ = "1.0.0"

__all__ = [
    "Player", "MatchState", "MatchSetup",
    "RotationEngine", "MatchController", "RosterService", "SetupWizard",
    "create_app", "run_web_app", "fmt_mmss", "now_ts", "APP_TITLE", "AppConfig"
]
