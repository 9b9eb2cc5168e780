"""
Constants for the Matchday rotation manager.

This module contains the match format and API defaults used throughout the application.
"""

# Application metadata
APP_TITLE = "Matchday Rotation Manager"

# Match format (6-a-side youth football)
MATCH_PLAYER_COUNT = 8      # players selected for a match
GROUP_SIZE = 4              # players per rotation group
MAX_GROUP_POSITIONS = 3     # non-keeper positions a group may cover
MIN_GROUP1_POSITIONS = 2
MIN_GROUP2_POSITIONS = 3

KEEPER = "keeper"

# Ordered as shown on the pitch, keeper first
POSITIONS = ["keeper", "linksachter", "rechtsachter", "midden", "linksvoor", "rechtsvoor"]
FIELD_POSITIONS = [p for p in POSITIONS if p != KEEPER]

POSITION_LABELS = {
    "keeper": "Keeper",
    "linksachter": "Links Achter",
    "rechtsachter": "Rechts Achter",
    "midden": "Midden",
    "linksvoor": "Links Voor",
    "rechtsvoor": "Rechts Voor",
}

# Timing
TICK_INTERVAL_SECONDS = 1.0
TIME_ADJUSTMENT_SECONDS = 60
SUGGESTION_TIE_SECONDS = 1  # playing times within this window count as equal

# Roster
MIN_SHIRT_NUMBER = 1
MAX_SHIRT_NUMBER = 99

# Persistence slot names
ROSTER_SLOT = "roster"
SETUP_SLOT = "current_setup"
MATCH_SLOT = "current_match"

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_DATA_DIR = "data"
