"""
Services package for the Matchday rotation manager.

This package contains service classes that handle business logic.
Includes factory for dependency injection of stores and clients.
"""
from .persistence_service import PersistenceService, StateStore, JsonFileStore, InMemoryStore
from .roster_service import (
    RosterService, PlayerValidator, PlayerValidationError,
    PlayerNotFoundError, PlayerConflictError
)
from .roster_client import RosterClient, RosterClientError
from .setup_service import SetupWizard, SetupError
from .rotation_engine import RotationEngine, IllegalOperationError
from .match_clock import ClockTicker
from .match_controller import MatchController, NoActiveMatchError
from .service_factory import ServiceFactory

__all__ = [
    "PersistenceService", "StateStore", "JsonFileStore", "InMemoryStore",
    "RosterService", "PlayerValidator", "PlayerValidationError",
    "PlayerNotFoundError", "PlayerConflictError",
    "RosterClient", "RosterClientError",
    "SetupWizard", "SetupError",
    "RotationEngine", "IllegalOperationError",
    "ClockTicker", "MatchController", "NoActiveMatchError",
    "ServiceFactory"
]
