"""
Service Factory for dependency injection.

This module builds the roster, setup and match services from an
:class:`AppConfig`, so the web layer never constructs stores or clients
itself.
"""
from typing import Optional, Union

from ..utils import AppConfig
from ..utils.constants import MATCH_SLOT, ROSTER_SLOT, SETUP_SLOT
from .match_controller import MatchController
from .persistence_service import PersistenceService
from .roster_client import RosterClient
from .roster_service import RosterService
from .setup_service import SetupWizard


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    Services that hold state (roster, wizard, controller) are created once
    and shared.
    """

    def __init__(self, config: Optional[AppConfig] = None, persistence: Optional[PersistenceService] = None):
        """
        Initialize factory.

        Args:
            config: Application configuration (defaults from the environment)
            persistence: Persistence service override (e.g. in-memory for tests)
        """
        self.config = config or AppConfig.from_env()
        self.persistence = persistence or PersistenceService(self.config.data_dir)
        self._roster_service: Optional[RosterService] = None
        self._roster_client: Optional[RosterClient] = None
        self._setup_wizard: Optional[SetupWizard] = None
        self._match_controller: Optional[MatchController] = None

    def roster_service(self) -> RosterService:
        """Get the singleton local roster."""
        if self._roster_service is None:
            self._roster_service = RosterService(self.persistence.store(ROSTER_SLOT))
        return self._roster_service

    def player_source(self) -> Union[RosterService, RosterClient]:
        """
        Roster the setup wizard selects players from.

        Returns:
            RosterClient when a remote roster URL is configured, else the local roster
        """
        if self.config.roster_url:
            if self._roster_client is None:
                self._roster_client = RosterClient(self.config.roster_url)
            return self._roster_client
        return self.roster_service()

    def setup_wizard(self) -> SetupWizard:
        """Get the singleton setup wizard."""
        if self._setup_wizard is None:
            self._setup_wizard = SetupWizard(self.player_source(), self.persistence.store(SETUP_SLOT))
        return self._setup_wizard

    def match_controller(self) -> MatchController:
        """Get the singleton match controller."""
        if self._match_controller is None:
            self._match_controller = MatchController(
                self.persistence.store(MATCH_SLOT),
                tick_interval=self.config.tick_interval,
            )
        return self._match_controller
