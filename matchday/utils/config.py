"""
Runtime configuration for the Matchday rotation manager.

Settings are read from ``MATCHDAY_*`` environment variables with the defaults
from :mod:`matchday.utils.constants`.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import DEFAULT_DATA_DIR, DEFAULT_HOST, DEFAULT_PORT, TICK_INTERVAL_SECONDS


@dataclass
class AppConfig:
    """
    Configuration for the web application and its services.

    Attributes:
        host: Address the web server binds to
        port: Port the web server listens on
        data_dir: Directory holding the JSON state slots
        roster_url: Base URL of a remote roster server, or None for the local roster
        tick_interval: Seconds between match clock ticks
        log_level: Name of the root logging level
    """
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    data_dir: str = DEFAULT_DATA_DIR
    roster_url: Optional[str] = None
    tick_interval: float = TICK_INTERVAL_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            AppConfig instance

        Raises:
            ValueError: If a numeric setting cannot be parsed
        """
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("MATCHDAY_HOST", DEFAULT_HOST),
            port=int(env.get("MATCHDAY_PORT", DEFAULT_PORT)),
            data_dir=env.get("MATCHDAY_DATA_DIR", DEFAULT_DATA_DIR),
            roster_url=env.get("MATCHDAY_ROSTER_URL") or None,
            tick_interval=float(env.get("MATCHDAY_TICK_INTERVAL", TICK_INTERVAL_SECONDS)),
            log_level=env.get("MATCHDAY_LOG_LEVEL", "INFO").upper(),
        )
