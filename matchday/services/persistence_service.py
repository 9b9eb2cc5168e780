"""
Persistence service for the Matchday rotation manager.

This module provides the load/save port used by the roster, the setup wizard
and the live match. Each store holds a single named slot of JSON data; the
JSON file implementation keeps one file per slot in a data directory, and the
in-memory implementation is used in tests or when nothing should touch disk.
"""
import copy
import json
import logging
import os
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Port for persisting a single named slot of JSON data."""

    def load(self) -> Optional[dict]:
        """Return the stored data, or None when the slot is empty."""
        ...

    def save(self, data: dict) -> None:
        """Overwrite the slot with data."""
        ...

    def clear(self) -> None:
        """Empty the slot."""
        ...


class JsonFileStore:
    """
    Slot store backed by ``<directory>/<slot>.json``.

    Writes go to a temporary file first and are then moved into place so a
    crash during save never leaves a half-written slot behind.
    """

    def __init__(self, directory: str, slot: str):
        self.directory = directory
        self.slot = slot
        self.file_path = os.path.join(directory, f"{slot}.json")

    def load(self) -> Optional[dict]:
        """
        Load the slot from disk.

        Returns:
            Parsed JSON data, or None if the file is missing or unreadable
        """
        if not os.path.exists(self.file_path):
            return None

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable slot %s: %s", self.file_path, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Ignoring slot %s: expected a JSON object", self.file_path)
            return None
        return data

    def save(self, data: dict) -> None:
        """
        Save data to the slot file.

        Args:
            data: JSON-serializable dictionary

        Raises:
            OSError: If the file cannot be written
        """
        if self.directory and not os.path.exists(self.directory):
            os.makedirs(self.directory)

        temp_path = f"{self.file_path}.tmp"
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(temp_path, self.file_path)

    def clear(self) -> None:
        """Remove the slot file if present."""
        try:
            os.remove(self.file_path)
        except FileNotFoundError:
            pass


class InMemoryStore:
    """Slot store kept in process memory."""

    def __init__(self, data: Optional[dict] = None):
        self._data: Optional[dict] = copy.deepcopy(data) if data is not None else None
        self.save_count = 0

    def load(self) -> Optional[dict]:
        return copy.deepcopy(self._data) if self._data is not None else None

    def save(self, data: dict) -> None:
        self._data = copy.deepcopy(data)
        self.save_count += 1

    def clear(self) -> None:
        self._data = None


class PersistenceService:
    """
    Hands out slot stores rooted at one data directory.

    Args:
        data_dir: Directory for JSON slot files, or None to keep everything in memory
    """

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = data_dir
        self._stores: Dict[str, StateStore] = {}

    def store(self, slot: str) -> StateStore:
        """
        Get the store for a named slot, creating it on first use.

        Args:
            slot: Slot name, e.g. "current_match"

        Returns:
            StateStore for the slot
        """
        if slot not in self._stores:
            if self.data_dir is None:
                self._stores[slot] = InMemoryStore()
            else:
                self._stores[slot] = JsonFileStore(self.data_dir, slot)
        return self._stores[slot]
