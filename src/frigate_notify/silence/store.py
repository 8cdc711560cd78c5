"""
Silence Stores - Where the silence table lives between events.

Contract:
- read(entity_id) returns the raw string snapshot (or None), which is
  parsed leniently by parse_silence_table()
- write(update) replaces the stored table wholesale with JSON

Stores do no locking across read and write; see silence/table.py.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from ..homeassistant import HomeAssistantClient
from .table import SilenceUpdate

logger = logging.getLogger(__name__)


class SilenceStore(ABC):
    """Abstract base class for silence table storage backends."""

    @abstractmethod
    def read(self, entity_id: str) -> str | None:
        """Return the raw stored value, or None if nothing is stored."""

    @abstractmethod
    def write(self, update: SilenceUpdate) -> bool:
        """
        Replace the stored table.

        Returns:
            True if the write succeeded
        """


class MemorySilenceStore(SilenceStore):
    """In-process store. Used for dry runs and tests."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})

    def read(self, entity_id: str) -> str | None:
        return self.values.get(entity_id)

    def write(self, update: SilenceUpdate) -> bool:
        self.values[update.entity_id] = update.value
        return True


class FileSilenceStore(SilenceStore):
    """
    Store each table as a JSON file under a state directory.

    Writes go to a temp file first and are moved into place, so a reader
    never sees a half-written table.
    """

    def __init__(self, state_dir: str = "data/state"):
        self.state_dir = Path(state_dir)
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, entity_id: str) -> Path:
        safe_name = entity_id.replace("/", "_")
        return self.state_dir / f"{safe_name}.json"

    def read(self, entity_id: str) -> str | None:
        path = self._path(entity_id)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read silence table {path}: {e}")
            return None

    def write(self, update: SilenceUpdate) -> bool:
        path = self._path(update.entity_id)
        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(dir=self.state_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(update.table, f)
            os.replace(temp_path, path)
            logger.debug(f"Silence table written: {path}")
            return True
        except OSError as e:
            logger.error(f"Failed to write silence table {path}: {e}")
            if temp_path is not None:
                Path(temp_path).unlink(missing_ok=True)
            return False


class HomeAssistantSilenceStore(SilenceStore):
    """Store the table in a Home Assistant input_text entity."""

    def __init__(self, client: HomeAssistantClient):
        self._client = client

    def read(self, entity_id: str) -> str | None:
        return self._client.get_state(entity_id)

    def write(self, update: SilenceUpdate) -> bool:
        return self._client.call_service(
            "input_text.set_value",
            {"entity_id": update.entity_id, "value": update.value},
        )
