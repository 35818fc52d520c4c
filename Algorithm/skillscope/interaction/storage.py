"""
Preference storage ports.

View preferences (filters, detail panel state) persist for the session.
The state machine only talks to a PreferenceStore; where the data lives
is the caller's choice.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class PreferenceStore(Protocol):
    """Load and save a flat preferences mapping."""

    def load(self) -> Dict[str, Any]:
        ...

    def save(self, data: Dict[str, Any]) -> None:
        ...


class InMemoryPreferenceStore:
    """Keeps preferences for the lifetime of the object."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})
        self.save_count = 0

    def load(self) -> Dict[str, Any]:
        return dict(self._data)

    def save(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)
        self.save_count += 1


class JsonFilePreferenceStore:
    """
    Keeps preferences in a JSON file.

    A missing or corrupt file loads as empty preferences; the file is
    rewritten on the next save.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring preferences file {self.path}: not an object")
            return {}
        return data

    def save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)
