"""File-based favorites storage adapter."""

import json
import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

STORAGE_KEY = "favorites-storage"


class FileFavoritesStore:
    """
    JSON file favorites storage.

    Implements FavoritesStore protocol. The file is a small key-value
    document; only the favorites entry is read or written:

        {"favorites-storage": {"state": {"favorites": [...]}, "version": 0}}
    """

    def __init__(self, path: Path | str, key: str = STORAGE_KEY):
        self.path = Path(path).expanduser()
        self.key = key

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable favorites file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring favorites file {self.path}: not an object")
            return {}
        return data

    def load(self) -> set[str] | None:
        """Load saved favorites. Returns None if nothing was saved."""
        entry = self._read_document().get(self.key)
        if not isinstance(entry, dict):
            return None
        state = entry.get("state", {})
        favorites = state.get("favorites") if isinstance(state, dict) else None
        if not isinstance(favorites, list):
            logger.warning(f"Ignoring malformed '{self.key}' entry in {self.path}")
            return None
        return {str(f) for f in favorites}

    def save(self, favorites: Iterable[str]) -> None:
        """Replace the saved favorites, keeping any other keys in the file."""
        document = self._read_document()
        document[self.key] = {"state": {"favorites": sorted(favorites)}, "version": 0}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
