"""Shared wiring between the CLI and other front ends.

Builds the store and board from configuration so callers never
construct adapters themselves.
"""

from datetime import tzinfo
from zoneinfo import ZoneInfo

from .adapters.file_favorites import FileFavoritesStore
from .adapters.http_catalogue import HttpCatalogueSource
from .board import DeadlineBoard
from .config import Config, load_config
from .core.ranking import FlatEvent
from .store import AppStore


def get_favorites_store(config: Config) -> FileFavoritesStore:
    """Resolve favorites file from config."""
    return FileFavoritesStore(config.favorites_path)


def get_display_zone(config: Config) -> tzinfo | None:
    """Zone to format deadlines in; None means local time."""
    return ZoneInfo(config.timezone) if config.timezone else None


def build_store(config: Config | None = None) -> AppStore:
    """Create a hydrated store wired to the configured adapters."""
    config = config or load_config()
    store = AppStore(
        source=HttpCatalogueSource(config.data_url, timeout=config.request_timeout),
        favorites_store=get_favorites_store(config),
    )
    store.hydrate()
    return store


def load_board(config: Config | None = None) -> DeadlineBoard:
    """Build a store, fetch the catalogue once and return a board over it."""
    config = config or load_config()
    store = build_store(config)
    store.fetch_items()
    return DeadlineBoard(store, threshold=config.search_threshold)


def find_event(board: DeadlineBoard, event_id: str) -> FlatEvent | None:
    """Look up a flattened record by event id."""
    return next((r for r in board.records() if r.event.id == event_id), None)
