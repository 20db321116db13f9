"""Application state store.

Holds the catalogue, filter selection, favorites and fetch status as
immutable AppState snapshots. State changes only through the mutators
below; subscribers are called with each new snapshot.

Overlapping fetch_items() calls are not guarded: whichever finishes last
installs its catalogue.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable

from .core.catalogue import CatalogueError, DeadlineItem
from .core.ranking import FilterSelection
from .ports import CatalogueSource, FavoritesStore

logger = logging.getLogger(__name__)


class FetchStatus(Enum):
    """Catalogue fetch lifecycle."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class AppState:
    """Immutable snapshot of the store."""

    items: tuple[DeadlineItem, ...] = ()
    loading: bool = True
    status: FetchStatus = FetchStatus.IDLE
    selection: FilterSelection = field(default_factory=FilterSelection)
    favorites: frozenset[str] = frozenset()
    mounted: bool = False
    last_error: str | None = None


Listener = Callable[[AppState], None]


def _toggle(values: frozenset[str], value: str) -> frozenset[str]:
    return values - {value} if value in values else values | {value}


class AppStore:
    """Process-wide state container; pass it explicitly to whatever needs it."""

    def __init__(
        self,
        source: CatalogueSource,
        favorites_store: FavoritesStore | None = None,
        initial: AppState | None = None,
    ):
        self.source = source
        self.favorites_store = favorites_store
        self._state = initial or AppState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def _select(self, **changes) -> None:
        self._set(selection=replace(self._state.selection, **changes))

    # ============== Filters ==============

    def set_category(self, category: str | None) -> None:
        self._select(category=category)

    def toggle_tag(self, tag: str) -> None:
        self._select(tags=_toggle(self._state.selection.tags, tag))

    def toggle_location(self, location: str) -> None:
        self._select(locations=_toggle(self._state.selection.locations, location))

    def set_search_query(self, query: str) -> None:
        self._select(search_query=query)

    def set_show_only_favorites(self, show: bool) -> None:
        self._select(favorites_only=show)

    # ============== Favorites ==============

    def toggle_favorite(self, event_id: str) -> bool:
        """
        Add or remove an event id from favorites and persist immediately.

        Returns False, leaving favorites unchanged, if they could not be saved.
        """
        favorites = _toggle(self._state.favorites, event_id)
        if self.favorites_store is not None:
            try:
                self.favorites_store.save(favorites)
            except OSError as e:
                logger.error(f"Failed to save favorites: {e}")
                return False
        self._set(favorites=favorites)
        return True

    def hydrate(self) -> None:
        """Restore persisted favorites and mark the store as mounted."""
        saved = self.favorites_store.load() if self.favorites_store is not None else None
        if saved is None:
            self._set(mounted=True)
        else:
            self._set(favorites=frozenset(saved), mounted=True)

    # ============== Catalogue ==============

    def fetch_items(self) -> None:
        """
        Load the catalogue from the source.

        On failure the previous catalogue is kept and the error is logged;
        nothing is raised and nothing is retried.
        """
        self._set(loading=True, status=FetchStatus.LOADING)
        try:
            items = self.source.fetch_items()
        except CatalogueError as e:
            logger.error(f"Failed to load data: {e}")
            self._set(loading=False, status=FetchStatus.FAILED, last_error=str(e))
            return

        logger.info(f"Loaded {len(items)} deadline items")
        self._set(
            items=tuple(items),
            loading=False,
            status=FetchStatus.LOADED,
            last_error=None,
        )
