"""Deadline board - keeps the ranked view in step with the store."""

import logging
from datetime import datetime
from typing import Callable

from .core.countdown import Clock, utc_now
from .core.ranking import FlatEvent, build_view, flatten, next_boundary
from .core.search import DEFAULT_THRESHOLD, FuzzyIndex
from .ports import SearchIndex
from .store import AppState, AppStore

logger = logging.getLogger(__name__)


class DeadlineBoard:
    """
    Derived view over an AppStore.

    The search index is rebuilt only when the catalogue changes. Every
    store change recomputes the view and hands it to on_update.
    """

    def __init__(
        self,
        store: AppStore,
        threshold: float = DEFAULT_THRESHOLD,
        clock: Clock = utc_now,
        on_update: Callable[[list[FlatEvent]], None] | None = None,
    ):
        self.store = store
        self.threshold = threshold
        self.clock = clock
        self.on_update = on_update
        self._indexed_items: tuple | None = None
        self._index: SearchIndex | None = None
        self._unsubscribe = store.subscribe(self._on_state)

    def _on_state(self, state: AppState) -> None:
        if self.on_update is not None:
            self.on_update(self.view())

    def index(self) -> SearchIndex:
        """Search index for the current catalogue."""
        items = self.store.state.items
        if self._index is None or self._indexed_items is not items:
            logger.debug(f"Rebuilding search index for {len(items)} items")
            self._index = FuzzyIndex(flatten(items, self.clock()), threshold=self.threshold)
            self._indexed_items = items
        return self._index

    def records(self, now: datetime | None = None) -> list[FlatEvent]:
        """All flattened records at the given instant, unfiltered."""
        return flatten(self.store.state.items, now or self.clock())

    def view(self, now: datetime | None = None) -> list[FlatEvent]:
        """Filtered and ranked records for the store's current selection."""
        state = self.store.state
        records = self.records(now)
        index = self.index() if state.selection.search_query.strip() else None
        return build_view(records, state.selection, state.favorites, index)

    def next_refresh(self, now: datetime | None = None) -> datetime | None:
        """The instant the next upcoming deadline passes; the view must be recomputed then."""
        now = now or self.clock()
        return next_boundary(self.records(now), now)

    def close(self) -> None:
        self._unsubscribe()
