"""Favorites persistence interface."""

from typing import Iterable, Protocol


class FavoritesStore(Protocol):
    """Interface for persisting the set of favorite event ids."""

    def load(self) -> set[str] | None:
        """Load saved favorites. Returns None if nothing was saved."""
        ...

    def save(self, favorites: Iterable[str]) -> None:
        """Replace the saved favorites."""
        ...
