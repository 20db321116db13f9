"""Catalogue source interface."""

from typing import Protocol

from oseddl.core.catalogue import DeadlineItem


class CatalogueSource(Protocol):
    """Interface for loading the deadline catalogue from any backend."""

    def fetch_items(self) -> list[DeadlineItem]:
        """Fetch and parse the full catalogue. Raises CatalogueError on failure."""
        ...
