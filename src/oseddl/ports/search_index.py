"""Search index interface."""

from typing import Protocol


class SearchIndex(Protocol):
    """Interface for approximate matching over an indexed record list."""

    def search(self, query: str) -> list[int]:
        """Positions of matching records, most relevant first."""
        ...
