"""Ports - interfaces/protocols for external dependencies."""

from .catalogue_source import CatalogueSource
from .favorites_store import FavoritesStore
from .search_index import SearchIndex

__all__ = [
    "CatalogueSource",
    "FavoritesStore",
    "SearchIndex",
]
