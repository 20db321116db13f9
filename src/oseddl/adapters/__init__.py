"""Adapters - I/O implementations of ports."""

from .http_catalogue import HttpCatalogueSource, CatalogueFetchError
from .file_favorites import FileFavoritesStore

__all__ = [
    "HttpCatalogueSource",
    "CatalogueFetchError",
    "FileFavoritesStore",
]
