"""HTTP catalogue adapter - fetches the deadline catalogue over HTTP."""

import logging

import requests

from oseddl.core.catalogue import CatalogueError, DeadlineItem, parse_catalogue

logger = logging.getLogger(__name__)

DEFAULT_DATA_URL = "https://oseddl.openatom.club/api/data"


class CatalogueFetchError(CatalogueError):
    """Raised when the catalogue endpoint cannot be reached or answers with an error."""

    pass


class HttpCatalogueSource:
    """
    HTTP catalogue adapter.

    Implements CatalogueSource protocol. One GET per fetch, no retries.
    No business logic - just I/O and shape checking.
    """

    def __init__(
        self,
        url: str = DEFAULT_DATA_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_raw(self) -> list | dict:
        """GET the endpoint and decode its JSON body."""
        try:
            resp = self._session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise CatalogueFetchError(f"Failed to fetch {self.url}: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise CatalogueFetchError(f"Response from {self.url} is not JSON: {e}") from e

    def fetch_items(self) -> list[DeadlineItem]:
        """Fetch and parse the full catalogue."""
        data = self.fetch_raw()
        items = parse_catalogue(data)
        logger.debug(f"Fetched {len(items)} items from {self.url}")
        return items
