"""
Catalogue query service.

``CatalogService`` turns the store primitives into the four read
operations served by the API and decides how empty results are
reported: an empty catalogue or banner list is "not found", while a
search that matches nothing is a normal, empty answer.

Any failure not covered by those rules is logged with its traceback
and replaced by a ``ServiceFault`` carrying a generic message, so
driver details never reach a client.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .exceptions import BadRequestError, CatalogError, NotFoundError, ServiceFault
from .schemas import Banner, CatalogItem
from .store import (
    BANNERS_COLLECTION,
    DETAILS_COLLECTION,
    DocumentStore,
    InvalidIdentifier,
)

logger = logging.getLogger(__name__)


@contextmanager
def _faults_as(message: str, action: str) -> Iterator[None]:
    try:
        yield
    except CatalogError:
        raise
    except Exception:
        logger.exception("Error %s", action)
        raise ServiceFault(message) from None


class CatalogService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def list_catalog(self) -> List[CatalogItem]:
        with _faults_as("Failed to fetch images", "fetching images"):
            docs = self.store.fetch_all(DETAILS_COLLECTION)
            if not docs:
                raise NotFoundError("No images found")
            return [CatalogItem.from_document(d) for d in docs]

    def search_catalog(self, query: Optional[str]) -> List[CatalogItem]:
        """Search titles for ``query``.

        ``None`` and the empty string are both treated as a missing
        query. Whitespace is kept as typed; ``" "`` searches for titles
        containing a space.
        """
        if not query:
            raise BadRequestError("Query is required")
        with _faults_as("Failed to fetch search results", "fetching search results"):
            docs = self.store.search_by_title(DETAILS_COLLECTION, query)
            return [CatalogItem.from_document(d) for d in docs]

    def get_catalog_item(self, item_id: str) -> CatalogItem:
        with _faults_as("Failed to fetch image details", "fetching image details"):
            try:
                doc = self.store.fetch_by_id(DETAILS_COLLECTION, item_id)
            except InvalidIdentifier:
                logger.info("Rejected malformed image id %r", item_id)
                doc = None
            if doc is None:
                raise NotFoundError("Image not found")
            return CatalogItem.from_document(doc)

    def list_banners(self) -> List[Banner]:
        with _faults_as("Failed to fetch banners", "fetching banners"):
            docs = self.store.fetch_all(BANNERS_COLLECTION)
            if not docs:
                raise NotFoundError("No banners found")
            return [Banner.from_document(d) for d in docs]

    def store_is_up(self) -> bool:
        return self.store.ping()
