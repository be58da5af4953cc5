"""
Document store access for the catalogue API.

``DocumentStore`` wraps a MongoDB database handle and exposes the
three read primitives the catalogue needs: fetch every document of a
collection, fetch one document by identifier, and search a collection
by title. The store is built once per process (see
``DocumentStore.from_url``) and handed to the service layer; nothing
here keeps module level state.

Driver failures are translated into the small ``StoreError`` family
so callers never have to know about ``pymongo.errors``.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    ExecutionTimeout,
    NetworkTimeout,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)

logger = logging.getLogger(__name__)

DETAILS_COLLECTION = "details"
BANNERS_COLLECTION = "banners"

Document = Dict[str, Any]


class StoreError(Exception):
    """Base class for document store failures."""


class StoreUnavailable(StoreError):
    """The store could not be reached or did not answer in time."""


class MalformedQuery(StoreError):
    """The store rejected the query."""


class InvalidIdentifier(StoreError):
    """The identifier is not a syntactically valid ObjectId."""


_UNAVAILABLE_ERRORS = (
    ConnectionFailure,
    ServerSelectionTimeoutError,
    AutoReconnect,
    NetworkTimeout,
    ExecutionTimeout,
)


def _translate(exc: PyMongoError, action: str) -> StoreError:
    if isinstance(exc, _UNAVAILABLE_ERRORS):
        return StoreUnavailable(f"{action}: {exc}")
    if isinstance(exc, OperationFailure):
        return MalformedQuery(f"{action}: {exc}")
    return StoreError(f"{action}: {exc}")


def title_pattern(text: str) -> str:
    r"""Build a regular expression matching ``text`` as a literal substring.

    Every metacharacter is escaped, so ``"a.b"`` only matches titles
    that contain a dot between ``a`` and ``b``. ``re.escape`` only
    puts a backslash before non-alphanumeric characters (``\.``,
    ``\ ``, ``\#``, ``\-``, ...), and PCRE reads a backslash followed by
    any non-alphanumeric character as that character, so the server
    matches the same literal text Python's ``re`` does.
    """
    return re.escape(text)


class DocumentStore:
    """Read-only access to the catalogue collections of one database."""

    def __init__(self, database: Database, client: Optional[MongoClient] = None):
        self._db = database
        self._client = client

    @classmethod
    def from_url(cls, url: str, default_database: str, timeout_ms: int = 5000) -> "DocumentStore":
        """Create a client for ``url`` and bind to the database it names.

        When the URL carries no database path, ``default_database`` is
        used instead. The client connects lazily; no I/O happens here.
        """
        client: MongoClient = MongoClient(url, serverSelectionTimeoutMS=timeout_ms)
        database = client.get_default_database(default=default_database)
        return cls(database, client=client)

    @property
    def database_name(self) -> str:
        return self._db.name

    def fetch_all(self, collection: str) -> List[Document]:
        """Return all documents of ``collection`` in natural order."""
        try:
            return list(self._db[collection].find())
        except PyMongoError as exc:
            raise _translate(exc, f"find on {collection}") from exc

    def fetch_by_id(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return the document whose ``_id`` is ``doc_id`` or ``None``.

        Raises ``InvalidIdentifier`` when ``doc_id`` is not a valid
        ObjectId, before any query is sent.
        """
        if not ObjectId.is_valid(doc_id):
            raise InvalidIdentifier(f"not an ObjectId: {doc_id!r}")
        try:
            return self._db[collection].find_one({"_id": ObjectId(doc_id)})
        except PyMongoError as exc:
            raise _translate(exc, f"find_one on {collection}") from exc

    def search_by_title(self, collection: str, text: str) -> List[Document]:
        """Return documents whose title contains ``text``, sorted by title.

        Matching is case-insensitive and literal. Ties keep the
        collection's natural order.
        """
        query = {"title": {"$regex": title_pattern(text), "$options": "i"}}
        try:
            cursor = self._db[collection].find(query).sort("title", ASCENDING)
            return list(cursor)
        except PyMongoError as exc:
            raise _translate(exc, f"title search on {collection}") from exc

    def ping(self) -> bool:
        """Return True when the server answers a ``ping`` command."""
        try:
            self._db.command("ping")
        except PyMongoError as exc:
            logger.warning("Document store ping failed: %s", exc)
            return False
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
