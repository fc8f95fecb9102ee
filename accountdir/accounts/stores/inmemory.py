"""In-memory implementation of DocumentStore."""

import asyncio
import copy
from collections.abc import Mapping
from typing import Any
from uuid import UUID, uuid4

from accountdir.accounts.models import PRIMARY_ID
from accountdir.accounts.store import Document, DocumentStore, UpdateResult


class InMemoryDocumentStore(DocumentStore):
    """In-memory implementation of DocumentStore for testing and development.

    Uses an insertion-ordered dict with linear scan for filters.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._documents: dict[UUID, Document] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _matches(document: Document, filter: Mapping[str, Any]) -> bool:
        return all(
            key in document and document[key] == value
            for key, value in filter.items()
        )

    def _first_match(self, filter: Mapping[str, Any]) -> Document | None:
        primary_id = filter.get(PRIMARY_ID)
        if primary_id is not None:
            document = self._documents.get(primary_id)
            if document is not None and self._matches(document, filter):
                return document
            return None

        for document in self._documents.values():
            if self._matches(document, filter):
                return document
        return None

    async def find_all(self) -> list[Document]:
        """Return every document in insertion order."""
        return [copy.deepcopy(doc) for doc in self._documents.values()]

    async def find_one(self, filter: Mapping[str, Any]) -> Document | None:
        """Return the first document matching filter."""
        document = self._first_match(filter)
        return copy.deepcopy(document) if document is not None else None

    async def insert_one(self, document: Mapping[str, Any]) -> UUID:
        """Insert a document under a new UUID."""
        async with self._lock:
            primary_id = uuid4()
            stored = copy.deepcopy(dict(document))
            stored[PRIMARY_ID] = primary_id
            self._documents[primary_id] = stored
            return primary_id

    async def update_one(
        self, filter: Mapping[str, Any], patch: Mapping[str, Any]
    ) -> UpdateResult:
        """Shallow-merge patch into the first matching document."""
        async with self._lock:
            document = self._first_match(filter)
            if document is None:
                return UpdateResult(matched_count=0, modified_count=0)

            changes = {
                key: copy.deepcopy(value)
                for key, value in patch.items()
                if key != PRIMARY_ID
                and (key not in document or document[key] != value)
            }
            document.update(changes)
            return UpdateResult(matched_count=1, modified_count=1 if changes else 0)

    def clear(self) -> None:
        """Remove all documents."""
        self._documents.clear()
