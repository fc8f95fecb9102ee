"""DocumentStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

Document = dict[str, Any]


class UpdateResult(BaseModel):
    """Outcome of a single-document update."""

    matched_count: int = Field(default=0, ge=0, le=1)
    modified_count: int = Field(default=0, ge=0, le=1)


class DocumentStore(ABC):
    """Abstract interface for account document storage.

    Documents are flat mappings keyed by camelCase field names. The
    store assigns ``primaryId`` on insert. Filters are exact-match
    mappings on ``primaryId`` and/or ``externalId``.
    """

    @abstractmethod
    async def find_all(self) -> list[Document]:
        """Return every document in store order."""
        pass

    @abstractmethod
    async def find_one(self, filter: Mapping[str, Any]) -> Document | None:
        """Return the first document matching filter."""
        pass

    @abstractmethod
    async def insert_one(self, document: Mapping[str, Any]) -> UUID:
        """Insert a document and return its generated primary id."""
        pass

    @abstractmethod
    async def update_one(
        self, filter: Mapping[str, Any], patch: Mapping[str, Any]
    ) -> UpdateResult:
        """Shallow-merge patch into the first document matching filter.

        modified_count is 0 when the patch changes nothing, including
        when the patch is empty.
        """
        pass

    async def health_check(self) -> bool:
        """Check that the store is reachable."""
        return True

    async def close(self) -> None:
        """Release backend resources."""
        return None
