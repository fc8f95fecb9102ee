"""AccountDirectory: addressable operations over account records.

Mediates between callers and the DocumentStore. Every operation is one
independent unit of work; the directory keeps no state of its own apart
from the injected store handle.
"""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from accountdir.accounts.models import (
    EXTERNAL_ID,
    PRIMARY_ID,
    REQUIRED_FIELDS,
    UPDATABLE_FIELDS,
    AccountRecord,
    build_merge_patch,
    extract_external_id,
    parse_primary_id,
    validate_for_create,
)
from accountdir.accounts.store import DocumentStore
from accountdir.errors import MissingIdentifierError, NotFoundError, ValidationError
from accountdir.observability.logging import get_logger

logger = get_logger(__name__)


class AccountDirectory:
    """Create, read and update accounts by primary or external id.

    Args:
        store: Long-lived document store handle
        strict_updates: Reject update-by-id payload keys outside the
            account schema instead of merging them verbatim
    """

    def __init__(self, store: DocumentStore, *, strict_updates: bool = False) -> None:
        self._store = store
        self._strict_updates = strict_updates

    async def list_all(self) -> list[AccountRecord]:
        """Return every account in store order."""
        documents = await self._store.find_all()
        logger.debug("accounts_listed", count=len(documents))
        return [AccountRecord.from_document(doc) for doc in documents]

    async def get_by_primary_id(self, primary_id: str | UUID) -> AccountRecord | None:
        """Look up one account.

        Returns:
            The account, or None when the id is well-formed but unknown

        Raises:
            MalformedIdentifierError: If primary_id is not a valid id
        """
        key = parse_primary_id(primary_id)
        document = await self._store.find_one({PRIMARY_ID: key})
        if document is None:
            logger.debug("account_not_found", primary_id=str(key))
            return None
        return AccountRecord.from_document(document)

    async def create_account(self, payload: Mapping[str, Any]) -> UUID:
        """Validate and insert a new account.

        Not idempotent: identical payloads produce distinct records.

        Raises:
            ValidationError: If a required field is missing
        """
        document = validate_for_create(payload)
        primary_id = await self._store.insert_one(document)
        logger.info(
            "account_created",
            primary_id=str(primary_id),
            has_external_id=EXTERNAL_ID in document,
        )
        return primary_id

    async def create_account_idempotent_by_query(
        self, payload: Mapping[str, Any], external_id: str | None = None
    ) -> UUID:
        """Insert an account, then attach its external id in a second write.

        The two writes are not atomic. If the second one fails the record
        stays without an external id and the store error propagates.

        Args:
            payload: Required account fields
            external_id: External id supplied outside the payload; falls
                back to one carried in the payload

        Raises:
            ValidationError: If a required field is missing
        """
        document = validate_for_create(payload)
        document.pop(EXTERNAL_ID, None)
        external_id = external_id or extract_external_id(payload)

        primary_id = await self._store.insert_one(document)
        logger.info("account_created", primary_id=str(primary_id), via="query")

        if external_id:
            try:
                await self._store.update_one(
                    {PRIMARY_ID: primary_id}, {EXTERNAL_ID: external_id}
                )
            except Exception:
                logger.error(
                    "account_external_id_attach_failed",
                    primary_id=str(primary_id),
                    external_id=external_id,
                )
                raise
            logger.debug("account_external_id_attached", primary_id=str(primary_id))

        return primary_id

    async def update_by_primary_id(
        self, primary_id: str | UUID, payload: Mapping[str, Any]
    ) -> int:
        """Shallow-merge payload into the account with primary_id.

        A well-formed id that matches nothing yields 0, not an error.

        Returns:
            Number of records modified (0 or 1)

        Raises:
            MalformedIdentifierError: If primary_id is not a valid id
            ValidationError: In strict mode, if payload has unknown keys
        """
        key = parse_primary_id(primary_id)
        patch = {name: value for name, value in payload.items() if name != PRIMARY_ID}

        if self._strict_updates:
            allowed = set(REQUIRED_FIELDS) | {EXTERNAL_ID}
            unknown = sorted(name for name in patch if name not in allowed)
            if unknown:
                raise ValidationError(
                    f"Unknown account fields: {', '.join(unknown)}", fields=unknown
                )

        result = await self._store.update_one({PRIMARY_ID: key}, patch)
        logger.info(
            "account_updated",
            primary_id=str(key),
            matched=result.matched_count,
            modified=result.modified_count,
        )
        return result.modified_count

    async def update_by_external_id(
        self, external_id: str | None, payload: Mapping[str, Any]
    ) -> int:
        """Update name, email and phone of the account with external_id.

        Only accountName, accountEmail and phone are mergeable; empty
        values are ignored. A match with nothing to change returns 0.

        Returns:
            Number of records modified (0 or 1)

        Raises:
            MissingIdentifierError: If external_id is absent or empty
            NotFoundError: If no account has external_id
        """
        if not external_id:
            raise MissingIdentifierError("Missing external account id")

        patch = build_merge_patch(payload, UPDATABLE_FIELDS)
        result = await self._store.update_one({EXTERNAL_ID: external_id}, patch)

        if result.matched_count == 0:
            logger.info("account_update_by_external_id_no_match", external_id=external_id)
            raise NotFoundError(f"No account found with external id {external_id}")

        logger.info(
            "account_updated",
            external_id=external_id,
            fields=sorted(patch),
            modified=result.modified_count,
        )
        return result.modified_count
