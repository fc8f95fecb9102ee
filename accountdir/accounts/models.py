"""Account domain models.

Defines the AccountRecord entity, creation validation and the merge
policy used for partial updates.
"""

from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from accountdir.errors import MalformedIdentifierError, ValidationError

PRIMARY_ID = "primaryId"
EXTERNAL_ID = "externalId"

# Wire name used by the Salesforce integration for the external id
LEGACY_EXTERNAL_ID = "sfAccountId"

REQUIRED_FIELDS: tuple[str, ...] = ("accountName", "accountEmail", "phone")
UPDATABLE_FIELDS: tuple[str, ...] = REQUIRED_FIELDS


class AccountRecord(BaseModel):
    """A persisted account.

    Field names are snake_case in Python and camelCase in the stored
    document. Values are returned as stored, whatever their type, and
    unknown keys are kept as extra attributes.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    primary_id: UUID = Field(..., alias=PRIMARY_ID, description="Store-assigned id")
    account_name: Any = Field(default=None, alias="accountName")
    account_email: Any = Field(default=None, alias="accountEmail")
    phone: Any = Field(default=None)
    external_id: Any = Field(
        default=None, alias=EXTERNAL_ID, description="CRM identifier"
    )

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "AccountRecord":
        """Build a record from a stored document."""
        return cls.model_validate(dict(document))

    def to_document(self) -> dict[str, Any]:
        """Return the camelCase document, omitting an unset external id."""
        document = self.model_dump(by_alias=True, mode="json")
        if document.get(EXTERNAL_ID) is None:
            document.pop(EXTERNAL_ID, None)
        return document


def _present(value: Any) -> bool:
    return bool(value)


def extract_external_id(payload: Mapping[str, Any]) -> str | None:
    """Return the external id from a payload, accepting the legacy alias."""
    value = payload.get(EXTERNAL_ID) or payload.get(LEGACY_EXTERNAL_ID)
    return value if _present(value) else None


def validate_for_create(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a creation payload and return the document to insert.

    Args:
        payload: Parsed request body

    Returns:
        Document with the required fields, plus externalId only when one
        was supplied

    Raises:
        ValidationError: If any required field is missing or empty
    """
    missing = [name for name in REQUIRED_FIELDS if not _present(payload.get(name))]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}", fields=missing
        )

    document = {name: payload[name] for name in REQUIRED_FIELDS}
    external_id = extract_external_id(payload)
    if external_id:
        document[EXTERNAL_ID] = external_id
    return document


def build_merge_patch(
    payload: Mapping[str, Any], allowed_fields: Iterable[str]
) -> dict[str, Any]:
    """Return the allowed keys of payload whose values are present.

    Falsy values are dropped rather than written as empty.
    """
    return {
        name: payload[name]
        for name in allowed_fields
        if name in payload and _present(payload[name])
    }


def parse_primary_id(token: Any) -> UUID:
    """Parse a primary id token.

    Raises:
        MalformedIdentifierError: If token is not a UUID
    """
    if isinstance(token, UUID):
        return token
    try:
        return UUID(str(token))
    except (TypeError, ValueError) as e:
        raise MalformedIdentifierError(
            f"Invalid account id: {token!r}", token=str(token)
        ) from e
