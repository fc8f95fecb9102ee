"""Accounts: record model, directory operations and document storage.

Accounts are addressable by two identifier spaces:
- primary id, a UUID assigned by the document store
- external id, supplied by the CRM system (optional)
"""

from accountdir.accounts.directory import AccountDirectory
from accountdir.accounts.models import (
    UPDATABLE_FIELDS,
    AccountRecord,
    build_merge_patch,
    parse_primary_id,
    validate_for_create,
)
from accountdir.accounts.store import DocumentStore, UpdateResult

__all__ = [
    "AccountDirectory",
    "AccountRecord",
    "DocumentStore",
    "UpdateResult",
    "UPDATABLE_FIELDS",
    "build_merge_patch",
    "parse_primary_id",
    "validate_for_create",
]
