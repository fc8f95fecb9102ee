"""Account endpoints.

Paths and parameter names match the legacy Express service so existing CRM
callers (Salesforce outbound calls) keep working.
"""

from typing import Any

from fastapi import APIRouter, Body, Query

from accountdir.api.dependencies import AccountDirectoryDep
from accountdir.api.models.accounts import InsertedIdResponse, ModifiedCountResponse

router = APIRouter()


def _query_payload(**fields: str | None) -> dict[str, Any]:
    """Drop query parameters that were not supplied."""
    return {name: value for name, value in fields.items() if value is not None}


@router.get("/accounts")
async def list_accounts(directory: AccountDirectoryDep) -> list[dict[str, Any]]:
    """List every account as stored."""
    records = await directory.list_all()
    return [record.to_document() for record in records]


@router.get("/accounts/{account_id}")
async def get_account(
    account_id: str, directory: AccountDirectoryDep
) -> dict[str, Any] | None:
    """Get one account by primary id.

    Returns null when the id is well-formed but unknown.
    """
    record = await directory.get_by_primary_id(account_id)
    return record.to_document() if record else None


@router.post("/accounts", response_model=InsertedIdResponse)
async def create_account(
    directory: AccountDirectoryDep,
    payload: dict[str, Any] = Body(...),
) -> InsertedIdResponse:
    """Create an account from a JSON body.

    The body may carry externalId (or sfAccountId).
    """
    inserted_id = await directory.create_account(payload)
    return InsertedIdResponse(inserted_id=inserted_id)


@router.get("/insertAccount", response_model=InsertedIdResponse)
async def insert_account(
    directory: AccountDirectoryDep,
    account_name: str | None = Query(default=None, alias="accountName"),
    account_email: str | None = Query(default=None, alias="accountEmail"),
    phone: str | None = Query(default=None),
    sf_account_id: str | None = Query(default=None, alias="sfAccountId"),
) -> InsertedIdResponse:
    """Create an account from query parameters.

    The external id is attached with a second write after the insert.
    """
    payload = _query_payload(accountName=account_name, accountEmail=account_email, phone=phone)
    inserted_id = await directory.create_account_idempotent_by_query(
        payload, external_id=sf_account_id
    )
    return InsertedIdResponse(inserted_id=inserted_id)


@router.put("/accounts/{account_id}", response_model=ModifiedCountResponse)
async def update_account(
    account_id: str,
    directory: AccountDirectoryDep,
    payload: dict[str, Any] = Body(...),
) -> ModifiedCountResponse:
    """Merge the JSON body into the account with this primary id."""
    modified = await directory.update_by_primary_id(account_id, payload)
    return ModifiedCountResponse(modified_count=modified)


@router.put("/updateAccount", response_model=ModifiedCountResponse)
async def update_account_by_external_id(
    directory: AccountDirectoryDep,
    sf_id: str | None = Query(default=None, alias="sfId"),
    account_name: str | None = Query(default=None, alias="accountName"),
    account_email: str | None = Query(default=None, alias="accountEmail"),
    phone: str | None = Query(default=None),
) -> ModifiedCountResponse:
    """Update name, email or phone of the account with this CRM id."""
    payload = _query_payload(accountName=account_name, accountEmail=account_email, phone=phone)
    modified = await directory.update_by_external_id(sf_id, payload)
    return ModifiedCountResponse(modified_count=modified)
