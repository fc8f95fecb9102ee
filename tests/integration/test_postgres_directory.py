"""Integration tests for AccountDirectory over PostgreSQL.

Skipped unless TEST_DATABASE_URL points at a reachable database.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

import pytest

from accountdir.accounts.directory import AccountDirectory
from accountdir.accounts.stores.postgres import PostgresDocumentStore
from accountdir.db.pool import PostgresPool
from accountdir.errors import NotFoundError

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not TEST_DATABASE_URL, reason="TEST_DATABASE_URL not set"),
]


@asynccontextmanager
async def postgres_directory() -> AsyncIterator[AccountDirectory]:
    """Directory over a throwaway table, dropped afterwards."""
    pool = PostgresPool(dsn=TEST_DATABASE_URL, min_size=1, max_size=2)
    table = f"accounts_test_{uuid4().hex[:8]}"
    store = PostgresDocumentStore(pool, table_name=table)
    await store.ensure_schema()
    try:
        yield AccountDirectory(store)
    finally:
        async with pool.acquire() as conn:
            await conn.execute(f"DROP TABLE IF EXISTS {table}")
        await pool.close()


class TestPostgresDirectory:
    """End-to-end directory behaviour against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_acme_scenario(self, acme_payload) -> None:
        async with postgres_directory() as directory:
            primary_id = await directory.create_account(acme_payload)

            record = await directory.get_by_primary_id(str(primary_id))
            assert record.external_id == "SF-1"

            assert await directory.update_by_external_id("SF-1", {"phone": "555-0199"}) == 1

            record = await directory.get_by_primary_id(primary_id)
            assert record.phone == "555-0199"
            assert record.account_name == "Acme"

    @pytest.mark.asyncio
    async def test_match_counts(self, acme_payload) -> None:
        async with postgres_directory() as directory:
            primary_id = await directory.create_account(acme_payload)

            assert await directory.update_by_external_id("SF-1", {}) == 0
            assert await directory.update_by_primary_id(primary_id, {"phone": "555-0100"}) == 0
            assert await directory.update_by_primary_id(uuid4(), {"phone": "1"}) == 0
            with pytest.raises(NotFoundError):
                await directory.update_by_external_id("SF-404", {"phone": "1"})

    @pytest.mark.asyncio
    async def test_two_step_create_and_order(self) -> None:
        async with postgres_directory() as directory:
            first = await directory.create_account_idempotent_by_query(
                {"accountName": "A", "accountEmail": "e", "phone": "p"}, external_id="SF-9"
            )
            second = await directory.create_account(
                {"accountName": "B", "accountEmail": "e", "phone": "p"}
            )

            records = await directory.list_all()
            assert [r.primary_id for r in records] == [first, second]
            assert records[0].external_id == "SF-9"
