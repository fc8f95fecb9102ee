"""PostgreSQL implementation of DocumentStore.

Each account is one row holding the document as JSONB. Uses asyncpg
for async database access.
"""

import json
import re
from collections.abc import Mapping
from typing import Any
from uuid import UUID, uuid4

import asyncpg

from accountdir.accounts.models import EXTERNAL_ID, PRIMARY_ID
from accountdir.accounts.store import Document, DocumentStore, UpdateResult
from accountdir.db.pool import PostgresPool
from accountdir.errors import StoreUnavailableError
from accountdir.observability.logging import get_logger

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


class PostgresDocumentStore(DocumentStore):
    """PostgreSQL implementation of DocumentStore.

    Rows are ordered by an insertion sequence so that find_all and
    first-match updates are stable.
    """

    def __init__(self, pool: PostgresPool, table_name: str = "accounts") -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
            table_name: Table holding account documents
        """
        if not _IDENTIFIER.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self._pool = pool
        self._table = table_name

    async def ensure_schema(self) -> None:
        """Create the accounts table and external id index if missing."""
        async with self._pool.acquire() as conn:
            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    primary_id UUID PRIMARY KEY,
                    document JSONB NOT NULL,
                    created_seq BIGSERIAL
                )
                """
            )
            await conn.execute(
                f"""
                CREATE INDEX IF NOT EXISTS {self._table}_external_id_idx
                ON {self._table} ((document->>'{EXTERNAL_ID}'))
                """
            )
        logger.info("document_store_schema_ready", table=self._table)

    def _where(self, filter: Mapping[str, Any], params: list[Any]) -> str:
        """Translate an exact-match filter into a WHERE clause."""
        clauses = []
        fields = dict(filter)
        primary_id = fields.pop(PRIMARY_ID, None)
        if primary_id is not None:
            params.append(primary_id)
            clauses.append(f"primary_id = ${len(params)}")
        if fields:
            params.append(json.dumps(fields, default=str))
            clauses.append(f"document @> ${len(params)}::jsonb")
        return " AND ".join(clauses) or "TRUE"

    @staticmethod
    def _row_to_document(row: asyncpg.Record) -> Document:
        document = json.loads(row["document"])
        document[PRIMARY_ID] = row["primary_id"]
        return document

    async def find_all(self) -> list[Document]:
        """Return every document in insertion order."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT primary_id, document FROM {self._table} ORDER BY created_seq"
                )
                return [self._row_to_document(row) for row in rows]
        except StoreUnavailableError:
            logger.error("postgres_find_all_error", table=self._table)
            raise

    async def find_one(self, filter: Mapping[str, Any]) -> Document | None:
        """Return the first document matching filter."""
        params: list[Any] = []
        where = self._where(filter, params)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT primary_id, document FROM {self._table}
                    WHERE {where}
                    ORDER BY created_seq
                    LIMIT 1
                    """,
                    *params,
                )
                return self._row_to_document(row) if row else None
        except StoreUnavailableError:
            logger.error("postgres_find_one_error", table=self._table)
            raise

    async def insert_one(self, document: Mapping[str, Any]) -> UUID:
        """Insert a document under a new UUID."""
        primary_id = uuid4()
        body = {key: value for key, value in document.items() if key != PRIMARY_ID}
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"INSERT INTO {self._table} (primary_id, document) VALUES ($1, $2::jsonb)",
                    primary_id,
                    json.dumps(body, default=str),
                )
        except StoreUnavailableError:
            logger.error("postgres_insert_error", table=self._table)
            raise
        logger.debug("document_inserted", primary_id=str(primary_id))
        return primary_id

    async def update_one(
        self, filter: Mapping[str, Any], patch: Mapping[str, Any]
    ) -> UpdateResult:
        """Shallow-merge patch into the first matching document.

        A row whose document already contains the patch counts as
        matched but not modified.
        """
        params: list[Any] = []
        where = self._where(filter, params)
        body = {key: value for key, value in patch.items() if key != PRIMARY_ID}
        params.append(json.dumps(body, default=str))
        patch_param = f"${len(params)}::jsonb"
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    WITH target AS (
                        SELECT primary_id, document FROM {self._table}
                        WHERE {where}
                        ORDER BY created_seq
                        LIMIT 1
                        FOR UPDATE
                    ), updated AS (
                        UPDATE {self._table} AS t
                        SET document = t.document || {patch_param}
                        FROM target
                        WHERE t.primary_id = target.primary_id
                          AND NOT (target.document @> {patch_param})
                        RETURNING t.primary_id
                    )
                    SELECT
                        (SELECT count(*) FROM target) AS matched,
                        (SELECT count(*) FROM updated) AS modified
                    """,
                    *params,
                )
        except StoreUnavailableError:
            logger.error("postgres_update_error", table=self._table)
            raise
        return UpdateResult(matched_count=row["matched"], modified_count=row["modified"])

    async def health_check(self) -> bool:
        """Check the underlying pool."""
        return await self._pool.health_check()

    async def close(self) -> None:
        """Close the underlying pool."""
        await self._pool.close()
