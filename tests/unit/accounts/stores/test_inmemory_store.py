"""Tests for InMemoryDocumentStore."""

from uuid import UUID, uuid4

import pytest

from accountdir.accounts.stores import InMemoryDocumentStore


@pytest.fixture
def document() -> dict[str, str]:
    return {"accountName": "Acme", "accountEmail": "a@acme.com", "phone": "555-0100"}


class TestInsertAndFind:
    """Tests for insert_one, find_one and find_all."""

    @pytest.mark.asyncio
    async def test_insert_assigns_primary_id(self, store, document) -> None:
        primary_id = await store.insert_one(document)

        assert isinstance(primary_id, UUID)
        found = await store.find_one({"primaryId": primary_id})
        assert found == {**document, "primaryId": primary_id}

    @pytest.mark.asyncio
    async def test_insert_ignores_supplied_primary_id(self, store, document) -> None:
        supplied = uuid4()
        primary_id = await store.insert_one({**document, "primaryId": supplied})

        assert primary_id != supplied
        assert await store.find_one({"primaryId": supplied}) is None

    @pytest.mark.asyncio
    async def test_find_by_external_id(self, store, document) -> None:
        await store.insert_one(document)
        primary_id = await store.insert_one({**document, "externalId": "SF-1"})

        found = await store.find_one({"externalId": "SF-1"})

        assert found["primaryId"] == primary_id

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, store) -> None:
        assert await store.find_one({"primaryId": uuid4()}) is None
        assert await store.find_one({"externalId": "nope"}) is None

    @pytest.mark.asyncio
    async def test_find_all_in_insertion_order(self, store, document) -> None:
        ids = [await store.insert_one(document) for _ in range(3)]
        assert [doc["primaryId"] for doc in await store.find_all()] == ids

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, store, document) -> None:
        primary_id = await store.insert_one(document)

        found = await store.find_one({"primaryId": primary_id})
        found["phone"] = "changed"
        document["phone"] = "changed too"

        stored = await store.find_one({"primaryId": primary_id})
        assert stored["phone"] == "555-0100"


class TestUpdateOne:
    """Tests for update_one."""

    @pytest.mark.asyncio
    async def test_shallow_merge(self, store, document) -> None:
        primary_id = await store.insert_one(document)

        result = await store.update_one({"primaryId": primary_id}, {"phone": "1"})

        assert (result.matched_count, result.modified_count) == (1, 1)
        found = await store.find_one({"primaryId": primary_id})
        assert found["phone"] == "1"
        assert found["accountName"] == "Acme"

    @pytest.mark.asyncio
    async def test_no_match(self, store) -> None:
        result = await store.update_one({"externalId": "SF-1"}, {"phone": "1"})
        assert (result.matched_count, result.modified_count) == (0, 0)

    @pytest.mark.asyncio
    async def test_empty_patch_matches_without_modifying(self, store, document) -> None:
        primary_id = await store.insert_one(document)
        result = await store.update_one({"primaryId": primary_id}, {})
        assert (result.matched_count, result.modified_count) == (1, 0)

    @pytest.mark.asyncio
    async def test_unchanged_values_not_counted(self, store, document) -> None:
        primary_id = await store.insert_one(document)
        result = await store.update_one({"primaryId": primary_id}, {"phone": "555-0100"})
        assert (result.matched_count, result.modified_count) == (1, 0)

    @pytest.mark.asyncio
    async def test_only_first_match_updated(self, store, document) -> None:
        first = await store.insert_one({**document, "externalId": "SF-1"})
        second = await store.insert_one({**document, "externalId": "SF-1"})

        await store.update_one({"externalId": "SF-1"}, {"phone": "1"})

        assert (await store.find_one({"primaryId": first}))["phone"] == "1"
        assert (await store.find_one({"primaryId": second}))["phone"] == "555-0100"

    @pytest.mark.asyncio
    async def test_primary_id_never_patched(self, store, document) -> None:
        primary_id = await store.insert_one(document)

        await store.update_one({"primaryId": primary_id}, {"primaryId": uuid4()})

        found = await store.find_one({"primaryId": primary_id})
        assert found["primaryId"] == primary_id

    @pytest.mark.asyncio
    async def test_clear(self, store, document) -> None:
        await store.insert_one(document)
        store.clear()
        assert await store.find_all() == []


@pytest.mark.asyncio
async def test_health_check_always_true() -> None:
    assert await InMemoryDocumentStore().health_check() is True
