"""Tests for the document store."""

from datetime import datetime

import pytest

from fittrack.db import DocumentStore, Filter, init_db
from fittrack.errors import BatchLimitExceededError, NotFoundError, StoreError


@pytest.fixture
async def clocked_store(temp_db_path, clock):
    await init_db(temp_db_path)
    return DocumentStore(temp_db_path, clock=clock)


class TestDocumentStore:
    """Tests for basic document operations."""

    async def test_add_and_get(self, clocked_store, clock):
        """Test documents get server timestamps."""
        doc_id = await clocked_store.add("users/u1/programs", {"name": "P"})
        doc = await clocked_store.get(f"users/u1/programs/{doc_id}")

        assert doc.id == doc_id
        assert doc.data == {"name": "P"}
        assert doc.created_at == clock.now
        assert doc.updated_at == clock.now
        assert doc.parent_path == "users/u1/programs"

    async def test_get_missing(self, store):
        """Test missing documents return None."""
        assert await store.get("users/u1/programs/nope") is None

    async def test_update_merges_and_refreshes_updated_at(self, clocked_store, clock):
        """Test update merges fields and keeps created_at."""
        doc_id = await clocked_store.add("users/u1/programs", {"name": "P", "is_archived": False})
        created = clock.now
        clock.advance(minutes=10)

        await clocked_store.update(f"users/u1/programs/{doc_id}", {"is_archived": True})
        doc = await clocked_store.get(f"users/u1/programs/{doc_id}")

        assert doc.data == {"name": "P", "is_archived": True}
        assert doc.created_at == created
        assert doc.updated_at == created.replace(minute=10)

    async def test_update_missing_raises(self, store):
        """Test updating a missing document fails."""
        with pytest.raises(NotFoundError):
            await store.update("users/u1/programs/nope", {"name": "x"})

    async def test_set_keeps_created_at(self, clocked_store, clock):
        """Test replacing a document does not move created_at."""
        path = "users/u1/programs/p1"
        await clocked_store.set(path, {"name": "A"}, created_at=datetime(2024, 1, 1))
        await clocked_store.set(path, {"name": "B"}, created_at=datetime(2025, 1, 1))

        doc = await clocked_store.get(path)
        assert doc.data == {"name": "B"}
        assert doc.created_at == datetime(2024, 1, 1)

    async def test_timestamps_strictly_increase(self, clocked_store):
        """Test writes in the same instant still get ordered timestamps."""
        first = await clocked_store.add("users/u1/programs", {"name": "A"})
        second = await clocked_store.add("users/u1/programs", {"name": "B"})

        docs = await clocked_store.list_documents("users/u1/programs")
        assert [d.id for d in docs] == [first, second]
        assert docs[0].created_at < docs[1].created_at

    async def test_uninitialized_database_raises_store_error(self, temp_db_path):
        """Test driver errors surface as StoreError."""
        with pytest.raises(StoreError):
            await DocumentStore(temp_db_path).get("users/u1/programs/p1")


class TestQueries:
    """Tests for listing and counting."""

    async def test_list_with_filters_and_order(self, store):
        """Test field filters and ordering."""
        await store.set("users/u1/programs/p1/weeks/a", {"order": 2, "name": "B"})
        await store.set("users/u1/programs/p1/weeks/b", {"order": 1, "name": "A"})
        await store.set("users/u1/programs/p1/weeks/c", {"order": 3, "name": "C"})

        docs = await store.list_documents("users/u1/programs/p1/weeks", order_by="order")
        assert [d.id for d in docs] == ["b", "a", "c"]

        docs = await store.list_documents(
            "users/u1/programs/p1/weeks", filters=[Filter("order", ">=", 2)], order_by="order"
        )
        assert [d.id for d in docs] == ["a", "c"]

    async def test_boolean_filter(self, store):
        """Test booleans match their JSON values."""
        await store.set("users/u1/programs/p1", {"is_archived": False})
        await store.set("users/u1/programs/p2", {"is_archived": True})

        docs = await store.list_documents(
            "users/u1/programs", filters=[Filter("is_archived", "==", False)]
        )
        assert [d.id for d in docs] == ["p1"]

    async def test_descendants_are_scoped(self, store):
        """Test descendant queries do not leak into sibling ids sharing a prefix."""
        await store.set("users/u1/programs/p1/weeks/w1/workouts/o1", {})
        await store.set("users/u1/programs/p1/weeks/w1/workouts/o2", {})
        await store.set("users/u1/programs/p1/weeks/w10/workouts/o3", {})

        assert await store.count_descendants("users/u1/programs/p1/weeks/w1", "workouts") == 2
        docs = await store.list_descendants("users/u1/programs/p1", "workouts")
        assert len(docs) == 3

    async def test_count_missing_scope_is_zero(self, store):
        """Test counting under a missing path returns zero."""
        assert await store.count_descendants("users/u1/programs/nope", "sets") == 0
        assert await store.count("users/u1/programs") == 0

    async def test_invalid_field_name(self, store):
        """Test field names are validated."""
        with pytest.raises(ValueError):
            await store.list_documents("users/u1/programs", filters=[Filter("x') OR 1=1 --", "==", 1)])


class TestWriteBatch:
    """Tests for write batches."""

    async def test_batch_commits_together(self, store):
        """Test a batch applies all operations."""
        batch = store.batch()
        batch.set("users/u1/programs/p1", {"name": "A"}).set("users/u1/programs/p2", {"name": "B"})
        await batch.commit()

        assert await store.count("users/u1/programs") == 2

    async def test_batch_limit(self, temp_db_path):
        """Test a batch refuses operations beyond the store limit."""
        await init_db(temp_db_path)
        small = DocumentStore(temp_db_path, max_batch_operations=2)
        batch = small.batch()
        batch.delete("users/u1/programs/a").delete("users/u1/programs/b")

        with pytest.raises(BatchLimitExceededError):
            batch.delete("users/u1/programs/c")

    async def test_failed_batch_is_atomic(self, store):
        """Test one failing operation discards the whole batch."""
        await store.set("users/u1/programs/p1", {"name": "A"})
        batch = store.batch()
        batch.delete("users/u1/programs/p1")
        batch.update("users/u1/programs/missing", {"name": "x"})

        with pytest.raises(NotFoundError):
            await batch.commit()
        assert await store.get("users/u1/programs/p1") is not None

    async def test_batch_commits_once(self, store):
        """Test a committed batch cannot be reused."""
        batch = store.batch()
        batch.set("users/u1/programs/p1", {})
        await batch.commit()

        with pytest.raises(StoreError):
            await batch.commit()
