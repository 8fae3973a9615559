"""
Unit tests for BatchExecutor.

Tests cover:
- Update path writes equipment then inventory; create path uses the paired insert
- One failure in a chunk is recorded and the rest of the chunk succeeds
- Counts reflect confirmed successes only
- Chunks run one after another; concurrency inside a chunk is bounded
- Archive runs last as one bulk call; its failure is recorded, not raised
- Cancellation is not swallowed

Version: 1.0.0
"""
import asyncio
from datetime import datetime, timezone

import pytest

from inventory_sync.core.exceptions import PersistenceError
from inventory_sync.schemas.sync import EquipmentCreate, EquipmentUpdate
from inventory_sync.services.batch_executor import BatchExecutor


SYNCED_AT = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _update(n):
    return EquipmentUpdate(equipment_id=f"e{n}", external_id=n, sku=f"S{n}", name=f"Item {n}", quantity=n)


def _create(n):
    return EquipmentCreate(external_id=n, sku=f"S{n}", name=f"Item {n}", quantity=n)


@pytest.mark.unit
class TestApplyPaths:

    @pytest.mark.asyncio
    async def test_update_writes_equipment_then_inventory(self, mock_equipment_store):
        executor = BatchExecutor(mock_equipment_store)
        op = _update(1)

        outcome = await executor.apply([], [op], [], synced_at=SYNCED_AT)

        mock_equipment_store.update_equipment.assert_awaited_once_with(op, SYNCED_AT)
        mock_equipment_store.upsert_inventory.assert_awaited_once_with("e1", 1)
        assert outcome.updated == 1
        assert outcome.errors == []

    @pytest.mark.asyncio
    async def test_create_uses_paired_insert(self, mock_equipment_store):
        executor = BatchExecutor(mock_equipment_store)
        op = _create(2)

        outcome = await executor.apply([op], [], [], synced_at=SYNCED_AT)

        mock_equipment_store.create_equipment_with_inventory.assert_awaited_once_with(op, SYNCED_AT)
        assert outcome.created == 1

    @pytest.mark.asyncio
    async def test_failed_equipment_update_skips_inventory(self, mock_equipment_store):
        mock_equipment_store.update_equipment.side_effect = PersistenceError("update", "boom")
        outcome = await BatchExecutor(mock_equipment_store).apply([], [_update(1)], [])
        mock_equipment_store.upsert_inventory.assert_not_awaited()
        assert outcome.updated == 0

    @pytest.mark.asyncio
    async def test_empty_plan(self, mock_equipment_store):
        outcome = await BatchExecutor(mock_equipment_store).apply([], [], [])
        assert (outcome.created, outcome.updated, outcome.archived, outcome.errors) == (0, 0, 0, [])
        mock_equipment_store.archive_equipment.assert_not_awaited()


@pytest.mark.unit
class TestFailureIsolation:

    @pytest.mark.asyncio
    async def test_one_failure_in_hundred_updates(self, mock_equipment_store):
        async def update(op, synced_at):
            if op.external_id == 42:
                raise PersistenceError("Supabase update on equipment", "constraint violated")

        mock_equipment_store.update_equipment.side_effect = update
        updates = [_update(n) for n in range(1, 101)]

        outcome = await BatchExecutor(mock_equipment_store, chunk_size=100).apply([], updates, [])

        assert outcome.updated == 99
        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("Failed to update equipment e42 (sku S42, external id 42):")

    @pytest.mark.asyncio
    async def test_create_failure_counted_once(self, mock_equipment_store):
        async def create(op, synced_at):
            if op.external_id in (3, 7):
                raise RuntimeError("insert rejected")
            return f"id-{op.external_id}"

        mock_equipment_store.create_equipment_with_inventory.side_effect = create
        creates = [_create(n) for n in range(1, 11)]

        outcome = await BatchExecutor(mock_equipment_store, chunk_size=4).apply(creates, [], [])

        assert outcome.created == 8
        assert outcome.created + len(outcome.errors) == len(creates)
        assert "Failed to create equipment sku S3 (external id 3): insert rejected" in outcome.errors

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, mock_equipment_store):
        mock_equipment_store.update_equipment.side_effect = asyncio.CancelledError()
        with pytest.raises(asyncio.CancelledError):
            await BatchExecutor(mock_equipment_store).apply([], [_update(1)], [])


@pytest.mark.unit
class TestChunking:

    @pytest.mark.asyncio
    async def test_chunks_run_sequentially(self, mock_equipment_store):
        events = []

        async def update(op, synced_at):
            events.append(("start", op.external_id))
            await asyncio.sleep(0)
            events.append(("end", op.external_id))

        mock_equipment_store.update_equipment.side_effect = update
        updates = [_update(n) for n in range(1, 7)]

        await BatchExecutor(mock_equipment_store, chunk_size=3).apply([], updates, [])

        last_end_first_chunk = max(i for i, e in enumerate(events) if e[0] == "end" and e[1] <= 3)
        first_start_second_chunk = min(i for i, e in enumerate(events) if e[0] == "start" and e[1] > 3)
        assert last_end_first_chunk < first_start_second_chunk

    @pytest.mark.asyncio
    async def test_concurrency_bounded_by_workers(self, mock_equipment_store):
        state = {"active": 0, "peak": 0}

        async def update(op, synced_at):
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
            await asyncio.sleep(0.01)
            state["active"] -= 1

        mock_equipment_store.update_equipment.side_effect = update
        updates = [_update(n) for n in range(1, 21)]

        outcome = await BatchExecutor(mock_equipment_store, chunk_size=20, max_workers=4).apply([], updates, [])

        assert outcome.updated == 20
        assert 1 < state["peak"] <= 4

    @pytest.mark.asyncio
    async def test_updates_before_creates_before_archive(self, mock_equipment_store):
        order = []
        mock_equipment_store.update_equipment.side_effect = lambda *a: order.append("update")
        mock_equipment_store.create_equipment_with_inventory.side_effect = lambda *a: order.append("create")
        mock_equipment_store.archive_equipment.side_effect = lambda ids, synced_at=None: order.append("archive") or len(ids)

        await BatchExecutor(mock_equipment_store).apply([_create(2)], [_update(1)], ["e9"])

        assert order == ["update", "create", "archive"]

    def test_from_settings(self, mock_equipment_store, mock_settings):
        mock_settings.sync_chunk_size = 25
        mock_settings.sync_max_workers = 3
        executor = BatchExecutor.from_settings(mock_equipment_store, mock_settings)
        assert executor._chunk_size == 25
        assert executor._max_workers == 3


@pytest.mark.unit
class TestArchive:

    @pytest.mark.asyncio
    async def test_archive_count(self, mock_equipment_store):
        outcome = await BatchExecutor(mock_equipment_store).apply([], [], ["e1", "e2"], synced_at=SYNCED_AT)
        mock_equipment_store.archive_equipment.assert_awaited_once_with(["e1", "e2"], SYNCED_AT)
        assert outcome.archived == 2

    @pytest.mark.asyncio
    async def test_archive_failure_recorded(self, mock_equipment_store):
        mock_equipment_store.archive_equipment.side_effect = PersistenceError("Supabase update on equipment", "timeout")

        outcome = await BatchExecutor(mock_equipment_store).apply([_create(1)], [], ["e1", "e2"])

        assert outcome.created == 1
        assert outcome.archived == 0
        assert outcome.errors == ["Failed to archive 2 equipment rows: Supabase update on equipment failed: timeout"]
