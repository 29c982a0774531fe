"""Tests for the buyer service: CRUD, search, and history recording."""

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from buyer_api.core.errors import BuyerNotFoundError
from buyer_api.lib.exporter import parse_filters
from buyer_api.lib.importer import BuyerCandidate, BuyerRecord, validate_record
from buyer_api.models.buyer import Buyer
from buyer_api.models.buyer_history import BuyerHistory
from buyer_api.models.enums import Status
from buyer_api.schemas.history import CreatedDiff, StatusUpdatedDiff, UpdatedDiff, load_diff
from buyer_api.services import buyer_service


async def _history(session: AsyncSession, buyer_id: uuid.UUID) -> list[BuyerHistory]:
    result = await session.execute(
        select(BuyerHistory).where(BuyerHistory.buyer_id == buyer_id).order_by(BuyerHistory.changed_at)
    )
    return list(result.scalars().all())


def _record(buyer_data: dict, **overrides: object) -> BuyerRecord:
    return validate_record(BuyerCandidate.from_mapping({**buyer_data, **overrides}))


class TestCreateBuyer:
    """Tests for create_buyer."""

    @pytest.mark.asyncio
    async def test_creates_buyer_with_created_entry(
        self, async_session: AsyncSession, valid_record: BuyerRecord
    ) -> None:
        buyer = await buyer_service.create_buyer(async_session, valid_record, owner_id="agent-1")

        assert buyer.owner_id == "agent-1"
        assert buyer.status == "New"
        assert buyer.created_at is not None

        history = await _history(async_session, buyer.id)
        assert len(history) == 1
        diff = load_diff(history[0].diff)
        assert isinstance(diff, CreatedDiff)
        assert diff.record["fullName"] == "Asha Verma"
        assert diff.record["tags"] == ["hot", "family"]
        assert history[0].changed_by == "agent-1"


class TestUpdateBuyer:
    """Tests for update_buyer."""

    @pytest.mark.asyncio
    async def test_identical_update_writes_no_history(
        self, async_session: AsyncSession, valid_record: BuyerRecord
    ) -> None:
        buyer = await buyer_service.create_buyer(async_session, valid_record, owner_id="agent-1")

        await buyer_service.update_buyer(async_session, buyer.id, valid_record, changed_by="agent-1")

        assert len(await _history(async_session, buyer.id)) == 1

    @pytest.mark.asyncio
    async def test_changed_fields_recorded(
        self, async_session: AsyncSession, buyer_data: dict, valid_record: BuyerRecord
    ) -> None:
        buyer = await buyer_service.create_buyer(async_session, valid_record, owner_id="agent-1")
        created_at = buyer.updated_at

        updated = await buyer_service.update_buyer(
            async_session,
            buyer.id,
            _record(buyer_data, city="Mohali", tags=["family", "hot"]),
            changed_by="agent-2",
        )

        assert updated.city == "Mohali"
        assert updated.updated_at >= created_at
        history = await _history(async_session, buyer.id)
        assert len(history) == 2
        diff = load_diff(history[1].diff)
        assert isinstance(diff, UpdatedDiff)
        assert set(diff.changes) == {"city", "tags"}
        assert diff.changes["city"].old == "Chandigarh"
        assert diff.changes["city"].new == "Mohali"
        assert history[1].changed_by == "agent-2"

    @pytest.mark.asyncio
    async def test_keep_status(self, async_session: AsyncSession, buyer_data: dict) -> None:
        buyer = await buyer_service.create_buyer(
            async_session, _record(buyer_data, status="Visited"), owner_id="agent-1"
        )

        updated = await buyer_service.update_buyer(
            async_session, buyer.id, _record(buyer_data), changed_by="agent-1", keep_status=True
        )

        assert updated.status == "Visited"
        assert len(await _history(async_session, buyer.id)) == 1

    @pytest.mark.asyncio
    async def test_missing_buyer(self, async_session: AsyncSession, valid_record: BuyerRecord) -> None:
        with pytest.raises(BuyerNotFoundError):
            await buyer_service.update_buyer(async_session, uuid.uuid4(), valid_record, changed_by=None)


class TestUpdateStatus:
    """Tests for update_buyer_status."""

    @pytest.mark.asyncio
    async def test_status_change_recorded(self, async_session: AsyncSession, valid_record: BuyerRecord) -> None:
        buyer = await buyer_service.create_buyer(async_session, valid_record, owner_id="agent-1")

        updated = await buyer_service.update_buyer_status(
            async_session, buyer.id, Status.CONTACTED, changed_by="agent-1"
        )

        assert updated.status == "Contacted"
        history = await _history(async_session, buyer.id)
        diff = load_diff(history[-1].diff)
        assert isinstance(diff, StatusUpdatedDiff)
        assert list(diff.changes) == ["status"]
        assert (diff.changes["status"].old, diff.changes["status"].new) == ("New", "Contacted")

    @pytest.mark.asyncio
    async def test_unchanged_status_suppressed(
        self, async_session: AsyncSession, valid_record: BuyerRecord
    ) -> None:
        buyer = await buyer_service.create_buyer(async_session, valid_record, owner_id="agent-1")

        await buyer_service.update_buyer_status(async_session, buyer.id, Status.NEW, changed_by="agent-1")

        assert len(await _history(async_session, buyer.id)) == 1


class TestGetAndDelete:
    """Tests for get_buyer_with_history and delete_buyer."""

    @pytest.mark.asyncio
    async def test_history_newest_first_and_limited(
        self, async_session: AsyncSession, valid_record: BuyerRecord
    ) -> None:
        buyer = await buyer_service.create_buyer(async_session, valid_record, owner_id="agent-1")
        for status in [Status.QUALIFIED, Status.NEW] * 6:
            await buyer_service.update_buyer_status(async_session, buyer.id, status, changed_by="agent-1")

        found, history = await buyer_service.get_buyer_with_history(async_session, buyer.id)

        assert found.id == buyer.id
        assert len(history) == 10
        timestamps = [entry.changed_at for entry in history]
        assert timestamps == sorted(timestamps, reverse=True)
        assert history[0].diff["changes"]["status"]["new"] == "New"

    @pytest.mark.asyncio
    async def test_get_missing(self, async_session: AsyncSession) -> None:
        with pytest.raises(BuyerNotFoundError):
            await buyer_service.get_buyer_with_history(async_session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_delete_cascades_history(self, async_session: AsyncSession, valid_record: BuyerRecord) -> None:
        buyer = await buyer_service.create_buyer(async_session, valid_record, owner_id="agent-1")
        await buyer_service.update_buyer_status(async_session, buyer.id, Status.DROPPED, changed_by="agent-1")

        await buyer_service.delete_buyer(async_session, buyer.id)

        assert await buyer_service.get_buyer(async_session, buyer.id) is None
        count = (await async_session.execute(select(func.count()).select_from(BuyerHistory))).scalar_one()
        assert count == 0

    @pytest.mark.asyncio
    async def test_delete_missing(self, async_session: AsyncSession) -> None:
        with pytest.raises(BuyerNotFoundError):
            await buyer_service.delete_buyer(async_session, uuid.uuid4())


class TestListBuyers:
    """Tests for list_buyers search, filters, and ordering."""

    @pytest.fixture
    async def seeded(self, async_session: AsyncSession, buyer_data: dict) -> list[Buyer]:
        buyers = []
        for overrides in (
            {"fullName": "Asha Verma", "city": "Chandigarh", "notes": "wants 100% financing"},
            {"fullName": "Ravi Kumar", "city": "Mohali", "propertyType": "Plot", "bhk": None, "email": None},
            {"fullName": "Meera Shah", "city": "Mohali", "timeline": "EXPLORING", "notes": "ASHA's referral"},
        ):
            record = _record(buyer_data, **overrides)
            buyers.append(await buyer_service.create_buyer(async_session, record, owner_id="agent-1"))
        return buyers

    @pytest.mark.asyncio
    async def test_most_recently_updated_first(self, async_session: AsyncSession, seeded: list[Buyer]) -> None:
        items, total = await buyer_service.list_buyers(async_session, parse_filters())
        assert total == 3
        assert [b.full_name for b in items] == ["Meera Shah", "Ravi Kumar", "Asha Verma"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_or(self, async_session: AsyncSession, seeded: list[Buyer]) -> None:
        items, total = await buyer_service.list_buyers(async_session, parse_filters(search="asha"))
        assert total == 2
        assert {b.full_name for b in items} == {"Asha Verma", "Meera Shah"}

    @pytest.mark.asyncio
    async def test_search_combined_with_filters(self, async_session: AsyncSession, seeded: list[Buyer]) -> None:
        items, total = await buyer_service.list_buyers(async_session, parse_filters(search="asha", city="Mohali"))
        assert total == 1
        assert items[0].full_name == "Meera Shah"

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self, async_session: AsyncSession, seeded: list[Buyer]) -> None:
        items, total = await buyer_service.list_buyers(async_session, parse_filters(search="100%"))
        assert total == 1
        assert items[0].full_name == "Asha Verma"
        _, total = await buyer_service.list_buyers(async_session, parse_filters(search="_"))
        assert total == 0

    @pytest.mark.asyncio
    async def test_exact_filters(self, async_session: AsyncSession, seeded: list[Buyer]) -> None:
        _, total = await buyer_service.list_buyers(async_session, parse_filters(property_type="Plot"))
        assert total == 1
        _, total = await buyer_service.list_buyers(async_session, parse_filters(timeline="EXPLORING"))
        assert total == 1
        _, total = await buyer_service.list_buyers(async_session, parse_filters(status="Converted"))
        assert total == 0

    @pytest.mark.asyncio
    async def test_pagination(self, async_session: AsyncSession, seeded: list[Buyer]) -> None:
        items, total = await buyer_service.list_buyers(async_session, parse_filters(), page=2, page_size=2)
        assert total == 3
        assert [b.full_name for b in items] == ["Asha Verma"]
        assert buyer_service.total_pages(total, 2) == 2
        assert buyer_service.total_pages(0, 10) == 0
