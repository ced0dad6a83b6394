import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from evermore.context import PlannerContext
from evermore.models import Wedding
from evermore.view_session import STALE, ViewSession

pytestmark = pytest.mark.asyncio

CTX = PlannerContext(user_id="u1", wedding=Wedding(id="w1", user_id="u1"))

STORE = {
    "tasks": [
        {"id": "t1", "wedding_id": "w1", "title": "Book venue", "completed": False},
        {"id": "t2", "wedding_id": "w1", "title": "Send invites", "completed": True},
    ],
    "milestones": [],
    "guests": [
        {"id": "g1", "wedding_id": "w1", "name": "Ana", "rsvp_status": "invited"},
    ],
    "inspiration_items": [
        {
            "id": "i1",
            "wedding_id": "w1",
            "media_url": "https://abc.supabase.co/storage/v1/object/public/inspiration/u1/1.png",
            "media_type": "image",
            "shared_with_vendors": False,
        },
    ],
    "vendors": [
        {"id": "v1", "name": "Rosewood Hall", "category": "Venue", "rating": 4.9},
        {"id": "v2", "name": "Petal & Stem", "category": "Flowers", "rating": 4.7},
    ],
}


async def fake_select(collection, filters=None, order_by=None, ascending=True, **kwargs):
    return {"status": "success", "data": [dict(row) for row in STORE.get(collection.value, [])]}


@pytest.fixture
def store():
    with patch("evermore.views.select_rows", new=AsyncMock(side_effect=fake_select)) as mock_select, \
            patch("evermore.view_session.load_planner_context",
                  new=AsyncMock(return_value={"status": "success", "context": CTX})):
        yield mock_select


async def _opened(view_name, publish=None, **params):
    session = ViewSession("u1", publish=publish)
    result = await session.open(view_name, **params)
    assert result["status"] == "success"
    return session


async def test_open_loads_view(store):
    session = await _opened("checklist")

    view = session.current_view()
    assert view.progress.completed == 1
    assert view.progress.total == 2
    assert session.mounted is True


async def test_open_unknown_view():
    session = ViewSession("u1")

    result = await session.open("seating-chart")

    assert result["error_type"] == "validation"


async def test_toggle_task_is_optimistic_then_reloads(store):
    publish = AsyncMock()
    session = await _opened("checklist", publish=publish)

    with patch("evermore.services.checklist.update_child",
               new=AsyncMock(return_value={"status": "success", "data": [{"id": "t1"}]})) as mock_update:
        result = await session.toggle_task("t1")

    optimistic = publish.await_args_list[0].args[0]
    assert optimistic.progress.completed == 2
    assert mock_update.await_args.args[3] == {"completed": True}
    # reconciled from the store, which still says incomplete here
    assert result["status"] == "success"
    assert result["view"].progress.completed == 1


async def test_toggle_task_rolls_back_on_store_error(store):
    publish = AsyncMock()
    session = await _opened("checklist", publish=publish)

    with patch("evermore.services.checklist.update_child",
               new=AsyncMock(return_value={"status": "error", "error_type": "store", "message": "permission denied"})):
        result = await session.toggle_task("t1")

    assert result == {"status": "error", "error_type": "store", "message": "permission denied"}
    assert publish.await_count == 2
    optimistic, rolled_back = (c.args[0] for c in publish.await_args_list)
    assert optimistic.progress.completed == 2
    assert rolled_back.progress.completed == 1
    assert session.current_view().tasks[0].completed is False


async def test_toggle_unknown_task(store):
    session = await _opened("checklist")

    result = await session.toggle_task("missing")

    assert result["error_type"] == "not_found"


async def test_toggle_share_flips_prior_value(store):
    session = await _opened("inspiration")

    with patch("evermore.services.inspiration.update_child",
               new=AsyncMock(return_value={"status": "success", "data": [{"id": "i1"}]})) as mock_update:
        await session.toggle_share("i1")

    assert mock_update.await_args.args[3] == {"shared_with_vendors": True}


async def test_update_validates_before_persisting(store):
    session = await _opened("guests")

    with patch("evermore.view_session.update_child", new=AsyncMock()) as mock_update:
        result = await session.update("guests", "g1", {"rsvp_status": "maybe"})

    assert result["error_type"] == "validation"
    mock_update.assert_not_awaited()


async def test_update_rolls_back_on_store_error(store):
    session = await _opened("guests")

    with patch("evermore.view_session.update_child",
               new=AsyncMock(return_value={"status": "error", "error_type": "store", "message": "timeout"})) as mock_update:
        result = await session.update("guests", "g1", {"rsvp_status": "confirmed"})

    assert result["error_type"] == "store"
    assert mock_update.await_args.args[3] == {"rsvp_status": "confirmed"}
    assert session.current_view().summary.confirmed == 0


async def test_delete_restores_row_when_store_rejects(store):
    publish = AsyncMock()
    session = await _opened("guests", publish=publish)

    with patch("evermore.view_session.delete_child",
               new=AsyncMock(return_value={"status": "error", "error_type": "store", "message": "denied"})):
        result = await session.delete("guests", "g1")

    assert result["status"] == "error"
    assert publish.await_args_list[0].args[0].guests == []
    assert [g.id for g in session.current_view().guests] == ["g1"]


async def test_delete_inspiration_goes_through_blob_removal(store):
    session = await _opened("inspiration")

    with patch("evermore.view_session.inspiration.delete_item",
               new=AsyncMock(return_value={"status": "error", "error_type": "storage", "message": "denied"})) as mock_delete:
        result = await session.delete("inspiration_items", "i1")

    mock_delete.assert_awaited_once()
    assert result["error_type"] == "storage"
    assert [i.id for i in session.current_view().items] == ["i1"]


async def test_weddings_cannot_be_edited_from_live_view(store):
    session = await _opened("dashboard")

    result = await session.update("weddings", "w1", {"theme": "Boho"})

    assert result["error_type"] == "validation"


async def test_load_finishing_after_unmount_is_discarded():
    gate = asyncio.Event()

    async def slow_context(user_id):
        await gate.wait()
        return {"status": "success", "context": CTX}

    with patch("evermore.view_session.load_planner_context", new=AsyncMock(side_effect=slow_context)), \
            patch("evermore.views.select_rows", new=AsyncMock(side_effect=fake_select)):
        session = ViewSession("u1")
        pending = asyncio.create_task(session.open("checklist"))
        await asyncio.sleep(0)
        session.unmount()
        gate.set()
        result = await pending

    assert result is STALE
    assert session.rows == {}
    assert session.current_view() is None


async def test_superseded_load_is_discarded():
    gate = asyncio.Event()

    async def slow_context(user_id):
        await gate.wait()
        return {"status": "success", "context": CTX}

    with patch("evermore.view_session.load_planner_context", new=AsyncMock(side_effect=slow_context)), \
            patch("evermore.views.select_rows", new=AsyncMock(side_effect=fake_select)):
        session = ViewSession("u1")
        first = asyncio.create_task(session.open("checklist"))
        await asyncio.sleep(0)
        second = asyncio.create_task(session.open("guests"))
        await asyncio.sleep(0)
        gate.set()
        first_result, second_result = await asyncio.gather(first, second)

    assert first_result is STALE
    assert second_result["status"] == "success"
    assert session.view_name == "guests"
    assert session.current_view().summary.total == 1


async def test_toggle_vendor_is_ephemeral(store):
    session = await _opened("vendors")

    result = session.toggle_vendor("v2")
    assert result["view"].my_vendor_ids == ["v2"]
    assert [v.id for v in result["view"].my_vendors] == ["v2"]

    result = session.toggle_vendor("v2")
    assert result["view"].my_vendor_ids == []

    other = ViewSession("u1")
    assert other.my_vendor_ids == set()


async def test_open_calendar_with_invalid_date(store):
    session = ViewSession("u1")

    result = await session.open("calendar", date="2025-13-45")

    assert result["error_type"] == "validation"
    assert session.mounted is False
    store.assert_not_awaited()


async def test_toggle_vendor_requires_an_id(store):
    session = await _opened("vendors")

    assert session.toggle_vendor(None)["error_type"] == "validation"
    result = session.toggle_vendor("v1")

    assert result["view"].my_vendor_ids == ["v1"]
