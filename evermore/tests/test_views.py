import datetime as dt
from unittest.mock import AsyncMock, patch

import pytest

from evermore.context import PlannerContext
from evermore.models import Wedding
from evermore.views import BudgetView, CalendarView, VendorsView, load_view

pytestmark = pytest.mark.asyncio

CTX = PlannerContext(user_id="u1", wedding=Wedding(id="w1", user_id="u1", total_budget=20000))
NO_WEDDING_CTX = PlannerContext(user_id="u1")


def _select_returning(rows_by_collection):
    async def fake_select(collection, filters=None, order_by=None, ascending=True, **kwargs):
        return {"status": "success", "data": rows_by_collection.get(collection.value, [])}
    return AsyncMock(side_effect=fake_select)


async def test_budget_view_orders_by_created_at():
    mock_select = _select_returning({
        "budget_categories": [{"id": "c1", "wedding_id": "w1", "name": "Venue", "budgeted": 5000, "spent": 6000}],
    })
    with patch("evermore.views.select_rows", new=mock_select):
        result = await load_view("budget", CTX)

    assert isinstance(result["view"], BudgetView)
    assert result["view"].summary.over_budget_count == 1
    mock_select.assert_awaited_once()
    kwargs = mock_select.await_args.kwargs
    assert kwargs["filters"] == {"wedding_id": "w1"}
    assert kwargs["order_by"] == "created_at"
    assert kwargs["ascending"] is True


async def test_dashboard_fetches_three_collections_in_parallel():
    mock_select = _select_returning({
        "tasks": [{"id": "t1", "wedding_id": "w1", "title": "Venue", "completed": True}],
        "guests": [{"id": "g1", "wedding_id": "w1", "name": "Ana", "rsvp_status": "confirmed"}],
        "budget_categories": [{"id": "c1", "wedding_id": "w1", "name": "Venue", "budgeted": 5000, "spent": 100}],
    })
    with patch("evermore.views.select_rows", new=mock_select):
        result = await load_view("dashboard", CTX)

    summary = result["view"].summary
    assert mock_select.await_count == 3
    assert summary.progress_percent == 100
    assert summary.guest_percent == 100
    assert summary.vendors_booked == 1
    assert summary.total_budget == 20000


async def test_no_wedding_yields_zero_state_without_requests():
    mock_select = _select_returning({})
    with patch("evermore.views.select_rows", new=mock_select):
        result = await load_view("dashboard", NO_WEDDING_CTX)

    view = result["view"]
    assert view.onboarded is False
    assert view.summary.total_tasks == 0
    assert view.summary.vendors_booked == 0
    mock_select.assert_not_awaited()


async def test_vendor_directory_is_global_and_filtered():
    mock_select = _select_returning({
        "vendors": [
            {"id": "v1", "name": "Rosewood Hall", "category": "Venue", "rating": 4.9},
            {"id": "v2", "name": "Petal & Stem", "category": "Flowers", "rating": 4.7},
        ],
    })
    with patch("evermore.views.select_rows", new=mock_select):
        result = await load_view("vendors", NO_WEDDING_CTX, category="Flowers", my_vendor_ids={"v1"})

    view = result["view"]
    assert isinstance(view, VendorsView)
    assert [v.id for v in view.vendors] == ["v2"]
    assert [v.id for v in view.my_vendors] == ["v1"]
    assert view.categories[0] == "All"
    kwargs = mock_select.await_args.kwargs
    assert kwargs["filters"] is None
    assert kwargs["order_by"] == "rating"
    assert kwargs["ascending"] is False


async def test_calendar_view_selects_day():
    mock_select = _select_returning({
        "appointments": [
            {"id": "a1", "wedding_id": "w1", "title": "Tasting", "date": "2025-06-01T18:00:00+02:00"},
            {"id": "a2", "wedding_id": "w1", "title": "Fitting", "date": "2025-06-03"},
        ],
    })
    with patch("evermore.views.select_rows", new=mock_select):
        result = await load_view("calendar", CTX, date=dt.date(2025, 6, 1))

    view = result["view"]
    assert isinstance(view, CalendarView)
    assert [a.id for a in view.on_selected_date] == ["a1"]
    assert len(view.appointments) == 2


async def test_guests_view_filters_but_counts_everyone():
    mock_select = _select_returning({
        "guests": [
            {"id": "g1", "wedding_id": "w1", "name": "Ana Lopez", "rsvp_status": "confirmed"},
            {"id": "g2", "wedding_id": "w1", "name": "Ben Ortiz", "rsvp_status": "declined"},
        ],
    })
    with patch("evermore.views.select_rows", new=mock_select):
        result = await load_view("guests", CTX, q="ana")

    view = result["view"]
    assert [g.id for g in view.guests] == ["g1"]
    assert view.summary.total == 2


async def test_store_error_fails_the_load():
    async def failing_select(collection, **kwargs):
        if collection.value == "milestones":
            return {"status": "error", "error": "relation does not exist"}
        return {"status": "success", "data": []}

    with patch("evermore.views.select_rows", new=AsyncMock(side_effect=failing_select)):
        result = await load_view("checklist", CTX)

    assert result == {"status": "error", "error_type": "store", "message": "relation does not exist"}


async def test_unknown_enum_value_in_store_is_a_store_error():
    mock_select = _select_returning({
        "guests": [{"id": "g1", "wedding_id": "w1", "name": "Ana", "rsvp_status": "maybe"}],
    })
    with patch("evermore.views.select_rows", new=mock_select):
        result = await load_view("guests", CTX)

    assert result["status"] == "error"
    assert result["error_type"] == "store"
    assert "guests" in result["message"]
