from unittest.mock import AsyncMock, patch

import pytest

from evermore.context import PlannerContext, load_planner_context

pytestmark = pytest.mark.asyncio

WEDDING_ROW = {"id": "w1", "user_id": "u1", "location": "Lisbon", "total_budget": 30000}


async def test_context_with_wedding():
    with patch("evermore.context.select_rows", new=AsyncMock(return_value={"status": "success", "data": [WEDDING_ROW]})) as mock_select:
        result = await load_planner_context("u1")

    mock_select.assert_awaited_once()
    assert mock_select.await_args.kwargs["filters"] == {"user_id": "u1"}
    ctx = result["context"]
    assert isinstance(ctx, PlannerContext)
    assert ctx.onboarded is True
    assert ctx.wedding_id == "w1"


async def test_context_without_wedding_is_not_onboarded():
    with patch("evermore.context.select_rows", new=AsyncMock(return_value={"status": "success", "data": []})):
        result = await load_planner_context("u1")

    assert result["status"] == "success"
    assert result["context"].onboarded is False
    assert result["context"].wedding_id is None


async def test_duplicate_weddings_are_an_integrity_error():
    rows = [WEDDING_ROW, {**WEDDING_ROW, "id": "w2"}]
    with patch("evermore.context.select_rows", new=AsyncMock(return_value={"status": "success", "data": rows})):
        result = await load_planner_context("u1")

    assert result["status"] == "error"
    assert result["error_type"] == "integrity"


async def test_store_failure_is_a_store_error():
    with patch("evermore.context.select_rows", new=AsyncMock(return_value={"status": "error", "error": "timeout"})):
        result = await load_planner_context("u1")

    assert result == {"status": "error", "error_type": "store", "message": "timeout"}
