from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from evermore.context import PlannerContext
from evermore.models import Wedding
from main import app

CTX = PlannerContext(user_id="u1", wedding=Wedding(id="w1", user_id="u1"))


async def fake_select(collection, filters=None, order_by=None, ascending=True, **kwargs):
    rows = {
        "tasks": [{"id": "t1", "wedding_id": "w1", "title": "Book venue", "completed": False}],
        "milestones": [{"id": "m1", "wedding_id": "w1", "title": "Venue", "timeframe": "12 months", "progress": 40}],
        "vendors": [{"id": "v1", "name": "Rosewood Hall", "category": "Venue", "rating": 4.9}],
    }
    return {"status": "success", "data": rows.get(collection.value, [])}


@pytest.fixture
def live():
    with patch("live_view.service.resolve_user_id", new=AsyncMock(return_value="u1")), \
            patch("evermore.view_session.load_planner_context",
                  new=AsyncMock(return_value={"status": "success", "context": CTX})), \
            patch("evermore.views.select_rows", new=AsyncMock(side_effect=fake_select)):
        yield TestClient(app)


def test_open_sends_view(live):
    with live.websocket_connect("/ws?token=abc") as ws:
        ws.send_json({"type": "open", "view": "checklist"})
        message = ws.receive_json()

    assert message["type"] == "view"
    assert message["view"] == "checklist"
    assert message["data"]["progress"] == {"completed": 0, "total": 1, "progress_percent": 0}
    assert message["data"]["milestones"][0]["progress"] == 40


def test_toggle_task_failure_rolls_back(live):
    with patch("evermore.services.checklist.update_child",
               new=AsyncMock(return_value={"status": "error", "error_type": "store", "message": "permission denied"})):
        with live.websocket_connect("/ws?token=abc") as ws:
            ws.send_json({"type": "open", "view": "checklist"})
            ws.receive_json()
            ws.send_json({"type": "toggle_task", "id": "t1"})
            optimistic = ws.receive_json()
            rolled_back = ws.receive_json()
            error = ws.receive_json()

    assert optimistic["data"]["tasks"][0]["completed"] is True
    assert rolled_back["data"]["tasks"][0]["completed"] is False
    assert error == {"type": "error", "error_type": "store", "data": "permission denied"}


def test_toggle_vendor(live):
    with live.websocket_connect("/ws?token=abc") as ws:
        ws.send_json({"type": "open", "view": "vendors"})
        ws.receive_json()
        ws.send_json({"type": "toggle_vendor", "id": "v1"})
        message = ws.receive_json()

    assert message["data"]["my_vendor_ids"] == ["v1"]


def test_unknown_message_type(live):
    with live.websocket_connect("/ws?token=abc") as ws:
        ws.send_json({"type": "dance"})
        message = ws.receive_json()

    assert message["type"] == "error"
    assert message["error_type"] == "validation"


def test_connection_without_token_is_rejected():
    with TestClient(app).websocket_connect("/ws") as ws:
        message = ws.receive_json()

    assert message == {"type": "error", "error_type": "validation", "data": "Not authenticated."}


def test_open_with_invalid_date_reports_error(live):
    with live.websocket_connect("/ws?token=abc") as ws:
        ws.send_json({"type": "open", "view": "calendar", "params": {"date": "2025-13-45"}})
        message = ws.receive_json()

    assert message["type"] == "error"
    assert message["error_type"] == "validation"


def test_message_without_id_keeps_connection_answering(live):
    with live.websocket_connect("/ws?token=abc") as ws:
        ws.send_json({"type": "open", "view": "vendors"})
        ws.receive_json()
        ws.send_json({"type": "toggle_vendor"})
        rejected = ws.receive_json()
        ws.send_json({"type": "toggle_vendor", "id": "v1"})
        toggled = ws.receive_json()

    assert rejected["type"] == "error"
    assert rejected["error_type"] == "validation"
    assert toggled["data"]["my_vendor_ids"] == ["v1"]
