import asyncio
import json
from typing import Any, Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from api.security import resolve_user_id
from evermore.view_session import STALE, ViewSession
from logger import json_logger

ID_MESSAGES = {"toggle_task", "toggle_share", "update", "delete", "toggle_vendor"}


async def _send_view(websocket: WebSocket, session: ViewSession, view: BaseModel) -> None:
    await websocket.send_json({"type": "view", "view": session.view_name, "data": view.model_dump(mode="json")})


async def _send_result(websocket: WebSocket, session: ViewSession, result: Dict[str, Any], notice: Optional[str] = None) -> None:
    """Relay a session envelope to the client. Stale results are dropped silently."""
    if result is STALE or result.get("status") == "stale":
        return
    if result.get("status") != "success":
        await websocket.send_json({
            "type": "error",
            "error_type": result.get("error_type", "store"),
            "data": result.get("message") or result.get("error") or "Request failed.",
        })
        return
    if "view" in result:
        await _send_view(websocket, session, result["view"])
    elif "my_vendor_ids" in result:
        await websocket.send_json({"type": "notice", "data": {"my_vendor_ids": result["my_vendor_ids"]}})
    if notice:
        await websocket.send_json({"type": "notice", "data": notice})


async def websocket_endpoint(websocket: WebSocket):
    """
    Live view over a WebSocket. The Supabase access token is expected as a
    query parameter: ws://localhost:8765/ws?token=...

    The client opens one view at a time and sends mutations against it; the
    server answers with `view`, `notice` and `error` messages.
    """
    await websocket.accept()
    token = websocket.query_params.get("token")
    user_id = await resolve_user_id(token) if token else None
    if not user_id:
        json_logger.warning("Rejected live view connection without a valid token")
        await websocket.send_json({"type": "error", "error_type": "validation", "data": "Not authenticated."})
        await websocket.close(code=1008)
        return

    log = json_logger.bind(user_id=user_id)
    log.info(f"Live view connected from {websocket.client.host if websocket.client else 'unknown'}")

    async def publish(view: BaseModel) -> None:
        await _send_view(websocket, session, view)

    session = ViewSession(user_id, publish=publish)
    load_task: Optional[asyncio.Task] = None

    async def run_open(view_name: str, params: Dict[str, Any]) -> None:
        try:
            result = await session.open(view_name, **params)
            await _send_result(websocket, session, result)
        except Exception as e:
            log.exception(f"Failed to open view {view_name}: {e}")
            await websocket.send_json({"type": "error", "error_type": "store", "data": f"Could not load {view_name}."})

    async def handle(message: Dict[str, Any]) -> None:
        nonlocal load_task
        msg_type = message.get("type")
        row_id = message.get("id")
        log.debug(f"Live view message type={msg_type}, view={session.view_name}")

        if msg_type in ID_MESSAGES and not (isinstance(row_id, str) and row_id):
            await websocket.send_json({"type": "error", "error_type": "validation", "data": f"'{msg_type}' needs a row id."})
            return

        if msg_type == "open":
            # A newer open supersedes whatever is still loading
            if load_task and not load_task.done():
                load_task.cancel()
            params = message.get("params") or {}
            if not isinstance(params, dict):
                await websocket.send_json({"type": "error", "error_type": "validation", "data": "params must be an object."})
                return
            load_task = asyncio.create_task(run_open(message.get("view", ""), params))
        elif msg_type == "toggle_task":
            await _send_result(websocket, session, await session.toggle_task(row_id))
        elif msg_type == "toggle_share":
            result = await session.toggle_share(row_id)
            await _send_result(websocket, session, result, notice="Sharing updated.")
        elif msg_type == "update":
            result = await session.update(message.get("collection", ""), row_id, message.get("changes") or {})
            await _send_result(websocket, session, result)
        elif msg_type == "delete":
            result = await session.delete(message.get("collection", ""), row_id)
            await _send_result(websocket, session, result, notice="Deleted.")
        elif msg_type == "toggle_vendor":
            await _send_result(websocket, session, session.toggle_vendor(row_id))
        elif msg_type == "close":
            session.unmount()
            await websocket.send_json({"type": "notice", "data": "View closed."})
        else:
            await websocket.send_json({"type": "error", "error_type": "validation", "data": f"Unknown message type '{msg_type}'."})

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "error_type": "validation", "data": "Messages must be JSON."})
                continue
            if not isinstance(message, dict):
                await websocket.send_json({"type": "error", "error_type": "validation", "data": "Messages must be JSON objects."})
                continue
            await handle(message)
    except WebSocketDisconnect:
        log.info("Live view disconnected")
    except Exception as e:
        log.exception(f"Unhandled error in live view: {e}")
    finally:
        session.unmount()
        if load_task and not load_task.done():
            load_task.cancel()
        log.info("Live view connection closed")
