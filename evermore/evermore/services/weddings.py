import logging
from typing import Any, Dict

from evermore.context import PlannerContext, load_planner_context
from evermore.db import delete_row, insert_row, update_row
from evermore.models import Collection, Wedding, WeddingCreate, WeddingUpdate
from evermore.services.common import NO_WEDDING_MESSAGE, error


async def create_wedding(user_id: str, payload: WeddingCreate) -> Dict[str, Any]:
    """Onboarding: create the caller's single wedding row."""
    loaded = await load_planner_context(user_id)
    if loaded.get("status") != "success":
        return loaded
    if loaded["context"].onboarded:
        return error("integrity", "A wedding already exists for this account.")

    row = {"user_id": user_id, **payload.to_row()}
    logging.info(f"create_wedding: user_id={user_id}")
    result = await insert_row(Collection.WEDDINGS, row)
    if result.get("status") != "success":
        return error("store", result.get("error", "Failed to create wedding."))

    data = result.get("data") or []
    if not data:
        # Insert succeeded without returning a representation; read it back.
        return await _reload(user_id)
    wedding = Wedding.model_validate(data[0])

    # Concurrent onboardings can both pass the check above; the second lookup sees both rows.
    after = await load_planner_context(user_id)
    if after.get("error_type") == "integrity":
        logging.warning(f"create_wedding: concurrent insert for user_id={user_id}, removing wedding_id={wedding.id}")
        await delete_row(Collection.WEDDINGS, wedding.id, match={"user_id": user_id})
        return error("integrity", "A wedding already exists for this account.")
    return {"status": "success", "wedding": wedding}


async def update_wedding(ctx: PlannerContext, payload: WeddingUpdate) -> Dict[str, Any]:
    if not ctx.onboarded:
        return error("not_found", NO_WEDDING_MESSAGE)

    patch = payload.to_row()
    if not patch:
        return {"status": "success", "wedding": ctx.wedding}

    logging.info(f"update_wedding: wedding_id={ctx.wedding_id}, fields={sorted(patch)}")
    result = await update_row(Collection.WEDDINGS, ctx.wedding_id, patch, match={"user_id": ctx.user_id})
    if result.get("status") != "success":
        return error("store", result.get("error", "Failed to update wedding."))
    if not result.get("data"):
        return error("not_found", "Wedding not found.")
    return {"status": "success", "wedding": Wedding.model_validate(result["data"][0])}


async def _reload(user_id: str) -> Dict[str, Any]:
    loaded = await load_planner_context(user_id)
    if loaded.get("status") != "success":
        return loaded
    ctx = loaded["context"]
    if not ctx.onboarded:
        return error("store", "Wedding was not saved.")
    return {"status": "success", "wedding": ctx.wedding}
