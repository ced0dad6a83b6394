import logging
from typing import Any, Dict

from evermore.context import PlannerContext
from evermore.db import delete_row, insert_row, update_row
from evermore.models import Collection

NO_WEDDING_MESSAGE = "No wedding found. Please complete onboarding."


def error(error_type: str, message: str) -> Dict[str, Any]:
    return {"status": "error", "error_type": error_type, "message": message}


_LABELS = {
    Collection.WEDDINGS: "Wedding",
    Collection.BUDGET_CATEGORIES: "Budget category",
    Collection.GUESTS: "Guest",
    Collection.TASKS: "Task",
    Collection.APPOINTMENTS: "Appointment",
    Collection.INSPIRATION_ITEMS: "Inspiration item",
}


def _label(collection: Collection) -> str:
    return _LABELS.get(collection, collection.value)


async def insert_child(ctx: PlannerContext, collection: Collection, row: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a row under the caller's wedding; the store assigns the id."""
    if not ctx.onboarded:
        return error("not_found", NO_WEDDING_MESSAGE)

    row = {**row, "wedding_id": ctx.wedding_id}
    logging.info(f"insert_child: collection={collection.value}, wedding_id={ctx.wedding_id}")
    result = await insert_row(collection, row)
    if result.get("status") != "success":
        return error("store", result.get("error", f"Failed to create {_label(collection).lower()}."))
    data = result.get("data") or []
    return {"status": "success", "data": data[0] if data else row}


async def update_child(ctx: PlannerContext, collection: Collection, row_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Update one of the wedding's rows. Matching nothing is not_found."""
    if not ctx.onboarded:
        return error("not_found", NO_WEDDING_MESSAGE)
    if not patch:
        return error("validation", "Nothing to update.")

    logging.info(f"update_child: collection={collection.value}, row_id={row_id}, wedding_id={ctx.wedding_id}")
    result = await update_row(collection, row_id, patch, match={"wedding_id": ctx.wedding_id})
    if result.get("status") != "success":
        return error("store", result.get("error", f"Failed to update {_label(collection).lower()}."))
    if not result.get("data"):
        return error("not_found", f"{_label(collection)} not found.")
    return {"status": "success", "data": result["data"][0]}


async def delete_child(ctx: PlannerContext, collection: Collection, row_id: str) -> Dict[str, Any]:
    if not ctx.onboarded:
        return error("not_found", NO_WEDDING_MESSAGE)

    logging.info(f"delete_child: collection={collection.value}, row_id={row_id}, wedding_id={ctx.wedding_id}")
    result = await delete_row(collection, row_id, match={"wedding_id": ctx.wedding_id})
    if result.get("status") != "success":
        return error("store", result.get("error", f"Failed to delete {_label(collection).lower()}."))
    if not result.get("data"):
        return error("not_found", f"{_label(collection)} not found.")
    return {"status": "success", "data": result["data"][0]}
