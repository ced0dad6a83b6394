import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Request, status

from api.security import get_current_user_id
from evermore.context import PlannerContext, load_planner_context
from evermore.views import load_view

ERROR_STATUS_CODES = {
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "integrity": status.HTTP_409_CONFLICT,
    "store": status.HTTP_502_BAD_GATEWAY,
    "storage": status.HTTP_502_BAD_GATEWAY,
}


def raise_for_error(result: Dict[str, Any]) -> Dict[str, Any]:
    """Turn an error envelope into an HTTPException; pass successes through."""
    if result.get("status") == "success":
        return result
    error_type = result.get("error_type", "store")
    message = result.get("message") or result.get("error") or "Request failed."
    code = ERROR_STATUS_CODES.get(error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)
    logging.error(f"Request failed: error_type={error_type}, status_code={code}, message={message}")
    raise HTTPException(status_code=code, detail={"error_type": error_type, "message": message})


async def get_planner_context(request: Request, user_id: str = Depends(get_current_user_id)) -> PlannerContext:
    """Per-request lookup of the caller's wedding. Never cached."""
    ctx = raise_for_error(await load_planner_context(user_id))["context"]
    request.state.wedding_id = ctx.wedding_id
    return ctx


async def view_or_raise(name: str, ctx: PlannerContext, **params):
    return raise_for_error(await load_view(name, ctx, **params))["view"]
