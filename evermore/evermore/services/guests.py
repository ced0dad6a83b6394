from typing import Any, Dict

from evermore.context import PlannerContext
from evermore.models import Collection, GuestCreate, GuestUpdate, RsvpStatus
from evermore.services.common import delete_child, insert_child, update_child


async def create_guest(ctx: PlannerContext, payload: GuestCreate) -> Dict[str, Any]:
    return await insert_child(ctx, Collection.GUESTS, payload.to_row())


async def update_guest(ctx: PlannerContext, guest_id: str, payload: GuestUpdate) -> Dict[str, Any]:
    return await update_child(ctx, Collection.GUESTS, guest_id, payload.to_row())


async def set_rsvp(ctx: PlannerContext, guest_id: str, rsvp_status: RsvpStatus) -> Dict[str, Any]:
    return await update_child(ctx, Collection.GUESTS, guest_id, {"rsvp_status": RsvpStatus(rsvp_status).value})


async def delete_guest(ctx: PlannerContext, guest_id: str) -> Dict[str, Any]:
    return await delete_child(ctx, Collection.GUESTS, guest_id)
