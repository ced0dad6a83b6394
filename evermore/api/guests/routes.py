from fastapi import APIRouter, Depends, status

from api.dependencies import get_planner_context, raise_for_error, view_or_raise
from api.guests.models import RsvpUpdate
from evermore.context import PlannerContext
from evermore.models import GuestCreate, GuestUpdate
from evermore.services import guests
from evermore.views import GuestsView

guests_router = APIRouter()


@guests_router.get("", response_model=GuestsView)
async def list_guests(q: str = "", ctx: PlannerContext = Depends(get_planner_context)):
    return await view_or_raise("guests", ctx, q=q)


@guests_router.post("", response_model=GuestsView, status_code=status.HTTP_201_CREATED)
async def create_guest(payload: GuestCreate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await guests.create_guest(ctx, payload))
    return await view_or_raise("guests", ctx)


@guests_router.patch("/{guest_id}", response_model=GuestsView)
async def update_guest(guest_id: str, payload: GuestUpdate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await guests.update_guest(ctx, guest_id, payload))
    return await view_or_raise("guests", ctx)


@guests_router.put("/{guest_id}/rsvp", response_model=GuestsView)
async def set_rsvp(guest_id: str, payload: RsvpUpdate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await guests.set_rsvp(ctx, guest_id, payload.rsvp_status))
    return await view_or_raise("guests", ctx)


@guests_router.delete("/{guest_id}", response_model=GuestsView)
async def delete_guest(guest_id: str, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await guests.delete_guest(ctx, guest_id))
    return await view_or_raise("guests", ctx)
