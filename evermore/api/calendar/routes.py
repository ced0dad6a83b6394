import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, status

from api.dependencies import get_planner_context, raise_for_error, view_or_raise
from evermore.context import PlannerContext
from evermore.models import AppointmentCreate, AppointmentUpdate
from evermore.services import calendar
from evermore.views import CalendarView

calendar_router = APIRouter()


@calendar_router.get("", response_model=CalendarView)
async def get_calendar(date: Optional[dt.date] = None, ctx: PlannerContext = Depends(get_planner_context)):
    return await view_or_raise("calendar", ctx, date=date)


@calendar_router.post("/appointments", response_model=CalendarView, status_code=status.HTTP_201_CREATED)
async def create_appointment(payload: AppointmentCreate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await calendar.create_appointment(ctx, payload))
    return await view_or_raise("calendar", ctx, date=payload.date)


@calendar_router.patch("/appointments/{appointment_id}", response_model=CalendarView)
async def update_appointment(appointment_id: str, payload: AppointmentUpdate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await calendar.update_appointment(ctx, appointment_id, payload))
    return await view_or_raise("calendar", ctx, date=payload.date)


@calendar_router.delete("/appointments/{appointment_id}", response_model=CalendarView)
async def delete_appointment(appointment_id: str, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await calendar.delete_appointment(ctx, appointment_id))
    return await view_or_raise("calendar", ctx)
