from typing import Any, Dict

from evermore.context import PlannerContext
from evermore.models import AppointmentCreate, AppointmentUpdate, Collection
from evermore.services.common import delete_child, insert_child, update_child


async def create_appointment(ctx: PlannerContext, payload: AppointmentCreate) -> Dict[str, Any]:
    return await insert_child(ctx, Collection.APPOINTMENTS, payload.to_row())


async def update_appointment(ctx: PlannerContext, appointment_id: str, payload: AppointmentUpdate) -> Dict[str, Any]:
    return await update_child(ctx, Collection.APPOINTMENTS, appointment_id, payload.to_row())


async def delete_appointment(ctx: PlannerContext, appointment_id: str) -> Dict[str, Any]:
    return await delete_child(ctx, Collection.APPOINTMENTS, appointment_id)
