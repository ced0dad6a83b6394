from typing import Any, Dict

from evermore.context import PlannerContext
from evermore.models import Collection, TaskCreate, TaskUpdate
from evermore.services.common import delete_child, insert_child, update_child


async def create_task(ctx: PlannerContext, payload: TaskCreate) -> Dict[str, Any]:
    return await insert_child(ctx, Collection.TASKS, payload.to_row())


async def update_task(ctx: PlannerContext, task_id: str, payload: TaskUpdate) -> Dict[str, Any]:
    return await update_child(ctx, Collection.TASKS, task_id, payload.to_row())


async def toggle_task(ctx: PlannerContext, task_id: str, completed: bool) -> Dict[str, Any]:
    """Persist the opposite of `completed`, the value the caller last saw."""
    return await update_child(ctx, Collection.TASKS, task_id, {"completed": not completed})


async def delete_task(ctx: PlannerContext, task_id: str) -> Dict[str, Any]:
    return await delete_child(ctx, Collection.TASKS, task_id)
