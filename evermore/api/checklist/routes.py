from fastapi import APIRouter, Depends, status

from api.checklist.models import TaskToggle
from api.dependencies import get_planner_context, raise_for_error, view_or_raise
from evermore.context import PlannerContext
from evermore.models import TaskCreate, TaskUpdate
from evermore.services import checklist
from evermore.views import ChecklistView

checklist_router = APIRouter()


@checklist_router.get("", response_model=ChecklistView)
async def get_checklist(ctx: PlannerContext = Depends(get_planner_context)):
    return await view_or_raise("checklist", ctx)


@checklist_router.post("/tasks", response_model=ChecklistView, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await checklist.create_task(ctx, payload))
    return await view_or_raise("checklist", ctx)


@checklist_router.patch("/tasks/{task_id}", response_model=ChecklistView)
async def update_task(task_id: str, payload: TaskUpdate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await checklist.update_task(ctx, task_id, payload))
    return await view_or_raise("checklist", ctx)


@checklist_router.post("/tasks/{task_id}/toggle", response_model=ChecklistView)
async def toggle_task(task_id: str, payload: TaskToggle, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await checklist.toggle_task(ctx, task_id, payload.completed))
    return await view_or_raise("checklist", ctx)


@checklist_router.delete("/tasks/{task_id}", response_model=ChecklistView)
async def delete_task(task_id: str, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await checklist.delete_task(ctx, task_id))
    return await view_or_raise("checklist", ctx)
