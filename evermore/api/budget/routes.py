from fastapi import APIRouter, Depends, status

from api.dependencies import get_planner_context, raise_for_error, view_or_raise
from evermore.context import PlannerContext
from evermore.models import BudgetCategoryCreate, BudgetCategoryUpdate
from evermore.services import budget
from evermore.views import BudgetView

budget_router = APIRouter()


@budget_router.get("/categories", response_model=BudgetView)
async def get_budget(ctx: PlannerContext = Depends(get_planner_context)):
    return await view_or_raise("budget", ctx)


@budget_router.post("/categories", response_model=BudgetView, status_code=status.HTTP_201_CREATED)
async def create_category(payload: BudgetCategoryCreate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await budget.create_category(ctx, payload))
    return await view_or_raise("budget", ctx)


@budget_router.patch("/categories/{category_id}", response_model=BudgetView)
async def update_category(category_id: str, payload: BudgetCategoryUpdate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await budget.update_category(ctx, category_id, payload))
    return await view_or_raise("budget", ctx)


@budget_router.delete("/categories/{category_id}", response_model=BudgetView)
async def delete_category(category_id: str, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await budget.delete_category(ctx, category_id))
    return await view_or_raise("budget", ctx)
