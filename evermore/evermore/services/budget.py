from typing import Any, Dict

from evermore.context import PlannerContext
from evermore.models import BudgetCategoryCreate, BudgetCategoryUpdate, Collection
from evermore.services.common import delete_child, insert_child, update_child


async def create_category(ctx: PlannerContext, payload: BudgetCategoryCreate) -> Dict[str, Any]:
    """New categories start with nothing spent."""
    return await insert_child(ctx, Collection.BUDGET_CATEGORIES, payload.to_row())


async def update_category(ctx: PlannerContext, category_id: str, payload: BudgetCategoryUpdate) -> Dict[str, Any]:
    return await update_child(ctx, Collection.BUDGET_CATEGORIES, category_id, payload.to_row())


async def delete_category(ctx: PlannerContext, category_id: str) -> Dict[str, Any]:
    return await delete_child(ctx, Collection.BUDGET_CATEGORIES, category_id)
