from fastapi import APIRouter, Depends

from api.dependencies import get_planner_context, view_or_raise
from evermore.context import PlannerContext
from evermore.views import DashboardView

dashboard_router = APIRouter()


@dashboard_router.get("", response_model=DashboardView)
async def get_dashboard(ctx: PlannerContext = Depends(get_planner_context)):
    return await view_or_raise("dashboard", ctx)
