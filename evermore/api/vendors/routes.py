from fastapi import APIRouter, Depends

from api.dependencies import get_planner_context, view_or_raise
from config import VENDOR_CATEGORY_ALL
from evermore.context import PlannerContext
from evermore.views import VendorsView

vendors_router = APIRouter()


@vendors_router.get("", response_model=VendorsView)
async def list_vendors(q: str = "", category: str = VENDOR_CATEGORY_ALL, ctx: PlannerContext = Depends(get_planner_context)):
    return await view_or_raise("vendors", ctx, q=q, category=category)
