import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_planner_context, raise_for_error
from api.security import get_current_user_id
from api.weddings.models import WeddingResponse
from evermore.context import PlannerContext
from evermore.models import WeddingCreate, WeddingUpdate
from evermore.services import weddings

weddings_router = APIRouter()


@weddings_router.get("/me", response_model=WeddingResponse)
async def get_my_wedding(ctx: PlannerContext = Depends(get_planner_context)):
    logging.info(f"Received request for wedding of user_id: {ctx.user_id}")
    return WeddingResponse(onboarded=ctx.onboarded, wedding=ctx.wedding)


@weddings_router.post("/me", response_model=WeddingResponse, status_code=status.HTTP_201_CREATED)
async def create_my_wedding(payload: WeddingCreate, user_id: str = Depends(get_current_user_id)):
    logging.info(f"Received onboarding request for user_id: {user_id}")
    result = raise_for_error(await weddings.create_wedding(user_id, payload))
    return WeddingResponse(onboarded=True, wedding=result["wedding"])


@weddings_router.patch("/me", response_model=WeddingResponse)
async def update_my_wedding(payload: WeddingUpdate, ctx: PlannerContext = Depends(get_planner_context)):
    logging.info(f"Received update request for wedding_id: {ctx.wedding_id} with data: {payload.model_dump_json(exclude_unset=True)}")
    result = raise_for_error(await weddings.update_wedding(ctx, payload))
    return WeddingResponse(onboarded=True, wedding=result["wedding"])
