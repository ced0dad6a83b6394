import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from api.dependencies import get_planner_context, raise_for_error, view_or_raise
from api.inspiration.models import ShareToggle
from evermore.context import PlannerContext
from evermore.models import InspirationUpdate
from evermore.services import inspiration
from evermore.views import InspirationView

inspiration_router = APIRouter()


@inspiration_router.get("", response_model=InspirationView)
async def get_inspiration(ctx: PlannerContext = Depends(get_planner_context)):
    return await view_or_raise("inspiration", ctx)


@inspiration_router.post("", response_model=InspirationView, status_code=status.HTTP_201_CREATED)
async def upload_inspiration(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    ctx: PlannerContext = Depends(get_planner_context),
):
    data = await file.read()
    logging.info(f"Inspiration upload filename={file.filename} size={len(data)} wedding_id={ctx.wedding_id}")
    raise_for_error(await inspiration.upload_item(ctx, file.filename, file.content_type, data, title=title, notes=notes))
    return await view_or_raise("inspiration", ctx)


@inspiration_router.patch("/{item_id}", response_model=InspirationView)
async def update_inspiration(item_id: str, payload: InspirationUpdate, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await inspiration.update_item(ctx, item_id, payload))
    return await view_or_raise("inspiration", ctx)


@inspiration_router.post("/{item_id}/share", response_model=InspirationView)
async def toggle_share(item_id: str, payload: ShareToggle, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await inspiration.toggle_share(ctx, item_id, payload.shared_with_vendors))
    return await view_or_raise("inspiration", ctx)


@inspiration_router.delete("/{item_id}", response_model=InspirationView)
async def delete_inspiration(item_id: str, ctx: PlannerContext = Depends(get_planner_context)):
    raise_for_error(await inspiration.delete_item(ctx, item_id))
    return await view_or_raise("inspiration", ctx)
