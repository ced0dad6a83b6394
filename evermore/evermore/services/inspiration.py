import logging
from typing import Any, Dict, Optional

from evermore.context import PlannerContext
from evermore.db import select_rows
from evermore.models import Collection, InspirationUpdate, MediaType
from evermore.services.common import NO_WEDDING_MESSAGE, delete_child, error, insert_child, update_child
from evermore.storage import media_object_path, object_path_from_url, remove_media, upload_media


async def upload_item(
    ctx: PlannerContext,
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
    title: Optional[str] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Uploads a media file and records it as an inspiration item.

    The row is only inserted once the blob exists. If the insert then fails,
    the blob is removed again so nothing is left orphaned in the bucket.
    """
    if not ctx.onboarded:
        return error("not_found", NO_WEDDING_MESSAGE)
    try:
        media_type = MediaType.from_mime_type(content_type)
    except ValueError as e:
        return error("validation", str(e))
    if not data:
        return error("validation", "The uploaded file is empty.")

    path = media_object_path(ctx.user_id, filename)
    uploaded = await upload_media(path, data, content_type)
    if uploaded.get("status") != "success":
        return error("storage", uploaded.get("error", "Upload failed."))

    row = {
        "media_url": uploaded["public_url"],
        "media_type": media_type.value,
        "title": (title or "").strip() or None,
        "notes": (notes or "").strip() or None,
        "shared_with_vendors": False,
    }
    inserted = await insert_child(ctx, Collection.INSPIRATION_ITEMS, row)
    if inserted.get("status") != "success":
        logging.warning(f"Insert failed after upload, removing orphaned blob {path}")
        cleanup = await remove_media(path)
        if cleanup.get("status") != "success":
            logging.error(f"Orphaned blob left in storage: {path}")
    return inserted


async def update_item(ctx: PlannerContext, item_id: str, payload: InspirationUpdate) -> Dict[str, Any]:
    return await update_child(ctx, Collection.INSPIRATION_ITEMS, item_id, payload.to_row())


async def toggle_share(ctx: PlannerContext, item_id: str, shared_with_vendors: bool) -> Dict[str, Any]:
    """Persist the opposite of the sharing flag the caller last saw."""
    return await update_child(ctx, Collection.INSPIRATION_ITEMS, item_id, {"shared_with_vendors": not shared_with_vendors})


async def delete_item(ctx: PlannerContext, item_id: str) -> Dict[str, Any]:
    """Remove the blob, then the row. A failed blob removal keeps the row."""
    if not ctx.onboarded:
        return error("not_found", NO_WEDDING_MESSAGE)

    found = await select_rows(
        Collection.INSPIRATION_ITEMS,
        filters={"id": item_id, "wedding_id": ctx.wedding_id},
        columns="id, media_url",
    )
    if found.get("status") != "success":
        return error("store", found.get("error", "Failed to load inspiration item."))
    if not found.get("data"):
        return error("not_found", "Inspiration item not found.")

    media_url = found["data"][0].get("media_url") or ""
    path = object_path_from_url(media_url)
    if path:
        removed = await remove_media(path)
        if removed.get("status") != "success":
            return error("storage", removed.get("error", "Could not remove media file."))
    else:
        logging.info(f"Inspiration item {item_id} has no bucket path, skipping blob removal")

    return await delete_child(ctx, Collection.INSPIRATION_ITEMS, item_id)
