import asyncio
import logging
import time
from typing import Any, Dict, Optional

from config import INSPIRATION_BUCKET
from evermore.db import get_supabase_client


def media_object_path(user_id: str, filename: Optional[str], now_ms: Optional[int] = None) -> str:
    """Storage key for an upload: {user_id}/{epoch_millis}.{ext}."""
    ext = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else "bin"
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{user_id}/{now_ms}.{ext}"


def object_path_from_url(public_url: str, bucket: str = INSPIRATION_BUCKET) -> Optional[str]:
    """Recover the storage key from a public URL, or None if the URL is not in the bucket."""
    marker = f"/{bucket}/"
    if marker not in public_url:
        return None
    path = public_url.split(marker, 1)[1].split("?", 1)[0]
    return path or None


async def upload_media(path: str, data: bytes, content_type: str, bucket: str = INSPIRATION_BUCKET) -> Dict[str, Any]:
    """
    Uploads a media file to the Supabase storage bucket.

    Returns:
        {"status": "success", "public_url": ...} or {"status": "error", "error": ...}.
    """
    logging.info({
        "event": "upload_media:start",
        "bucket": bucket,
        "path": path,
        "content_type": content_type,
        "size_bytes": len(data),
    })
    try:
        files = get_supabase_client().storage.from_(bucket)
        await asyncio.to_thread(files.upload, path, data, file_options={"content-type": content_type})
        public_url = files.get_public_url(path)
    except Exception as e:
        logging.error(f"Failed to upload {path} to bucket {bucket}: {e}")
        return {"status": "error", "error": f"Upload failed: {e}"}

    logging.info(f"Uploaded media to {bucket}/{path}: {public_url}")
    return {"status": "success", "public_url": public_url}


async def remove_media(path: str, bucket: str = INSPIRATION_BUCKET) -> Dict[str, Any]:
    logging.info(f"Removing media {bucket}/{path}")
    try:
        files = get_supabase_client().storage.from_(bucket)
        await asyncio.to_thread(files.remove, [path])
    except Exception as e:
        logging.error(f"Failed to remove {path} from bucket {bucket}: {e}")
        return {"status": "error", "error": f"Could not remove media file: {e}"}
    return {"status": "success", "path": path}
