import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from config import SUPABASE_URL, SUPABASE_KEY

_supabase_client: Optional[Client] = None


def is_supabase_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_KEY)


def get_supabase_client() -> Client:
    """Lazily create the shared Supabase client."""
    global _supabase_client

    if _supabase_client is None:
        if not is_supabase_configured():
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")
        _supabase_client = create_client(SUPABASE_URL, SUPABASE_KEY)
        logging.info("Supabase client initialized.")

    return _supabase_client


def _collection_name(collection) -> str:
    return getattr(collection, "value", collection)


async def _run(operation: str, collection: str, build_query) -> Dict[str, Any]:
    """Execute a PostgREST query off the event loop and wrap the outcome in a status envelope."""
    start_time = time.perf_counter()
    try:
        query = build_query(get_supabase_client().table(collection))
        response = await asyncio.to_thread(query.execute)
    except APIError as e:
        duration = (time.perf_counter() - start_time) * 1000
        message = e.message or str(e)
        logging.error(f"{operation} on {collection} failed after {duration:.2f}ms: {message}")
        return {"status": "error", "error": message}
    except ValueError as ve:
        logging.error(f"{operation} on {collection} failed, store not configured: {ve}")
        return {"status": "error", "error": str(ve)}
    except Exception as e:
        logging.exception(f"Unexpected error during {operation} on {collection}: {e}")
        return {"status": "error", "error": f"Unexpected error during {operation} on {collection}."}

    duration = (time.perf_counter() - start_time) * 1000
    data: List[Dict[str, Any]] = response.data or []
    logging.debug(f"{operation} on {collection} returned {len(data)} rows in {duration:.2f}ms")
    return {"status": "success", "data": data}


async def select_rows(
    collection,
    filters: Optional[Dict[str, Any]] = None,
    order_by: Optional[str] = None,
    ascending: bool = True,
    columns: str = "*",
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Select rows matching every equality filter, optionally ordered by a single column."""
    collection = _collection_name(collection)

    def build(table):
        query = table.select(columns)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        if order_by:
            query = query.order(order_by, desc=not ascending)
        if limit is not None:
            query = query.limit(limit)
        return query

    logging.debug(f"select_rows: collection={collection}, filters={filters}, order_by={order_by}, ascending={ascending}")
    return await _run("select", collection, build)


async def insert_row(collection, row: Dict[str, Any]) -> Dict[str, Any]:
    collection = _collection_name(collection)
    logging.debug(f"insert_row: collection={collection}, columns={sorted(row)}")
    return await _run("insert", collection, lambda table: table.insert(row))


async def update_row(
    collection,
    row_id: str,
    patch: Dict[str, Any],
    match: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Update the row with this id; `match` adds scoping filters such as wedding_id."""
    collection = _collection_name(collection)

    def build(table):
        query = table.update(patch).eq("id", row_id)
        for column, value in (match or {}).items():
            query = query.eq(column, value)
        return query

    logging.debug(f"update_row: collection={collection}, row_id={row_id}, columns={sorted(patch)}")
    return await _run("update", collection, build)


async def delete_row(
    collection,
    row_id: str,
    match: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    collection = _collection_name(collection)

    def build(table):
        query = table.delete().eq("id", row_id)
        for column, value in (match or {}).items():
            query = query.eq(column, value)
        return query

    logging.debug(f"delete_row: collection={collection}, row_id={row_id}")
    return await _run("delete", collection, build)
