"""State for one live-view connection.

A session has at most one mounted view. Each load is tagged with a
generation number; a load that finishes after a newer load started, or
after the session unmounted, is dropped instead of applied.

Updates, toggles and deletes are applied to the local rows first and
published, then persisted. If the store rejects the change the local row is
restored. Every successful mutation is followed by a reload.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from pydantic import BaseModel, TypeAdapter, ValidationError

from evermore.context import PlannerContext, load_planner_context
from evermore.models import UPDATE_MODELS, CalendarDay, Collection, StoreRow
from evermore.services import checklist, inspiration
from evermore.services.common import delete_child, error, update_child
from evermore.views import VIEWS, Rows, build_view, load_view

Publisher = Callable[[BaseModel], Awaitable[None]]

STALE = {"status": "stale"}

_calendar_day = TypeAdapter(CalendarDay)


class ViewSession:
    def __init__(self, user_id: str, publish: Optional[Publisher] = None):
        self.user_id = user_id
        self.publish = publish
        self.view_name: Optional[str] = None
        self.params: Dict[str, Any] = {}
        self.ctx: Optional[PlannerContext] = None
        self.rows: Rows = {}
        self.mounted = False
        self.generation = 0
        self.my_vendor_ids: Set[str] = set()

    # --- Mounting ---

    async def open(self, view_name: str, **params) -> Dict[str, Any]:
        if view_name not in VIEWS:
            return error("validation", f"Unknown view '{view_name}'.")
        params = {k: v for k, v in params.items() if v is not None}
        if "date" in params:
            try:
                params["date"] = _calendar_day.validate_python(params["date"])
            except ValidationError:
                return error("validation", f"Invalid date '{params['date']}'.")

        self.view_name = view_name
        self.params = params
        self.rows = {}
        self.mounted = True
        return await self.reload()

    def unmount(self) -> None:
        self.mounted = False
        # Anything still in flight now belongs to a dead generation.
        self.generation += 1

    def is_current(self, generation: int) -> bool:
        return self.mounted and generation == self.generation

    async def reload(self) -> Dict[str, Any]:
        if not self.mounted or self.view_name is None:
            return error("validation", "No view is open.")

        self.generation += 1
        generation = self.generation
        view_name = self.view_name

        loaded = await load_planner_context(self.user_id)
        if not self.is_current(generation):
            logging.debug(f"Discarding stale context load, generation={generation}")
            return STALE
        if loaded.get("status") != "success":
            return loaded

        ctx = loaded["context"]
        result = await load_view(view_name, ctx, **self._view_params())
        if not self.is_current(generation):
            logging.debug(f"Discarding stale {view_name} load, generation={generation}")
            return STALE
        if result.get("status") != "success":
            return result

        self.ctx = ctx
        self.rows = result["rows"]
        return {"status": "success", "view": result["view"]}

    def current_view(self) -> Optional[BaseModel]:
        if self.ctx is None or self.view_name is None or not self.rows:
            return None
        return build_view(self.view_name, self.ctx, self.rows, self._view_params())

    def _view_params(self) -> Dict[str, Any]:
        return {**self.params, "my_vendor_ids": set(self.my_vendor_ids)}

    # --- Local rows ---

    def _find(self, collection: Collection, row_id: str) -> Optional[StoreRow]:
        for row in self.rows.get(collection, []):
            if row.id == row_id:
                return row
        return None

    def _replace(self, collection: Collection, row_id: str, new_row: StoreRow) -> None:
        rows: List[StoreRow] = self.rows.get(collection, [])
        for i, row in enumerate(rows):
            if row.id == row_id:
                rows[i] = new_row
                return

    async def _publish(self) -> None:
        view = self.current_view()
        if self.publish and self.mounted and view is not None:
            await self.publish(view)

    def _not_loaded(self, collection: Collection) -> Dict[str, Any]:
        if self.ctx is None:
            return error("validation", "No view is open.")
        return error("not_found", f"No such row in {collection.value} for the open view.")

    # --- Optimistic mutations ---

    async def _apply(self, collection: Collection, before: StoreRow, after: StoreRow, persist) -> Dict[str, Any]:
        self._replace(collection, before.id, after)
        await self._publish()

        result = await persist()
        if result.get("status") != "success":
            logging.warning(f"Rolling back {collection.value} row {before.id}: {result.get('message')}")
            self._replace(collection, before.id, before)
            await self._publish()
            return result
        return await self.reload()

    async def toggle_task(self, task_id: str) -> Dict[str, Any]:
        task = self._find(Collection.TASKS, task_id)
        if task is None:
            return self._not_loaded(Collection.TASKS)
        prior = task.completed
        return await self._apply(
            Collection.TASKS,
            task,
            task.model_copy(update={"completed": not prior}),
            lambda: checklist.toggle_task(self.ctx, task_id, prior),
        )

    async def toggle_share(self, item_id: str) -> Dict[str, Any]:
        item = self._find(Collection.INSPIRATION_ITEMS, item_id)
        if item is None:
            return self._not_loaded(Collection.INSPIRATION_ITEMS)
        prior = item.shared_with_vendors
        return await self._apply(
            Collection.INSPIRATION_ITEMS,
            item,
            item.model_copy(update={"shared_with_vendors": not prior}),
            lambda: inspiration.toggle_share(self.ctx, item_id, prior),
        )

    async def update(self, collection: str, row_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        try:
            collection = Collection(collection)
        except ValueError:
            return error("validation", f"Unknown collection '{collection}'.")
        if collection not in UPDATE_MODELS or collection == Collection.WEDDINGS:
            return error("validation", f"{collection.value} cannot be edited from this view.")

        try:
            payload = UPDATE_MODELS[collection].model_validate(changes or {})
        except ValidationError as e:
            return error("validation", str(e))
        patch = payload.to_row()
        if not patch:
            return error("validation", "Nothing to update.")

        before = self._find(collection, row_id)
        if before is None:
            return self._not_loaded(collection)
        try:
            after = type(before).model_validate({**before.model_dump(), **payload.model_dump(exclude_unset=True)})
        except ValidationError as e:
            return error("validation", str(e))
        return await self._apply(
            collection,
            before,
            after,
            lambda: update_child(self.ctx, collection, row_id, patch),
        )

    async def delete(self, collection: str, row_id: str) -> Dict[str, Any]:
        try:
            collection = Collection(collection)
        except ValueError:
            return error("validation", f"Unknown collection '{collection}'.")
        if collection not in UPDATE_MODELS or collection == Collection.WEDDINGS:
            return error("validation", f"{collection.value} cannot be deleted from this view.")

        rows = self.rows.get(collection, [])
        index = next((i for i, row in enumerate(rows) if row.id == row_id), None)
        if index is None:
            return self._not_loaded(collection)

        removed = rows.pop(index)
        await self._publish()

        if collection == Collection.INSPIRATION_ITEMS:
            result = await inspiration.delete_item(self.ctx, row_id)
        else:
            result = await delete_child(self.ctx, collection, row_id)

        if result.get("status") != "success":
            logging.warning(f"Restoring deleted {collection.value} row {row_id}: {result.get('message')}")
            rows.insert(index, removed)
            await self._publish()
            return result
        return await self.reload()

    # --- My vendors ---

    def toggle_vendor(self, vendor_id: str) -> Dict[str, Any]:
        """Add or remove a vendor from this connection's selection. Never persisted."""
        if not isinstance(vendor_id, str) or not vendor_id:
            return error("validation", "A vendor id is required.")
        if vendor_id in self.my_vendor_ids:
            self.my_vendor_ids.discard(vendor_id)
        else:
            self.my_vendor_ids.add(vendor_id)

        if self.view_name == "vendors":
            view = self.current_view()
            if view is not None:
                return {"status": "success", "view": view}
        return {"status": "success", "my_vendor_ids": sorted(self.my_vendor_ids)}
