"""Per-page views: which collections each page reads and how they reduce.

A view is loaded by fetching every source collection for the caller's
wedding in parallel, parsing the rows, and handing them to a pure builder.
The live view keeps the parsed rows around so it can rebuild the view after
an optimistic local change without another round trip.
"""
import asyncio
import datetime as dt
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ValidationError

from config import VENDOR_CATEGORIES, VENDOR_CATEGORY_ALL
from evermore.aggregation import (
    BudgetSummary,
    DashboardSummary,
    GuestSummary,
    TaskProgress,
    appointments_for_date,
    dashboard_summary,
    filter_guests,
    filter_vendors,
    guest_summary,
    summarize_budget,
    task_progress,
    upcoming_appointments,
)
from evermore.context import PlannerContext
from evermore.db import select_rows
from evermore.exceptions import InvalidRowError
from evermore.models import (
    ROW_MODELS,
    Appointment,
    Collection,
    Guest,
    InspirationItem,
    Milestone,
    StoreRow,
    Task,
    Vendor,
    Wedding,
    calendar_day,
)

Rows = Dict[Collection, List[StoreRow]]


class Source(NamedTuple):
    collection: Collection
    order_by: Optional[str] = None
    ascending: bool = True
    # False for global collections such as the vendor directory
    scoped: bool = True


# --- View models ---

class DashboardView(BaseModel):
    onboarded: bool
    wedding: Optional[Wedding] = None
    summary: DashboardSummary


class BudgetView(BaseModel):
    onboarded: bool
    summary: BudgetSummary


class GuestsView(BaseModel):
    onboarded: bool
    query: str = ""
    guests: List[Guest]
    summary: GuestSummary


class ChecklistView(BaseModel):
    onboarded: bool
    tasks: List[Task]
    milestones: List[Milestone]
    progress: TaskProgress


class CalendarView(BaseModel):
    onboarded: bool
    selected_date: dt.date
    appointments: List[Appointment]
    on_selected_date: List[Appointment]
    upcoming: List[Appointment]


class InspirationView(BaseModel):
    onboarded: bool
    items: List[InspirationItem]
    shared_count: int


class VendorsView(BaseModel):
    onboarded: bool
    query: str = ""
    category: str = VENDOR_CATEGORY_ALL
    categories: List[str]
    vendors: List[Vendor]
    my_vendor_ids: List[str] = []
    my_vendors: List[Vendor] = []


# --- Builders ---

def build_dashboard(ctx: PlannerContext, rows: Rows, params: Dict[str, Any]) -> DashboardView:
    return DashboardView(
        onboarded=ctx.onboarded,
        wedding=ctx.wedding,
        summary=dashboard_summary(
            ctx.wedding,
            rows[Collection.TASKS],
            rows[Collection.GUESTS],
            rows[Collection.BUDGET_CATEGORIES],
        ),
    )


def build_budget(ctx: PlannerContext, rows: Rows, params: Dict[str, Any]) -> BudgetView:
    return BudgetView(onboarded=ctx.onboarded, summary=summarize_budget(rows[Collection.BUDGET_CATEGORIES]))


def build_guests(ctx: PlannerContext, rows: Rows, params: Dict[str, Any]) -> GuestsView:
    guests = rows[Collection.GUESTS]
    query = params.get("q") or ""
    return GuestsView(
        onboarded=ctx.onboarded,
        query=query,
        guests=filter_guests(guests, query),
        summary=guest_summary(guests),
    )


def build_checklist(ctx: PlannerContext, rows: Rows, params: Dict[str, Any]) -> ChecklistView:
    tasks = rows[Collection.TASKS]
    return ChecklistView(
        onboarded=ctx.onboarded,
        tasks=tasks,
        milestones=rows[Collection.MILESTONES],
        progress=task_progress(tasks),
    )


def build_calendar(ctx: PlannerContext, rows: Rows, params: Dict[str, Any]) -> CalendarView:
    appointments = rows[Collection.APPOINTMENTS]
    today = dt.date.today()
    selected = calendar_day(params.get("date") or today)
    return CalendarView(
        onboarded=ctx.onboarded,
        selected_date=selected,
        appointments=appointments,
        on_selected_date=appointments_for_date(appointments, selected),
        upcoming=upcoming_appointments(appointments, today),
    )


def build_inspiration(ctx: PlannerContext, rows: Rows, params: Dict[str, Any]) -> InspirationView:
    items = rows[Collection.INSPIRATION_ITEMS]
    return InspirationView(
        onboarded=ctx.onboarded,
        items=items,
        shared_count=sum(1 for item in items if item.shared_with_vendors),
    )


def build_vendors(ctx: PlannerContext, rows: Rows, params: Dict[str, Any]) -> VendorsView:
    directory = rows[Collection.VENDORS]
    query = params.get("q") or ""
    category = params.get("category") or VENDOR_CATEGORY_ALL
    mine = set(params.get("my_vendor_ids") or ())
    return VendorsView(
        onboarded=ctx.onboarded,
        query=query,
        category=category,
        categories=list(VENDOR_CATEGORIES),
        vendors=filter_vendors(directory, query, category),
        my_vendor_ids=sorted(mine),
        my_vendors=[v for v in directory if v.id in mine],
    )


class ViewDefinition(NamedTuple):
    sources: List[Source]
    build: Callable[[PlannerContext, Rows, Dict[str, Any]], BaseModel]


VIEWS: Dict[str, ViewDefinition] = {
    "dashboard": ViewDefinition(
        [Source(Collection.TASKS), Source(Collection.GUESTS), Source(Collection.BUDGET_CATEGORIES)],
        build_dashboard,
    ),
    "budget": ViewDefinition([Source(Collection.BUDGET_CATEGORIES, "created_at")], build_budget),
    "guests": ViewDefinition([Source(Collection.GUESTS, "name")], build_guests),
    "checklist": ViewDefinition(
        [Source(Collection.TASKS, "due_date"), Source(Collection.MILESTONES, "created_at")],
        build_checklist,
    ),
    "calendar": ViewDefinition([Source(Collection.APPOINTMENTS, "date")], build_calendar),
    "inspiration": ViewDefinition(
        [Source(Collection.INSPIRATION_ITEMS, "created_at", ascending=False)],
        build_inspiration,
    ),
    "vendors": ViewDefinition(
        [Source(Collection.VENDORS, "rating", ascending=False, scoped=False)],
        build_vendors,
    ),
}


def parse_rows(collection: Collection, raw_rows: List[Dict[str, Any]]) -> List[StoreRow]:
    model = ROW_MODELS[collection]
    try:
        return [model.model_validate(row) for row in raw_rows]
    except ValidationError as e:
        raise InvalidRowError(f"Malformed row in {collection.value}: {e}") from e


async def _fetch_source(ctx: PlannerContext, source: Source) -> Dict[str, Any]:
    if source.scoped and not ctx.onboarded:
        return {"status": "success", "data": []}
    filters = {"wedding_id": ctx.wedding_id} if source.scoped else None
    return await select_rows(source.collection, filters=filters, order_by=source.order_by, ascending=source.ascending)


async def fetch_rows(ctx: PlannerContext, sources: List[Source]) -> Dict[str, Any]:
    """Fetch and parse every source; the first failure fails the whole load."""
    results = await asyncio.gather(*(_fetch_source(ctx, s) for s in sources))

    rows: Rows = {}
    for source, result in zip(sources, results):
        if result.get("status") != "success":
            return {"status": "error", "error_type": "store", "message": result.get("error", "Failed to load data.")}
        try:
            rows[source.collection] = parse_rows(source.collection, result.get("data", []))
        except InvalidRowError as e:
            logging.error(f"wedding_id={ctx.wedding_id}: {e}")
            return {"status": "error", "error_type": "store", "message": str(e)}
    return {"status": "success", "rows": rows}


def build_view(name: str, ctx: PlannerContext, rows: Rows, params: Optional[Dict[str, Any]] = None) -> BaseModel:
    return VIEWS[name].build(ctx, rows, params or {})


async def load_view(name: str, ctx: PlannerContext, **params) -> Dict[str, Any]:
    """Fetch and reduce one page. Returns {"status": "success", "view": ..., "rows": ...}."""
    definition = VIEWS[name]
    logging.info(f"load_view: view={name}, user_id={ctx.user_id}, wedding_id={ctx.wedding_id}")
    fetched = await fetch_rows(ctx, definition.sources)
    if fetched.get("status") != "success":
        return fetched
    rows = fetched["rows"]
    return {"status": "success", "view": definition.build(ctx, rows, params), "rows": rows}
