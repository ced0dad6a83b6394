"""Derived metrics for a wedding's child collections.

Everything here is a pure function of the rows passed in: no I/O, no
caching. Metrics are recomputed from the current rows on every read and are
never written back to the store. A missing wedding is represented by empty
row lists, which reduce to the all-zero state.
"""
import datetime as dt
import math
from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import BaseModel

from config import VENDOR_CATEGORY_ALL
from evermore.icons import CategoryIcon
from evermore.models import (
    Appointment,
    BudgetCategory,
    Guest,
    Money,
    SignedMoney,
    RsvpStatus,
    Task,
    Vendor,
    Wedding,
    calendar_day,
)

ZERO = Decimal("0")


class CategoryMetrics(BaseModel):
    category: BudgetCategory
    icon: CategoryIcon
    icon_glyph: str
    remaining: SignedMoney
    percent_used: float
    bar_percent: float
    is_over_budget: bool
    status_label: str


class BudgetSummary(BaseModel):
    total_budgeted: Money = ZERO
    total_spent: Money = ZERO
    total_remaining: SignedMoney = ZERO
    over_budget_count: int = 0
    categories: List[CategoryMetrics] = []


class TaskProgress(BaseModel):
    completed: int = 0
    total: int = 0
    progress_percent: int = 0


class GuestSummary(BaseModel):
    confirmed: int = 0
    invited: int = 0
    declined: int = 0
    total: int = 0
    guest_percent: int = 0


class DashboardSummary(BaseModel):
    tasks_completed: int = 0
    total_tasks: int = 0
    progress_percent: int = 0
    budget_used: Money = ZERO
    total_budget: Money = ZERO
    guests_confirmed: int = 0
    total_guests: int = 0
    guest_percent: int = 0
    vendors_booked: int = 0


def round_percent(part: int, total: int) -> int:
    """round(part / total * 100), half-up, and 0 for an empty total."""
    if total <= 0:
        return 0
    return math.floor(part / total * 100 + 0.5)


def format_currency(amount: Decimal) -> str:
    """$1,000 for whole amounts, $1,000.5 / $1,000.25 otherwise."""
    cents = Decimal(amount).quantize(Decimal("0.01"))
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    if cents == cents.to_integral_value():
        return f"{sign}${int(cents):,}"
    return f"{sign}${cents:,.2f}".rstrip("0")


def category_metrics(category: BudgetCategory) -> CategoryMetrics:
    budgeted = category.budgeted
    spent = category.spent
    remaining = budgeted - spent
    percent_used = float(spent / budgeted * 100) if budgeted > 0 else 0.0
    is_over_budget = spent > budgeted

    if is_over_budget:
        label = f"Over budget by {format_currency(abs(remaining))}"
    else:
        label = f"{format_currency(remaining)} remaining"

    icon = CategoryIcon.resolve(category.icon)
    return CategoryMetrics(
        category=category,
        icon=icon,
        icon_glyph=icon.glyph,
        remaining=remaining,
        percent_used=percent_used,
        bar_percent=min(max(percent_used, 0.0), 100.0),
        is_over_budget=is_over_budget,
        status_label=label,
    )


def summarize_budget(categories: Iterable[BudgetCategory]) -> BudgetSummary:
    metrics = [category_metrics(c) for c in categories]
    total_budgeted = sum((m.category.budgeted for m in metrics), ZERO)
    total_spent = sum((m.category.spent for m in metrics), ZERO)
    return BudgetSummary(
        total_budgeted=total_budgeted,
        total_spent=total_spent,
        total_remaining=total_budgeted - total_spent,
        over_budget_count=sum(1 for m in metrics if m.is_over_budget),
        categories=metrics,
    )


def task_progress(tasks: Iterable[Task]) -> TaskProgress:
    tasks = list(tasks)
    completed = sum(1 for t in tasks if t.completed)
    return TaskProgress(
        completed=completed,
        total=len(tasks),
        progress_percent=round_percent(completed, len(tasks)),
    )


def guest_summary(guests: Iterable[Guest]) -> GuestSummary:
    counts = {status: 0 for status in RsvpStatus}
    for guest in guests:
        counts[guest.rsvp_status] += 1
    total = sum(counts.values())
    return GuestSummary(
        confirmed=counts[RsvpStatus.CONFIRMED],
        invited=counts[RsvpStatus.INVITED],
        declined=counts[RsvpStatus.DECLINED],
        total=total,
        guest_percent=round_percent(counts[RsvpStatus.CONFIRMED], total),
    )


def filter_guests(guests: Iterable[Guest], query: str = "") -> List[Guest]:
    needle = (query or "").lower()
    return [g for g in guests if needle in g.name.lower()]


def appointments_for_date(appointments: Iterable[Appointment], selected) -> List[Appointment]:
    """Appointments on the selected calendar day; time and offset never shift the day."""
    day = calendar_day(selected)
    return [a for a in appointments if a.date == day]


def _matches_query(vendor: Vendor, needle: str) -> bool:
    if not needle:
        return True
    if needle in vendor.name.lower():
        return True
    return bool(vendor.description) and needle in vendor.description.lower()


def filter_vendors(
    vendors: Iterable[Vendor],
    query: str = "",
    category: str = VENDOR_CATEGORY_ALL,
) -> List[Vendor]:
    """Category and text predicates are independent; input order is preserved."""
    needle = (query or "").lower()
    return [
        v for v in vendors
        if (not category or category == VENDOR_CATEGORY_ALL or v.category == category)
        and _matches_query(v, needle)
    ]


def dashboard_summary(
    wedding: Optional[Wedding],
    tasks: Iterable[Task],
    guests: Iterable[Guest],
    categories: Iterable[BudgetCategory],
) -> DashboardSummary:
    categories = list(categories)
    progress = task_progress(tasks)
    rsvps = guest_summary(guests)
    return DashboardSummary(
        tasks_completed=progress.completed,
        total_tasks=progress.total,
        progress_percent=progress.progress_percent,
        budget_used=sum((c.spent for c in categories), ZERO),
        total_budget=wedding.total_budget if wedding else ZERO,
        guests_confirmed=rsvps.confirmed,
        total_guests=rsvps.total,
        guest_percent=rsvps.guest_percent,
        vendors_booked=sum(1 for c in categories if c.spent > 0),
    )


def upcoming_appointments(appointments: Iterable[Appointment], today: dt.date) -> List[Appointment]:
    return sorted((a for a in appointments if a.date >= today), key=lambda a: (a.date, a.time or ""))
