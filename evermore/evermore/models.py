"""Row and payload models for the planner's collections.

Rows mirror the store's tables. Payload models carry the client-side
validation that runs before any request is issued: required fields must be
present and non-blank, amounts are non-negative and enums are closed.
"""
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, model_validator


class Collection(str, Enum):
    WEDDINGS = "weddings"
    BUDGET_CATEGORIES = "budget_categories"
    GUESTS = "guests"
    TASKS = "tasks"
    MILESTONES = "milestones"
    APPOINTMENTS = "appointments"
    INSPIRATION_ITEMS = "inspiration_items"
    VENDORS = "vendors"


class RsvpStatus(str, Enum):
    INVITED = "invited"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def from_mime_type(cls, mime_type: Optional[str]) -> "MediaType":
        """image/* maps to IMAGE, video/* to VIDEO, anything else is rejected."""
        mime = (mime_type or "").lower()
        if mime.startswith("image/"):
            return cls.IMAGE
        if mime.startswith("video/"):
            return cls.VIDEO
        raise ValueError(f"Unsupported media type '{mime_type}'. Upload an image or a video.")


def calendar_day(value: Any) -> Any:
    """Reduce a date-ish value to its calendar day as written.

    '2025-06-01T23:30:00-05:00' is 2025-06-01: the date component is taken
    verbatim, never shifted through a timezone conversion.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str) and len(value) >= 10:
        return dt.date.fromisoformat(value[:10])
    return value


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _none_to(default):
    def convert(value: Any) -> Any:
        return default if value is None else value
    return convert


RequiredText = Annotated[str, AfterValidator(_not_blank)]
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
OptionalDay = Annotated[Optional[dt.date], BeforeValidator(_blank_to_none)]
CalendarDay = Annotated[dt.date, BeforeValidator(calendar_day)]
# Money is Decimal in Python and a plain JSON number on the wire
Money = Annotated[Decimal, Field(ge=0), PlainSerializer(float, return_type=float, when_used="json")]
SignedMoney = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Amount = Annotated[Money, BeforeValidator(_none_to(Decimal("0")))]
Flag = Annotated[bool, BeforeValidator(_none_to(False))]


class StoreRow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


# --- Rows ---

class Wedding(StoreRow):
    user_id: str
    partner_email: Optional[str] = None
    wedding_date: Optional[dt.date] = None
    location: Optional[str] = None
    theme: Optional[str] = None
    total_budget: Amount = Decimal("0")


class BudgetCategory(StoreRow):
    wedding_id: str
    name: str
    icon: Optional[str] = None
    budgeted: Amount = Decimal("0")
    spent: Amount = Decimal("0")


class Guest(StoreRow):
    wedding_id: str
    name: str
    email: Optional[str] = None
    category: Optional[str] = None
    rsvp_status: RsvpStatus = RsvpStatus.INVITED
    avatar_url: Optional[str] = None


class Task(StoreRow):
    wedding_id: str
    title: str
    due_date: Optional[CalendarDay] = None
    assigned_to: Optional[str] = None
    completed: Flag = False


class Milestone(StoreRow):
    wedding_id: str
    title: str
    description: Optional[str] = None
    timeframe: str
    progress: int = Field(default=0, ge=0, le=100)


class Appointment(StoreRow):
    wedding_id: str
    title: str
    description: Optional[str] = None
    date: CalendarDay
    time: Optional[str] = None
    location: Optional[str] = None


class InspirationItem(StoreRow):
    wedding_id: str
    media_url: str
    media_type: MediaType
    title: Optional[str] = None
    notes: Optional[str] = None
    shared_with_vendors: Flag = False


class Vendor(StoreRow):
    name: str
    category: str
    description: Optional[str] = None
    rating: Optional[float] = None
    reviews_count: Optional[int] = None


# --- Payloads ---

class Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Columns that may be left out of a patch but never set to null
    non_nullable: ClassVar[tuple] = ()

    @model_validator(mode="after")
    def _reject_null_required(self):
        nulled = [name for name in self.non_nullable if name in self.model_fields_set and getattr(self, name) is None]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be empty.")
        return self

    def to_row(self) -> dict:
        """JSON-safe dict of the fields that were actually provided."""
        return self.model_dump(mode="json", exclude_unset=True)


class WeddingCreate(Payload):
    wedding_date: OptionalDay = None
    location: OptionalText = None
    theme: OptionalText = None
    total_budget: Money = Decimal("0")
    partner_email: OptionalText = None

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


class WeddingUpdate(Payload):
    non_nullable = ("total_budget",)

    wedding_date: OptionalDay = None
    location: OptionalText = None
    theme: OptionalText = None
    total_budget: Optional[Money] = None
    partner_email: OptionalText = None


class BudgetCategoryCreate(Payload):
    name: RequiredText
    budgeted: Money
    icon: OptionalText = None

    def to_row(self) -> dict:
        row = self.model_dump(mode="json")
        row["spent"] = 0
        return row


class BudgetCategoryUpdate(Payload):
    non_nullable = ("name", "budgeted", "spent")

    name: Optional[RequiredText] = None
    icon: OptionalText = None
    budgeted: Optional[Money] = None
    spent: Optional[Money] = None


class GuestCreate(Payload):
    name: RequiredText
    email: OptionalText = None
    category: OptionalText = None
    rsvp_status: RsvpStatus = RsvpStatus.INVITED

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


class GuestUpdate(Payload):
    non_nullable = ("name", "rsvp_status")

    name: Optional[RequiredText] = None
    email: OptionalText = None
    category: OptionalText = None
    rsvp_status: Optional[RsvpStatus] = None


class TaskCreate(Payload):
    title: RequiredText
    due_date: OptionalDay = None
    assigned_to: OptionalText = None

    def to_row(self) -> dict:
        row = self.model_dump(mode="json")
        row["completed"] = False
        return row


class TaskUpdate(Payload):
    non_nullable = ("title", "completed")

    title: Optional[RequiredText] = None
    due_date: OptionalDay = None
    assigned_to: OptionalText = None
    completed: Optional[bool] = None


class AppointmentCreate(Payload):
    title: RequiredText
    date: dt.date
    time: OptionalText = None
    description: OptionalText = None
    location: OptionalText = None

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


class AppointmentUpdate(Payload):
    non_nullable = ("title", "date")

    title: Optional[RequiredText] = None
    date: Optional[dt.date] = None
    time: OptionalText = None
    description: OptionalText = None
    location: OptionalText = None


class InspirationUpdate(Payload):
    non_nullable = ("shared_with_vendors",)

    title: OptionalText = None
    notes: OptionalText = None
    shared_with_vendors: Optional[bool] = None


ROW_MODELS = {
    Collection.WEDDINGS: Wedding,
    Collection.BUDGET_CATEGORIES: BudgetCategory,
    Collection.GUESTS: Guest,
    Collection.TASKS: Task,
    Collection.MILESTONES: Milestone,
    Collection.APPOINTMENTS: Appointment,
    Collection.INSPIRATION_ITEMS: InspirationItem,
    Collection.VENDORS: Vendor,
}

UPDATE_MODELS = {
    Collection.WEDDINGS: WeddingUpdate,
    Collection.BUDGET_CATEGORIES: BudgetCategoryUpdate,
    Collection.GUESTS: GuestUpdate,
    Collection.TASKS: TaskUpdate,
    Collection.APPOINTMENTS: AppointmentUpdate,
    Collection.INSPIRATION_ITEMS: InspirationUpdate,
}
