# itinerary_editor/schemas/itinerary.py

"""
Schemas for the editable itinerary document.

Nested records serialise with camelCase aliases (``dayNumber``, ``activityId``)
while the document root keeps the server's snake_case keys
(``itinerary_data``, ``travel_tips``, ``duration_days``), so
``ItineraryDocument.to_payload()`` is exactly what the remote store accepts.
"""

from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_DRAFT_TIME = "09:00"
DEFAULT_DRAFT_DURATION_MINUTES = 60


class ActivityType(StrEnum):
    SIGHTSEEING = "sightseeing"
    ADVENTURE = "adventure"
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    CULTURE = "culture"
    HISTORY = "history"
    NATURE = "nature"
    RELAXATION = "relaxation"

    @classmethod
    def coerce(cls, value: object) -> "ActivityType":
        """Return the matching member, falling back to sightseeing."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.SIGHTSEEING


class TipCategory(StrEnum):
    GENERAL = "general"
    WEATHER = "weather"
    SAFETY = "safety"
    FOOD = "food"
    TRANSPORT = "transport"
    CULTURE = "culture"
    BUDGET = "budget"

    @classmethod
    def coerce(cls, value: object) -> "TipCategory":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERAL


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Activity(CamelModel):
    """A single scheduled activity within a day."""

    activity_id: str | None = Field(
        default=None,
        description="Server id, or a local id for activities not yet persisted",
    )
    activity: str = Field(..., description="Display name")
    time: str = Field(..., description="Start time in HH:MM format", examples=["09:00"])
    duration: str = Field(default="1 hour", description="Human readable duration")
    cost: int = Field(default=0, ge=0, description="Cost in VND")
    type: ActivityType = ActivityType.SIGHTSEEING
    location: str = ""
    time_slot: str | None = Field(default=None, description="Source slot, kept for reference")
    user_modified: bool = False


class Day(CamelModel):
    """One day of the itinerary."""

    day_number: int = Field(..., ge=1)
    theme: str = ""
    description: str = ""
    activities: list[Activity] = Field(default_factory=list)
    day_total: int = Field(default=0, ge=0, description="Sum of activity costs in VND")
    user_modified: bool = False

    def recalculate_total(self) -> int:
        self.day_total = sum(a.cost for a in self.activities)
        return self.day_total


class Tip(CamelModel):
    id: str
    content: str
    category: TipCategory = TipCategory.GENERAL


class ItineraryDocument(BaseModel):
    """The root aggregate under edit."""

    model_config = ConfigDict(populate_by_name=True)

    destination: str = ""
    summary: str = ""
    days: list[Day] = Field(default_factory=list, alias="itinerary_data")
    travel_tips: list[Tip] = Field(default_factory=list)
    duration_days: int = 0

    @model_validator(mode="after")
    def sync_duration(self) -> Self:
        self.duration_days = len(self.days)
        return self

    def to_payload(self) -> dict[str, Any]:
        """Serialise the whole document for a save call."""
        self.duration_days = len(self.days)
        return self.model_dump(mode="json", by_alias=True)


class Totals(CamelModel):
    total_days: int = 0
    total_activities: int = 0
    total_cost: int = 0


# --- Drafts (unvalidated form input) ---


class ActivityDraft(CamelModel):
    """
    Activity form input as typed by the user.

    Fields are deliberately loose: the store validates and coerces them
    when the draft is applied.
    """

    activity_id: str | None = None
    activity: str | None = ""
    time: str | None = ""
    duration: str | int | None = None
    cost: int | float | str | None = 0
    type: str = ActivityType.SIGHTSEEING.value
    location: str | None = ""
    time_slot: str | None = None

    @classmethod
    def blank(cls) -> Self:
        """Pre-filled draft for the "add activity" form."""
        return cls(
            activity="New Activity",
            time=DEFAULT_DRAFT_TIME,
            duration=DEFAULT_DRAFT_DURATION_MINUTES,
            time_slot="morning",
        )

    @classmethod
    def from_activity(cls, activity: Activity) -> Self:
        return cls.model_validate(activity.model_dump(mode="json"))


class TipDraft(CamelModel):
    id: str | None = None
    content: str | None = ""
    category: str = TipCategory.GENERAL.value

    @classmethod
    def from_tip(cls, tip: Tip) -> Self:
        return cls.model_validate(tip.model_dump(mode="json"))
