# itinerary_editor/services/store.py

"""
Itinerary document store.

Owns the in-memory document for the editing session and exposes synchronous,
validated mutation primitives. Nothing here touches the network: refused
edits raise ``DocumentValidationError`` or ``QuotaExceededError`` and leave
the document exactly as it was.
"""

from logging import getLogger
from typing import Literal

from itinerary_editor.configs import MAX_ACTIVITIES_PER_DAY, MAX_DAYS, file_logger
from itinerary_editor.errors import DocumentValidationError, MaxActivitiesError, MaxDaysError
from itinerary_editor.schemas.itinerary import (
    Activity,
    ActivityDraft,
    ActivityType,
    Day,
    ItineraryDocument,
    Tip,
    TipCategory,
    TipDraft,
    Totals,
)
from itinerary_editor.services.normalizer import coerce_duration
from itinerary_editor.utils import is_clock_time, local_id, to_non_negative_int

logger = file_logger(getLogger(__name__))

Direction = Literal["up", "down"]

DOCUMENT_FIELDS = frozenset({"destination", "summary"})
DAY_FIELDS = frozenset({"theme", "description"})
ACTIVITY_FIELDS = frozenset({"activity", "time", "duration", "cost", "type", "location"})


def validate_activity(draft: ActivityDraft) -> list[str]:
    """
    Collect every problem with an activity draft.

    Returns:
        Human-readable messages; empty when the draft can be applied.
    """
    errors: list[str] = []
    if not (draft.activity or "").strip():
        errors.append("Activity name is required")
    time = (draft.time or "").strip()
    if not time:
        errors.append("Time is required")
    elif not is_clock_time(time):
        errors.append("Time must be in HH:MM format")
    return errors


def validate_tip(draft: TipDraft) -> list[str]:
    if not (draft.content or "").strip():
        return ["Tip content is required"]
    return []


def calculate_totals(document: ItineraryDocument) -> Totals:
    """Aggregate day, activity and cost counts for the summary panel."""
    return Totals(
        total_days=len(document.days),
        total_activities=sum(len(d.activities) for d in document.days),
        total_cost=sum(a.cost for d in document.days for a in d.activities),
    )


class ItineraryDocumentStore:
    """In-memory owner of the itinerary document."""

    def __init__(self, document: ItineraryDocument | None = None) -> None:
        self._document = document or ItineraryDocument()
        self._revision = 0

    @property
    def document(self) -> ItineraryDocument:
        return self._document

    @property
    def revision(self) -> int:
        """Counter bumped by every mutation, used to detect stale save responses."""
        return self._revision

    def replace(self, document: ItineraryDocument) -> None:
        """Swap in a whole document, e.g. the server's reconciled copy."""
        self._document = document
        self._touch()

    def snapshot(self) -> ItineraryDocument:
        return self._document.model_copy(deep=True)

    def calculate_totals(self) -> Totals:
        return calculate_totals(self._document)

    # --- Scalar edits ---

    def set_field(self, path: str, value: str) -> None:
        if path not in DOCUMENT_FIELDS:
            raise DocumentValidationError(f"Unknown itinerary field: {path}")
        setattr(self._document, path, "" if value is None else str(value))
        self._touch()

    def set_day_field(self, day_index: int, field: str, value: str) -> None:
        if field not in DAY_FIELDS:
            raise DocumentValidationError(f"Unknown day field: {field}")
        day = self._day(day_index)
        setattr(day, field, "" if value is None else str(value))
        day.user_modified = True
        self._touch()

    def set_activity_field(
        self,
        day_index: int,
        activity_index: int,
        field: str,
        value: object,
    ) -> None:
        """
        Update one activity field as typed in the inline grid.

        ``cost`` is coerced to a non-negative integer (0 when unparsable),
        ``duration`` minute counts are formatted and ``type`` must be a known
        activity type.
        """
        if field not in ACTIVITY_FIELDS:
            raise DocumentValidationError(f"Unknown activity field: {field}")
        day = self._day(day_index)
        activity = self._activity(day, activity_index)

        match field:
            case "cost":
                activity.cost = to_non_negative_int(value)
            case "duration":
                activity.duration = coerce_duration(value)
            case "type":
                if str(value) not in {t.value for t in ActivityType}:
                    raise DocumentValidationError(f"Invalid activity type: {value}")
                activity.type = ActivityType(str(value))
            case _:
                setattr(activity, field, "" if value is None else str(value))

        activity.user_modified = True
        day.user_modified = True
        day.recalculate_total()
        self._touch()

    # --- Activities ---

    def add_activity(self, day_index: int, draft: ActivityDraft) -> Activity:
        day = self._day(day_index)
        self._raise_if_invalid(validate_activity(draft))
        if len(day.activities) >= MAX_ACTIVITIES_PER_DAY:
            raise MaxActivitiesError()

        activity = self._build_activity(draft, activity_id=draft.activity_id or local_id())
        day.activities.append(activity)
        day.user_modified = True
        day.recalculate_total()
        self._touch()
        logger.info(f"Added activity {activity.activity_id} to day {day.day_number}")
        return activity

    def edit_activity(self, day_index: int, activity_index: int, draft: ActivityDraft) -> Activity:
        day = self._day(day_index)
        current = self._activity(day, activity_index)
        self._raise_if_invalid(validate_activity(draft))

        activity = self._build_activity(draft, activity_id=current.activity_id)
        day.activities[activity_index] = activity
        day.user_modified = True
        day.recalculate_total()
        self._touch()
        return activity

    def delete_activity(self, day_index: int, activity_index: int) -> Activity:
        day = self._day(day_index)
        self._activity(day, activity_index)
        removed = day.activities.pop(activity_index)
        day.user_modified = True
        day.recalculate_total()
        self._touch()
        return removed

    def move_activity(self, day_index: int, activity_index: int, direction: Direction) -> bool:
        """
        Swap an activity with its neighbour.

        Returns:
            False, with nothing changed, when the activity is already first
            (moving up) or last (moving down).
        """
        if direction not in ("up", "down"):
            raise DocumentValidationError(f"Invalid direction: {direction}")
        day = self._day(day_index)
        self._activity(day, activity_index)

        target = activity_index - 1 if direction == "up" else activity_index + 1
        if target < 0 or target >= len(day.activities):
            return False

        acts = day.activities
        acts[activity_index], acts[target] = acts[target], acts[activity_index]
        day.user_modified = True
        self._touch()
        return True

    # --- Days ---

    def add_day(self) -> Day:
        days = self._document.days
        if len(days) >= MAX_DAYS:
            raise MaxDaysError()

        number = len(days) + 1
        day = Day(day_number=number, theme=f"Day {number}", user_modified=True)
        days.append(day)
        self._renumber_days()
        self._touch()
        logger.info(f"Added day {number}")
        return day

    def delete_day(self, day_index: int) -> Day:
        days = self._document.days
        self._day(day_index)
        if len(days) <= 1:
            raise DocumentValidationError("Cannot delete the only day in itinerary")

        removed = days.pop(day_index)
        self._renumber_days()
        self._touch()
        return removed

    # --- Travel tips ---

    def add_tip(self, draft: TipDraft) -> Tip:
        self._raise_if_invalid(validate_tip(draft))
        tip = Tip(
            id=draft.id or local_id("tip"),
            content=(draft.content or "").strip(),
            category=TipCategory.coerce(draft.category),
        )
        self._document.travel_tips.append(tip)
        self._touch()
        return tip

    def edit_tip(self, index: int, draft: TipDraft) -> Tip:
        current = self._tip(index)
        self._raise_if_invalid(validate_tip(draft))
        tip = Tip(
            id=current.id or draft.id or local_id("tip"),
            content=(draft.content or "").strip(),
            category=TipCategory.coerce(draft.category),
        )
        self._document.travel_tips[index] = tip
        self._touch()
        return tip

    def delete_tip(self, index: int) -> Tip:
        self._tip(index)
        removed = self._document.travel_tips.pop(index)
        self._touch()
        return removed

    # --- Internals ---

    def _touch(self) -> None:
        self._document.duration_days = len(self._document.days)
        self._revision += 1

    def _renumber_days(self) -> None:
        for position, day in enumerate(self._document.days, start=1):
            day.day_number = position

    def _day(self, day_index: int) -> Day:
        days = self._document.days
        if not 0 <= day_index < len(days):
            raise DocumentValidationError(f"Day {day_index + 1} does not exist")
        return days[day_index]

    def _activity(self, day: Day, activity_index: int) -> Activity:
        if not 0 <= activity_index < len(day.activities):
            msg = f"Activity {activity_index + 1} does not exist on day {day.day_number}"
            raise DocumentValidationError(msg)
        return day.activities[activity_index]

    def _tip(self, index: int) -> Tip:
        tips = self._document.travel_tips
        if not 0 <= index < len(tips):
            raise DocumentValidationError(f"Tip {index + 1} does not exist")
        return tips[index]

    @staticmethod
    def _raise_if_invalid(errors: list[str]) -> None:
        if errors:
            raise DocumentValidationError(errors[0], errors=errors)

    @staticmethod
    def _build_activity(draft: ActivityDraft, activity_id: str | None) -> Activity:
        return Activity(
            activity_id=activity_id,
            activity=(draft.activity or "").strip(),
            time=(draft.time or "").strip(),
            duration=coerce_duration(draft.duration),
            cost=to_non_negative_int(draft.cost),
            type=ActivityType.coerce(draft.type),
            location=(draft.location or "").strip(),
            time_slot=draft.time_slot,
            user_modified=True,
        )
