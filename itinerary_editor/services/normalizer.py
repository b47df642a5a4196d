# itinerary_editor/services/normalizer.py

"""
Import normalizer.

Converts a server-shaped itinerary (nested day headers, ``timeSlot`` buckets,
durations in minutes, heterogeneous field names) into the canonical
``ItineraryDocument``. Every function here is pure, and normalising an already
canonical document returns an equal document.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from itinerary_editor.schemas.itinerary import (
    Activity,
    ActivityType,
    Day,
    ItineraryDocument,
    Tip,
    TipCategory,
)
from itinerary_editor.utils import to_non_negative_int

# Verb used to build a name from "type + location"
TYPE_ACTIONS: dict[str, str] = {
    "sightseeing": "Visit",
    "adventure": "Explore",
    "food": "Dine at",
    "transport": "Travel to",
    "accommodation": "Stay at",
}
DEFAULT_ACTION = "Visit"

# Name used when there is no location either
TYPE_FALLBACK_NAMES: dict[str, str] = {
    "sightseeing": "Sightseeing Activity",
    "adventure": "Adventure Activity",
    "food": "Dining Experience",
    "transport": "Transportation",
    "accommodation": "Accommodation",
}
DEFAULT_NAME = "Activity"

# Candidate clock times per slot, consumed by activity index
TIME_SLOTS: dict[str, tuple[str, ...]] = {
    "morning": ("08:00", "09:00", "10:00", "11:00"),
    "afternoon": ("12:00", "13:00", "14:00", "15:00"),
    "evening": ("16:00", "17:00", "18:00", "19:00"),
    "night": ("20:00", "21:00", "22:00"),
}
DEFAULT_SLOT = "morning"

MISSING_DURATION = "1 hour"
IMPORT_DEFAULT_DURATION = "2 hours"


def _first(record: Mapping[str, Any], *keys: str) -> Any:  # noqa: ANN401
    """Return the first truthy value among ``keys``."""
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def activity_name(record: Mapping[str, Any]) -> str:
    """
    Build a display name for an activity that arrived without one.

    Args:
        record: Raw activity record.

    Returns:
        ``"{verb} {place}"`` from the location's first comma-separated part,
        or a per-type label when there is no location.

    Examples:
    --------
    >>> activity_name({"location": "Hoan Kiem Lake, Hanoi", "type": "sightseeing"})
    'Visit Hoan Kiem Lake'
    >>> activity_name({"type": "food"})
    'Dining Experience'
    """
    kind = str(_first(record, "activityType", "type") or "")
    location = record.get("location")
    if location:
        place = str(location).split(",")[0]
        return f"{TYPE_ACTIONS.get(kind, DEFAULT_ACTION)} {place}"
    return TYPE_FALLBACK_NAMES.get(kind, DEFAULT_NAME)


def time_from_slot(time_slot: str | None, activity_index: int = 0) -> str:
    """
    Resolve a time-of-day bucket to a concrete clock time.

    Activities sharing a slot are spread over its candidate times by index
    and wrap around once the list is exhausted.

    Examples:
    --------
    >>> time_from_slot("morning", 5)
    '09:00'
    """
    slots = TIME_SLOTS.get(str(time_slot or "").lower(), TIME_SLOTS[DEFAULT_SLOT])
    return slots[activity_index % len(slots)]


def format_duration(minutes: int | None) -> str:
    """
    Convert a duration in minutes to a human readable string.

    Examples:
    --------
    >>> format_duration(45)
    '45 minutes'
    >>> format_duration(120)
    '2 hours'
    >>> format_duration(90)
    '1h 30m'
    >>> format_duration(None)
    '1 hour'
    """
    if not minutes:
        return MISSING_DURATION
    if minutes < 60:
        return f"{minutes} minutes"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return f"{hours}h {rest}m"


def coerce_duration(value: object, default: str = MISSING_DURATION) -> str:
    """Keep text durations, convert minute counts, and fall back to ``default``."""
    if isinstance(value, bool) or value in (None, ""):
        return default
    if isinstance(value, int | float):
        return format_duration(int(value)) if value else default
    text = str(value).strip()
    if text.isdigit():
        return format_duration(int(text)) if int(text) else default
    return text or default


def normalize_activity(record: Mapping[str, Any], activity_index: int) -> Activity:
    clock = _first(record, "time", "start_time")
    time_slot = record.get("timeSlot") or record.get("time_slot")
    raw_id = _first(record, "activityId", "id", "_id")

    return Activity(
        activity_id=str(raw_id) if raw_id is not None else None,
        activity=str(_first(record, "activity", "name", "activity_name") or activity_name(record)),
        time=str(clock) if clock else time_from_slot(time_slot, activity_index),
        duration=coerce_duration(record.get("duration"), IMPORT_DEFAULT_DURATION),
        cost=to_non_negative_int(record.get("cost")),
        type=ActivityType.coerce(_first(record, "activityType", "type")),
        location=str(record.get("location") or ""),
        time_slot=str(time_slot) if time_slot else None,
        user_modified=bool(record.get("userModified") or record.get("user_modified")),
    )


def normalize_day(record: Mapping[str, Any], day_index: int) -> Day:
    """
    Normalise one day.

    Accepts both the nested server shape
    (``{"itinerary": {...header...}, "activities": [...]}``) and a flat day.
    """
    header = record.get("itinerary")
    if not isinstance(header, Mapping):
        header = record

    raw_activities = record.get("activities") or header.get("activities") or []
    activities = [
        normalize_activity(a, i) for i, a in enumerate(raw_activities) if isinstance(a, Mapping)
    ]

    number = to_non_negative_int(_first(header, "day_number", "dayNumber", "day")) or day_index + 1
    activities_total = sum(a.cost for a in activities)

    return Day(
        day_number=number,
        theme=str(_first(header, "title", "theme") or f"Day {number}"),
        description=str(header.get("description") or ""),
        activities=activities,
        day_total=to_non_negative_int(
            _first(header, "day_total", "dayTotal"),
            default=activities_total,
        ),
        user_modified=bool(header.get("user_modified") or header.get("userModified")),
    )


def normalize_tip(record: object, tip_index: int) -> Tip | None:
    if isinstance(record, str):
        content, tip_id, category = record, None, None
    elif isinstance(record, Mapping):
        content = _first(record, "content", "tip", "text")
        tip_id = _first(record, "id", "_id")
        category = record.get("category")
    else:
        return None

    if not content or not str(content).strip():
        return None
    return Tip(
        id=str(tip_id) if tip_id else f"tip_{tip_index + 1}",
        content=str(content),
        category=TipCategory.coerce(category),
    )


def _sequence(data: Mapping[str, Any], *keys: str) -> Sequence[Any]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, list | tuple):
            return value
    return []


def normalize_itinerary(raw: Mapping[str, Any] | ItineraryDocument | None) -> ItineraryDocument:
    """
    Convert a raw itinerary into the canonical editable document.

    Args:
        raw: The ``data`` object of a load or save response, or a document
            that is already canonical.

    Returns:
        A new ``ItineraryDocument``; ``raw`` is never modified.
    """
    if isinstance(raw, ItineraryDocument):
        raw = raw.to_payload()
    data: Mapping[str, Any] = raw or {}

    raw_days = [d for d in _sequence(data, "itinerary_data", "days") if isinstance(d, Mapping)]
    days = [normalize_day(d, i) for i, d in enumerate(raw_days)]
    # Day numbers follow position; the server's numbering may have gaps
    for position, day in enumerate(days, start=1):
        day.day_number = position
    tips = [
        tip
        for i, t in enumerate(_sequence(data, "travel_tips", "travelTips"))
        if (tip := normalize_tip(t, i)) is not None
    ]

    return ItineraryDocument(
        destination=str(data.get("destination") or ""),
        summary=str(data.get("summary") or ""),
        days=days,
        travel_tips=tips,
    )
