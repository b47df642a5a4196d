"""Utility helper functions."""

from itinerary_editor.utils.helpers import (
    is_clock_time,
    is_local_id,
    local_id,
    time_taken,
    to_non_negative_int,
    today_str,
)

__all__ = [
    "is_clock_time",
    "is_local_id",
    "local_id",
    "time_taken",
    "to_non_negative_int",
    "today_str",
]
