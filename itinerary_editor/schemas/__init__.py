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
from itinerary_editor.schemas.outcome import (
    OutcomeStatus,
    PersistenceOutcome,
    SaveStatus,
)
from itinerary_editor.schemas.remote import EditorUser, SaveResponse

__all__ = [
    "Activity",
    "ActivityDraft",
    "ActivityType",
    "Day",
    "EditorUser",
    "ItineraryDocument",
    "OutcomeStatus",
    "PersistenceOutcome",
    "SaveResponse",
    "SaveStatus",
    "Tip",
    "TipCategory",
    "TipDraft",
    "Totals",
]
