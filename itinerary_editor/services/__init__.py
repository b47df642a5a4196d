from itinerary_editor.services.coordinator import PersistenceCoordinator
from itinerary_editor.services.identity import IdentityResolver
from itinerary_editor.services.normalizer import normalize_itinerary
from itinerary_editor.services.session import EditingSession
from itinerary_editor.services.store import ItineraryDocumentStore, calculate_totals

__all__ = [
    "EditingSession",
    "IdentityResolver",
    "ItineraryDocumentStore",
    "PersistenceCoordinator",
    "calculate_totals",
    "normalize_itinerary",
]
