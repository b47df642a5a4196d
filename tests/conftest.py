# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from copy import deepcopy
from typing import Any

import pytest

from itinerary_editor.clients import MemoryRemoteStore, NoticeLevel
from itinerary_editor.configs import EditorConfig
from itinerary_editor.schemas import EditorUser, ItineraryDocument
from itinerary_editor.services import (
    IdentityResolver,
    ItineraryDocumentStore,
    PersistenceCoordinator,
    normalize_itinerary,
)

ORIGINAL_ID = "665f1c2e9b1d4a0012ab34cd"

RAW_ITINERARY: dict[str, Any] = {
    "_id": ORIGINAL_ID,
    "destination": "Hanoi",
    "summary": "Two days in the capital",
    "itinerary_data": [
        {
            "itinerary": {"day_number": 1, "title": "Old Quarter", "description": "Lakes"},
            "activities": [
                {
                    "_id": "act-1",
                    "activityType": "sightseeing",
                    "location": "Hoan Kiem Lake, Hanoi",
                    "timeSlot": "morning",
                    "duration": 120,
                    "cost": 500000,
                },
            ],
        },
        {
            "itinerary": {"day_number": 2, "title": "Food tour"},
            "activities": [
                {
                    "id": "act-2",
                    "activity": "Pho breakfast",
                    "activityType": "food",
                    "timeSlot": "morning",
                    "duration": 60,
                    "cost": 300000,
                },
                {
                    "id": "act-3",
                    "activity": "Water puppet show",
                    "activityType": "entertainment",
                    "timeSlot": "evening",
                    "duration": "1h 30m",
                    "cost": 200000,
                },
            ],
        },
    ],
    "travel_tips": [
        "Carry some cash",
        {"content": "Avoid rush hour", "category": "transport"},
    ],
}


class RecordingNotifier:
    """Notifier collecting every notice."""

    def __init__(self) -> None:
        self.notices: list[tuple[NoticeLevel, str]] = []

    def notify(self, level: NoticeLevel, message: str) -> None:
        self.notices.append((level, message))

    def messages(self, level: NoticeLevel) -> list[str]:
        return [m for lvl, m in self.notices if lvl == level]


class RecordingNavigator:
    """Navigator collecting every route change."""

    def __init__(self) -> None:
        self.visits: list[tuple[str, bool]] = []

    def navigate(self, path: str, *, replace: bool = False) -> None:
        self.visits.append((path, replace))

    @property
    def paths(self) -> list[str]:
        return [path for path, _ in self.visits]


class StubConfirmer:
    """Confirmer answering with a fixed value."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.asked: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.answer


@pytest.fixture
def raw_itinerary() -> dict[str, Any]:
    """Server-shaped itinerary: nested day headers, slots and minute durations."""
    return deepcopy(RAW_ITINERARY)


@pytest.fixture
def document(raw_itinerary: dict[str, Any]) -> ItineraryDocument:
    return normalize_itinerary(raw_itinerary)


@pytest.fixture
def store(document: ItineraryDocument) -> ItineraryDocumentStore:
    return ItineraryDocumentStore(document)


@pytest.fixture
def fast_config() -> EditorConfig:
    """Editor configuration with every delay shortened for tests."""
    return EditorConfig(
        autosave_delay=0.05,
        saved_display=0.05,
        autosave_error_display=0.05,
        save_error_display=0.05,
        not_found_redirect_delay=0.05,
        login_redirect_delay=0.05,
        exit_redirect_delay=0.05,
    )


@pytest.fixture
def remote(raw_itinerary: dict[str, Any]) -> MemoryRemoteStore:
    """In-memory remote store seeded with the sample itinerary."""
    memory = MemoryRemoteStore()
    memory.put(ORIGINAL_ID, raw_itinerary)
    return memory


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def user() -> EditorUser:
    return EditorUser(user_id="user-1", full_name="Lan Nguyen", role="traveler")


@pytest.fixture
async def coordinator(
    store: ItineraryDocumentStore,
    remote: MemoryRemoteStore,
    notifier: RecordingNotifier,
    fast_config: EditorConfig,
) -> AsyncGenerator[PersistenceCoordinator]:
    """Coordinator saving to the seeded itinerary, closed on teardown."""
    coord = PersistenceCoordinator(
        store,
        remote,
        IdentityResolver(ORIGINAL_ID),
        notifier,
        fast_config,
    )
    yield coord
    await coord.close()


@pytest.fixture
def confirm_yes() -> StubConfirmer:
    return StubConfirmer(answer=True)


@pytest.fixture
def confirm_no() -> StubConfirmer:
    return StubConfirmer(answer=False)


@pytest.fixture
def original_id() -> str:
    return ORIGINAL_ID
