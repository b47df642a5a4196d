"""Protocol definitions for the editor's collaborators."""

from collections.abc import Awaitable
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from itinerary_editor.schemas.remote import SaveResponse


@runtime_checkable
class RemoteStoreProtocol(Protocol):
    """
    Protocol for remote itinerary store implementations.

    Both RemoteStoreClient and MemoryRemoteStore conform to this protocol.
    Every method raises a ``RemoteStoreError`` subclass on failure.
    """

    def load_customizable(self, itinerary_id: str) -> Awaitable[dict[str, Any]]:
        """Get (creating it if needed) the editable clone of an itinerary."""
        ...

    def load_existing(
        self,
        itinerary_id: str,
        *,
        no_cache: bool = False,
    ) -> Awaitable[dict[str, Any]]:
        """Get an itinerary by id, optionally bypassing caches."""
        ...

    def save_document(self, itinerary_id: str, payload: dict[str, Any]) -> Awaitable[SaveResponse]:
        """Replace the whole itinerary document."""
        ...

    def delete_activity(self, itinerary_id: str, activity_id: str) -> Awaitable[bool]:
        """Delete one persisted activity."""
        ...


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@runtime_checkable
class NotifierProtocol(Protocol):
    """User-facing notifications (toasts)."""

    def notify(self, level: NoticeLevel, message: str) -> None: ...


@runtime_checkable
class NavigatorProtocol(Protocol):
    """Route changes in the host application."""

    def navigate(self, path: str, *, replace: bool = False) -> None: ...


@runtime_checkable
class ConfirmerProtocol(Protocol):
    """Yes/no prompt shown before discarding unsaved changes."""

    def confirm(self, message: str) -> bool: ...
