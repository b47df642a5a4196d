"""Schemas exchanged with the remote store and the host application."""

from typing import Any

from pydantic import BaseModel, Field

DOCUMENT_KEYS = ("itinerary_data", "days")


class SaveResponse(BaseModel):
    """Envelope returned by a whole-document save."""

    success: bool = False
    data: dict[str, Any] | None = None
    message: str | None = None

    @property
    def document_data(self) -> dict[str, Any] | None:
        """The returned itinerary, when the server echoed a full document."""
        if self.data and any(isinstance(self.data.get(k), list) for k in DOCUMENT_KEYS):
            return self.data
        return None

    @property
    def new_id(self) -> str | None:
        """Top-level identifier of the saved itinerary, if the server sent one."""
        if not self.data:
            return None
        value = self.data.get("_id") or self.data.get("id")
        return str(value) if value else None


class EditorUser(BaseModel):
    """The logged-in traveler driving the session."""

    user_id: str = Field(..., min_length=1)
    full_name: str | None = None
    role: str | None = None
