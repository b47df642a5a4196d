from httpx import codes

from itinerary_editor.errors.base import BaseAppError


class SessionRequiredError(BaseAppError):
    """Raised when editing is attempted before the itinerary has been loaded."""

    def __init__(self, detail: str = "Editing session is not open") -> None:
        super().__init__(detail=detail, status_code=codes.CONFLICT)
