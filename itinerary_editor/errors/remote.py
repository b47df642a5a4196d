from httpx import codes

from itinerary_editor.errors.base import BaseAppError, ErrorKind
from itinerary_editor.errors.document import MaxActivitiesError, MaxDaysError


class RemoteStoreError(BaseAppError):
    """Base exception for remote store failures."""

    def __init__(
        self,
        detail: str = "Remote store error",
        status_code: int = codes.BAD_GATEWAY,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class NotFoundError(RemoteStoreError):
    """The itinerary or activity was deleted or is not accessible."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, detail: str = "Itinerary not found") -> None:
        super().__init__(detail, codes.NOT_FOUND)


class AccessDeniedError(RemoteStoreError):
    """The user is authenticated but does not own the itinerary."""

    kind = ErrorKind.ACCESS_DENIED

    def __init__(self, detail: str = "Access denied") -> None:
        super().__init__(detail, codes.FORBIDDEN)


class AuthRequiredError(RemoteStoreError):
    """No valid session token."""

    kind = ErrorKind.AUTH_REQUIRED

    def __init__(self, detail: str = "Authentication required. Please login first.") -> None:
        super().__init__(detail, codes.UNAUTHORIZED)


class MaxDaysExceededError(MaxDaysError):
    """The server refused a document with too many days."""


class MaxActivitiesExceededError(MaxActivitiesError):
    """The server refused a day with too many activities."""


class InvalidPayloadError(RemoteStoreError):
    """The server rejected the document content."""

    kind = ErrorKind.VALIDATION

    def __init__(self, detail: str = "Invalid data provided") -> None:
        super().__init__(detail, codes.BAD_REQUEST)


class RemoteNetworkError(RemoteStoreError):
    """The remote store could not be reached."""

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        detail: str = "Unable to connect to server. Please check your internet connection.",
    ) -> None:
        super().__init__(detail, codes.SERVICE_UNAVAILABLE)
