from itinerary_editor.errors.base import BASE_EXCEPTION, BaseAppError, ErrorKind, error_kind
from itinerary_editor.errors.document import (
    DocumentValidationError,
    MaxActivitiesError,
    MaxDaysError,
    QuotaExceededError,
)
from itinerary_editor.errors.remote import (
    AccessDeniedError,
    AuthRequiredError,
    InvalidPayloadError,
    MaxActivitiesExceededError,
    MaxDaysExceededError,
    NotFoundError,
    RemoteNetworkError,
    RemoteStoreError,
)
from itinerary_editor.errors.session import SessionRequiredError

__all__ = [
    "BASE_EXCEPTION",
    "AccessDeniedError",
    "AuthRequiredError",
    "BaseAppError",
    "DocumentValidationError",
    "ErrorKind",
    "InvalidPayloadError",
    "MaxActivitiesError",
    "MaxActivitiesExceededError",
    "MaxDaysError",
    "MaxDaysExceededError",
    "NotFoundError",
    "QuotaExceededError",
    "RemoteNetworkError",
    "RemoteStoreError",
    "SessionRequiredError",
    "error_kind",
]
