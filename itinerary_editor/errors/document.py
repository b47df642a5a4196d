from httpx import codes

from itinerary_editor.configs import MAX_ACTIVITIES_PER_DAY, MAX_DAYS
from itinerary_editor.errors.base import BaseAppError, ErrorKind


class DocumentValidationError(BaseAppError):
    """Raised when a local edit is refused before reaching the network."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        detail: str = "Validation Error",
        errors: list[str] | None = None,
    ) -> None:
        """
        Initialize DocumentValidationError.

        Args:
            detail: Summary message.
            errors: Every human-readable problem found, in the order found.
        """
        super().__init__(detail=detail, status_code=codes.UNPROCESSABLE_ENTITY)
        self.errors = errors or [detail]

    def __str__(self) -> str:
        return ", ".join(self.errors)


class QuotaExceededError(BaseAppError):
    """Raised when an edit would exceed the day or activity limits."""

    kind = ErrorKind.QUOTA_EXCEEDED

    def __init__(self, detail: str = "Quota exceeded") -> None:
        super().__init__(detail=detail, status_code=codes.BAD_REQUEST)


class MaxDaysError(QuotaExceededError):
    def __init__(self, detail: str = f"Maximum {MAX_DAYS} days allowed") -> None:
        super().__init__(detail)


class MaxActivitiesError(QuotaExceededError):
    def __init__(
        self,
        detail: str = f"Maximum {MAX_ACTIVITIES_PER_DAY} activities per day allowed",
    ) -> None:
        super().__init__(detail)
