"""Results reported by the persistence coordinator for each user operation."""

from enum import Enum, StrEnum
from typing import Self

from pydantic import BaseModel, Field

from itinerary_editor.errors import BaseAppError, DocumentValidationError, ErrorKind, error_kind


class SaveStatus(StrEnum):
    """Save indicator shown next to the editor."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class OutcomeStatus(Enum):
    SAVED = "saved"  # mutation applied and persisted
    PENDING = "pending"  # mutation applied, debounced save scheduled
    FAILED = "failed"  # mutation applied, save failed (no rollback)
    REJECTED = "rejected"  # refused locally, nothing changed
    IGNORED = "ignored"  # same operation already in flight
    SKIPPED = "skipped"  # mutation applied, save skipped because another is in flight
    UNCHANGED = "unchanged"  # valid no-op, e.g. moving past a boundary


class PersistenceOutcome(BaseModel):
    status: OutcomeStatus
    error: ErrorKind | None = None
    messages: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in (OutcomeStatus.SAVED, OutcomeStatus.PENDING, OutcomeStatus.UNCHANGED)

    @classmethod
    def of(cls, status: OutcomeStatus) -> Self:
        return cls(status=status)

    @classmethod
    def from_error(cls, exc: BaseException, status: OutcomeStatus = OutcomeStatus.FAILED) -> Self:
        """Build a failed or rejected outcome carrying the error's messages."""
        if isinstance(exc, DocumentValidationError):
            messages = list(exc.errors)
        elif isinstance(exc, BaseAppError):
            messages = [exc.detail]
        else:
            messages = [str(exc) or exc.__class__.__name__]
        return cls(status=status, error=error_kind(exc), messages=messages)
