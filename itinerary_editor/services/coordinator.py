# itinerary_editor/services/coordinator.py

"""
Persistence coordinator.

Sits between user operations and the remote store. Each operation mutates the
``ItineraryDocumentStore`` first and then persists the whole document through
one of two channels:

- Immediate: structural edits (add/edit/delete/move activity, add/delete day,
  tip changes) are saved right away and the caller awaits the result.
- Debounced: typing in scalar fields only schedules a save; a burst of edits
  produces one save carrying the final state.

At most one save is in flight. Failures never roll the document back, they
leave it marked unsaved and flag ``dirty_since_failed_save``.
"""

from asyncio import TimerHandle, get_running_loop
from collections.abc import Callable
from logging import getLogger
from time import perf_counter
from typing import Any

from itinerary_editor.clients.protocols import NoticeLevel, NotifierProtocol, RemoteStoreProtocol
from itinerary_editor.configs import EditorConfig, file_logger
from itinerary_editor.errors import (
    BASE_EXCEPTION,
    BaseAppError,
    DocumentValidationError,
    ErrorKind,
    QuotaExceededError,
    error_kind,
)
from itinerary_editor.managers import Debouncer, OperationLocks, OperationType
from itinerary_editor.schemas.itinerary import ActivityDraft, TipDraft
from itinerary_editor.schemas.outcome import OutcomeStatus, PersistenceOutcome, SaveStatus
from itinerary_editor.schemas.remote import SaveResponse
from itinerary_editor.services.identity import IdentityResolver
from itinerary_editor.services.normalizer import normalize_itinerary
from itinerary_editor.services.store import Direction, ItineraryDocumentStore
from itinerary_editor.utils import is_local_id, time_taken

logger = file_logger(getLogger(__name__))

# Refused locally, nothing sent
LOCAL_ERRORS = (DocumentValidationError, QuotaExceededError)
# Anything a remote call may raise
REMOTE_ERRORS = (BaseAppError, ValueError, *BASE_EXCEPTION)

# Autosave failures that are not worth interrupting the user for
SILENT_AUTOSAVE_ERRORS = frozenset({ErrorKind.AUTH_REQUIRED, ErrorKind.ACCESS_DENIED})
AUTOSAVE_NOT_FOUND_MESSAGE = "Itinerary not found. It may have been deleted."


class PersistenceCoordinator:
    """Routes document mutations to the remote store and tracks save state."""

    def __init__(
        self,
        store: ItineraryDocumentStore,
        remote: RemoteStoreProtocol,
        identity: IdentityResolver,
        notifier: NotifierProtocol | None = None,
        config: EditorConfig | None = None,
    ) -> None:
        """
        Initialize the coordinator.

        Args:
            store: Owner of the document being edited.
            remote: Remote store the document is saved to.
            identity: Resolves the id saves are sent to.
            notifier: Receives user-facing success and error notices.
            config: Timing configuration; defaults are read from the environment.
        """
        self._store = store
        self._remote = remote
        self._identity = identity
        self._notifier = notifier
        self._config = config or EditorConfig()

        self._locks = OperationLocks()
        self._debouncer = Debouncer(self._autosave, self._config.autosave_delay, name="autosave")
        self._status = SaveStatus.IDLE
        self._status_reset: TimerHandle | None = None

        self._unsaved = False
        self._dirty_since_failed_save = False
        self._last_error: ErrorKind | None = None

        # Sequence of issued saves and of the last one whose response was applied
        self._save_seq = 0
        self._applied_seq = 0

    # --- State ---

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved

    @property
    def dirty_since_failed_save(self) -> bool:
        """True once a save failed, until the next save succeeds."""
        return self._dirty_since_failed_save

    @property
    def last_error(self) -> ErrorKind | None:
        return self._last_error

    @property
    def locks(self) -> OperationLocks:
        return self._locks

    @property
    def autosave_pending(self) -> bool:
        return self._debouncer.pending

    @property
    def saving(self) -> bool:
        return self._locks.held(OperationType.SAVE)

    # --- Debounced channel ---

    def edit_field(self, path: str, value: str) -> PersistenceOutcome:
        """Edit ``destination`` or ``summary``."""
        return self._debounced(self._store.set_field, path, value)

    def edit_day_field(self, day_index: int, field: str, value: str) -> PersistenceOutcome:
        return self._debounced(self._store.set_day_field, day_index, field, value)

    def edit_activity_field(
        self,
        day_index: int,
        activity_index: int,
        field: str,
        value: object,
    ) -> PersistenceOutcome:
        return self._debounced(
            self._store.set_activity_field,
            day_index,
            activity_index,
            field,
            value,
        )

    async def flush(self) -> bool:
        """Run a pending debounced save now. Returns whether one was pending."""
        return await self._debouncer.flush()

    # --- Immediate channel ---

    async def add_activity(self, day_index: int, draft: ActivityDraft) -> PersistenceOutcome:
        return await self._immediate(
            OperationType.ADD_ACTIVITY,
            "Activity added!",
            self._store.add_activity,
            day_index,
            draft,
        )

    async def edit_activity(
        self,
        day_index: int,
        activity_index: int,
        draft: ActivityDraft,
    ) -> PersistenceOutcome:
        return await self._immediate(
            OperationType.EDIT_ACTIVITY,
            "Activity updated!",
            self._store.edit_activity,
            day_index,
            activity_index,
            draft,
        )

    async def delete_activity(self, day_index: int, activity_index: int) -> PersistenceOutcome:
        """
        Delete an activity.

        Persisted activities are first deleted through the dedicated endpoint
        on a best-effort basis; the whole document is saved regardless.
        """
        with self._locks.hold(OperationType.DELETE_ACTIVITY) as acquired:
            if not acquired:
                return PersistenceOutcome.of(OutcomeStatus.IGNORED)
            try:
                removed = self._store.delete_activity(day_index, activity_index)
            except LOCAL_ERRORS as e:
                return self._reject(e)

            self._mark_unsaved()
            if removed.activity_id and not is_local_id(removed.activity_id):
                await self._delete_remote_activity(removed.activity_id)
            return await self._persist("Activity deleted!")

    async def move_activity(
        self,
        day_index: int,
        activity_index: int,
        direction: Direction,
    ) -> PersistenceOutcome:
        return await self._immediate(
            OperationType.MOVE_ACTIVITY,
            "Activity moved!",
            self._store.move_activity,
            day_index,
            activity_index,
            direction,
        )

    async def add_day(self) -> PersistenceOutcome:
        if self.saving:
            logger.info("Add day ignored while a save is in flight")
            return PersistenceOutcome.of(OutcomeStatus.IGNORED)
        return await self._immediate(OperationType.ADD_DAY, "New day added!", self._store.add_day)

    async def delete_day(self, day_index: int) -> PersistenceOutcome:
        return await self._immediate(
            OperationType.DELETE_DAY,
            "Day deleted!",
            self._store.delete_day,
            day_index,
        )

    async def add_tip(self, draft: TipDraft) -> PersistenceOutcome:
        return await self._immediate(OperationType.ADD_TIP, "Tip added!", self._store.add_tip, draft)

    async def edit_tip(self, index: int, draft: TipDraft) -> PersistenceOutcome:
        return await self._immediate(
            OperationType.EDIT_TIP,
            "Tip updated!",
            self._store.edit_tip,
            index,
            draft,
        )

    async def delete_tip(self, index: int) -> PersistenceOutcome:
        return await self._immediate(
            OperationType.DELETE_TIP,
            "Tip deleted!",
            self._store.delete_tip,
            index,
        )

    # --- Explicit save ---

    async def save_now(self) -> tuple[PersistenceOutcome, SaveResponse | None]:
        """
        Save the whole document immediately, replacing any pending autosave.

        Returns:
            The outcome and, on success, the server's response. Notifying the
            user is left to the caller.
        """
        self._debouncer.cancel()
        return await self._save(autosave=False)

    async def close(self) -> None:
        """Cancel the autosave timer and the status reset timer."""
        await self._debouncer.close()
        self._cancel_status_reset()

    # --- Internals ---

    def _debounced(self, mutate: Callable[..., Any], *args: Any) -> PersistenceOutcome:  # noqa: ANN401
        try:
            mutate(*args)
        except LOCAL_ERRORS as e:
            return self._reject(e)
        self._mark_unsaved()
        self._debouncer.trigger()
        return PersistenceOutcome.of(OutcomeStatus.PENDING)

    async def _immediate(
        self,
        operation: OperationType,
        success_message: str,
        mutate: Callable[..., Any],
        *args: Any,  # noqa: ANN401
    ) -> PersistenceOutcome:
        with self._locks.hold(operation) as acquired:
            if not acquired:
                return PersistenceOutcome.of(OutcomeStatus.IGNORED)
            try:
                result = mutate(*args)
            except LOCAL_ERRORS as e:
                return self._reject(e)
            # move_activity past a boundary
            if result is False:
                return PersistenceOutcome.of(OutcomeStatus.UNCHANGED)

            self._mark_unsaved()
            return await self._persist(success_message)

    async def _persist(self, success_message: str) -> PersistenceOutcome:
        # The whole document goes out now, so a pending autosave is redundant
        self._debouncer.cancel()
        outcome, _ = await self._save(autosave=False)
        if outcome.status is OutcomeStatus.SAVED:
            self._notify(NoticeLevel.SUCCESS, success_message)
        elif outcome.status is OutcomeStatus.FAILED:
            self._notify(NoticeLevel.ERROR, outcome.messages[0])
        return outcome

    async def _autosave(self) -> None:
        if not self._unsaved:
            return
        outcome, _ = await self._save(autosave=True)
        if outcome.status is not OutcomeStatus.FAILED:
            return

        if outcome.error in SILENT_AUTOSAVE_ERRORS:
            logger.warning("Autosave rejected by auth; session preserved")
        elif outcome.error is ErrorKind.NOT_FOUND:
            self._notify(NoticeLevel.ERROR, AUTOSAVE_NOT_FOUND_MESSAGE)
        elif outcome.error is ErrorKind.QUOTA_EXCEEDED:
            self._notify(NoticeLevel.ERROR, outcome.messages[0])
        else:
            self._notify(NoticeLevel.ERROR, f"Auto-save failed: {outcome.messages[0]}")

    async def _save(self, *, autosave: bool) -> tuple[PersistenceOutcome, SaveResponse | None]:
        if not self._locks.acquire(OperationType.SAVE):
            logger.info("Save already in flight, skipping")
            return PersistenceOutcome.of(OutcomeStatus.SKIPPED), None

        self._save_seq += 1
        seq = self._save_seq
        revision = self._store.revision
        target = self._identity.save_target
        start = perf_counter()
        self._set_status(SaveStatus.SAVING)
        try:
            response = await self._remote.save_document(target, self._store.document.to_payload())
            self._reconcile(response, seq, revision)
        except REMOTE_ERRORS as e:
            logger.warning(f"{'Autosave' if autosave else 'Save'} of {target} failed: {e}")
            self._dirty_since_failed_save = True
            self._last_error = error_kind(e)
            hold = self._config.autosave_error_display if autosave else self._config.save_error_display
            self._set_status(SaveStatus.ERROR, hold)
            return PersistenceOutcome.from_error(e), None
        finally:
            self._locks.release(OperationType.SAVE)

        self._dirty_since_failed_save = False
        self._last_error = None
        self._set_status(SaveStatus.SAVED, self._config.saved_display)
        logger.info(f"Saved itinerary {target} in {time_taken(start)}")
        return PersistenceOutcome.of(OutcomeStatus.SAVED), response

    def _reconcile(self, response: SaveResponse, seq: int, revision: int) -> None:
        """Adopt the server's copy unless it is stale or local edits happened meanwhile."""
        if seq < self._applied_seq:
            logger.info(f"Ignoring response of save #{seq}, #{self._applied_seq} already applied")
            return
        self._applied_seq = seq
        if response.data:
            self._identity.capture(response.data)

        if self._store.revision != revision:
            # Edits made while saving are not in this response; stay unsaved
            logger.info("Document changed during save, keeping local edits")
            return

        data = response.document_data
        if data is not None:
            self._store.replace(normalize_itinerary(data))
        self._unsaved = False

    async def _delete_remote_activity(self, activity_id: str) -> None:
        try:
            await self._remote.delete_activity(self._identity.save_target, activity_id)
        except REMOTE_ERRORS as e:
            logger.warning(f"Remote delete of activity {activity_id} failed: {e}")

    def _reject(self, error: BaseAppError) -> PersistenceOutcome:
        outcome = PersistenceOutcome.from_error(error, OutcomeStatus.REJECTED)
        logger.info(f"Edit rejected: {error}")
        self._notify(NoticeLevel.ERROR, ", ".join(outcome.messages))
        return outcome

    def _mark_unsaved(self) -> None:
        self._unsaved = True

    def _notify(self, level: NoticeLevel, message: str) -> None:
        if self._notifier is not None:
            self._notifier.notify(level, message)

    def _set_status(self, status: SaveStatus, hold: float | None = None) -> None:
        """Set the indicator, returning to idle after ``hold`` seconds when given."""
        self._cancel_status_reset()
        self._status = status
        if hold is not None:
            self._status_reset = get_running_loop().call_later(hold, self._reset_status)

    def _reset_status(self) -> None:
        self._status_reset = None
        self._status = SaveStatus.IDLE

    def _cancel_status_reset(self) -> None:
        if self._status_reset is not None:
            self._status_reset.cancel()
            self._status_reset = None
