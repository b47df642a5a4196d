# itinerary_editor/services/session.py

"""
Editing session.

Wires the document store, identity resolver and persistence coordinator for
one itinerary and implements the page-level flows: opening (and cloning on
first customization), reloading, save-and-exit and cancel.
"""

from asyncio import TimerHandle, get_running_loop
from typing import Any

from itinerary_editor.clients.protocols import (
    ConfirmerProtocol,
    NavigatorProtocol,
    NoticeLevel,
    NotifierProtocol,
    RemoteStoreProtocol,
)
from itinerary_editor.configs import EditorConfig
from itinerary_editor.configs.settings import LOAD_ERROR_MESSAGE, SAVE_ERROR_MESSAGE
from itinerary_editor.errors import ErrorKind, SessionRequiredError, error_kind
from itinerary_editor.managers import OperationLocks, OperationType
from itinerary_editor.monitoring import bind_session, clear_context, get_logger
from itinerary_editor.schemas.itinerary import ItineraryDocument, Totals
from itinerary_editor.schemas.outcome import OutcomeStatus, PersistenceOutcome
from itinerary_editor.schemas.remote import EditorUser
from itinerary_editor.services.coordinator import REMOTE_ERRORS, PersistenceCoordinator
from itinerary_editor.services.identity import IdentityResolver
from itinerary_editor.services.normalizer import normalize_itinerary
from itinerary_editor.services.store import ItineraryDocumentStore

logger = get_logger(__name__)

LOGIN_REQUIRED_MESSAGE = "Please login to customize itinerary"
LOGIN_TO_EDIT_MESSAGE = "Please login to edit this itinerary"
NOT_FOUND_MESSAGE = "Itinerary not found. It may have been deleted or you may not have access to it."
SAVED_MESSAGE = "Itinerary saved successfully!"
UNSAVED_CONFIRM_MESSAGE = "You have unsaved changes. Are you sure you want to leave?"


class EditingSession:
    """
    One user editing one itinerary.

    The coordinator exists only once the itinerary has been loaded; editing
    before that raises ``SessionRequiredError``.
    """

    def __init__(
        self,
        itinerary_id: str,
        remote: RemoteStoreProtocol,
        navigator: NavigatorProtocol,
        notifier: NotifierProtocol,
        confirmer: ConfirmerProtocol | None = None,
        user: EditorUser | None = None,
        *,
        on_customization_route: bool = False,
        config: EditorConfig | None = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            itinerary_id: Id from the route.
            remote: Remote itinerary store.
            navigator: Performs route changes.
            notifier: Shows user-facing notices.
            confirmer: Asks before discarding unsaved changes.
            user: The logged-in user, ``None`` when logged out.
            on_customization_route: Whether the route is already the
                customization URL, i.e. the clone exists.
            config: Timing and route configuration.
        """
        self._remote = remote
        self._navigator = navigator
        self._notifier = notifier
        self._confirmer = confirmer
        self._user = user
        self._config = config or EditorConfig()

        self._identity = IdentityResolver(
            itinerary_id,
            on_customization_route=on_customization_route,
        )
        self._store = ItineraryDocumentStore()
        self._coordinator: PersistenceCoordinator | None = None
        self._locks = OperationLocks()
        self._timers: list[TimerHandle] = []

        self.loading = False
        self.load_error: str | None = None
        self.load_error_kind: ErrorKind | None = None

    # --- State ---

    @property
    def identity(self) -> IdentityResolver:
        return self._identity

    @property
    def store(self) -> ItineraryDocumentStore:
        return self._store

    @property
    def document(self) -> ItineraryDocument:
        return self._store.document

    @property
    def loaded(self) -> bool:
        return self._coordinator is not None

    @property
    def coordinator(self) -> PersistenceCoordinator:
        if self._coordinator is None:
            raise SessionRequiredError()
        return self._coordinator

    @property
    def totals(self) -> Totals:
        return self._store.calculate_totals()

    # --- Flows ---

    async def open(self) -> bool:
        """
        Load the itinerary into the session.

        Outside the customization route this fetches (creating on first
        access) the editable clone and switches the route to the
        customization URL.

        Returns:
            Whether the itinerary was loaded. On failure ``load_error`` is set,
            the user has been notified and any redirect has been scheduled.
        """
        itinerary_id = self._identity.itinerary_id
        if self._user is None:
            self._fail_load(ErrorKind.AUTH_REQUIRED, LOGIN_REQUIRED_MESSAGE)
            return False

        bind_session(itinerary_id, self._user.user_id)
        with self._locks.hold(OperationType.LOAD) as acquired:
            if not acquired:
                return False
            self.loading = True
            self.load_error = None
            self.load_error_kind = None
            try:
                if self._identity.on_customization_route:
                    data = await self._remote.load_existing(self._identity.save_target)
                else:
                    data = await self._remote.load_customizable(itinerary_id)
                    if self._identity.enter_customization():
                        self._navigator.navigate(
                            self._config.customize_path(itinerary_id),
                            replace=True,
                        )
            except REMOTE_ERRORS as e:
                logger.warning("Failed to load itinerary", itinerary_id=itinerary_id, error=str(e))
                self._handle_load_error(e)
                return False
            finally:
                self.loading = False

            self._adopt(data)
        logger.info(
            "Itinerary loaded",
            itinerary_id=itinerary_id,
            save_target=self._identity.save_target,
            days=len(self.document.days),
        )
        return True

    async def reload(self) -> bool:
        """Fetch the saved copy again, bypassing caches, and replace the document."""
        target = self._identity.save_target
        with self._locks.hold(OperationType.LOAD) as acquired:
            if not acquired:
                return False
            try:
                data = await self._remote.load_existing(target, no_cache=True)
            except REMOTE_ERRORS as e:
                logger.warning("Reload failed", itinerary_id=target, error=str(e))
                return False
            self._adopt(data)
        return True

    async def save_and_exit(self) -> PersistenceOutcome:
        """
        Save the whole document, then head to the saved itinerary's detail view.

        The document is kept as is when the save fails.
        """
        outcome, response = await self.coordinator.save_now()

        if outcome.status is OutcomeStatus.FAILED:
            self._notifier.notify(
                NoticeLevel.ERROR,
                outcome.messages[0] if outcome.messages else SAVE_ERROR_MESSAGE,
            )
            return outcome
        if outcome.status is not OutcomeStatus.SAVED:
            return outcome

        self._notifier.notify(NoticeLevel.SUCCESS, SAVED_MESSAGE)
        await self.reload()
        if response is not None and response.new_id:
            self._schedule_redirect(
                self._config.exit_redirect_delay,
                self._config.detail_path(response.new_id),
            )
        return outcome

    def cancel(self) -> bool:
        """
        Leave the editor for the original itinerary's detail view.

        Returns:
            Whether navigation happened; False when the user chose to stay.
        """
        if self._coordinator is not None and self._coordinator.has_unsaved_changes:
            if self._confirmer is None or not self._confirmer.confirm(UNSAVED_CONFIRM_MESSAGE):
                return False
        self._navigator.navigate(self._config.detail_path(self._identity.cancel_target))
        return True

    async def close(self) -> None:
        """Cancel scheduled redirects and the coordinator's timers."""
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
        if self._coordinator is not None:
            await self._coordinator.close()
        clear_context()

    # --- Internals ---

    def _adopt(self, data: dict[str, Any]) -> None:
        self._identity.capture(data)
        self._store.replace(normalize_itinerary(data))
        if self._coordinator is None:
            self._coordinator = PersistenceCoordinator(
                self._store,
                self._remote,
                self._identity,
                self._notifier,
                self._config,
            )

    def _handle_load_error(self, error: BaseException) -> None:
        kind = error_kind(error)
        match kind:
            case ErrorKind.NOT_FOUND:
                self._fail_load(kind, NOT_FOUND_MESSAGE)
            case ErrorKind.ACCESS_DENIED:
                self._fail_load(kind, str(error))
            case ErrorKind.AUTH_REQUIRED:
                self._fail_load(kind, LOGIN_TO_EDIT_MESSAGE)
            case _:
                self._fail_load(kind, str(error) or LOAD_ERROR_MESSAGE)

    def _fail_load(self, kind: ErrorKind, message: str) -> None:
        self.load_error = message
        self.load_error_kind = kind
        self._notifier.notify(NoticeLevel.ERROR, message)

        if kind is ErrorKind.NOT_FOUND:
            self._schedule_redirect(
                self._config.not_found_redirect_delay,
                self._config.list_route,
            )
        elif kind is ErrorKind.AUTH_REQUIRED:
            self._schedule_redirect(self._config.login_redirect_delay, self._config.login_route)

    def _schedule_redirect(self, delay: float, path: str) -> None:
        handle = get_running_loop().call_later(delay, self._navigator.navigate, path)
        self._timers.append(handle)
