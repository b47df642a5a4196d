"""In-memory remote store for tests and offline use."""

from asyncio import Lock, sleep
from collections import deque
from copy import deepcopy
from logging import DEBUG, getLogger
from secrets import token_hex
from typing import Any, NamedTuple

from itinerary_editor.configs import file_logger
from itinerary_editor.errors import AuthRequiredError, BaseAppError, NotFoundError
from itinerary_editor.schemas.remote import SaveResponse

logger = file_logger(getLogger(__name__))


class RecordedCall(NamedTuple):
    method: str
    itinerary_id: str
    payload: dict[str, Any] | None = None


def _object_id() -> str:
    """24 hex characters, the shape of the server's ids."""
    return token_hex(12)


class MemoryRemoteStore:
    """
    An asynchronous in-memory store that mimics RemoteStoreClient.

    Features:
        - Customization clones created on first ``load_customizable``
        - Call recording for assertions
        - Scripted failures via ``fail_next``
        - Optional artificial latency to exercise in-flight guards
    """

    def __init__(self, latency: float = 0.0, *, authenticated: bool = True) -> None:
        """
        Initialize the MemoryRemoteStore.

        Args:
            latency: Seconds every call sleeps before answering.
            authenticated: When False every call raises ``AuthRequiredError``.
        """
        self._documents: dict[str, dict[str, Any]] = {}
        # original id -> customized clone id
        self._clones: dict[str, str] = {}
        self._failures: deque[BaseAppError] = deque()
        self._lock = Lock()

        self.latency = latency
        self.authenticated = authenticated
        self.calls: list[RecordedCall] = []
        self.echo_document = True

    # --- Test helpers ---

    def put(self, itinerary_id: str, data: dict[str, Any]) -> None:
        """Seed or overwrite an itinerary."""
        self._documents[itinerary_id] = deepcopy(data)

    def get(self, itinerary_id: str) -> dict[str, Any] | None:
        document = self._documents.get(itinerary_id)
        return deepcopy(document) if document is not None else None

    def fail_next(self, *errors: BaseAppError) -> None:
        """Make the next calls raise ``errors``, one per call, in order."""
        self._failures.extend(errors)

    def calls_to(self, method: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == method]

    # --- RemoteStoreProtocol ---

    async def load_customizable(self, itinerary_id: str) -> dict[str, Any]:
        await self._enter("load_customizable", itinerary_id)
        async with self._lock:
            clone_id = self._clones.get(itinerary_id)
            if clone_id is None:
                original = self._require(itinerary_id)
                clone_id = _object_id()
                clone = deepcopy(original)
                clone.update(
                    {
                        "_id": clone_id,
                        "aiGeneratedId": clone_id,
                        "originalAiGeneratedId": itinerary_id,
                    },
                )
                self._documents[clone_id] = clone
                self._clones[itinerary_id] = clone_id
                logger.info(f"Created customization {clone_id} of {itinerary_id}")
            return deepcopy(self._documents[clone_id])

    async def load_existing(self, itinerary_id: str, *, no_cache: bool = False) -> dict[str, Any]:
        await self._enter("load_existing", itinerary_id)
        async with self._lock:
            return deepcopy(self._require(itinerary_id))

    async def save_document(self, itinerary_id: str, payload: dict[str, Any]) -> SaveResponse:
        await self._enter("save_document", itinerary_id, payload)
        async with self._lock:
            current = self._require(itinerary_id)
            current.update(deepcopy(payload))
            current.setdefault("_id", itinerary_id)
            data = deepcopy(current) if self.echo_document else {"_id": current["_id"]}
        return SaveResponse(success=True, data=data, message="Itinerary updated")

    async def delete_activity(self, itinerary_id: str, activity_id: str) -> bool:
        await self._enter("delete_activity", itinerary_id, {"activityId": activity_id})
        async with self._lock:
            document = self._require(itinerary_id)
            for day in document.get("itinerary_data") or []:
                activities = day.get("activities") or []
                kept = [a for a in activities if a.get("activityId", a.get("id")) != activity_id]
                if len(kept) != len(activities):
                    day["activities"] = kept
                    return True
        msg = f"Activity {activity_id} not found"
        raise NotFoundError(msg)

    # --- Internals ---

    async def _enter(
        self,
        method: str,
        itinerary_id: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.calls.append(RecordedCall(method, itinerary_id, deepcopy(payload)))
        if logger.isEnabledFor(DEBUG):
            logger.debug("MemoryRemoteStore.%s(%s)", method, itinerary_id)
        if self.latency:
            await sleep(self.latency)
        if not self.authenticated:
            raise AuthRequiredError()
        if self._failures:
            raise self._failures.popleft()

    def _require(self, itinerary_id: str) -> dict[str, Any]:
        document = self._documents.get(itinerary_id)
        if document is None:
            raise NotFoundError()
        return document
