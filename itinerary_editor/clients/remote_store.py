# itinerary_editor/clients/remote_store.py
"""HTTP client for the itinerary REST API."""

from collections.abc import Callable
from logging import getLogger
from typing import Any

from httpx import AsyncBaseTransport, AsyncClient, Response, TransportError, codes

from itinerary_editor.configs import file_logger, settings
from itinerary_editor.configs.settings import (
    DEFAULT_ERROR_MESSAGE,
    LOAD_ERROR_MESSAGE,
    SAVE_ERROR_MESSAGE,
)
from itinerary_editor.decorators import with_retry
from itinerary_editor.errors import (
    AccessDeniedError,
    AuthRequiredError,
    BaseAppError,
    InvalidPayloadError,
    MaxActivitiesExceededError,
    MaxDaysExceededError,
    NotFoundError,
    RemoteNetworkError,
    RemoteStoreError,
)
from itinerary_editor.schemas.remote import SaveResponse

logger = file_logger(getLogger(__name__))

BASE_PATH = "/ai-itineraries"

# Server error codes carried in ``{"error": {"code": ...}}``
UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
BAD_REQUEST_ERRORS: dict[str, Callable[[], BaseAppError]] = {
    "MAX_DAYS_EXCEEDED": MaxDaysExceededError,
    "MAX_ACTIVITIES_EXCEEDED": MaxActivitiesExceededError,
    "INVALID_TIME_FORMAT": lambda: InvalidPayloadError("Time must be in HH:MM format (00:00-23:59)"),
    "INVALID_COST_VALUE": lambda: InvalidPayloadError("Cost must be 0 or positive number"),
}

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


def _error_fields(body: dict[str, Any]) -> tuple[str | None, str | None]:
    """Extract ``(code, message)`` from an error envelope."""
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("code"), error.get("message") or body.get("message")
    if isinstance(error, str):
        return None, body.get("message") or error
    return None, body.get("message")


def map_http_error(status_code: int, body: dict[str, Any]) -> BaseAppError:
    """
    Translate an HTTP error response into the matching application error.

    Args:
        status_code: Response status.
        body: Decoded JSON body, or an empty dict when it was not JSON.

    Returns:
        The error to raise; callers never match on message text.
    """
    code, message = _error_fields(body)

    match status_code:
        case codes.UNAUTHORIZED if code == UNAUTHORIZED_ACCESS:
            return AccessDeniedError(f"Access Denied: {message}" if message else "Access denied")
        case codes.UNAUTHORIZED:
            return AuthRequiredError()
        case codes.FORBIDDEN:
            return AccessDeniedError(message or "Access denied")
        case codes.NOT_FOUND:
            return NotFoundError(message or "Itinerary not found")
        case codes.BAD_REQUEST if code in BAD_REQUEST_ERRORS:
            return BAD_REQUEST_ERRORS[code]()
        case codes.BAD_REQUEST:
            return InvalidPayloadError(message or "Invalid data provided")
        case _:
            return RemoteStoreError(message or DEFAULT_ERROR_MESSAGE, status_code)


def _json(response: Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class RemoteStoreClient:
    """
    Async client for the itinerary endpoints.

    Every request carries the bearer token; a missing token fails with
    ``AuthRequiredError`` before anything is sent. Transport failures surface
    as ``RemoteNetworkError`` and loads retry them with exponential backoff.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root; defaults to ``settings.API_BASE_URL``.
            token: Bearer token; defaults to ``settings.API_TOKEN``.
            timeout: Request timeout in seconds.
            transport: Custom httpx transport, e.g. ``MockTransport`` in tests.
        """
        if token is None and settings.API_TOKEN is not None:
            token = settings.API_TOKEN.get_secret_value()
        self._token = token
        self._client = AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.API_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "RemoteStoreClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def client(self) -> AsyncClient:
        return self._client

    def set_token(self, token: str | None) -> None:
        self._token = token

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Remote store client closed.")

    # --- Endpoints ---

    @with_retry()
    async def load_customizable(self, itinerary_id: str) -> dict[str, Any]:
        """
        Get the editable clone of an itinerary, creating it on first access.

        Raises:
            NotFoundError: If the itinerary still cannot be found after
                initialization.
        """
        path = f"{BASE_PATH}/{itinerary_id}/customize"
        try:
            return await self._get_data(path)
        except NotFoundError:
            logger.info(f"No customizable copy of {itinerary_id}, initializing")
        await self._initialize_customization(itinerary_id)
        return await self._get_data(path)

    @with_retry()
    async def load_existing(self, itinerary_id: str, *, no_cache: bool = False) -> dict[str, Any]:
        headers = NO_CACHE_HEADERS if no_cache else None
        return await self._get_data(f"{BASE_PATH}/{itinerary_id}", headers=headers)

    async def save_document(self, itinerary_id: str, payload: dict[str, Any]) -> SaveResponse:
        response = await self._send("PUT", f"{BASE_PATH}/{itinerary_id}", json=payload)
        body = self._parse(response)
        saved = SaveResponse.model_validate(body)
        if not saved.success:
            raise RemoteStoreError(saved.message or SAVE_ERROR_MESSAGE)
        return saved

    async def delete_activity(self, itinerary_id: str, activity_id: str) -> bool:
        path = f"{BASE_PATH}/{itinerary_id}/activities/{activity_id}"
        body = self._parse(await self._send("DELETE", path))
        if body and not body.get("success", True):
            _, message = _error_fields(body)
            raise RemoteStoreError(message or "Failed to delete activity")
        return True

    # --- Internals ---

    async def _initialize_customization(self, itinerary_id: str) -> None:
        response = await self._send("POST", f"{BASE_PATH}/{itinerary_id}/initialize-customize")
        if response.status_code == codes.CONFLICT:
            logger.info(f"Customization of {itinerary_id} already exists")
            return
        self._parse(response)
        logger.info(f"Initialized customization of {itinerary_id}")

    async def _get_data(
        self,
        path: str,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        body = self._parse(await self._send("GET", path, headers=headers))
        if not body.get("success"):
            _, message = _error_fields(body)
            raise RemoteStoreError(message or LOAD_ERROR_MESSAGE)
        data = body.get("data")
        return data if isinstance(data, dict) else {}

    def _auth_headers(self) -> dict[str, str]:
        if not self._token:
            raise AuthRequiredError()
        return {"Authorization": f"Bearer {self._token}"}

    async def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Response:
        request_headers = {**self._auth_headers(), **(headers or {})}
        try:
            return await self._client.request(method, path, headers=request_headers, json=json)
        except TransportError as e:
            logger.warning(f"{method} {path} failed: {e.__class__.__name__}")
            raise RemoteNetworkError() from e

    @staticmethod
    def _parse(response: Response) -> dict[str, Any]:
        body = _json(response)
        if response.is_error:
            error = map_http_error(response.status_code, body)
            logger.warning(
                f"{response.request.method} {response.request.url.path} -> "
                f"{response.status_code} ({error.kind.value})",
            )
            raise error
        return body
