# tests/clients/test_remote_store.py
"""Tests for itinerary_editor/clients/remote_store.py module."""

from collections.abc import AsyncGenerator, Callable
from json import loads
from typing import Any

import pytest
from httpx import ConnectError, MockTransport, Request, Response, codes
from tenacity import stop_after_attempt, wait_none

from itinerary_editor.clients import RemoteStoreClient, RemoteStoreProtocol, map_http_error
from itinerary_editor.errors import (
    AccessDeniedError,
    AuthRequiredError,
    ErrorKind,
    InvalidPayloadError,
    MaxActivitiesExceededError,
    MaxDaysExceededError,
    NotFoundError,
    RemoteNetworkError,
    RemoteStoreError,
)

BASE_URL = "http://api.test/api"
TOKEN = "token-123"

Handler = Callable[[Request], Response]


class Recorder:
    """Routes requests to canned responses and records them."""

    def __init__(self, routes: dict[tuple[str, str], Response | list[Response]]) -> None:
        self.routes = routes
        self.requests: list[Request] = []

    def __call__(self, request: Request) -> Response:
        self.requests.append(request)
        key = (request.method, request.url.path.removeprefix("/api"))
        answer = self.routes.get(key)
        if answer is None:
            return Response(codes.NOT_FOUND, json={"success": False, "message": "No route"})
        if isinstance(answer, list):
            return answer.pop(0)
        return answer


def _ok(data: dict[str, Any]) -> Response:
    return Response(codes.OK, json={"success": True, "data": data})


def _client(handler: Handler, token: str | None = TOKEN) -> RemoteStoreClient:
    return RemoteStoreClient(base_url=BASE_URL, token=token, transport=MockTransport(handler))


@pytest.fixture
async def recorder_client() -> AsyncGenerator[tuple[Recorder, RemoteStoreClient]]:
    recorder = Recorder(
        {
            ("GET", "/ai-itineraries/abc"): _ok({"_id": "abc", "destination": "Hue"}),
            ("PUT", "/ai-itineraries/abc"): Response(
                codes.OK,
                json={"success": True, "data": {"_id": "abc"}, "message": "Itinerary updated"},
            ),
            ("DELETE", "/ai-itineraries/abc/activities/act-1"): Response(
                codes.OK,
                json={"success": True},
            ),
        },
    )
    client = _client(recorder)
    yield recorder, client
    await client.close()


class TestMapHttpError:
    """Tests for map_http_error."""

    @pytest.mark.parametrize(
        ("status", "body", "error_type", "detail"),
        [
            (401, {}, AuthRequiredError, "Authentication required. Please login first."),
            (
                401,
                {"error": {"code": "UNAUTHORIZED_ACCESS", "message": "not your itinerary"}},
                AccessDeniedError,
                "Access Denied: not your itinerary",
            ),
            (403, {"message": "Forbidden"}, AccessDeniedError, "Forbidden"),
            (404, {}, NotFoundError, "Itinerary not found"),
            (400, {"error": {"code": "MAX_DAYS_EXCEEDED"}}, MaxDaysExceededError, None),
            (
                400,
                {"error": {"code": "MAX_ACTIVITIES_EXCEEDED"}},
                MaxActivitiesExceededError,
                None,
            ),
            (
                400,
                {"error": {"code": "INVALID_TIME_FORMAT"}},
                InvalidPayloadError,
                "Time must be in HH:MM format (00:00-23:59)",
            ),
            (
                400,
                {"error": {"code": "INVALID_COST_VALUE"}},
                InvalidPayloadError,
                "Cost must be 0 or positive number",
            ),
            (400, {"message": "Bad shape"}, InvalidPayloadError, "Bad shape"),
            (500, {}, RemoteStoreError, "An unexpected error occurred."),
        ],
    )
    def test_mapping(
        self,
        status: int,
        body: dict[str, Any],
        error_type: type[Exception],
        detail: str | None,
    ) -> None:
        """Test each status and server code maps to a typed error."""
        error = map_http_error(status, body)
        assert type(error) is error_type
        if detail is not None:
            assert error.detail == detail

    def test_quota_codes_are_tagged(self) -> None:
        """Test server quota errors share the local quota tag."""
        assert map_http_error(400, {"error": {"code": "MAX_DAYS_EXCEEDED"}}).kind is (
            ErrorKind.QUOTA_EXCEEDED
        )

    def test_server_status_kept(self) -> None:
        """Test unmapped statuses keep their code."""
        assert map_http_error(502, {"message": "Upstream"}).status_code == 502


class TestRemoteStoreClient:
    """Tests for RemoteStoreClient endpoints."""

    def test_satisfies_protocol(self) -> None:
        """Test the HTTP client implements the remote store protocol."""
        assert isinstance(_client(Recorder({})), RemoteStoreProtocol)

    @pytest.mark.asyncio
    async def test_load_existing(
        self,
        recorder_client: tuple[Recorder, RemoteStoreClient],
    ) -> None:
        """Test the document is unwrapped and the bearer token sent."""
        recorder, client = recorder_client

        data = await client.load_existing("abc")

        assert data == {"_id": "abc", "destination": "Hue"}
        request = recorder.requests[0]
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert "Cache-Control" not in request.headers

    @pytest.mark.asyncio
    async def test_load_existing_no_cache(
        self,
        recorder_client: tuple[Recorder, RemoteStoreClient],
    ) -> None:
        """Test reloads ask intermediaries to bypass caches."""
        recorder, client = recorder_client

        await client.load_existing("abc", no_cache=True)

        assert recorder.requests[0].headers["Cache-Control"] == "no-cache"
        assert recorder.requests[0].headers["Pragma"] == "no-cache"

    @pytest.mark.asyncio
    async def test_save_document(
        self,
        recorder_client: tuple[Recorder, RemoteStoreClient],
    ) -> None:
        """Test the whole document is sent with PUT."""
        recorder, client = recorder_client
        payload = {"summary": "Short trip", "itinerary_data": []}

        response = await client.save_document("abc", payload)

        assert response.success is True
        assert response.new_id == "abc"
        assert loads(recorder.requests[0].content) == payload

    @pytest.mark.asyncio
    async def test_save_unsuccessful_envelope(self) -> None:
        """Test a 200 response with success false is an error."""

        def handler(_: Request) -> Response:
            return Response(codes.OK, json={"success": False, "message": "Locked"})

        async with _client(handler) as client:
            with pytest.raises(RemoteStoreError, match="Locked"):
                await client.save_document("abc", {})

    @pytest.mark.asyncio
    async def test_save_quota_error(self) -> None:
        """Test server quota codes surface as typed errors."""

        def handler(_: Request) -> Response:
            return Response(
                codes.BAD_REQUEST,
                json={"success": False, "error": {"code": "MAX_DAYS_EXCEEDED"}},
            )

        async with _client(handler) as client:
            with pytest.raises(MaxDaysExceededError):
                await client.save_document("abc", {})

    @pytest.mark.asyncio
    async def test_delete_activity(
        self,
        recorder_client: tuple[Recorder, RemoteStoreClient],
    ) -> None:
        """Test the activity delete endpoint."""
        recorder, client = recorder_client

        assert await client.delete_activity("abc", "act-1") is True
        assert recorder.requests[0].method == "DELETE"

    @pytest.mark.asyncio
    async def test_missing_token(self) -> None:
        """Test nothing is sent without a token."""
        recorder = Recorder({})
        async with _client(recorder, token="") as client:
            with pytest.raises(AuthRequiredError):
                await client.save_document("abc", {})
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_set_token(self) -> None:
        """Test the token can be supplied after construction."""
        recorder = Recorder({("GET", "/ai-itineraries/abc"): _ok({})})
        async with _client(recorder, token="") as client:
            client.set_token("fresh")
            await client.load_existing("abc")
        assert recorder.requests[0].headers["Authorization"] == "Bearer fresh"


class TestLoadCustomizable:
    """Tests for the clone-on-first-access flow."""

    @pytest.mark.asyncio
    async def test_existing_clone(self) -> None:
        """Test an existing clone is returned directly."""
        recorder = Recorder(
            {("GET", "/ai-itineraries/abc/customize"): _ok({"_id": "clone", "aiGeneratedId": "clone"})},
        )
        async with _client(recorder) as client:
            data = await client.load_customizable("abc")

        assert data["aiGeneratedId"] == "clone"
        assert [r.method for r in recorder.requests] == ["GET"]

    @pytest.mark.parametrize("init_status", [codes.CREATED, codes.CONFLICT])
    @pytest.mark.asyncio
    async def test_initializes_on_not_found(self, init_status: int) -> None:
        """Test a missing clone is initialized, tolerating one that already exists."""
        recorder = Recorder(
            {
                ("GET", "/ai-itineraries/abc/customize"): [
                    Response(codes.NOT_FOUND, json={"success": False}),
                    _ok({"_id": "clone"}),
                ],
                ("POST", "/ai-itineraries/abc/initialize-customize"): Response(
                    init_status,
                    json={"success": init_status == codes.CREATED},
                ),
            },
        )
        async with _client(recorder) as client:
            data = await client.load_customizable("abc")

        assert data == {"_id": "clone"}
        assert [r.method for r in recorder.requests] == ["GET", "POST", "GET"]

    @pytest.mark.asyncio
    async def test_missing_original(self) -> None:
        """Test a missing original surfaces as NotFoundError."""
        recorder = Recorder({})
        async with _client(recorder) as client:
            with pytest.raises(NotFoundError):
                await client.load_customizable("gone")


class TestNetworkErrors:
    """Tests for transport failures."""

    @pytest.mark.asyncio
    async def test_save_not_retried(self) -> None:
        """Test transport errors on save fail at once as RemoteNetworkError."""
        attempts: list[Request] = []

        def handler(request: Request) -> Response:
            attempts.append(request)
            msg = "refused"
            raise ConnectError(msg, request=request)

        async with _client(handler) as client:
            with pytest.raises(RemoteNetworkError) as exc_info:
                await client.save_document("abc", {})

        assert exc_info.value.kind is ErrorKind.NETWORK
        assert len(attempts) == 1

    @pytest.mark.asyncio
    async def test_load_retried(self) -> None:
        """Test loads retry transport errors before succeeding."""
        attempts: list[Request] = []

        def handler(request: Request) -> Response:
            attempts.append(request)
            if len(attempts) < 3:
                msg = "refused"
                raise ConnectError(msg, request=request)
            return _ok({"_id": "abc"})

        load = RemoteStoreClient.load_existing.retry_with(  # type: ignore[attr-defined]
            wait=wait_none(),
            stop=stop_after_attempt(3),
        )
        async with _client(handler) as client:
            data = await load(client, "abc")

        assert data == {"_id": "abc"}
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_http_errors_not_retried(self) -> None:
        """Test error statuses are final."""
        attempts: list[Request] = []

        def handler(request: Request) -> Response:
            attempts.append(request)
            return Response(codes.FORBIDDEN, json={"message": "Nope"})

        async with _client(handler) as client:
            with pytest.raises(AccessDeniedError):
                await client.load_existing("abc")
        assert len(attempts) == 1
