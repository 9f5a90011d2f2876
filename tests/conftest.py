"""Shared test fixtures."""

from collections.abc import Callable, Generator
from dataclasses import dataclass, field

import pytest
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

from maps_client.config import Settings
from maps_client.context import ApiKey, Context
from maps_client.dispatch import RetryPolicy
from maps_client.transport import HTTPResponse

API_KEY = "AIzaNotReallyAnApiKey"
MOCK_BASE_URL = "http://testserver/maps/api"


@dataclass(frozen=True)
class RecordedCall:
    operation: str
    params: dict[str, str]
    query: str


@dataclass
class MockService:
    """A fake remote service answering every call with queued responses.

    The last queued response is repeated once the queue runs dry.
    """

    responses: list[tuple[int, str]]
    calls: list[RecordedCall] = field(default_factory=list)

    def app(self) -> FastAPI:
        app = FastAPI()

        @app.get("/maps/api/{operation}/json")
        async def handle(operation: str, request: Request) -> Response:
            self.calls.append(
                RecordedCall(operation, dict(request.query_params), request.url.query)
            )
            status_code, body = self.responses[0]
            if len(self.responses) > 1:
                self.responses.pop(0)
            return Response(content=body, status_code=status_code, media_type="application/json")

        return app


class AppTransport:
    """Transport that sends requests through a FastAPI TestClient."""

    def __init__(self, client: TestClient) -> None:
        self._client = client

    def get(self, url: str, *, timeout: float) -> HTTPResponse:
        response = self._client.get(url)
        return HTTPResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )


@pytest.fixture
def retry_policy() -> RetryPolicy:
    """Three attempts without any backoff sleep."""
    return RetryPolicy(max_attempts=3, base_delay=0.0, max_delay=0.0)


@pytest.fixture
def mock_server(
    retry_policy: RetryPolicy,
) -> Generator[Callable[..., tuple[MockService, Context]], None, None]:
    """Factory building a mock service and a context pointed at it.

    Call with ``(status_code, body)`` or pass several such pairs to answer
    successive attempts differently.
    """
    clients: list[TestClient] = []

    def factory(*responses: tuple[int, str]) -> tuple[MockService, Context]:
        service = MockService(responses=list(responses))
        client = TestClient(service.app(), raise_server_exceptions=False)
        clients.append(client)
        context = Context.with_base_url(
            ApiKey(API_KEY),
            AppTransport(client),
            MOCK_BASE_URL,
            retry_policy=retry_policy,
        )
        return service, context

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def settings() -> Settings:
    """Create test settings pointing at the mock service."""
    return Settings(
        api_key=API_KEY,
        client_id=None,
        client_secret=None,
        base_url=MOCK_BASE_URL,
        timeout_seconds=5.0,
        max_attempts=2,
        base_backoff_seconds=0.0,
        max_backoff_seconds=0.0,
        queries_per_second=0,
    )
