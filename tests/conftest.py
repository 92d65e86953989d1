"""Pytest configuration and fixtures."""

import json
from typing import Any

import httpx
import pytest
import pytest_asyncio

from namerec.datagate import GatewayConfig
from namerec.datagate import RequestGateway
from namerec.datagate import Settings

ENGINE_URL = 'http://engine.test'
INTERNAL_TOKEN = 'internal-secret'
API_KEY = 'caller-key'


class EngineStub:
    """
    Scripted execution engine behind httpx.MockTransport.

    Records every request and answers with the next queued response,
    or with {'success': true, 'data': []} when the queue is empty.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[Any] = []

    def reply(self, status_code: int = 200, json_body: Any = None, text: str | None = None) -> None:
        """Queue a response."""
        self._responses.append(('response', status_code, json_body, text))

    def fail(self, error: type[httpx.TransportError] = httpx.ConnectError) -> None:
        """Queue a transport failure."""
        self._responses.append(('error', error))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, json={'success': True, 'data': []})

        item = self._responses.pop(0)
        if item[0] == 'error':
            raise item[1]('connection refused', request=request)

        _, status_code, json_body, text = item
        if text is not None:
            return httpx.Response(status_code, text=text)
        if json_body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=json_body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def config() -> GatewayConfig:
    """Create gateway configuration with one accepted caller key."""
    return GatewayConfig(
        engine_url=ENGINE_URL,
        internal_token=INTERNAL_TOKEN,
        api_keys=frozenset({API_KEY, 'other-key'}),
        timeout_seconds=5.0,
    )


@pytest.fixture
def settings() -> Settings:
    """Create settings equivalent to the config fixture."""
    return Settings(
        engine_url=ENGINE_URL + '/',
        internal_token=INTERNAL_TOKEN,
        api_keys=f'{API_KEY}, other-key',
        timeout_seconds=5.0,
        log_level='WARNING',
    )


@pytest.fixture
def engine_stub() -> EngineStub:
    """Create scripted engine."""
    return EngineStub()


@pytest_asyncio.fixture
async def http_client(engine_stub: EngineStub):  # noqa: ANN201
    """Create httpx client routed to the scripted engine."""
    client = httpx.AsyncClient(base_url=ENGINE_URL, transport=httpx.MockTransport(engine_stub.handler))

    yield client

    await client.aclose()


@pytest_asyncio.fixture
async def gateway(config: GatewayConfig, http_client: httpx.AsyncClient) -> RequestGateway:
    """Create gateway talking to the scripted engine."""
    return RequestGateway.create(config, http_client=http_client)
