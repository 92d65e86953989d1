"""Tests for the execution engine client."""

import httpx
import pytest

from namerec.datagate import DataGateTransportError
from namerec.datagate import DataGateUpstreamError
from namerec.datagate import EngineClient
from namerec.datagate.engine.client import unwrap_data


@pytest.mark.asyncio
async def test_post_sends_token_and_body(config, http_client, engine_stub) -> None:  # noqa: ANN001
    """Test every call carries the internal token and the JSON body."""
    engine_stub.reply(json_body={'success': True, 'data': [{'id': 1}]})
    client = EngineClient(config, client=http_client)

    result = await client.post('/data/get', {'table': 'produtos'})

    assert result == [{'id': 1}]
    assert engine_stub.last_request.headers['X-Internal-Token'] == config.internal_token
    assert engine_stub.last_request.url.path == '/data/get'
    assert engine_stub.last_body == {'table': 'produtos'}


@pytest.mark.asyncio
async def test_unwrapped_and_bare_results(config, http_client, engine_stub) -> None:  # noqa: ANN001
    """Test both the enveloped and the bare result shapes are accepted."""
    engine_stub.reply(json_body=[{'id': 1}, {'id': 2}])
    engine_stub.reply(json_body={'insertId': 7})
    engine_stub.reply()
    client = EngineClient(config, client=http_client)

    assert await client.post('/data/get', {}) == [{'id': 1}, {'id': 2}]
    assert await client.post('/data/insert', {}) == {'insertId': 7}
    assert await client.post('/data/delete', {}) is None


def test_unwrap_data_one_level_only() -> None:
    """Test only one level of data nesting is removed."""
    assert unwrap_data({'data': {'data': [1]}}) == {'data': [1]}
    assert unwrap_data({'rows': [1]}) == {'rows': [1]}
    assert unwrap_data([{'data': 1}]) == [{'data': 1}]


@pytest.mark.asyncio
@pytest.mark.parametrize('error', [httpx.ConnectError, httpx.ReadTimeout])
async def test_transport_failure(config, http_client, engine_stub, error) -> None:  # noqa: ANN001
    """Test connection failures and timeouts become TransportError with a generic message."""
    engine_stub.fail(error)
    client = EngineClient(config, client=http_client)

    with pytest.raises(DataGateTransportError) as exc_info:
        await client.post('/data/get', {})

    assert str(exc_info.value) == 'Cannot reach execution engine'
    assert exc_info.value.endpoint == '/data/get'
    assert isinstance(exc_info.value.original_error, error)


@pytest.mark.asyncio
async def test_upstream_error_forwards_message(config, http_client, engine_stub) -> None:  # noqa: ANN001
    """Test engine failure status becomes UpstreamError with the engine message verbatim."""
    engine_stub.reply(500, json_body={'success': False, 'message': "Table 'x' doesn't exist"})
    engine_stub.reply(404, json_body={'error': 'Project not found'})
    engine_stub.reply(502, text='Bad gateway upstream')
    engine_stub.reply(503)
    client = EngineClient(config, client=http_client)

    with pytest.raises(DataGateUpstreamError) as exc_info:
        await client.post('/data/advanced-select', {})
    assert str(exc_info.value) == "Table 'x' doesn't exist"
    assert exc_info.value.status_code == 500

    with pytest.raises(DataGateUpstreamError, match='Project not found') as exc_info:
        await client.request('GET', '/projects/9')
    assert exc_info.value.status_code == 404

    with pytest.raises(DataGateUpstreamError, match='Bad gateway upstream'):
        await client.post('/data/get', {})

    with pytest.raises(DataGateUpstreamError, match='Service Unavailable'):
        await client.post('/data/get', {})


@pytest.mark.asyncio
async def test_non_json_success_body(config, http_client, engine_stub) -> None:  # noqa: ANN001
    """Test a success status with an unparseable body is reported as upstream failure."""
    engine_stub.reply(200, text='<html>oops</html>')
    client = EngineClient(config, client=http_client)

    with pytest.raises(DataGateUpstreamError, match='non-JSON'):
        await client.post('/data/get', {})


@pytest.mark.asyncio
async def test_borrowed_client_is_not_closed(config, http_client) -> None:  # noqa: ANN001
    """Test aclose() leaves an injected httpx client open."""
    async with EngineClient(config, client=http_client):
        pass

    assert not http_client.is_closed


@pytest.mark.asyncio
async def test_own_client_is_closed(config) -> None:  # noqa: ANN001
    """Test aclose() closes a client the engine client created itself."""
    client = EngineClient(config)
    await client.aclose()

    assert client._client.is_closed  # noqa: SLF001
