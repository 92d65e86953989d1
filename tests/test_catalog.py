"""Tests for catalog pass-through."""

import pytest

from namerec.datagate import CatalogClient
from namerec.datagate import DataGateValidationError
from namerec.datagate import EngineClient


@pytest.fixture
def catalog(config, http_client) -> CatalogClient:  # noqa: ANN001
    """Create catalog client over the scripted engine."""
    return CatalogClient(EngineClient(config, client=http_client))


@pytest.mark.asyncio
async def test_list_projects(catalog, engine_stub) -> None:  # noqa: ANN001
    """Test project listing, including an empty engine answer."""
    engine_stub.reply(json_body={'success': True, 'data': [{'id': 1, 'nome': 'Loja'}]})
    engine_stub.reply()

    assert await catalog.list_projects() == [{'id': 1, 'nome': 'Loja'}]
    assert engine_stub.last_request.method == 'GET'
    assert await catalog.list_projects() == []


@pytest.mark.asyncio
async def test_project_and_instance_paths(catalog, engine_stub) -> None:  # noqa: ANN001
    """Test project and instance calls hit REST paths with ids in the URL."""
    await catalog.update_project(3, {'nome': 'Nova'})
    assert engine_stub.last_request.method == 'PUT'
    assert engine_stub.last_request.url.path == '/projects/3'
    assert engine_stub.last_body == {'nome': 'Nova'}

    await catalog.delete_instance(8)
    assert engine_stub.last_request.method == 'DELETE'
    assert engine_stub.last_request.url.path == '/instances/8'

    await catalog.list_instances(3)
    assert engine_stub.last_request.url.path == '/instances'
    assert engine_stub.last_request.url.params['project_id'] == '3'


@pytest.mark.asyncio
async def test_create_table_defaults_indexes(catalog, engine_stub) -> None:  # noqa: ANN001
    """Test table creation sends an empty index list when none is given."""
    columns = [{'name': 'id', 'type': 'INT', 'primary': True}]

    await catalog.create_table({'project_id': 1, 'table_name': 'produtos', 'columns': columns})

    assert engine_stub.last_request.url.path == '/schema/table'
    assert engine_stub.last_body == {
        'project_id': 1,
        'table_name': 'produtos',
        'columns': columns,
        'indexes': [],
    }


@pytest.mark.asyncio
async def test_schema_query_params(catalog, engine_stub) -> None:  # noqa: ANN001
    """Test schema calls pass identifiers as query parameters."""
    await catalog.list_tables(1, detailed=True)
    assert engine_stub.last_request.url.params['detailed'] == 'true'

    await catalog.list_tables(1)
    assert 'detailed' not in engine_stub.last_request.url.params

    await catalog.drop_column(1, 'produtos', 'preco')
    params = engine_stub.last_request.url.params
    assert engine_stub.last_request.method == 'DELETE'
    assert (params['project_id'], params['table'], params['column']) == ('1', 'produtos', 'preco')

    await catalog.add_index(1, 'produtos', {'name': 'idx_nome', 'columns': ['nome']})
    assert engine_stub.last_request.url.path == '/schema/index'
    assert engine_stub.last_body == {'name': 'idx_nome', 'columns': ['nome']}


@pytest.mark.asyncio
async def test_catalog_validates_identifiers(catalog, engine_stub) -> None:  # noqa: ANN001
    """Test missing identifiers never reach the engine."""
    with pytest.raises(DataGateValidationError):
        await catalog.create_table({'project_id': 1, 'table_name': 'produtos'})

    with pytest.raises(DataGateValidationError):
        await catalog.drop_index(1, 'produtos', '')

    with pytest.raises(DataGateValidationError):
        await catalog.add_column(1, 'produtos', {'name': 'preco'})

    assert engine_stub.requests == []
