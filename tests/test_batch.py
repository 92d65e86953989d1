"""Tests for batch validation."""

import pytest

from namerec.datagate import BatchCoordinator
from namerec.datagate import DataGateValidationError


def test_prepare_insert_preserves_order() -> None:
    """Test batch insert keeps rows in input order under 'data'."""
    items = [{'nome': f'Produto {i}', 'preco': i * 10} for i in range(5)]

    request = BatchCoordinator.prepare_insert(1, 10, 'produtos', items)

    payload = request.to_payload()
    assert payload['data'] == items
    assert payload['table'] == 'produtos'
    assert payload['id_instancia'] == 10


def test_prepare_insert_rejects_bad_items() -> None:
    """Test empty batches and non-row items are rejected."""
    with pytest.raises(DataGateValidationError):
        BatchCoordinator.prepare_insert(1, 10, 'produtos', [])

    with pytest.raises(DataGateValidationError):
        BatchCoordinator.prepare_insert(1, 10, 'produtos', {'nome': 'A'})  # type: ignore[arg-type]

    with pytest.raises(DataGateValidationError) as exc_info:
        BatchCoordinator.prepare_insert(1, 10, 'produtos', [{'nome': 'A'}, 'B'])  # type: ignore[list-item]
    assert exc_info.value.field_name == 'data[1]'


def test_prepare_update_preserves_order() -> None:
    """Test batch update keeps operations in input order under 'updates'."""
    operations = [
        {'data': {'status': 'pago'}, 'where': {'id': 1}},
        {'data': {'status': 'enviado'}, 'where': {'id': 1}},
        {'data': {'estoque': 0}, 'where': {'categoria': 'antigos'}},
    ]

    request = BatchCoordinator.prepare_update(1, 10, 'pedidos', operations)

    assert request.to_payload()['updates'] == operations


@pytest.mark.parametrize('where', [{}, None, 'id = 1'])
def test_prepare_update_requires_where(where: object) -> None:
    """Test any operation without a non-empty where rejects the whole batch."""
    operations = [
        {'data': {'status': 'pago'}, 'where': {'id': 1}},
        {'data': {'status': 'pago'}, 'where': where},
    ]

    with pytest.raises(DataGateValidationError) as exc_info:
        BatchCoordinator.prepare_update(1, 10, 'pedidos', operations)

    assert exc_info.value.field_name == 'updates[1].where'


def test_prepare_update_requires_where_key() -> None:
    """Test operation with where absent is rejected."""
    with pytest.raises(DataGateValidationError, match='unconditional'):
        BatchCoordinator.prepare_update(1, 10, 'pedidos', [{'data': {'status': 'pago'}}])


def test_prepare_update_requires_data() -> None:
    """Test operation without data is rejected."""
    with pytest.raises(DataGateValidationError) as exc_info:
        BatchCoordinator.prepare_update(1, 10, 'pedidos', [{'data': {}, 'where': {'id': 1}}])

    assert exc_info.value.field_name == 'updates[0].data'


def test_batches_require_target() -> None:
    """Test batches validate identifiers before items."""
    with pytest.raises(DataGateValidationError) as exc_info:
        BatchCoordinator.prepare_insert(1, None, 'produtos', [{'nome': 'A'}])

    assert exc_info.value.field_name == 'id_instancia'
