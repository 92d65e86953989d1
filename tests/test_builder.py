"""Tests for QueryBuilder and QueryDescriptor serialization."""

import pytest

from namerec.datagate import DataGateValidationError
from namerec.datagate import JoinSpec
from namerec.datagate import JoinType
from namerec.datagate import QueryDescriptor
from namerec.datagate import query


def test_empty_builder_payload() -> None:
    """Test builder with no calls yields only the target, joins and where."""
    descriptor = query(1, 10, 'pedidos').build()

    assert descriptor.to_payload() == {
        'project_id': 1,
        'id_instancia': 10,
        'table': 'pedidos',
        'joins': [],
        'where': {},
    }


def test_paginate() -> None:
    """Test paginate translates pages into limit/offset."""
    first = query(1, 10, 'pedidos').paginate(1, 20).build()
    assert (first.limit, first.offset) == (20, 0)

    third = query(1, 10, 'pedidos').paginate(3, 10).build()
    assert (third.limit, third.offset) == (10, 20)

    default = query(1, 10, 'pedidos').paginate(2).build()
    assert (default.limit, default.offset) == (20, 20)


@pytest.mark.parametrize(('page', 'per_page'), [(0, 20), (1, 0), (-1, 10)])
def test_paginate_rejects_invalid_pages(page: int, per_page: int) -> None:
    """Test paginate rejects pages or page sizes below 1."""
    with pytest.raises(DataGateValidationError):
        query(1, 10, 'pedidos').paginate(page, per_page)


def test_merge_where_overwrites() -> None:
    """Test merge_where is a shallow merge where new keys win."""
    descriptor = query(1, 10, 'pedidos').merge_where({'a': 1}).merge_where({'a': 2, 'b': 3}).build()

    assert descriptor.where == {'a': 2, 'b': 3}


def test_merge_where_rejects_non_mapping() -> None:
    """Test merge_where requires an object."""
    with pytest.raises(DataGateValidationError):
        query(1, 10, 'pedidos').merge_where(['status'])  # type: ignore[arg-type]


def test_builder_matches_hand_built_descriptor() -> None:
    """Test builder-built and hand-built descriptors serialize identically."""
    built = (
        query(1, 10, 'pedidos')
        .set_alias('p')
        .select_columns(['p.*', 'c.nome as cliente_nome'])
        .left_join('clientes', 'c', 'p.cliente_id = c.id')
        .merge_where({'p.status': 'ativo'})
        .set_where_raw('p.total > 100')
        .set_order_by('p.created_at DESC')
        .paginate(2, 50)
        .build()
    )

    hand_built = QueryDescriptor(
        project_id=1,
        instance_id=10,
        table='pedidos',
        alias='p',
        select=['p.*', 'c.nome as cliente_nome'],
        joins=[JoinSpec(type=JoinType.LEFT, table='clientes', alias='c', on='p.cliente_id = c.id')],
        where={'p.status': 'ativo'},
        where_raw='p.total > 100',
        order_by='p.created_at DESC',
        limit=50,
        offset=50,
    )

    assert built.to_payload() == hand_built.to_payload()


def test_joins_keep_declaration_order() -> None:
    """Test joins are serialized in the order they were added."""
    descriptor = (
        query(1, 10, 'pedidos')
        .inner_join('clientes', 'c', 'pedidos.cliente_id = c.id')
        .right_join('vendedores', 'v', 'pedidos.vendedor_id = v.id')
        .add_join('left', 'lojas', None, 'pedidos.loja_id = lojas.id')
        .build()
    )

    joins = descriptor.to_payload()['joins']
    assert [join['table'] for join in joins] == ['clientes', 'vendedores', 'lojas']
    assert [join['type'] for join in joins] == ['INNER', 'RIGHT', 'LEFT']
    assert 'alias' not in joins[2]


def test_add_join_rejects_unknown_type() -> None:
    """Test unsupported join types are rejected."""
    with pytest.raises(DataGateValidationError) as exc_info:
        query(1, 10, 'pedidos').add_join('FULL', 'clientes', 'c', 'pedidos.cliente_id = c.id')

    assert exc_info.value.field_name == 'joins.type'


def test_add_join_rejects_missing_condition() -> None:
    """Test joins need a table and a condition."""
    with pytest.raises(DataGateValidationError):
        query(1, 10, 'pedidos').left_join('clientes', 'c', '')

    with pytest.raises(DataGateValidationError):
        query(1, 10, 'pedidos').left_join('', 'c', 'pedidos.cliente_id = c.id')


@pytest.mark.parametrize('value', [-1, 1.5, '10', True])
def test_limit_offset_reject_invalid_values(value: object) -> None:
    """Test limit and offset accept only non-negative integers."""
    with pytest.raises(DataGateValidationError):
        query(1, 10, 'pedidos').set_limit(value)  # type: ignore[arg-type]

    with pytest.raises(DataGateValidationError):
        query(1, 10, 'pedidos').set_offset(value)  # type: ignore[arg-type]


def test_build_twice_requires_reset() -> None:
    """Test builder is single-use until reset."""
    builder = query(1, 10, 'pedidos').set_limit(5)
    builder.build()

    with pytest.raises(RuntimeError, match='reset'):
        builder.build()

    descriptor = builder.reset().build()
    assert descriptor.limit is None
    assert descriptor.table == 'pedidos'


@pytest.mark.parametrize(
    ('project_id', 'instance_id', 'table', 'field_name'),
    [
        (None, 10, 'pedidos', 'project_id'),
        (1, 0, 'pedidos', 'id_instancia'),
        (1, 10, '  ', 'table'),
    ],
)
def test_build_requires_target(project_id: object, instance_id: object, table: str, field_name: str) -> None:
    """Test missing identifiers are reported with the offending field."""
    with pytest.raises(DataGateValidationError) as exc_info:
        query(project_id, instance_id, table).build()

    assert exc_info.value.field_name == field_name


def test_from_payload_accepts_wire_format() -> None:
    """Test descriptor parsed from a request body serializes back unchanged."""
    payload = {
        'project_id': 1,
        'id_instancia': 10,
        'table': 'vendas',
        'select': ['categoria', 'SUM(valor) as total'],
        'joins': [{'type': 'inner', 'table': 'produtos', 'alias': 'p', 'on': 'vendas.produto_id = p.id'}],
        'where': {'ano': 2024},
        'group_by': 'categoria',
        'having': 'SUM(valor) > 1000',
        'limit': 10,
    }

    descriptor = QueryDescriptor.from_payload(payload)
    expected = dict(payload)
    expected['joins'] = [{'type': 'INNER', 'table': 'produtos', 'alias': 'p', 'on': 'vendas.produto_id = p.id'}]

    assert descriptor.to_payload() == expected


def test_from_payload_defaults_join_type_to_inner() -> None:
    """Test join without a type defaults to INNER."""
    descriptor = QueryDescriptor.from_payload(
        {
            'project_id': 1,
            'id_instancia': 10,
            'table': 'pedidos',
            'joins': [{'table': 'clientes', 'on': 'pedidos.cliente_id = clientes.id'}],
        }
    )

    assert descriptor.joins[0].type is JoinType.INNER


def test_from_payload_rejects_malformed_parts() -> None:
    """Test structural errors in a request body are validation errors."""
    target = {'project_id': 1, 'id_instancia': 10, 'table': 'pedidos'}

    with pytest.raises(DataGateValidationError):
        QueryDescriptor.from_payload({**target, 'joins': {'table': 'clientes'}})

    with pytest.raises(DataGateValidationError):
        QueryDescriptor.from_payload({**target, 'where': ['status']})

    with pytest.raises(DataGateValidationError):
        QueryDescriptor.from_payload({**target, 'limit': -5})


def test_built_descriptor_is_detached_from_builder() -> None:
    """Test builder changes after build() do not alter the returned descriptor."""
    builder = query(1, 10, 'pedidos').merge_where({'status': 'pago'})
    descriptor = builder.build()

    builder.merge_where({'x': 1}).set_limit(5).left_join('clientes', 'c', 'pedidos.cliente_id = c.id')

    assert descriptor.where == {'status': 'pago'}
    assert descriptor.limit is None
    assert descriptor.joins == []


@pytest.mark.parametrize('payload', [None, ['pedidos'], 'pedidos'])
def test_from_payload_rejects_non_object(payload: object) -> None:
    """Test a descriptor that is not an object is a validation error."""
    with pytest.raises(DataGateValidationError) as exc_info:
        QueryDescriptor.from_payload(payload)  # type: ignore[arg-type]

    assert exc_info.value.field_name == 'descriptor'
