"""
Gateway usage example for DataGate.

This example demonstrates:
1. Configuring a RequestGateway
2. Building descriptors with the fluent builder
3. Relation shorthands and batches

The execution engine is simulated with httpx.MockTransport so the example
runs without a live engine.
"""

import asyncio
import json

import httpx

from namerec.datagate import DataGateValidationError
from namerec.datagate import GatewayConfig
from namerec.datagate import ManyToManyRelation
from namerec.datagate import RequestGateway
from namerec.datagate import query

API_KEY = 'demo-key'


def fake_engine(request: httpx.Request) -> httpx.Response:
    """Echo the received descriptor back as the only row."""
    body = json.loads(request.content)
    return httpx.Response(200, json={'success': True, 'data': [{'endpoint': request.url.path, 'received': body}]})


async def main() -> None:
    """Run examples."""
    config = GatewayConfig(
        engine_url='http://engine.local',
        internal_token='internal-secret',
        api_keys=frozenset({API_KEY}),
    )
    http_client = httpx.AsyncClient(base_url=config.engine_url, transport=httpx.MockTransport(fake_engine))
    gateway = RequestGateway.create(config, http_client=http_client)

    try:
        print('=== Builder ===')
        rows = await (
            query(1, 10, 'pedidos')
            .set_alias('p')
            .select_columns(['p.*', 'c.nome as cliente_nome'])
            .left_join('clientes', 'c', 'p.cliente_id = c.id')
            .merge_where({'p.status': 'pago'})
            .set_order_by('p.created_at DESC')
            .paginate(2, 25)
            .execute(gateway, API_KEY)
        )
        print(json.dumps(rows[0]['received'], indent=2))

        print('\n=== Many-to-many ===')
        base = query(1, 10, 'produtos').build()
        relation = ManyToManyRelation('produto_tags', 'tags', 'produto_id', 'tag_id')
        rows = await gateway.select_related(base, relation, 'many-to-many', api_key=API_KEY)
        print(json.dumps(rows[0]['received'], indent=2))

        print('\n=== Batch update without where ===')
        try:
            await gateway.batch_update(1, 10, 'produtos', [{'data': {'ativo': 0}}], api_key=API_KEY)
        except DataGateValidationError as e:
            print(f'Rejected: {e} (field: {e.field_name})')
    finally:
        await gateway.aclose()
        await http_client.aclose()


if __name__ == '__main__':
    asyncio.run(main())
