"""Advanced endpoints: descriptor queries, relations, aggregation and batches."""

import structlog
from fastapi import APIRouter
from fastapi import Depends

from namerec.datagate.gateway import RequestGateway
from namerec.datagate.web.dependencies import get_api_key
from namerec.datagate.web.dependencies import get_gateway
from namerec.datagate.web.models.requests import BatchInsertBody
from namerec.datagate.web.models.requests import BatchUpdateBody
from namerec.datagate.web.models.requests import RelationBody
from namerec.datagate.web.models.requests import SelectBody
from namerec.datagate.web.models.responses import Envelope
from namerec.datagate.web.models.responses import row_count

logger = structlog.get_logger()

router = APIRouter(prefix='/api/advanced', tags=['Advanced'])


@router.post('/select', response_model=Envelope, response_model_exclude_none=True)
async def select_endpoint(
    body: SelectBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """
    Execute a query descriptor.

    Args:
        body: Full descriptor in wire format
        api_key: Caller credential
        gateway: Request gateway

    Returns:
        Envelope with rows and count
    """
    logger.info(
        'Advanced select request',
        table=body.table,
        joins=len(body.joins) if isinstance(body.joins, list) else 0,
    )
    data = await gateway.advanced_select(body.model_dump(), api_key=api_key)
    logger.info('Advanced select completed', row_count=row_count(data))
    return Envelope(message='Query executed successfully', data=data, count=row_count(data))


@router.post('/aggregate', response_model=Envelope, response_model_exclude_none=True)
async def aggregate_endpoint(
    body: SelectBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """Execute an aggregation query (group_by/having)."""
    logger.info('Aggregate request', table=body.table, group_by=body.group_by)
    data = await gateway.aggregate(body.model_dump(), api_key=api_key)
    return Envelope(message='Aggregation executed successfully', data=data, count=row_count(data))


@router.post('/relation-one-to-many', response_model=Envelope, response_model_exclude_none=True)
async def relation_one_to_many_endpoint(
    body: RelationBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """
    Fetch rows of a table joined with a one-to-many related table.

    Args:
        body: Base table, filters and relation {table, foreign_key, select, join_type}
        api_key: Caller credential
        gateway: Request gateway

    Returns:
        Envelope with rows and count
    """
    logger.info('One-to-many relation request', table=body.table)
    base = body.model_dump(exclude={'relation'})
    data = await gateway.relation_one_to_many(base, body.relation, api_key=api_key)
    return Envelope(message='Relation query executed successfully', data=data, count=row_count(data))


@router.post('/relation-many-to-many', response_model=Envelope, response_model_exclude_none=True)
async def relation_many_to_many_endpoint(
    body: RelationBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """Fetch rows of a table with aggregated labels through a pivot table."""
    logger.info('Many-to-many relation request', table=body.table)
    base = body.model_dump(exclude={'relation'})
    data = await gateway.relation_many_to_many(base, body.relation, api_key=api_key)
    return Envelope(message='Relation query executed successfully', data=data, count=row_count(data))


@router.post('/batch-insert', response_model=Envelope, response_model_exclude_none=True)
async def batch_insert_endpoint(
    body: BatchInsertBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """
    Insert many rows with one engine call.

    Returns:
        Envelope with per-item results
    """
    items = body.data
    logger.info('Batch insert request', table=body.table, items=len(items) if isinstance(items, list) else 0)
    data = await gateway.batch_insert(body.project_id, body.id_instancia, body.table, items, api_key=api_key)
    return Envelope(message=f'{len(items)} records inserted successfully', data=data)


@router.post('/batch-update', response_model=Envelope, response_model_exclude_none=True)
async def batch_update_endpoint(
    body: BatchUpdateBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """Apply ordered conditional updates with one engine call."""
    operations = body.updates
    logger.info(
        'Batch update request',
        table=body.table,
        operations=len(operations) if isinstance(operations, list) else 0,
    )
    data = await gateway.batch_update(body.project_id, body.id_instancia, body.table, operations, api_key=api_key)
    return Envelope(message=f'{len(operations)} records updated successfully', data=data)
