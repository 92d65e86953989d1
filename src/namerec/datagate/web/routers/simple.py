"""Simple CRUD endpoints (one row, by id or equality filters)."""

import structlog
from fastapi import APIRouter
from fastapi import Depends

from namerec.datagate.gateway import RequestGateway
from namerec.datagate.web.dependencies import get_api_key
from namerec.datagate.web.dependencies import get_gateway
from namerec.datagate.web.models.requests import DeleteBody
from namerec.datagate.web.models.requests import GetBody
from namerec.datagate.web.models.requests import InsertBody
from namerec.datagate.web.models.requests import UpdateBody
from namerec.datagate.web.models.responses import Envelope
from namerec.datagate.web.models.responses import row_count

logger = structlog.get_logger()

router = APIRouter(prefix='/api/simple', tags=['Simple'])


@router.post('/insert', response_model=Envelope, response_model_exclude_none=True)
async def insert_endpoint(
    body: InsertBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """
    Insert a single row.

    Args:
        body: Target identifiers and row data
        api_key: Caller credential
        gateway: Request gateway

    Returns:
        Envelope with the engine result
    """
    logger.info('Insert request', table=body.table)
    data = await gateway.insert(body.project_id, body.id_instancia, body.table, body.data, api_key=api_key)
    return Envelope(message='Record inserted successfully', data=data)


@router.post('/get', response_model=Envelope, response_model_exclude_none=True)
async def get_endpoint(
    body: GetBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """
    Fetch rows matching equality filters.

    Returns:
        Envelope with rows and count
    """
    logger.info('Get request', table=body.table, has_filters=bool(body.filters))
    data = await gateway.get(body.project_id, body.id_instancia, body.table, body.filters, api_key=api_key)
    return Envelope(data=data, count=row_count(data))


@router.post('/update', response_model=Envelope, response_model_exclude_none=True)
async def update_endpoint(
    body: UpdateBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """Update a single row by id."""
    logger.info('Update request', table=body.table, id=body.id)
    data = await gateway.update(
        body.project_id,
        body.id_instancia,
        body.table,
        body.id,
        body.data,
        api_key=api_key,
    )
    return Envelope(message='Record updated successfully', data=data)


@router.post('/delete', response_model=Envelope, response_model_exclude_none=True)
async def delete_endpoint(
    body: DeleteBody,
    api_key: str | None = Depends(get_api_key),
    gateway: RequestGateway = Depends(get_gateway),
) -> Envelope:
    """Delete a single row by id."""
    logger.info('Delete request', table=body.table, id=body.id)
    data = await gateway.delete(body.project_id, body.id_instancia, body.table, body.id, api_key=api_key)
    return Envelope(message='Record deleted successfully', data=data)
