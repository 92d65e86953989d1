"""Request gateway - single entry/exit point to the execution engine."""

import logging
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import Any

import httpx

from namerec.datagate.batch import BatchCoordinator
from namerec.datagate.core.access import check_credential
from namerec.datagate.core.config import GatewayConfig
from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.core.utils import is_blank
from namerec.datagate.core.utils import require_target
from namerec.datagate.engine.catalog import CatalogClient
from namerec.datagate.engine.client import EngineClient
from namerec.datagate.query.constants import DescriptorField
from namerec.datagate.query.constants import EngineEndpoint
from namerec.datagate.query.constants import RelationKind
from namerec.datagate.query.descriptor import QueryDescriptor
from namerec.datagate.query.relations import ManyToManyRelation
from namerec.datagate.query.relations import OneToManyRelation
from namerec.datagate.query.relations import expand_relation
from namerec.datagate.query.relations import parse_relation

logger = logging.getLogger(__name__)

F = DescriptorField


def _target(project_id: Any, instance_id: Any, table: str) -> dict[str, Any]:
    require_target(project_id, instance_id, table)
    return {
        F.PROJECT_ID.value: project_id,
        F.INSTANCE_ID.value: instance_id,
        F.TABLE.value: table,
    }


def _require_row(name: str, value: Any, table: str) -> dict[str, Any]:
    if not isinstance(value, Mapping) or not value:
        msg = f'{name} must be a non-empty object'
        raise DataGateValidationError(msg, field_name=name, table=table)
    return dict(value)


def _require_record_id(id_value: Any, table: str) -> None:
    if is_blank(id_value):
        msg = 'id is required'
        raise DataGateValidationError(msg, field_name='id', table=table)


@dataclass
class RequestGateway:
    """
    Gateway to the execution engine with encapsulated, read-only configuration.

    Every operation checks the caller credential first, then validates the
    request locally, then issues exactly one engine call. Rows are passed
    through untouched.

    Example:
        gateway = RequestGateway.create(settings.to_gateway_config())

        rows = await gateway.get(1, 10, 'produtos', {'status': 'ativo'}, api_key=key)

        descriptor = query(1, 10, 'pedidos').left_join('clientes', 'c', 'pedidos.cliente_id = c.id').build()
        rows = await gateway.advanced_select(descriptor, api_key=key)

        await gateway.aclose()
    """

    config: GatewayConfig
    engine: EngineClient
    catalog: CatalogClient = field(init=False)

    def __post_init__(self) -> None:
        self.catalog = CatalogClient(self.engine)

    @classmethod
    def create(
        cls,
        config: GatewayConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> 'RequestGateway':
        """
        Create gateway with its engine client.

        Args:
            config: Gateway configuration
            http_client: Optional preconfigured httpx client (e.g. with a mock transport)

        Returns:
            RequestGateway instance
        """
        return cls(config=config, engine=EngineClient(config, client=http_client))

    async def aclose(self) -> None:
        await self.engine.aclose()

    def authorize(self, api_key: str | None) -> None:
        """
        Check caller credential.

        Raises:
            DataGateAuthError: If key is missing or not accepted
        """
        check_credential(self.config, api_key)

    # ========== Simple CRUD ==========

    async def insert(
        self,
        project_id: Any,
        instance_id: Any,
        table: str,
        data: Mapping[str, Any],
        *,
        api_key: str | None,
    ) -> Any:
        """
        Insert a single row.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            data: Row to insert
            api_key: Caller credential

        Returns:
            Inserted row or id as reported by the engine

        Raises:
            DataGateAuthError: If credential rejected
            DataGateValidationError: If identifiers or data are missing
            DataGateTransportError: If engine unreachable
            DataGateUpstreamError: If engine reports failure
        """
        self.authorize(api_key)
        payload = _target(project_id, instance_id, table)
        payload['data'] = _require_row('data', data, table)
        return await self.engine.post(EngineEndpoint.INSERT.value, payload)

    async def get(
        self,
        project_id: Any,
        instance_id: Any,
        table: str,
        filters: Mapping[str, Any] | None = None,
        *,
        api_key: str | None,
    ) -> Any:
        """
        Fetch rows matching equality filters.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            filters: Equality filters (None = all rows)
            api_key: Caller credential

        Returns:
            Rows as reported by the engine
        """
        self.authorize(api_key)
        payload = _target(project_id, instance_id, table)
        if filters is not None and not isinstance(filters, Mapping):
            msg = f'filters must be an object, got {type(filters).__name__}'
            raise DataGateValidationError(msg, field_name='filters', table=table)
        payload['filters'] = dict(filters or {})
        return await self.engine.post(EngineEndpoint.GET.value, payload)

    async def update(
        self,
        project_id: Any,
        instance_id: Any,
        table: str,
        id_value: Any,
        data: Mapping[str, Any],
        *,
        api_key: str | None,
    ) -> Any:
        """
        Update a single row by id.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            id_value: Row id
            data: Columns to change
            api_key: Caller credential

        Returns:
            Update result as reported by the engine
        """
        self.authorize(api_key)
        payload = _target(project_id, instance_id, table)
        _require_record_id(id_value, table)
        payload['id'] = id_value
        payload['data'] = _require_row('data', data, table)
        return await self.engine.post(EngineEndpoint.UPDATE.value, payload)

    async def delete(
        self,
        project_id: Any,
        instance_id: Any,
        table: str,
        id_value: Any,
        *,
        api_key: str | None,
    ) -> Any:
        """
        Delete a single row by id.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            id_value: Row id
            api_key: Caller credential

        Returns:
            Deletion result as reported by the engine
        """
        self.authorize(api_key)
        payload = _target(project_id, instance_id, table)
        _require_record_id(id_value, table)
        payload['id'] = id_value
        return await self.engine.post(EngineEndpoint.DELETE.value, payload)

    # ========== Advanced queries ==========

    async def advanced_select(
        self,
        descriptor: QueryDescriptor | Mapping[str, Any],
        *,
        api_key: str | None,
    ) -> Any:
        """
        Execute a full query descriptor (joins, filters, grouping, paging).

        Args:
            descriptor: QueryDescriptor or its wire-format mapping
            api_key: Caller credential

        Returns:
            Rows as reported by the engine

        Raises:
            DataGateAuthError: If credential rejected
            DataGateValidationError: If descriptor is invalid
            DataGateTransportError: If engine unreachable
            DataGateUpstreamError: If engine reports failure
        """
        self.authorize(api_key)
        if isinstance(descriptor, QueryDescriptor):
            descriptor.validate()
        else:
            descriptor = QueryDescriptor.from_payload(descriptor)

        logger.debug(f'Advanced select on {descriptor.table} with {len(descriptor.joins)} join(s)')
        return await self.engine.post(EngineEndpoint.ADVANCED_SELECT.value, descriptor.to_payload())

    async def aggregate(
        self,
        descriptor: QueryDescriptor | Mapping[str, Any],
        *,
        api_key: str | None,
    ) -> Any:
        """
        Execute an aggregation query (COUNT, SUM, ... with group_by/having).

        Same contract as advanced_select; the engine receives the descriptor as is.
        """
        return await self.advanced_select(descriptor, api_key=api_key)

    async def select_related(
        self,
        base: QueryDescriptor | Mapping[str, Any],
        relation: OneToManyRelation | ManyToManyRelation | Mapping[str, Any],
        kind: RelationKind | str,
        *,
        api_key: str | None,
    ) -> Any:
        """
        Expand a relation shorthand onto a base query and execute it.

        Args:
            base: Base descriptor or its wire-format mapping
            relation: Relation spec or its wire-format mapping
            kind: Relation kind (used when relation is a mapping)
            api_key: Caller credential

        Returns:
            Rows as reported by the engine
        """
        self.authorize(api_key)
        if not isinstance(base, QueryDescriptor):
            base = QueryDescriptor.from_payload(base)
        if not isinstance(relation, (OneToManyRelation, ManyToManyRelation)):
            relation = parse_relation(relation, kind)

        expanded = expand_relation(base, relation)
        return await self.advanced_select(expanded, api_key=api_key)

    async def relation_one_to_many(
        self,
        base: QueryDescriptor | Mapping[str, Any],
        relation: OneToManyRelation | Mapping[str, Any],
        *,
        api_key: str | None,
    ) -> Any:
        return await self.select_related(base, relation, RelationKind.ONE_TO_MANY, api_key=api_key)

    async def relation_many_to_many(
        self,
        base: QueryDescriptor | Mapping[str, Any],
        relation: ManyToManyRelation | Mapping[str, Any],
        *,
        api_key: str | None,
    ) -> Any:
        return await self.select_related(base, relation, RelationKind.MANY_TO_MANY, api_key=api_key)

    # ========== Batches ==========

    async def batch_insert(
        self,
        project_id: Any,
        instance_id: Any,
        table: str,
        items: Sequence[Mapping[str, Any]],
        *,
        api_key: str | None,
    ) -> Any:
        """
        Insert many rows with one engine call.

        Partial failures are not retried per item; whatever atomicity the
        engine offers applies.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            items: Rows to insert, in order
            api_key: Caller credential

        Returns:
            Per-item results as reported by the engine
        """
        self.authorize(api_key)
        request = BatchCoordinator.prepare_insert(project_id, instance_id, table, items)
        logger.debug(f'Batch insert of {len(request.items)} row(s) into {table}')
        return await self.engine.post(EngineEndpoint.BATCH_INSERT.value, request.to_payload())

    async def batch_update(
        self,
        project_id: Any,
        instance_id: Any,
        table: str,
        operations: Sequence[Mapping[str, Any]],
        *,
        api_key: str | None,
    ) -> Any:
        """
        Apply ordered conditional updates with one engine call.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            operations: Sequence of {data, where}, applied by the engine in order
            api_key: Caller credential

        Returns:
            Per-item results as reported by the engine
        """
        self.authorize(api_key)
        request = BatchCoordinator.prepare_update(project_id, instance_id, table, operations)
        logger.debug(f'Batch update of {len(request.operations)} operation(s) on {table}')
        return await self.engine.post(EngineEndpoint.BATCH_UPDATE.value, request.to_payload())
