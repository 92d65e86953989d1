"""Pass-through client for the engine's project, instance and schema catalog."""

from collections.abc import Mapping
from typing import Any

from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.core.utils import is_blank
from namerec.datagate.core.utils import require_fields
from namerec.datagate.engine.client import EngineClient


def _require_id(name: str, value: Any) -> None:
    if is_blank(value):
        msg = f'{name} is required'
        raise DataGateValidationError(msg, field_name=name)


class CatalogClient:
    """
    Conventional REST pass-through for catalog resources.

    Shares transport, credential header and error mapping with EngineClient.
    Payloads are forwarded as given; only identifiers are checked locally.
    """

    def __init__(self, engine: EngineClient) -> None:
        self.engine = engine

    # ========== Projects ==========

    async def list_projects(self) -> list[Any]:
        """
        List all projects.

        Returns:
            List of projects (empty list if engine returns nothing)
        """
        return await self.engine.request('GET', '/projects') or []

    async def create_project(self, data: Mapping[str, Any]) -> Any:
        return await self.engine.request('POST', '/projects', dict(data))

    async def update_project(self, project_id: Any, data: Mapping[str, Any]) -> Any:
        _require_id('project_id', project_id)
        return await self.engine.request('PUT', f'/projects/{project_id}', dict(data))

    async def delete_project(self, project_id: Any) -> Any:
        _require_id('project_id', project_id)
        return await self.engine.request('DELETE', f'/projects/{project_id}')

    # ========== Instances ==========

    async def list_instances(self, project_id: Any) -> Any:
        _require_id('project_id', project_id)
        return await self.engine.request('GET', '/instances', params={'project_id': project_id})

    async def create_instance(self, data: Mapping[str, Any]) -> Any:
        return await self.engine.request('POST', '/instances', dict(data))

    async def update_instance(self, instance_id: Any, data: Mapping[str, Any]) -> Any:
        _require_id('instance_id', instance_id)
        return await self.engine.request('PUT', f'/instances/{instance_id}', dict(data))

    async def delete_instance(self, instance_id: Any) -> Any:
        _require_id('instance_id', instance_id)
        return await self.engine.request('DELETE', f'/instances/{instance_id}')

    # ========== Tables ==========

    async def create_table(self, table_data: Mapping[str, Any]) -> Any:
        """
        Create a table, optionally with indexes.

        Args:
            table_data: {project_id, table_name, columns, indexes?}

        Returns:
            Engine response

        Raises:
            DataGateValidationError: If project_id, table_name or columns is missing
        """
        require_fields(table_data, 'project_id', 'table_name', 'columns')
        payload = {
            'project_id': table_data['project_id'],
            'table_name': table_data['table_name'],
            'columns': table_data['columns'],
            'indexes': table_data.get('indexes') or [],
        }
        return await self.engine.request('POST', '/schema/table', payload)

    async def list_tables(self, project_id: Any, detailed: bool = False) -> Any:
        """
        List tables of a project.

        Args:
            project_id: Project identifier
            detailed: Include columns and indexes

        Returns:
            Engine response
        """
        _require_id('project_id', project_id)
        params: dict[str, Any] = {'project_id': project_id}
        if detailed:
            params['detailed'] = 'true'
        return await self.engine.request('GET', '/schema/tables', params=params)

    async def get_table_details(self, project_id: Any, table: str) -> Any:
        _require_id('project_id', project_id)
        _require_id('table', table)
        return await self.engine.request(
            'GET', '/schema/table/details', params={'project_id': project_id, 'table': table}
        )

    async def delete_table(self, project_id: Any, table: str) -> Any:
        _require_id('project_id', project_id)
        _require_id('table', table)
        return await self.engine.request(
            'DELETE', '/schema/table', params={'project_id': project_id, 'table': table}
        )

    # ========== Columns and indexes ==========

    async def add_column(self, project_id: Any, table: str, column_data: Mapping[str, Any]) -> Any:
        _require_id('project_id', project_id)
        _require_id('table', table)
        require_fields(column_data, 'name', 'type', table=table)
        return await self.engine.request(
            'POST', '/schema/column', dict(column_data), params={'project_id': project_id, 'table': table}
        )

    async def modify_column(self, project_id: Any, table: str, column_data: Mapping[str, Any]) -> Any:
        _require_id('project_id', project_id)
        _require_id('table', table)
        require_fields(column_data, 'name', table=table)
        return await self.engine.request(
            'PUT', '/schema/column', dict(column_data), params={'project_id': project_id, 'table': table}
        )

    async def drop_column(self, project_id: Any, table: str, column: str) -> Any:
        _require_id('project_id', project_id)
        _require_id('table', table)
        _require_id('column', column)
        return await self.engine.request(
            'DELETE',
            '/schema/column',
            params={'project_id': project_id, 'table': table, 'column': column},
        )

    async def add_index(self, project_id: Any, table: str, index_data: Mapping[str, Any]) -> Any:
        _require_id('project_id', project_id)
        _require_id('table', table)
        require_fields(index_data, 'name', 'columns', table=table)
        return await self.engine.request(
            'POST', '/schema/index', dict(index_data), params={'project_id': project_id, 'table': table}
        )

    async def drop_index(self, project_id: Any, table: str, index: str) -> Any:
        _require_id('project_id', project_id)
        _require_id('table', table)
        _require_id('index', index)
        return await self.engine.request(
            'DELETE',
            '/schema/index',
            params={'project_id': project_id, 'table': table, 'index': index},
        )
