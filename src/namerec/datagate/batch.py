"""Batch insert/update validation and sequencing."""

from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.core.utils import require_target
from namerec.datagate.query.constants import DescriptorField

F = DescriptorField


@dataclass(frozen=True, slots=True)
class UpdateOperation:
    """One conditional update inside a batch."""

    data: dict[str, Any]
    where: dict[str, Any]

    def to_payload(self) -> dict[str, Any]:
        return {'data': dict(self.data), 'where': dict(self.where)}


@dataclass(frozen=True, slots=True)
class BatchInsertRequest:
    """Ordered rows to insert into one table with a single engine call."""

    project_id: Any
    instance_id: Any
    table: str
    items: tuple[dict[str, Any], ...]

    def to_payload(self) -> dict[str, Any]:
        """
        Convert to engine wire format.

        Returns:
            Dictionary with rows under 'data', in input order
        """
        return {
            F.PROJECT_ID.value: self.project_id,
            F.INSTANCE_ID.value: self.instance_id,
            F.TABLE.value: self.table,
            'data': [dict(item) for item in self.items],
        }


@dataclass(frozen=True, slots=True)
class BatchUpdateRequest:
    """
    Ordered conditional updates for one table with a single engine call.

    The engine applies operations in this order; later operations may
    touch rows changed by earlier ones.
    """

    project_id: Any
    instance_id: Any
    table: str
    operations: tuple[UpdateOperation, ...]

    def to_payload(self) -> dict[str, Any]:
        """
        Convert to engine wire format.

        Returns:
            Dictionary with operations under 'updates', in input order
        """
        return {
            F.PROJECT_ID.value: self.project_id,
            F.INSTANCE_ID.value: self.instance_id,
            F.TABLE.value: self.table,
            'updates': [operation.to_payload() for operation in self.operations],
        }


def _require_sequence(value: Any, field_name: str, table: str) -> Sequence[Any]:
    """Reject non-sequences (strings and mappings included) and empty sequences."""
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        msg = f'{field_name} must be a non-empty array'
        raise DataGateValidationError(msg, field_name=field_name, table=table)
    if not value:
        msg = f'{field_name} must not be empty'
        raise DataGateValidationError(msg, field_name=field_name, table=table)
    return value


class BatchCoordinator:
    """Batch request validator - stateless, all methods are classmethods."""

    @classmethod
    def prepare_insert(
        cls,
        project_id: Any,
        instance_id: Any,
        table: str,
        items: Sequence[Mapping[str, Any]],
    ) -> BatchInsertRequest:
        """
        Validate and freeze a batch insert.

        Rows are not cross-validated against any schema.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            items: Rows to insert

        Returns:
            BatchInsertRequest with items in input order

        Raises:
            DataGateValidationError: If target is incomplete, items is empty
                or any item is not a row object
        """
        require_target(project_id, instance_id, table)
        items = _require_sequence(items, 'data', table)

        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                msg = f'data[{index}] must be an object, got {type(item).__name__}'
                raise DataGateValidationError(msg, field_name=f'data[{index}]', table=table)

        return BatchInsertRequest(
            project_id=project_id,
            instance_id=instance_id,
            table=table,
            items=tuple(dict(item) for item in items),
        )

    @classmethod
    def prepare_update(
        cls,
        project_id: Any,
        instance_id: Any,
        table: str,
        operations: Sequence[Mapping[str, Any]],
    ) -> BatchUpdateRequest:
        """
        Validate and freeze a batch update.

        Every operation needs a non-empty where: unconditional mass updates
        are rejected even if all other operations are valid.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Target table
            operations: Sequence of {data, where} mappings

        Returns:
            BatchUpdateRequest with operations in input order

        Raises:
            DataGateValidationError: If target is incomplete, operations is empty,
                or any operation lacks data or where
        """
        require_target(project_id, instance_id, table)
        operations = _require_sequence(operations, 'updates', table)

        prepared: list[UpdateOperation] = []
        for index, operation in enumerate(operations):
            path = f'updates[{index}]'
            if not isinstance(operation, Mapping):
                msg = f'{path} must be an object, got {type(operation).__name__}'
                raise DataGateValidationError(msg, field_name=path, table=table)

            where = operation.get('where')
            if not isinstance(where, Mapping) or not where:
                msg = f'{path}.where is required; unconditional updates are not allowed'
                raise DataGateValidationError(msg, field_name=f'{path}.where', table=table)

            data = operation.get('data')
            if not isinstance(data, Mapping) or not data:
                msg = f'{path}.data is required'
                raise DataGateValidationError(msg, field_name=f'{path}.data', table=table)

            prepared.append(UpdateOperation(data=dict(data), where=dict(where)))

        return BatchUpdateRequest(
            project_id=project_id,
            instance_id=instance_id,
            table=table,
            operations=tuple(prepared),
        )
