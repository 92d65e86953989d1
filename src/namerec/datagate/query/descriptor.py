"""Query descriptor - canonical engine-agnostic description of a read query."""

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.core.utils import is_blank
from namerec.datagate.core.utils import require_target
from namerec.datagate.query.constants import DescriptorField
from namerec.datagate.query.constants import JoinType

F = DescriptorField


def coerce_join_type(value: JoinType | str) -> JoinType:
    """
    Normalize a join type given as enum or string (case-insensitive).

    Args:
        value: Join type

    Returns:
        JoinType member

    Raises:
        DataGateValidationError: If join type is not supported
    """
    if isinstance(value, JoinType):
        return value
    if isinstance(value, str):
        try:
            return JoinType(value.strip().upper())
        except ValueError:
            pass
    allowed = ', '.join(t.value for t in JoinType)
    msg = f'Unsupported join type {value!r}, expected one of: {allowed}'
    raise DataGateValidationError(msg, field_name='joins.type')


def check_non_negative(name: str, value: Any) -> None:
    """
    Validate an optional non-negative integer (limit/offset).

    Args:
        name: Field name for error reporting
        value: Value to check (None is accepted)

    Raises:
        DataGateValidationError: If value is not a non-negative integer
    """
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f'{name} must be a non-negative integer, got {value!r}'
        raise DataGateValidationError(msg, field_name=name)


@dataclass(slots=True)
class JoinSpec:
    """One join clause. Joins are applied in declaration order."""

    type: JoinType
    table: str
    on: str
    alias: str | None = None

    def validate(self) -> None:
        """
        Validate join clause.

        Raises:
            DataGateValidationError: If table or condition is missing
        """
        self.type = coerce_join_type(self.type)
        if is_blank(self.table) or not isinstance(self.table, str):
            msg = 'Join table is required'
            raise DataGateValidationError(msg, field_name='joins.table')
        if is_blank(self.on) or not isinstance(self.on, str):
            msg = f'Join condition is required for {self.table}'
            raise DataGateValidationError(msg, field_name='joins.on')

    def to_payload(self) -> dict[str, Any]:
        """
        Convert to engine wire format.

        Returns:
            Dictionary with type, table, alias (if set) and on
        """
        payload: dict[str, Any] = {
            F.TYPE.value: coerce_join_type(self.type).value,
            F.TABLE.value: self.table,
        }
        if self.alias:
            payload[F.ALIAS.value] = self.alias
        payload[F.ON.value] = self.on
        return payload

    @classmethod
    def from_payload(cls, payload: Any) -> 'JoinSpec':
        """
        Build join clause from wire format.

        Args:
            payload: Mapping with type, table, alias and on

        Returns:
            Validated JoinSpec

        Raises:
            DataGateValidationError: If payload is malformed
        """
        if not isinstance(payload, Mapping):
            msg = f'Join must be an object, got {type(payload).__name__}'
            raise DataGateValidationError(msg, field_name='joins')

        join = cls(
            type=coerce_join_type(payload.get(F.TYPE.value) or JoinType.INNER),
            table=payload.get(F.TABLE.value),
            on=payload.get(F.ON.value),
            alias=payload.get(F.ALIAS.value),
        )
        join.validate()
        return join


@dataclass(slots=True)
class QueryDescriptor:
    """
    Canonical representation of one read query.

    Everything except the target (project, instance, table) is optional.
    An empty select means "all columns". Where and where_raw are combined with AND.
    """

    project_id: Any
    instance_id: Any
    table: str
    alias: str | None = None
    select: list[str] = field(default_factory=list)
    joins: list[JoinSpec] = field(default_factory=list)
    where: dict[str, Any] = field(default_factory=dict)
    where_raw: str | None = None
    group_by: str | None = None
    having: str | None = None
    order_by: str | None = None
    limit: int | None = None
    offset: int | None = None

    def validate(self) -> None:
        """
        Validate descriptor before it crosses the gateway boundary.

        Raises:
            DataGateValidationError: If target is incomplete or any part is malformed
        """
        require_target(self.project_id, self.instance_id, self.table)
        check_non_negative(F.LIMIT.value, self.limit)
        check_non_negative(F.OFFSET.value, self.offset)

        if not isinstance(self.where, Mapping):
            msg = f'where must be an object, got {type(self.where).__name__}'
            raise DataGateValidationError(msg, field_name=F.WHERE.value, table=self.table)

        for column in self.select:
            if not isinstance(column, str) or not column.strip():
                msg = f'select entries must be non-empty strings, got {column!r}'
                raise DataGateValidationError(msg, field_name=F.SELECT.value, table=self.table)

        for join in self.joins:
            join.validate()

    def join_aliases(self) -> set[str]:
        """
        Get aliases already taken by the main table and joins.

        Returns:
            Set of aliases
        """
        aliases = {join.alias for join in self.joins if join.alias}
        if self.alias:
            aliases.add(self.alias)
        return aliases

    def copy(self) -> 'QueryDescriptor':
        """
        Create an independent copy (sequences and filters are not shared).

        Returns:
            New QueryDescriptor
        """
        return copy.deepcopy(self)

    def to_payload(self) -> dict[str, Any]:
        """
        Convert to the engine wire format.

        Joins and where are always present; other optional fields only when set.

        Returns:
            Dictionary ready for JSON serialization
        """
        payload: dict[str, Any] = {
            F.PROJECT_ID.value: self.project_id,
            F.INSTANCE_ID.value: self.instance_id,
            F.TABLE.value: self.table,
        }
        if self.alias:
            payload[F.ALIAS.value] = self.alias
        if self.select:
            payload[F.SELECT.value] = list(self.select)
        payload[F.JOINS.value] = [join.to_payload() for join in self.joins]
        payload[F.WHERE.value] = dict(self.where)

        optional = (
            (F.WHERE_RAW, self.where_raw),
            (F.ORDER_BY, self.order_by),
            (F.GROUP_BY, self.group_by),
            (F.HAVING, self.having),
            (F.LIMIT, self.limit),
            (F.OFFSET, self.offset),
        )
        for key, value in optional:
            if value is not None:
                payload[key.value] = value

        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'QueryDescriptor':
        """
        Build descriptor from the wire format (e.g. a caller request body).

        Args:
            payload: Mapping using engine field names

        Returns:
            Validated QueryDescriptor

        Raises:
            DataGateValidationError: If payload is malformed or target incomplete
        """
        if not isinstance(payload, Mapping):
            msg = f'descriptor must be an object, got {type(payload).__name__}'
            raise DataGateValidationError(msg, field_name='descriptor')

        require_target(
            payload.get(F.PROJECT_ID.value),
            payload.get(F.INSTANCE_ID.value),
            payload.get(F.TABLE.value),
        )

        select = payload.get(F.SELECT.value) or []
        if isinstance(select, str):
            select = [select]
        if not isinstance(select, list):
            msg = f'select must be a list, got {type(select).__name__}'
            raise DataGateValidationError(msg, field_name=F.SELECT.value)

        joins = payload.get(F.JOINS.value) or []
        if not isinstance(joins, list):
            msg = f'joins must be a list, got {type(joins).__name__}'
            raise DataGateValidationError(msg, field_name=F.JOINS.value)

        where = payload.get(F.WHERE.value) or {}
        if not isinstance(where, Mapping):
            msg = f'where must be an object, got {type(where).__name__}'
            raise DataGateValidationError(msg, field_name=F.WHERE.value)

        descriptor = cls(
            project_id=payload[F.PROJECT_ID.value],
            instance_id=payload[F.INSTANCE_ID.value],
            table=payload[F.TABLE.value],
            alias=payload.get(F.ALIAS.value),
            select=list(select),
            joins=[JoinSpec.from_payload(join) for join in joins],
            where=dict(where),
            where_raw=payload.get(F.WHERE_RAW.value),
            group_by=payload.get(F.GROUP_BY.value),
            having=payload.get(F.HAVING.value),
            order_by=payload.get(F.ORDER_BY.value),
            limit=payload.get(F.LIMIT.value),
            offset=payload.get(F.OFFSET.value),
        )
        descriptor.validate()
        return descriptor
