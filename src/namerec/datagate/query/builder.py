"""Fluent query builder over a single QueryDescriptor."""

from collections.abc import Mapping
from collections.abc import Sequence
from typing import TYPE_CHECKING
from typing import Any

from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.query.constants import DEFAULT_PER_PAGE
from namerec.datagate.query.constants import JoinType
from namerec.datagate.query.descriptor import JoinSpec
from namerec.datagate.query.descriptor import QueryDescriptor
from namerec.datagate.query.descriptor import check_non_negative
from namerec.datagate.query.descriptor import coerce_join_type

if TYPE_CHECKING:
    from namerec.datagate.gateway import RequestGateway


class QueryBuilder:
    """
    Mutable, chainable accumulator over one QueryDescriptor.

    Every mutator changes the underlying descriptor in place and returns
    the builder itself. The builder is single-use: build() or execute()
    may be called once, then reset() is required.

    Example:
        descriptor = (
            query(1, 10, 'pedidos')
            .set_alias('p')
            .select_columns(['p.*', 'c.nome as cliente_nome'])
            .left_join('clientes', 'c', 'p.cliente_id = c.id')
            .merge_where({'p.status': 'ativo'})
            .set_order_by('p.created_at DESC')
            .paginate(2, 50)
            .build()
        )
    """

    def __init__(self, project_id: Any, instance_id: Any, table: str) -> None:
        """
        Initialize builder for a target table.

        Args:
            project_id: Project identifier
            instance_id: Instance identifier
            table: Main table name
        """
        self._target = (project_id, instance_id, table)
        self._descriptor = QueryDescriptor(project_id, instance_id, table)
        self._built = False

    @property
    def descriptor(self) -> QueryDescriptor:
        """Descriptor being accumulated (live, not a copy)."""
        return self._descriptor

    def reset(self) -> 'QueryBuilder':
        """Discard accumulated state and start a fresh descriptor for the same target."""
        self._descriptor = QueryDescriptor(*self._target)
        self._built = False
        return self

    # ========== Mutators ==========

    def select_columns(self, columns: Sequence[str] | str) -> 'QueryBuilder':
        """Replace projection; a single string is treated as one column."""
        self._descriptor.select = [columns] if isinstance(columns, str) else list(columns)
        return self

    def set_alias(self, alias: str) -> 'QueryBuilder':
        self._descriptor.alias = alias
        return self

    def add_join(
        self,
        join_type: JoinType | str,
        table: str,
        alias: str | None,
        on: str,
    ) -> 'QueryBuilder':
        """
        Append a join after the ones already declared.

        Args:
            join_type: INNER, LEFT or RIGHT
            table: Joined table
            alias: Alias of joined table
            on: Join condition (engine-native expression)

        Returns:
            The builder

        Raises:
            DataGateValidationError: If join type is unknown or table/condition missing
        """
        join = JoinSpec(type=coerce_join_type(join_type), table=table, on=on, alias=alias)
        join.validate()
        self._descriptor.joins.append(join)
        return self

    def inner_join(self, table: str, alias: str | None, on: str) -> 'QueryBuilder':
        return self.add_join(JoinType.INNER, table, alias, on)

    def left_join(self, table: str, alias: str | None, on: str) -> 'QueryBuilder':
        return self.add_join(JoinType.LEFT, table, alias, on)

    def right_join(self, table: str, alias: str | None, on: str) -> 'QueryBuilder':
        return self.add_join(JoinType.RIGHT, table, alias, on)

    def merge_where(self, filters: Mapping[str, Any]) -> 'QueryBuilder':
        """
        Shallow-merge equality filters; new keys overwrite existing ones.

        Raises:
            DataGateValidationError: If filters is not a mapping
        """
        if not isinstance(filters, Mapping):
            msg = f'where filters must be an object, got {type(filters).__name__}'
            raise DataGateValidationError(msg, field_name='where')
        self._descriptor.where = {**self._descriptor.where, **filters}
        return self

    def set_where_raw(self, condition: str) -> 'QueryBuilder':
        self._descriptor.where_raw = condition
        return self

    def set_order_by(self, order: str) -> 'QueryBuilder':
        self._descriptor.order_by = order
        return self

    def set_group_by(self, group: str) -> 'QueryBuilder':
        self._descriptor.group_by = group
        return self

    def set_having(self, condition: str) -> 'QueryBuilder':
        self._descriptor.having = condition
        return self

    def set_limit(self, limit: int) -> 'QueryBuilder':
        check_non_negative('limit', limit)
        self._descriptor.limit = limit
        return self

    def set_offset(self, offset: int) -> 'QueryBuilder':
        check_non_negative('offset', offset)
        self._descriptor.offset = offset
        return self

    def paginate(self, page: int, per_page: int = DEFAULT_PER_PAGE) -> 'QueryBuilder':
        """
        Set limit/offset for a 1-based page.

        Args:
            page: Page number, starting at 1
            per_page: Rows per page

        Returns:
            The builder

        Raises:
            DataGateValidationError: If page or per_page is less than 1
        """
        for name, value in (('page', page), ('per_page', per_page)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                msg = f'{name} must be an integer >= 1, got {value!r}'
                raise DataGateValidationError(msg, field_name=name)

        self._descriptor.limit = per_page
        self._descriptor.offset = (page - 1) * per_page
        return self

    # ========== Terminal operations ==========

    def build(self) -> QueryDescriptor:
        """
        Finish the descriptor.

        Returns:
            Validated copy of the accumulated descriptor

        Raises:
            RuntimeError: If called again without reset()
            DataGateValidationError: If descriptor is invalid
        """
        if self._built:
            msg = 'QueryBuilder already built. Call reset() before building again.'
            raise RuntimeError(msg)

        self._descriptor.validate()
        self._built = True
        return self._descriptor.copy()

    async def execute(self, gateway: 'RequestGateway', api_key: str | None) -> Any:
        """
        Build the descriptor and forward it to the engine.

        Args:
            gateway: Request gateway
            api_key: Caller credential

        Returns:
            Rows returned by the engine

        Raises:
            RuntimeError: If called again without reset()
            DataGateError: On validation, auth, transport or upstream failure
        """
        gateway.authorize(api_key)
        return await gateway.advanced_select(self.build(), api_key=api_key)


def query(project_id: Any, instance_id: Any, table: str) -> QueryBuilder:
    """
    Create a QueryBuilder.

    Args:
        project_id: Project identifier
        instance_id: Instance identifier
        table: Main table name

    Returns:
        New QueryBuilder
    """
    return QueryBuilder(project_id, instance_id, table)
