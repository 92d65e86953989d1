"""Relation expansion - turns relation shorthand into explicit joins.

All functions here are pure: the base descriptor is never mutated and
expander-added joins always come after the joins the caller declared.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.core.utils import require_fields
from namerec.datagate.query.constants import DEFAULT_LABEL_COLUMN
from namerec.datagate.query.constants import MAIN_ALIAS
from namerec.datagate.query.constants import PIVOT_ALIAS
from namerec.datagate.query.constants import RELATED_ALIAS
from namerec.datagate.query.constants import TARGET_ALIAS
from namerec.datagate.query.constants import JoinType
from namerec.datagate.query.constants import RelationKind
from namerec.datagate.query.descriptor import JoinSpec
from namerec.datagate.query.descriptor import QueryDescriptor
from namerec.datagate.query.descriptor import coerce_join_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OneToManyRelation:
    """Main table row points at one row of target_table through foreign_key."""

    target_table: str
    foreign_key: str
    select_columns: tuple[str, ...] = ()
    join_type: JoinType = JoinType.LEFT

    def validate(self) -> None:
        """
        Validate mandatory keys.

        Raises:
            DataGateValidationError: If target_table or foreign_key is missing,
                or a select entry is not a column name
        """
        require_fields(
            {'table': self.target_table, 'foreign_key': self.foreign_key},
            'table',
            'foreign_key',
        )
        for column in self.select_columns:
            if not isinstance(column, str) or not column.strip():
                msg = f'select entries must be non-empty column names, got {column!r}'
                raise DataGateValidationError(msg, field_name='relation.select', table=self.target_table)
        coerce_join_type(self.join_type)


@dataclass(frozen=True, slots=True)
class ManyToManyRelation:
    """Main table is linked to target_table through pivot_table."""

    pivot_table: str
    target_table: str
    pivot_foreign_key: str
    pivot_target_key: str
    label_column: str = DEFAULT_LABEL_COLUMN

    def validate(self) -> None:
        """
        Validate mandatory keys.

        Raises:
            DataGateValidationError: If any of the four keys is missing
        """
        require_fields(
            {
                'pivot_table': self.pivot_table,
                'target_table': self.target_table,
                'pivot_foreign_key': self.pivot_foreign_key,
                'pivot_target_key': self.pivot_target_key,
                'label_column': self.label_column,
            },
            'pivot_table',
            'target_table',
            'pivot_foreign_key',
            'pivot_target_key',
            'label_column',
        )


RelationSpec = OneToManyRelation | ManyToManyRelation


def parse_relation(payload: Any, kind: RelationKind | str) -> RelationSpec:
    """
    Build a relation spec from its wire format.

    One-to-many keys: table, foreign_key, select (optional), join_type (optional).
    Many-to-many keys: pivot_table, target_table, pivot_foreign_key,
    pivot_target_key, label_column (optional).

    Args:
        payload: Relation mapping from the request body
        kind: Relation kind

    Returns:
        Validated relation spec

    Raises:
        DataGateValidationError: If payload is not a mapping or keys are missing
    """
    if not isinstance(payload, Mapping):
        msg = 'relation must be an object'
        raise DataGateValidationError(msg, field_name='relation')

    try:
        kind = RelationKind(kind)
    except ValueError:
        msg = f'Unsupported relation kind {kind!r}'
        raise DataGateValidationError(msg, field_name='kind') from None

    if kind is RelationKind.ONE_TO_MANY:
        require_fields(payload, 'table', 'foreign_key')
        columns = payload.get('select') or ()
        if isinstance(columns, str):
            columns = (columns,)
        spec: RelationSpec = OneToManyRelation(
            target_table=payload['table'],
            foreign_key=payload['foreign_key'],
            select_columns=tuple(columns),
            join_type=coerce_join_type(payload.get('join_type') or JoinType.LEFT),
        )
    else:
        require_fields(payload, 'pivot_table', 'target_table', 'pivot_foreign_key', 'pivot_target_key')
        spec = ManyToManyRelation(
            pivot_table=payload['pivot_table'],
            target_table=payload['target_table'],
            pivot_foreign_key=payload['pivot_foreign_key'],
            pivot_target_key=payload['pivot_target_key'],
            label_column=payload.get('label_column') or DEFAULT_LABEL_COLUMN,
        )

    spec.validate()
    return spec


def _prepare_base(base: QueryDescriptor, new_aliases: tuple[str, ...]) -> tuple[QueryDescriptor, str]:
    """
    Copy base descriptor and resolve the alias of the main table.

    Raises:
        DataGateValidationError: If an expander alias is already taken
    """
    taken = base.join_aliases()
    for alias in new_aliases:
        if alias in taken:
            msg = f'Alias "{alias}" is already used in {base.table}; relation expansion needs it'
            raise DataGateValidationError(msg, field_name='joins.alias', table=base.table)

    result = base.copy()
    main_alias = result.alias or MAIN_ALIAS
    result.alias = main_alias
    return result, main_alias


def expand_one_to_many(base: QueryDescriptor, spec: OneToManyRelation) -> QueryDescriptor:
    """
    Expand a one-to-many relation into a single join aliased 'rel'.

    Related columns are projected as 'rel.<col> as rel_<col>'; with no columns
    given the whole related row is projected.

    Args:
        base: Descriptor to extend (not mutated)
        spec: Relation spec

    Returns:
        New descriptor with the join appended

    Raises:
        DataGateValidationError: If spec is missing mandatory keys
    """
    spec.validate()
    result, main_alias = _prepare_base(base, (RELATED_ALIAS,))

    if spec.select_columns:
        projections = [
            f'{RELATED_ALIAS}.{column} as {RELATED_ALIAS}_{column}' for column in spec.select_columns
        ]
    else:
        projections = [f'{RELATED_ALIAS}.*']

    result.select = (result.select or [f'{main_alias}.*']) + projections
    result.joins.append(
        JoinSpec(
            type=coerce_join_type(spec.join_type),
            table=spec.target_table,
            alias=RELATED_ALIAS,
            on=f'{main_alias}.{spec.foreign_key} = {RELATED_ALIAS}.id',
        )
    )

    logger.debug(f'Expanded one-to-many {base.table} -> {spec.target_table}')
    return result


def expand_many_to_many(base: QueryDescriptor, spec: ManyToManyRelation) -> QueryDescriptor:
    """
    Expand a many-to-many relation into main -> pivot -> target LEFT joins.

    Rows are grouped by main.id and the target labels/ids are aggregated into
    'related_names' and 'related_ids'.

    Args:
        base: Descriptor to extend (not mutated)
        spec: Relation spec

    Returns:
        New descriptor with both joins appended and group_by set

    Raises:
        DataGateValidationError: If spec is missing mandatory keys
    """
    spec.validate()
    result, main_alias = _prepare_base(base, (PIVOT_ALIAS, TARGET_ALIAS))

    aggregates = [
        f"GROUP_CONCAT({TARGET_ALIAS}.{spec.label_column} SEPARATOR ', ') as related_names",
        f'GROUP_CONCAT({TARGET_ALIAS}.id) as related_ids',
    ]
    result.select = (result.select or [f'{main_alias}.*']) + aggregates
    result.joins.extend([
        JoinSpec(
            type=JoinType.LEFT,
            table=spec.pivot_table,
            alias=PIVOT_ALIAS,
            on=f'{main_alias}.id = {PIVOT_ALIAS}.{spec.pivot_foreign_key}',
        ),
        JoinSpec(
            type=JoinType.LEFT,
            table=spec.target_table,
            alias=TARGET_ALIAS,
            on=f'{PIVOT_ALIAS}.{spec.pivot_target_key} = {TARGET_ALIAS}.id',
        ),
    ])
    result.group_by = f'{main_alias}.id'

    logger.debug(f'Expanded many-to-many {base.table} -> {spec.pivot_table} -> {spec.target_table}')
    return result


def expand_relation(base: QueryDescriptor, spec: RelationSpec) -> QueryDescriptor:
    """
    Expand any supported relation spec.

    Args:
        base: Descriptor to extend (not mutated)
        spec: One-to-many or many-to-many spec

    Returns:
        New descriptor

    Raises:
        DataGateValidationError: If spec is invalid or of unknown type
    """
    if isinstance(spec, OneToManyRelation):
        return expand_one_to_many(base, spec)
    if isinstance(spec, ManyToManyRelation):
        return expand_many_to_many(base, spec)

    msg = f'Unsupported relation spec: {type(spec).__name__}'
    raise DataGateValidationError(msg, field_name='relation')
