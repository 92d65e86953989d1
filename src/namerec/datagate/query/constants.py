"""Constants for the query layer to avoid magic strings."""

from enum import Enum


class DescriptorField(str, Enum):
    """Field names used in the engine wire format."""

    # Target
    PROJECT_ID = 'project_id'
    INSTANCE_ID = 'id_instancia'
    TABLE = 'table'
    ALIAS = 'alias'

    # Query structure
    SELECT = 'select'
    JOINS = 'joins'
    WHERE = 'where'
    WHERE_RAW = 'where_raw'
    GROUP_BY = 'group_by'
    HAVING = 'having'
    ORDER_BY = 'order_by'
    LIMIT = 'limit'
    OFFSET = 'offset'

    # Joins
    TYPE = 'type'
    ON = 'on'


class JoinType(str, Enum):
    """Join types accepted by the engine."""

    INNER = 'INNER'
    LEFT = 'LEFT'
    RIGHT = 'RIGHT'


class RelationKind(str, Enum):
    """High-level relation shorthands."""

    ONE_TO_MANY = 'one-to-many'
    MANY_TO_MANY = 'many-to-many'


class EngineEndpoint(str, Enum):
    """Execution engine data endpoints."""

    INSERT = '/data/insert'
    GET = '/data/get'
    UPDATE = '/data/update'
    DELETE = '/data/delete'
    ADVANCED_SELECT = '/data/advanced-select'
    BATCH_INSERT = '/data/batch-insert'
    BATCH_UPDATE = '/data/batch-update'


# Aliases used by relation expansion
MAIN_ALIAS = 'main'
RELATED_ALIAS = 'rel'
PIVOT_ALIAS = 'pivot'
TARGET_ALIAS = 'target'

# Default projected label column of a many-to-many target
DEFAULT_LABEL_COLUMN = 'nome'

DEFAULT_PER_PAGE = 20
