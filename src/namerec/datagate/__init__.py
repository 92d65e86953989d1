"""
DataGate - query descriptor gateway

A Python package that validates structured data-access requests, normalizes
them into query descriptors and forwards them to a remote execution engine.
"""

from namerec.datagate.batch import BatchCoordinator
from namerec.datagate.batch import BatchInsertRequest
from namerec.datagate.batch import BatchUpdateRequest
from namerec.datagate.batch import UpdateOperation
from namerec.datagate.core.config import GatewayConfig
from namerec.datagate.core.config import Settings
from namerec.datagate.core.exceptions import DataGateAuthError
from namerec.datagate.core.exceptions import DataGateError
from namerec.datagate.core.exceptions import DataGateTransportError
from namerec.datagate.core.exceptions import DataGateUpstreamError
from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.engine.catalog import CatalogClient
from namerec.datagate.engine.client import EngineClient
from namerec.datagate.gateway import RequestGateway
from namerec.datagate.query.builder import QueryBuilder
from namerec.datagate.query.builder import query
from namerec.datagate.query.constants import JoinType
from namerec.datagate.query.constants import RelationKind
from namerec.datagate.query.descriptor import JoinSpec
from namerec.datagate.query.descriptor import QueryDescriptor
from namerec.datagate.query.relations import ManyToManyRelation
from namerec.datagate.query.relations import OneToManyRelation
from namerec.datagate.query.relations import expand_relation

__version__ = '1.0'

__all__ = [
    # Query model
    'QueryDescriptor',
    'JoinSpec',
    'JoinType',
    'QueryBuilder',
    'query',
    # Relations
    'RelationKind',
    'OneToManyRelation',
    'ManyToManyRelation',
    'expand_relation',
    # Batches
    'BatchCoordinator',
    'BatchInsertRequest',
    'BatchUpdateRequest',
    'UpdateOperation',
    # Gateway
    'GatewayConfig',
    'Settings',
    'RequestGateway',
    'EngineClient',
    'CatalogClient',
    # Exceptions
    'DataGateError',
    'DataGateAuthError',
    'DataGateTransportError',
    'DataGateUpstreamError',
    'DataGateValidationError',
]
