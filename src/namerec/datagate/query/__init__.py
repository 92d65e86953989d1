"""Query descriptor model and composition."""

from namerec.datagate.query.builder import QueryBuilder
from namerec.datagate.query.builder import query
from namerec.datagate.query.constants import DescriptorField
from namerec.datagate.query.constants import JoinType
from namerec.datagate.query.constants import RelationKind
from namerec.datagate.query.descriptor import JoinSpec
from namerec.datagate.query.descriptor import QueryDescriptor
from namerec.datagate.query.relations import ManyToManyRelation
from namerec.datagate.query.relations import OneToManyRelation
from namerec.datagate.query.relations import RelationSpec
from namerec.datagate.query.relations import expand_many_to_many
from namerec.datagate.query.relations import expand_one_to_many
from namerec.datagate.query.relations import expand_relation
from namerec.datagate.query.relations import parse_relation

__all__ = [
    'DescriptorField',
    'JoinType',
    'RelationKind',
    'JoinSpec',
    'QueryDescriptor',
    'QueryBuilder',
    'query',
    'OneToManyRelation',
    'ManyToManyRelation',
    'RelationSpec',
    'expand_relation',
    'expand_one_to_many',
    'expand_many_to_many',
    'parse_relation',
]
