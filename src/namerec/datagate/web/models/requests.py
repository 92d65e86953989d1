"""Request models for API endpoints.

Fields are untyped; required-field and shape checks happen in the gateway
and surface as 400 envelopes.
"""

from typing import Any

from pydantic import BaseModel


class TargetBody(BaseModel):
    """Identifiers shared by every data request."""

    project_id: Any = None
    id_instancia: Any = None
    table: Any = None


class InsertBody(TargetBody):
    """Request for simple insert."""

    data: Any = None


class GetBody(TargetBody):
    """Request for simple get."""

    filters: Any = None


class UpdateBody(TargetBody):
    """Request for simple update by id."""

    id: Any = None
    data: Any = None


class DeleteBody(TargetBody):
    """Request for simple delete by id."""

    id: Any = None


class SelectBody(TargetBody):
    """Request for advanced select and aggregate (full query descriptor)."""

    alias: Any = None
    select: Any = None
    joins: Any = None
    where: Any = None
    where_raw: Any = None
    order_by: Any = None
    group_by: Any = None
    having: Any = None
    limit: Any = None
    offset: Any = None


class BatchInsertBody(TargetBody):
    """Request for batch insert."""

    data: Any = None


class BatchUpdateBody(TargetBody):
    """Request for batch update."""

    updates: Any = None


class RelationBody(TargetBody):
    """Request for relation endpoints (one-to-many, many-to-many)."""

    relation: Any = None
    where: Any = None
    order_by: Any = None
    limit: Any = None
