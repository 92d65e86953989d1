"""Execution engine clients."""

from namerec.datagate.engine.catalog import CatalogClient
from namerec.datagate.engine.client import EngineClient
from namerec.datagate.engine.client import unwrap_data

__all__ = [
    'CatalogClient',
    'EngineClient',
    'unwrap_data',
]
