"""Core DataGate components."""

from namerec.datagate.core.access import check_credential
from namerec.datagate.core.config import GatewayConfig
from namerec.datagate.core.config import Settings
from namerec.datagate.core.exceptions import (
    DataGateAuthError,
    DataGateError,
    DataGateTransportError,
    DataGateUpstreamError,
    DataGateValidationError,
)
from namerec.datagate.core.utils import is_blank
from namerec.datagate.core.utils import require_fields
from namerec.datagate.core.utils import require_target

__all__ = [
    'GatewayConfig',
    'Settings',
    'DataGateError',
    'DataGateAuthError',
    'DataGateTransportError',
    'DataGateUpstreamError',
    'DataGateValidationError',
    'check_credential',
    'is_blank',
    'require_fields',
    'require_target',
]
