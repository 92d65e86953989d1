"""Exception mapping from DataGate errors to error envelopes."""

import traceback
from typing import Any

from namerec.datagate.core.exceptions import DataGateAuthError
from namerec.datagate.core.exceptions import DataGateError
from namerec.datagate.core.exceptions import DataGateTransportError
from namerec.datagate.core.exceptions import DataGateUpstreamError
from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.web.models.responses import ErrorEnvelope

INTERNAL_ERROR_MESSAGE = 'Internal gateway error'


def handle_datagate_exception(
    exc: Exception,
    debug_mode: bool,
    passthrough_upstream_status: bool = False,
) -> tuple[ErrorEnvelope, int]:
    """
    Convert exception to ErrorEnvelope with HTTP status code.

    Args:
        exc: Exception to handle
        debug_mode: If True, include traceback in details
        passthrough_upstream_status: Use the engine status code for upstream errors

    Returns:
        Tuple of (ErrorEnvelope, HTTP status code)
    """
    error_id = exc.__class__.__name__
    message = str(exc)
    details: dict[str, Any] = {}

    if isinstance(exc, DataGateValidationError):
        status_code = 400
        details = {
            'field_name': exc.field_name,
            'table': exc.table,
        }
    elif isinstance(exc, DataGateAuthError):
        status_code = 401
    elif isinstance(exc, DataGateTransportError):
        # Cause is logged by the engine client, never returned to the caller
        status_code = 500
        details = {
            'endpoint': exc.endpoint,
        }
    elif isinstance(exc, DataGateUpstreamError):
        passthrough = passthrough_upstream_status and exc.status_code >= 400  # noqa: PLR2004
        status_code = exc.status_code if passthrough else 500
        details = {
            'endpoint': exc.endpoint,
            'upstream_status': exc.status_code,
        }
    elif isinstance(exc, DataGateError):
        status_code = 500
    else:
        status_code = 500
        message = INTERNAL_ERROR_MESSAGE
        details = {
            'exception_type': error_id,
        }

    if debug_mode:
        details['traceback'] = traceback.format_exception(exc)
        details['debug_mode'] = True

    return ErrorEnvelope(error=error_id, message=message, details=details), status_code
