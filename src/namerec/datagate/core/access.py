"""Credential check helper functions."""

import hmac

from namerec.datagate.core.config import GatewayConfig
from namerec.datagate.core.exceptions import DataGateAuthError


def check_credential(config: GatewayConfig, api_key: str | None) -> None:
    """
    Check the inbound shared credential and raise if it is not accepted.

    Args:
        config: Gateway configuration holding accepted keys
        api_key: Key presented by the caller (None if header absent)

    Raises:
        DataGateAuthError: If key is missing or not accepted
    """
    if not api_key:
        raise DataGateAuthError

    if not any(hmac.compare_digest(api_key.encode(), accepted.encode()) for accepted in config.api_keys):
        raise DataGateAuthError
