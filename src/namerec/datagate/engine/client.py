"""Execution engine HTTP client - transport and error mapping."""

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from namerec.datagate.core.config import GatewayConfig
from namerec.datagate.core.exceptions import DataGateTransportError
from namerec.datagate.core.exceptions import DataGateUpstreamError

logger = logging.getLogger(__name__)

TOKEN_HEADER = 'X-Internal-Token'
HTTP_ERROR_STATUS = 400


def unwrap_data(payload: Any) -> Any:
    """
    Unwrap one level of 'data' nesting if the engine wrapped its result.

    The engine answers either with the bare result or with an envelope like
    {'success': true, 'data': [...]}; both shapes are accepted.

    Args:
        payload: Decoded response body

    Returns:
        Value under 'data' if payload is a mapping with that key, else payload unchanged
    """
    if isinstance(payload, Mapping) and 'data' in payload:
        return payload['data']
    return payload


def extract_upstream_message(response: httpx.Response) -> str:
    """
    Extract the engine-reported error message, verbatim.

    Args:
        response: Failed engine response

    Returns:
        Message from a JSON body ('message' or 'error'), raw text, or the reason phrase
    """
    text = response.text
    if not text:
        return response.reason_phrase or f'HTTP {response.status_code}'

    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return text

    if isinstance(body, Mapping):
        for key in ('message', 'error'):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    if isinstance(body, str):
        return body
    return text


class EngineClient:
    """
    Thin async client over the execution engine.

    Issues exactly one request per call; nothing is retried. The shared
    secret is attached to every request.
    """

    def __init__(self, config: GatewayConfig, client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize engine client.

        Args:
            config: Gateway configuration (base URL, token, timeout)
            client: Optional preconfigured httpx client (not closed by aclose())
        """
        self.config = config
        if client is None:
            client = httpx.AsyncClient(
                base_url=config.engine_url,
                timeout=config.timeout_seconds,
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    async def __aenter__(self) -> 'EngineClient':
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            'Content-Type': 'application/json',
            TOKEN_HEADER: self.config.internal_token,
        }

    async def request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Send one request to the engine and normalize the outcome.

        Args:
            method: HTTP method
            path: Engine path (e.g. '/data/get')
            payload: JSON body (None = no body)
            params: Optional query parameters (None values are dropped)

        Returns:
            Response data with one level of 'data' nesting unwrapped

        Raises:
            DataGateTransportError: If the engine is unreachable or times out
            DataGateUpstreamError: If the engine answers with an error status
        """
        query = {key: value for key, value in (params or {}).items() if value is not None}
        logger.debug(f'Engine request {method} {path}')

        try:
            response = await self._client.request(
                method,
                path,
                json=payload,
                params=query or None,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        except httpx.TransportError as e:
            logger.error(f'Engine unreachable at {path}: {type(e).__name__}: {e}')
            raise DataGateTransportError(path, original_error=e) from e

        if response.status_code >= HTTP_ERROR_STATUS:
            message = extract_upstream_message(response)
            logger.error(f'Engine error at {path}: HTTP {response.status_code}: {message}')
            raise DataGateUpstreamError(message, response.status_code, endpoint=path)

        if not response.content:
            return None

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f'Engine returned a non-JSON body: {response.text[:200]}'
            raise DataGateUpstreamError(msg, response.status_code, endpoint=path) from e

        return unwrap_data(body)

    async def post(self, path: str, payload: Mapping[str, Any]) -> Any:
        """
        POST a JSON body to the engine.

        Args:
            path: Engine path
            payload: Request body

        Returns:
            Unwrapped response data

        Raises:
            DataGateTransportError: If the engine is unreachable or times out
            DataGateUpstreamError: If the engine answers with an error status
        """
        return await self.request('POST', path, payload)
