"""Dependency injection container and FastAPI providers."""

from dependency_injector import containers
from dependency_injector import providers
from fastapi import Header
from fastapi import Request

from namerec.datagate.core.config import GatewayConfig
from namerec.datagate.core.config import Settings
from namerec.datagate.engine.client import EngineClient
from namerec.datagate.gateway import RequestGateway


class Container(containers.DeclarativeContainer):
    """Application DI container."""

    # Configuration
    config = providers.Configuration()

    # Immutable core configuration, built once from the loaded settings
    gateway_config = providers.Singleton(
        GatewayConfig,
        engine_url=config.engine_url,
        internal_token=config.internal_token,
        api_keys=config.api_keys,
        timeout_seconds=config.timeout_seconds,
        passthrough_upstream_status=config.passthrough_upstream_status,
    )

    # Preconfigured httpx client; None lets the engine client create its own
    http_client = providers.Object(None)

    # Engine client (one connection pool per application)
    engine_client = providers.Singleton(
        EngineClient,
        gateway_config,
        client=http_client,
    )

    # Request gateway
    gateway = providers.Singleton(
        RequestGateway,
        config=gateway_config,
        engine=engine_client,
    )


def build_container(settings: Settings) -> Container:
    """
    Create container populated from settings.

    Args:
        settings: Loaded application settings

    Returns:
        Configured Container
    """
    gateway_config = settings.to_gateway_config()
    container = Container()
    container.config.from_dict(
        {
            'engine_url': gateway_config.engine_url,
            'internal_token': gateway_config.internal_token,
            'api_keys': gateway_config.api_keys,
            'timeout_seconds': gateway_config.timeout_seconds,
            'passthrough_upstream_status': gateway_config.passthrough_upstream_status,
        }
    )
    return container


def get_gateway(request: Request) -> RequestGateway:
    """
    FastAPI dependency to get the RequestGateway.

    Returns:
        Gateway instance of the current application
    """
    return request.app.state.container.gateway()


def get_api_key(x_api_key: str | None = Header(default=None)) -> str | None:
    """
    FastAPI dependency to read the caller credential.

    The value is checked by the gateway, so a missing header is not rejected here.

    Returns:
        X-API-Key header value or None
    """
    return x_api_key
