"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from namerec.datagate import __version__
from namerec.datagate.core.config import Settings
from namerec.datagate.core.exceptions import DataGateAuthError
from namerec.datagate.core.exceptions import DataGateError
from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.web.dependencies import build_container
from namerec.datagate.web.exceptions import handle_datagate_exception
from namerec.datagate.web.logging_config import configure_logging
from namerec.datagate.web.models.responses import ErrorEnvelope
from namerec.datagate.web.routers import advanced
from namerec.datagate.web.routers import simple

logger = structlog.get_logger()

SERVICE_NAME = 'datagate'


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """
    Create the caller-facing application.

    Args:
        settings: Application settings (None = load from environment)
        http_client: Optional preconfigured httpx client for the engine (e.g. mock transport)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = Settings()

    configure_logging(settings.log_level, json_logs=settings.json_logs)

    container = build_container(settings)
    if http_client is not None:
        container.http_client.override(http_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ARG001
        """Log startup and close the engine client at shutdown."""
        logger.info(
            'Starting DataGate',
            engine_url=settings.engine_url,
            debug_mode=settings.debug_mode,
            accepted_keys=len(settings.accepted_api_keys()),
        )
        if not settings.accepted_api_keys():
            logger.warning('No API keys configured, every request will be rejected')

        yield

        logger.info('Shutting down DataGate')
        await container.gateway().aclose()
        logger.info('Engine client closed')

    app = FastAPI(
        title='DataGate',
        description='HTTP gateway between callers and the data execution engine',
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.settings = settings

    # CORS for browser-based clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.include_router(simple.router)
    app.include_router(advanced.router)

    def error_response(exc: Exception) -> JSONResponse:
        error, status_code = handle_datagate_exception(
            exc,
            settings.debug_mode,
            settings.passthrough_upstream_status,
        )
        return JSONResponse(status_code=status_code, content=error.model_dump())

    @app.exception_handler(DataGateAuthError)
    async def auth_error_handler(request: Request, exc: DataGateAuthError):
        """Handle rejected credentials."""
        logger.warning('Credential rejected', path=request.url.path)
        return error_response(exc)

    @app.exception_handler(DataGateValidationError)
    async def validation_error_handler(request: Request, exc: DataGateValidationError):
        """Handle local validation errors."""
        logger.warning(
            'Validation error',
            path=request.url.path,
            field_name=exc.field_name,
            message=str(exc),
        )
        return error_response(exc)

    @app.exception_handler(DataGateError)
    async def datagate_error_handler(request: Request, exc: DataGateError):
        """Handle transport and upstream errors."""
        logger.error('Engine call failed', path=request.url.path, error_type=type(exc).__name__, message=str(exc))
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies (e.g. invalid JSON) as 400."""
        logger.warning('Malformed request body', path=request.url.path)
        error = ErrorEnvelope(
            error='DataGateValidationError',
            message='Malformed request body',
            details={'errors': [err.get('msg') for err in exc.errors()]},
        )
        return JSONResponse(status_code=400, content=error.model_dump())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):  # noqa: ARG001
        """Handle unexpected exceptions."""
        logger.exception('Unexpected error', exc_info=exc)
        return error_response(exc)

    @app.get('/health')
    async def health_check() -> dict:
        """Health check endpoint."""
        return {'status': 'ok', 'service': SERVICE_NAME}

    return app


def run() -> None:
    """Run development server with settings from the environment."""
    uvicorn.run(
        'namerec.datagate.web.app:create_app',
        factory=True,
        host='0.0.0.0',  # noqa: S104
        port=8000,
        log_config=None,  # Use our custom logging configuration
    )


if __name__ == '__main__':
    run()
